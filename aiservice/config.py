"""
Central configuration for the AI assistant service.
All settings loaded from environment with safe defaults.
"""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings with environment variable loading."""

    # === Environment ===
    ENV: str = Field(default="development", description="Environment: development, staging, production")
    LOG_LEVEL: str = Field(default="INFO")

    # === AI Provider ===
    AI_PROVIDER: str = Field(default="unknown", description="Provider type, only 'openai' is recognised")
    OPENAI_API_KEY: Optional[str] = Field(default=None)
    OPENAI_MODEL: str = Field(default="gpt-4o-mini")
    LLM_TEMPERATURE: float = Field(default=0.0)

    # === Vector Database ===
    PINECONE_API_KEY: Optional[str] = Field(default=None)
    PINECONE_INDEX_NAME: str = Field(default="api-knowledgebase")
    PINECONE_NAMESPACE: str = Field(default="endpoints")

    # === Retrieval ===
    KNOWLEDGEBASE_PATH: Path = Field(
        default_factory=lambda: Path(__file__).parent / "resources" / "api-knowledgebase.json"
    )
    FUZZY_THRESHOLD: float = Field(default=0.25, ge=0.0, le=1.0, description="Fuzzy distance: 0 exact, 1 anything")
    RETRIEVAL_TOP_K: int = Field(default=4, ge=1)

    # === LangSmith Tracing ===
    LANGSMITH_API_KEY: Optional[str] = Field(default=None)
    LANGCHAIN_TRACING_V2: bool = Field(default=False)
    LANGCHAIN_PROJECT: str = Field(default="ai-assistant-service")
    LANGCHAIN_ENDPOINT: str = Field(default="https://api.smith.langchain.com")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Singleton instance
settings = Settings()
