"""
AI provider abstraction over LangChain chat models.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Sequence, Type

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage
from langchain_core.runnables import Runnable
from langchain_openai import ChatOpenAI, OpenAIEmbeddings
from pydantic import BaseModel

from aiservice.config import Settings


logger = logging.getLogger(__name__)


class BaseAIProvider(ABC):
    """Abstract base class for AI providers."""

    model: BaseChatModel
    embeddings: Any

    @abstractmethod
    def model_with_output_parser(self, schema: Type[BaseModel]) -> Runnable:
        """Return the chat model bound so that it must answer with ``schema``."""
        pass

    async def invoke(self, messages: Sequence[Any], **options: Any) -> BaseMessage:
        """Send role-tagged messages to the model and return its reply."""
        return await self.model.ainvoke(list(messages), **options)

    def map_response(self, message: Any) -> str:
        """Flatten a model reply into plain text."""
        content = getattr(message, "content", message)

        if isinstance(content, str):
            return content

        if isinstance(content, list):
            parts = []
            for part in content:
                if isinstance(part, str):
                    parts.append(part)
                elif isinstance(part, dict) and part.get("type") == "text":
                    parts.append(part.get("text", ""))
            return "".join(parts)

        return str(content)


class OpenAIProvider(BaseAIProvider):
    """OpenAI chat model and embeddings."""

    def __init__(self, api_key: str, model_name: str, temperature: float = 0.0):
        self.model_name = model_name
        self.model = ChatOpenAI(
            api_key=api_key,
            model=model_name,
            temperature=temperature,
        )
        self.embeddings = OpenAIEmbeddings(api_key=api_key)

    def model_with_output_parser(self, schema: Type[BaseModel]) -> Runnable:
        return self.model.bind_tools([schema], tool_choice=schema.__name__)


PROVIDERS: Dict[str, Type[BaseAIProvider]] = {
    "openai": OpenAIProvider,
}


def is_provider_type(value: Optional[str]) -> bool:
    """Check whether ``value`` names a supported provider type."""
    return value in PROVIDERS


def create_provider(settings: Settings) -> Optional[BaseAIProvider]:
    """
    Build the configured provider.

    Returns None when the provider type is unknown or its API key is missing,
    so the caller can fail with a configuration error on first use.
    """
    provider_type = (settings.AI_PROVIDER or "").strip().lower()

    if not is_provider_type(provider_type):
        logger.warning("AI provider %r is not supported, AI features disabled", settings.AI_PROVIDER)
        return None

    if provider_type == "openai":
        if not settings.OPENAI_API_KEY:
            logger.warning("OpenAI selected but OPENAI_API_KEY is not set")
            return None

        logger.info("Initialising OpenAI provider (model=%s)", settings.OPENAI_MODEL)
        return OpenAIProvider(
            api_key=settings.OPENAI_API_KEY,
            model_name=settings.OPENAI_MODEL,
            temperature=settings.LLM_TEMPERATURE,
        )

    return None


__all__ = [
    "BaseAIProvider",
    "OpenAIProvider",
    "PROVIDERS",
    "create_provider",
    "is_provider_type",
]
