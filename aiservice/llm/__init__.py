"""
LLM module: providers, prompt templates and output schemas.
"""

from aiservice.llm.providers import (
    BaseAIProvider,
    OpenAIProvider,
    create_provider,
)
from aiservice.llm.schemas import GenerateCurlResult
from aiservice.llm.summarize import summarize_node_type_properties

__all__ = [
    "BaseAIProvider",
    "OpenAIProvider",
    "create_provider",
    "GenerateCurlResult",
    "summarize_node_type_properties",
]
