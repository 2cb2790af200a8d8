"""
AI service facade: prompting, error debugging and curl generation.
"""

import json
import logging
from typing import Any, Dict, Optional, Sequence

from aiservice.agent import build_curl_graph, generate_curl_generic, initial_state
from aiservice.config import Settings, settings as default_settings
from aiservice.errors import ProviderNotConfiguredError
from aiservice.llm.prompts import debug_error_prompt_template
from aiservice.llm.providers import BaseAIProvider, create_provider
from aiservice.llm.schemas import GenerateCurlResult
from aiservice.llm.summarize import summarize_node_type_properties
from aiservice.monitoring import get_metrics, get_tracer
from aiservice.rag.knowledgebase import ServiceMatcher, get_knowledgebase
from aiservice.rag.vectorstore import EndpointVectorStore, create_pinecone_client


logger = logging.getLogger(__name__)

DEFAULT_NODE_TYPE_NAME = "n8n Node"
DEFAULT_DOCUMENTATION_URL = "https://docs.n8n.io"


class AIService:
    """Routes application requests to the configured AI provider."""

    def __init__(
        self,
        provider: Optional[BaseAIProvider],
        vector_store: Optional[EndpointVectorStore] = None,
        matcher: Optional[ServiceMatcher] = None,
        settings: Settings = None,
    ):
        self.provider = provider
        self.vector_store = vector_store
        self.settings = settings or default_settings
        self._matcher = matcher
        self._curl_graph = None

    @classmethod
    def from_settings(cls, settings: Settings = None) -> "AIService":
        """Build the service from environment configuration."""
        settings = settings or default_settings
        provider = create_provider(settings)

        # Retrieval needs the vector DB key and the provider's embeddings
        vector_store = None
        if settings.PINECONE_API_KEY and provider is not None:
            vector_store = EndpointVectorStore(
                client=create_pinecone_client(settings.PINECONE_API_KEY),
                embeddings=provider.embeddings,
                index_name=settings.PINECONE_INDEX_NAME,
                namespace=settings.PINECONE_NAMESPACE,
            )
        elif provider is not None:
            logger.info("PINECONE_API_KEY not set, retrieval disabled")

        return cls(provider=provider, vector_store=vector_store, settings=settings)

    @property
    def matcher(self) -> ServiceMatcher:
        if self._matcher is None:
            self._matcher = ServiceMatcher(
                get_knowledgebase(self.settings.KNOWLEDGEBASE_PATH),
                threshold=self.settings.FUZZY_THRESHOLD,
            )
        return self._matcher

    @property
    def is_configured(self) -> bool:
        return self.provider is not None

    def _require_provider(self) -> BaseAIProvider:
        if self.provider is None:
            raise ProviderNotConfiguredError()
        return self.provider

    async def prompt(self, messages: Sequence[Any], **options: Any):
        """Send role-tagged messages to the model as-is."""
        provider = self._require_provider()
        return await provider.invoke(messages, **options)

    async def debug_error(self, error: Any, node_type: Optional[Dict[str, Any]] = None) -> str:
        """
        Explain a node error and suggest fixes.

        Args:
            error: The error raised by the node (any JSON-serialisable value)
            node_type: Optional node type description with ``displayName``,
                ``properties`` and ``documentationUrl``

        Returns:
            The model's answer as plain text
        """
        provider = self._require_provider()
        description = node_type or {}

        chain = debug_error_prompt_template | provider.model
        with get_tracer().trace_run("debug_error", run_type="llm"):
            result = await chain.ainvoke({
                "nodeType": description.get("displayName") or DEFAULT_NODE_TYPE_NAME,
                "error": json.dumps(error, default=str),
                "properties": json.dumps(
                    summarize_node_type_properties(description.get("properties") or [])
                ),
                "documentationUrl": description.get("documentationUrl") or DEFAULT_DOCUMENTATION_URL,
            })

        return provider.map_response(result)

    async def generate_curl(self, service_name: str, service_request: str) -> GenerateCurlResult:
        """
        Generate a curl command for a request against a named service.

        Uses the endpoint documentation of fuzzy-matched services when the
        vector database is configured, and falls back to plain generation
        whenever retrieval yields nothing.
        """
        provider = self._require_provider()
        get_metrics().increment("requests_total")

        if self._curl_graph is None:
            self._curl_graph = build_curl_graph(
                provider=provider,
                matcher=self.matcher if self.vector_store is not None else None,
                vector_store=self.vector_store,
                top_k=self.settings.RETRIEVAL_TOP_K,
            )

        final_state = await self._curl_graph.ainvoke(initial_state(service_name, service_request))

        logger.info(
            "Generated curl for %r via %s (%d endpoints)",
            service_name,
            final_state.get("source"),
            len(final_state.get("endpoints") or []),
        )
        return final_state["result"]

    async def generate_curl_generic(self, service_name: str, service_request: str) -> GenerateCurlResult:
        """Generate a curl command without retrieved context."""
        provider = self._require_provider()
        return await generate_curl_generic(provider, service_name, service_request)


# Singleton instance
_service: Optional[AIService] = None


def get_ai_service() -> AIService:
    """Get singleton AI service."""
    global _service
    if _service is None:
        _service = AIService.from_settings()
    return _service


def reset_ai_service() -> None:
    global _service
    _service = None
