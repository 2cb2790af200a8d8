from __future__ import annotations

import json
from typing import Any

import pytest
from langchain_core.documents import Document
from langchain_core.messages import AIMessage
from langchain_core.runnables import RunnableLambda

from aiservice.llm.providers import BaseAIProvider
from aiservice.rag.knowledgebase import KnowledgebaseService


class FakeProvider(BaseAIProvider):
    """Provider double recording every prompt it receives."""

    def __init__(self, curl: str = "curl https://api.example.com", chat_reply: str = "ok") -> None:
        self.curl = curl
        self.chat_reply = chat_reply
        self.chat_inputs: list[Any] = []
        self.structured_inputs: list[Any] = []
        self.model = RunnableLambda(self._chat)
        self.embeddings = None

    def _chat(self, prompt: Any) -> AIMessage:
        self.chat_inputs.append(prompt)
        return AIMessage(content=self.chat_reply)

    def _structured(self, prompt: Any) -> AIMessage:
        self.structured_inputs.append(prompt)
        return AIMessage(
            content="",
            tool_calls=[
                {
                    "name": "GenerateCurlResult",
                    "args": {"curl": self.curl, "metadata": {"endpoint": "/v1/test"}},
                    "id": "call_1",
                }
            ],
        )

    def model_with_output_parser(self, schema):
        return RunnableLambda(self._structured)

    def last_structured_prompt(self) -> str:
        return self.structured_inputs[-1].to_string()


class FakeVectorStore:
    """Vector store double returning canned documents."""

    def __init__(self, documents: list[Document] | None = None) -> None:
        self.documents = documents or []
        self.calls: list[dict[str, Any]] = []

    async def similarity_search(self, query: str, k: int | None = None, ids=()):
        self.calls.append({"query": query, "k": k, "ids": list(ids)})
        return list(self.documents)


def endpoint_document(service_id: str, **payload: Any) -> Document:
    return Document(
        page_content=json.dumps({"id": service_id, **payload}),
        metadata={"id": service_id},
    )


@pytest.fixture
def catalog() -> list[KnowledgebaseService]:
    return [
        KnowledgebaseService(id="stripe", title="Stripe", description="Payments"),
        KnowledgebaseService(id="github", title="GitHub", description="Code hosting"),
        KnowledgebaseService(id="google-sheets", title="Google Sheets"),
        KnowledgebaseService(id="google-drive", title="Google Drive"),
        KnowledgebaseService(id="jira", title="Jira Software"),
    ]


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture(autouse=True)
def _reset_singletons():
    from aiservice.monitoring import get_metrics
    from aiservice.service import reset_ai_service

    get_metrics().reset()
    reset_ai_service()
    yield
    reset_ai_service()
