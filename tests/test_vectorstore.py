from __future__ import annotations

from langchain_core.documents import Document

from aiservice.rag.vectorstore import EndpointVectorStore, build_id_filter, create_pinecone_client


class _FakeLangChainStore:
    def __init__(self) -> None:
        self.calls = []

    async def asimilarity_search(self, query, k=4, filter=None):
        self.calls.append({"query": query, "k": k, "filter": filter})
        return [Document(page_content="{}", metadata={"id": "stripe"})]


def test_id_filter_uses_in_operator() -> None:
    assert build_id_filter(("stripe", "github")) == {"id": {"$in": ["stripe", "github"]}}


async def test_similarity_search_restricts_to_ids() -> None:
    store = EndpointVectorStore(client=None, embeddings=None, index_name="idx", namespace="ns")
    fake = _FakeLangChainStore()
    store._store = fake

    documents = await store.similarity_search("create a charge", ids=["stripe"])

    assert len(documents) == 1
    assert fake.calls == [
        {"query": "create a charge", "k": 4, "filter": {"id": {"$in": ["stripe"]}}}
    ]


def test_defaults_come_from_settings() -> None:
    store = EndpointVectorStore(client=None, embeddings=None)

    assert store.index_name == "api-knowledgebase"
    assert store.namespace == "endpoints"


def test_no_api_key_means_no_client(monkeypatch) -> None:
    from aiservice.config import settings

    monkeypatch.setattr(settings, "PINECONE_API_KEY", None)

    assert create_pinecone_client() is None
