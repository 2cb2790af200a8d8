"""
Pinecone-backed store of API endpoint documents.
"""

import logging
from typing import Any, List, Optional, Sequence

from langchain_core.documents import Document
from langchain_pinecone import PineconeVectorStore
from pinecone import Pinecone

from aiservice.config import settings


logger = logging.getLogger(__name__)


def build_id_filter(ids: Sequence[str]) -> dict:
    """Metadata filter restricting a search to the given service ids."""
    return {"id": {"$in": list(ids)}}


class EndpointVectorStore:
    """Endpoint documents in one index namespace, searchable per service."""

    def __init__(
        self,
        client: Pinecone,
        embeddings: Any,
        index_name: str = None,
        namespace: str = None,
    ):
        self.client = client
        self.embeddings = embeddings
        self.index_name = settings.PINECONE_INDEX_NAME if index_name is None else index_name
        self.namespace = settings.PINECONE_NAMESPACE if namespace is None else namespace
        self._store: Optional[PineconeVectorStore] = None

    @property
    def store(self) -> PineconeVectorStore:
        """LangChain store over the existing index, created on first use."""
        if self._store is None:
            index = self.client.Index(self.index_name)
            self._store = PineconeVectorStore(
                index=index,
                embedding=self.embeddings,
                namespace=self.namespace,
            )
        return self._store

    async def similarity_search(
        self,
        query: str,
        k: int = None,
        ids: Sequence[str] = (),
    ) -> List[Document]:
        """
        Nearest endpoint documents for a query.

        Args:
            query: Free-text request to embed and search with
            k: Number of neighbours (default from settings)
            ids: Service ids the results must belong to

        Returns:
            Documents ordered by similarity
        """
        k = k or settings.RETRIEVAL_TOP_K

        documents = await self.store.asimilarity_search(
            query,
            k=k,
            filter=build_id_filter(ids),
        )

        logger.debug(
            "Vector search in %s/%s returned %d documents for %d services",
            self.index_name,
            self.namespace,
            len(documents),
            len(ids),
        )
        return documents

    async def add_documents(self, documents: List[Document]) -> List[str]:
        """Embed and upsert documents into the namespace."""
        if not documents:
            return []
        return await self.store.aadd_documents(documents)


def create_pinecone_client(api_key: Optional[str] = None) -> Optional[Pinecone]:
    """Pinecone client, or None when no API key is configured."""
    if api_key is None:
        api_key = settings.PINECONE_API_KEY
    if not api_key:
        logger.info("PINECONE_API_KEY not set, retrieval disabled")
        return None
    return Pinecone(api_key=api_key)
