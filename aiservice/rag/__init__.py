"""
RAG module: knowledgebase matching and endpoint retrieval.
"""

from aiservice.rag.knowledgebase import (
    KnowledgebaseService,
    ServiceMatch,
    ServiceMatcher,
    get_knowledgebase,
    load_knowledgebase,
)
from aiservice.rag.vectorstore import EndpointVectorStore, create_pinecone_client
from aiservice.rag.ingest import EndpointIngester

__all__ = [
    "KnowledgebaseService",
    "ServiceMatch",
    "ServiceMatcher",
    "get_knowledgebase",
    "load_knowledgebase",
    "EndpointVectorStore",
    "create_pinecone_client",
    "EndpointIngester",
]
