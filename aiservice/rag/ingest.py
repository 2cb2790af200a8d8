"""
Endpoint document ingestion into the vector index.

Each endpoint record is stored whole, as JSON, so retrieval can hand the
model the exact request shape.
"""

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set

from langchain_core.documents import Document

from aiservice.config import settings
from aiservice.errors import ApplicationError, ProviderNotConfiguredError
from aiservice.rag.knowledgebase import get_knowledgebase
from aiservice.rag.vectorstore import EndpointVectorStore, create_pinecone_client


logger = logging.getLogger(__name__)


def endpoint_to_document(record: Dict[str, Any]) -> Document:
    """Wrap one endpoint record as a document tagged with its service id."""
    metadata = {"id": str(record["id"])}
    for key in ("method", "path", "title"):
        if record.get(key) is not None:
            metadata[key] = str(record[key])

    return Document(
        page_content=json.dumps(record, ensure_ascii=False, sort_keys=True),
        metadata=metadata,
    )


class EndpointIngester:
    """Loads endpoint records for known services into the vector store."""

    def __init__(self, store: EndpointVectorStore, known_ids: Optional[Iterable[str]] = None):
        self.store = store
        if known_ids is None:
            known_ids = [s.id for s in get_knowledgebase()]
        self.known_ids: Set[str] = set(known_ids)

    def _load_records(self, path: Path) -> List[Dict[str, Any]]:
        if not path.exists():
            raise ApplicationError(f"Endpoint file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            records = json.load(f)

        if not isinstance(records, list):
            raise ApplicationError("Endpoint file must contain a list of records")

        return records

    async def ingest_records(self, records: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Ingest endpoint records.

        Records without a string ``id`` or whose id is not in the catalog
        are skipped and reported.

        Returns:
            Summary of ingestion results
        """
        results = {
            "ingested": 0,
            "skipped": [],
            "services": [],
        }

        documents = []
        services = set()
        for position, record in enumerate(records):
            service_id = record.get("id") if isinstance(record, dict) else None
            if not service_id:
                results["skipped"].append({"index": position, "reason": "missing id"})
                continue
            if not isinstance(service_id, str):
                results["skipped"].append({"index": position, "reason": f"invalid id: {service_id!r}"})
                continue
            if service_id not in self.known_ids:
                results["skipped"].append({"index": position, "reason": f"unknown service: {service_id}"})
                continue

            documents.append(endpoint_to_document(record))
            services.add(service_id)

        if documents:
            await self.store.add_documents(documents)

        results["ingested"] = len(documents)
        results["services"] = sorted(services)

        logger.info(
            "Ingested %d endpoint documents for %d services (%d skipped)",
            len(documents),
            len(services),
            len(results["skipped"]),
        )
        return results

    async def ingest_file(self, path: Path) -> Dict[str, Any]:
        """Ingest every record in a JSON endpoint file."""
        records = self._load_records(Path(path))
        return await self.ingest_records(records)


def _build_store() -> EndpointVectorStore:
    from aiservice.llm.providers import create_provider

    provider = create_provider(settings)
    if provider is None:
        raise ProviderNotConfiguredError()

    client = create_pinecone_client()
    if client is None:
        raise ApplicationError("PINECONE_API_KEY is required for ingestion")

    return EndpointVectorStore(client=client, embeddings=provider.embeddings)


def main(argv: Optional[List[str]] = None) -> int:
    from aiservice.log import setup_logging

    parser = argparse.ArgumentParser(description="Ingest API endpoint documents into the vector index")
    parser.add_argument("path", type=Path, help="JSON file with a list of endpoint records")
    args = parser.parse_args(argv)

    setup_logging()

    ingester = EndpointIngester(_build_store())
    result = asyncio.run(ingester.ingest_file(args.path))
    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
