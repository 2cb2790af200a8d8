from __future__ import annotations

import json

import pytest

from aiservice.errors import ApplicationError
from aiservice.rag.ingest import EndpointIngester, endpoint_to_document


class _RecordingStore:
    def __init__(self) -> None:
        self.added = []

    async def add_documents(self, documents):
        self.added.extend(documents)
        return [str(i) for i, _ in enumerate(documents)]


def test_endpoint_document_keeps_record_as_json() -> None:
    record = {"id": "stripe", "method": "POST", "path": "/v1/charges", "body": {"amount": "int"}}

    document = endpoint_to_document(record)

    assert json.loads(document.page_content) == record
    assert document.metadata == {"id": "stripe", "method": "POST", "path": "/v1/charges"}


async def test_only_known_services_are_ingested() -> None:
    store = _RecordingStore()
    ingester = EndpointIngester(store, known_ids=["stripe", "github"])

    result = await ingester.ingest_records([
        {"id": "stripe", "path": "/v1/charges"},
        {"id": "unknown-api", "path": "/x"},
        {"path": "/no-id"},
        {"id": "github", "path": "/repos"},
    ])

    assert result["ingested"] == 2
    assert result["services"] == ["github", "stripe"]
    assert [s["index"] for s in result["skipped"]] == [1, 2]
    assert [d.metadata["id"] for d in store.added] == ["stripe", "github"]


async def test_nothing_to_ingest_skips_store() -> None:
    store = _RecordingStore()
    ingester = EndpointIngester(store, known_ids=["stripe"])

    result = await ingester.ingest_records([{"id": "other"}])

    assert result["ingested"] == 0
    assert store.added == []


async def test_ingest_file(tmp_path) -> None:
    path = tmp_path / "endpoints.json"
    path.write_text(json.dumps([{"id": "stripe", "path": "/v1/customers"}]))
    store = _RecordingStore()

    result = await EndpointIngester(store, known_ids=["stripe"]).ingest_file(path)

    assert result["ingested"] == 1


async def test_ingest_file_must_hold_a_list(tmp_path) -> None:
    path = tmp_path / "endpoints.json"
    path.write_text(json.dumps({"id": "stripe"}))

    with pytest.raises(ApplicationError):
        await EndpointIngester(_RecordingStore(), known_ids=["stripe"]).ingest_file(path)


async def test_records_with_non_string_ids_are_skipped() -> None:
    store = _RecordingStore()
    ingester = EndpointIngester(store, known_ids=["stripe"])

    result = await ingester.ingest_records([
        {"id": ["stripe"], "path": "/v1/charges"},
        {"id": {"name": "stripe"}},
        {"id": 42},
        {"id": "stripe", "path": "/v1/refunds"},
    ])

    assert result["ingested"] == 1
    assert [s["index"] for s in result["skipped"]] == [0, 1, 2]
    assert all(s["reason"].startswith("invalid id") for s in result["skipped"])
    assert [d.metadata["id"] for d in store.added] == ["stripe"]
