from __future__ import annotations

import json

import pytest

from aiservice.errors import ApplicationError
from aiservice.rag.knowledgebase import ServiceMatcher, load_knowledgebase


def test_exact_name_matches_service(catalog) -> None:
    matcher = ServiceMatcher(catalog, threshold=0.25)

    ids = [s.id for s in matcher.match("Stripe")]

    assert ids[0] == "stripe"
    assert "github" not in ids


def test_matching_is_case_insensitive_and_uses_title(catalog) -> None:
    matcher = ServiceMatcher(catalog, threshold=0.25)

    assert [s.id for s in matcher.match("JIRA SOFTWARE")] == ["jira"]


def test_ties_keep_catalog_order(catalog) -> None:
    matcher = ServiceMatcher(catalog, threshold=0.25)

    ids = [s.id for s in matcher.match("google")]

    assert ids == ["google-sheets", "google-drive"]


def test_search_is_reproducible(catalog) -> None:
    matcher = ServiceMatcher(catalog, threshold=0.25)

    first = matcher.search("githb")
    second = ServiceMatcher(list(catalog), threshold=0.25).search("githb")

    assert first == second
    assert all(m.score >= matcher.min_score for m in first)


def test_unrelated_query_matches_nothing(catalog) -> None:
    matcher = ServiceMatcher(catalog, threshold=0.25)

    assert matcher.match("qqqqqq") == []


@pytest.mark.parametrize("query", ["", "   ", "!!"])
def test_blank_query_matches_nothing(catalog, query: str) -> None:
    assert ServiceMatcher(catalog).match(query) == []


def test_threshold_one_matches_everything(catalog) -> None:
    matcher = ServiceMatcher(catalog, threshold=1.0)

    assert len(matcher.match("anything")) == len(catalog)


def test_threshold_out_of_range_is_rejected(catalog) -> None:
    with pytest.raises(ValueError):
        ServiceMatcher(catalog, threshold=1.5)


def test_default_threshold_and_keys(catalog) -> None:
    matcher = ServiceMatcher(catalog)

    assert matcher.threshold == 0.25
    assert matcher.min_score == 75.0
    assert matcher.keys == ("id", "title")


def test_bundled_knowledgebase_loads_with_unique_ids() -> None:
    services = load_knowledgebase()

    ids = [s.id for s in services]
    assert len(ids) == len(set(ids))
    assert "stripe" in ids


def test_duplicate_ids_are_rejected(tmp_path) -> None:
    path = tmp_path / "kb.json"
    path.write_text(json.dumps([
        {"id": "a", "title": "A"},
        {"id": "a", "title": "Another A"},
    ]))

    with pytest.raises(ApplicationError, match="Duplicate"):
        load_knowledgebase(path)


def test_missing_knowledgebase_file(tmp_path) -> None:
    with pytest.raises(ApplicationError, match="not found"):
        load_knowledgebase(tmp_path / "missing.json")


def test_entry_without_title_is_rejected(tmp_path) -> None:
    path = tmp_path / "kb.json"
    path.write_text(json.dumps([{"id": "a"}]))

    with pytest.raises(ApplicationError, match="Invalid knowledgebase entry"):
        load_knowledgebase(path)
