"""
Static API knowledgebase catalog with fuzzy service matching.
"""

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from rapidfuzz import fuzz, utils

from aiservice.config import settings
from aiservice.errors import ApplicationError


logger = logging.getLogger(__name__)

# Fields compared against the query
MATCH_KEYS = ("id", "title")


@dataclass(frozen=True)
class KnowledgebaseService:
    """An API service known to the vector index."""
    id: str
    title: str
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KnowledgebaseService":
        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            description=data.get("description"),
        )


@dataclass(frozen=True)
class ServiceMatch:
    """A catalog entry selected by fuzzy matching."""
    service: KnowledgebaseService
    score: float


class ServiceMatcher:
    """
    Fuzzy matcher over the catalog.

    ``threshold`` is a distance between 0 (exact match only) and 1 (match
    anything). An entry matches when its best similarity over ``id`` and
    ``title`` reaches ``(1 - threshold) * 100``.
    """

    def __init__(
        self,
        services: Sequence[KnowledgebaseService],
        threshold: float = None,
        keys: Sequence[str] = MATCH_KEYS,
    ):
        self.services = list(services)
        self.threshold = settings.FUZZY_THRESHOLD if threshold is None else threshold
        self.keys = tuple(keys)

        if not 0.0 <= self.threshold <= 1.0:
            raise ValueError(f"threshold must be between 0 and 1, got {self.threshold}")

    @property
    def min_score(self) -> float:
        return (1.0 - self.threshold) * 100.0

    def _score(self, query: str, service: KnowledgebaseService) -> float:
        best = 0.0
        for key in self.keys:
            value = getattr(service, key, None)
            if not value:
                continue
            score = fuzz.partial_ratio(query, value, processor=utils.default_process)
            best = max(best, score)
        return best

    def search(self, query: str) -> List[ServiceMatch]:
        """
        Return matching services, best first.

        Ties keep catalog order, so results are reproducible for a fixed
        catalog and query.
        """
        if not query or not utils.default_process(query):
            return []

        matches = []
        for position, service in enumerate(self.services):
            score = self._score(query, service)
            if score >= self.min_score:
                matches.append((score, position, service))

        matches.sort(key=lambda item: (-item[0], item[1]))

        return [ServiceMatch(service=service, score=score) for score, _, service in matches]

    def match(self, query: str) -> List[KnowledgebaseService]:
        """Return only the matched services."""
        return [m.service for m in self.search(query)]


def load_knowledgebase(path: Path = None) -> List[KnowledgebaseService]:
    """
    Load the catalog from a JSON list of ``{id, title, description}`` records.

    Raises:
        ApplicationError: If the file is missing, malformed, or repeats an id.
    """
    path = Path(path or settings.KNOWLEDGEBASE_PATH)

    if not path.exists():
        raise ApplicationError(f"API knowledgebase not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise ApplicationError(f"API knowledgebase must be a list of services: {path}")

    services = []
    seen = set()
    for entry in raw:
        try:
            service = KnowledgebaseService.from_dict(entry)
        except (KeyError, TypeError) as e:
            raise ApplicationError(f"Invalid knowledgebase entry {entry!r}: {e}") from e

        if service.id in seen:
            raise ApplicationError(f"Duplicate knowledgebase service id: {service.id}")
        seen.add(service.id)
        services.append(service)

    logger.info("Loaded %d knowledgebase services from %s", len(services), path.name)
    return services


# Catalogs by resolved path
_catalogs: Dict[Path, List[KnowledgebaseService]] = {}
_catalog_lock = threading.Lock()


def get_knowledgebase(path: Path = None) -> List[KnowledgebaseService]:
    """Get the catalog at ``path`` (default from settings), loading it on first use."""
    path = Path(path or settings.KNOWLEDGEBASE_PATH).resolve()
    catalog = _catalogs.get(path)
    if catalog is None:
        with _catalog_lock:
            catalog = _catalogs.get(path)
            if catalog is None:
                catalog = load_knowledgebase(path)
                _catalogs[path] = catalog
    return catalog
