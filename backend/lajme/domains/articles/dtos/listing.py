from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..ranking.types import CandidateArticle


def _distinct_sources(items: List[CandidateArticle]) -> List[str]:
    seen: List[str] = []
    for item in items:
        if item.publication_source and item.publication_source not in seen:
            seen.append(item.publication_source)
    return seen


@dataclass
class ArticlePage:
    """One page of the deduplicated article feed."""

    page: int
    limit: int
    providers: Optional[List[str]]
    total_fetched: int
    total_after_filtering: int
    similarity_threshold: Optional[float]
    data: List[CandidateArticle] = field(default_factory=list)

    @property
    def filtering_applied(self) -> bool:
        return self.similarity_threshold is not None

    @property
    def total_pages_available(self) -> int:
        return max(1, -(-self.total_after_filtering // self.limit))

    @property
    def has_next_page(self) -> bool:
        return self.total_after_filtering > self.page * self.limit

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "page": self.page,
            "limit": self.limit,
            "providers": self.providers,
            "total_fetched": self.total_fetched,
            "total_pages_available": self.total_pages_available,
            "has_next_page": self.has_next_page,
            "providers_included": _distinct_sources(self.data),
            "filtering_applied": self.filtering_applied,
            "total_after_filtering": self.total_after_filtering,
            "data": [item.to_dict() for item in self.data],
        }
        if self.filtering_applied:
            body["similarity_threshold"] = self.similarity_threshold
        return body


@dataclass
class DailyDigest:
    """Curated daily selection."""

    mode: str
    total_fetched: int
    similarity_threshold: Optional[float]
    data: List[CandidateArticle] = field(default_factory=list)
    target: Optional[int] = None
    fetch_iterations: int = 1

    @property
    def filtering_applied(self) -> bool:
        return self.similarity_threshold is not None

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "mode": self.mode,
            "total_fetched": self.total_fetched,
            "providers_included": _distinct_sources(self.data),
            "filtering_applied": self.filtering_applied,
            "total_after_filtering": len(self.data),
            "data": [item.to_dict() for item in self.data],
        }
        if self.target is not None:
            body["target"] = self.target
            body["fetch_iterations"] = self.fetch_iterations
        if self.filtering_applied:
            body["similarity_threshold"] = self.similarity_threshold
        return body
