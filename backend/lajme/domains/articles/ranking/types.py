"""
Value types consumed by the ranking engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Protocol, Union


class Rankable(Protocol):
    """Anything with the four fields the engine reads."""

    title: Optional[str]
    url: str
    publication_source: Optional[str]
    created_at: Optional[datetime]


@dataclass(frozen=True, slots=True)
class CandidateArticle:
    """Immutable snapshot of an article row handed to the engine."""

    title: Optional[str]
    url: str
    publication_source: Optional[str]
    created_at: Optional[datetime]
    image_url: Optional[str] = None
    publication_date: Optional[str] = None
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "image_url": self.image_url,
            "publication_date": self.publication_date,
            "publication_source": self.publication_source,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True, slots=True)
class AllForWindow:
    """Every deduplicated item, ranked and diversified. ``limit`` truncates."""

    limit: Optional[int] = None


@dataclass(frozen=True, slots=True)
class ExactCount:
    """As close to ``count`` items as the pool allows, balanced by provider."""

    count: int
    top_provider_cap: int = 3
    provider_cap: int = 2
    relaxed_slots: int = 2
    relaxed_threshold: float = 0.95
    fill_unfiltered: bool = False


@dataclass(frozen=True, slots=True)
class PerProvider:
    """At most ``count`` items from each provider."""

    count: int


SelectionMode = Union[AllForWindow, ExactCount, PerProvider]
