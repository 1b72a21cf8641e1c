from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from lajme.utils.datetime_utils import utc_now_naive


@dataclass
class CountBasedDeletion:
    deleted_count: int
    total_articles: int
    max_articles: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "deleted_count": self.deleted_count,
            "total_articles": self.total_articles,
            "max_articles": self.max_articles,
        }


@dataclass
class CleanupResult:
    """Outcome of one retention run. ``deleted_count`` covers the age phase."""

    deleted_count: int
    cutoff_date: datetime
    count_based_deletion: CountBasedDeletion
    success: bool
    message: str
    timestamp: datetime = field(default_factory=utc_now_naive)

    @property
    def total_deleted(self) -> int:
        return self.deleted_count + self.count_based_deletion.deleted_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "deleted_count": self.deleted_count,
            "cutoff_date": self.cutoff_date.isoformat(),
            "count_based_deletion": self.count_based_deletion.to_dict(),
            "total_deleted": self.total_deleted,
            "success": self.success,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }
