from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class ProviderCrawlResult:
    provider: str
    scraped: int = 0
    new: int = 0
    saved: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider,
            "scraped": self.scraped,
            "new": self.new,
            "saved": self.saved,
            "success": self.success,
            "errors": list(self.errors),
        }


@dataclass
class CrawlSummary:
    results: List[ProviderCrawlResult] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def total_saved(self) -> int:
        return sum(result.saved for result in self.results)

    @property
    def failed_providers(self) -> List[str]:
        return [result.provider for result in self.results if not result.success]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "providers": [result.to_dict() for result in self.results],
            "total_saved": self.total_saved,
            "failed_providers": self.failed_providers,
            "duration_seconds": round(self.duration_seconds, 3),
        }
