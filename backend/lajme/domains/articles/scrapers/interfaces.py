"""
Shared interfaces for article scrapers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol


@dataclass(slots=True)
class ScrapedArticle:
    """Normalized structure produced by scraper providers."""

    title: str
    url: str
    image_url: Optional[str]
    publication_date: Optional[str]
    publication_source: str


class ScraperProvider(Protocol):
    """Interface for the per-site scrapers feeding the crawler."""

    provider: str

    async def scrape(self, *, skip_urls: Optional[set[str]] = None) -> List[ScrapedArticle]:
        ...

    async def close(self) -> None:
        ...
