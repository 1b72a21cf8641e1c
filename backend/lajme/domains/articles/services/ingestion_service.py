"""
Ingestion service for the articles domain.

Persists scraped articles, one row per unique URL, in small batches so that a
failing batch does not discard the rest of a crawl.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from lajme.core.config import settings
from lajme.models import Article

from ..ranking.providers import provider_slug
from ..repositories import ArticleRepository
from ..scrapers.interfaces import ScrapedArticle


@dataclass
class SaveResult:
    saved: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)


def _is_valid(item: ScrapedArticle) -> bool:
    return bool(
        (item.title or "").strip()
        and (item.url or "").strip()
        and (item.publication_source or "").strip()
    )


@dataclass
class ArticleIngestionService:
    session: AsyncSession

    @property
    def repo(self) -> ArticleRepository:
        return ArticleRepository(self.session)

    def _to_row(self, item: ScrapedArticle) -> Article:
        return Article(
            title=item.title.strip(),
            url=item.url.strip(),
            image_url=item.image_url,
            publication_date=item.publication_date,
            publication_source=provider_slug(item.publication_source),
        )

    async def save_articles(
        self,
        items: Iterable[ScrapedArticle],
        existing_urls: Optional[Set[str]] = None,
        *,
        batch_size: Optional[int] = None,
    ) -> SaveResult:
        """Insert articles whose URL is unknown.

        ``existing_urls`` is consulted first and updated with every URL that
        ends up stored, so callers can share it across providers.
        """
        batch_size = batch_size or settings.SCRAPER_SAVE_BATCH_SIZE
        known = existing_urls if existing_urls is not None else set()
        result = SaveResult()

        pending: List[ScrapedArticle] = []
        for item in items:
            if not _is_valid(item) or item.url.strip() in known:
                result.skipped += 1
                continue
            if any(other.url.strip() == item.url.strip() for other in pending):
                result.skipped += 1
                continue
            pending.append(item)

        for start in range(0, len(pending), batch_size):
            batch = pending[start:start + batch_size]
            try:
                inserted = await self.repo.insert_if_absent([self._to_row(item) for item in batch])
                await self.session.commit()
            except SQLAlchemyError as exc:
                await self.session.rollback()
                message = f"Batch {start // batch_size + 1} failed: {exc}"
                logger.error(message)
                result.errors.append(message)
                continue

            result.saved += len(inserted)
            result.skipped += len(batch) - len(inserted)
            known.update(item.url.strip() for item in batch)
            logger.debug(f"Saved {len(inserted)}/{len(batch)} articles in batch {start // batch_size + 1}")

        return result
