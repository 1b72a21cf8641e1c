"""
Crawl orchestration: scrape each provider and persist what is new.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from lajme.core.exceptions import NotFoundError

from ..dtos import CrawlSummary, ProviderCrawlResult
from ..ranking.providers import provider_slug
from ..repositories import ArticleRepository
from ..scrapers import ScraperRegistry
from .ingestion_service import ArticleIngestionService


@dataclass
class CrawlerService:
    session: AsyncSession
    registry: ScraperRegistry = field(default_factory=ScraperRegistry)

    @property
    def repo(self) -> ArticleRepository:
        return ArticleRepository(self.session)

    @property
    def ingestion_service(self) -> ArticleIngestionService:
        return ArticleIngestionService(self.session)

    async def crawl_all(self) -> CrawlSummary:
        return await self.crawl_providers(self.registry.providers())

    async def crawl_providers(self, providers: Iterable[str]) -> CrawlSummary:
        """Crawl providers one after another.

        Known URLs are loaded once and grow as each provider is saved. A
        failing provider is recorded in its result and the run continues.
        """
        started = time.perf_counter()
        names: List[str] = []
        for provider in providers:
            slug = provider_slug(provider)
            if slug and slug not in names:
                names.append(slug)

        logger.info(f"Starting crawl for providers: {', '.join(names) or 'none'}")
        existing_urls = await self.repo.existing_urls()
        logger.info(f"Loaded {len(existing_urls)} existing article URLs")

        summary = CrawlSummary()
        for name in names:
            summary.results.append(await self.crawl_provider(name, existing_urls))

        summary.duration_seconds = time.perf_counter() - started
        logger.info(
            f"Crawl finished in {summary.duration_seconds:.1f}s: saved {summary.total_saved}, "
            f"failed providers: {summary.failed_providers or 'none'}"
        )
        return summary

    async def crawl_provider(
        self,
        provider: str,
        existing_urls: Optional[Set[str]] = None,
    ) -> ProviderCrawlResult:
        result = ProviderCrawlResult(provider=provider)
        if existing_urls is None:
            existing_urls = await self.repo.existing_urls()

        try:
            scraper = self.registry.get_provider(provider)
        except NotFoundError as exc:
            result.errors.append(f"{provider}: {exc}")
            logger.error(f"{provider}: no scraper available: {exc}")
            return result

        try:
            scraped = await scraper.scrape()
            fresh = [article for article in scraped if article.url not in existing_urls]
            result.scraped = len(scraped)
            result.new = len(fresh)
            logger.info(f"{provider}: found {len(scraped)} articles, {len(fresh)} new")
            if fresh:
                saved = await self.ingestion_service.save_articles(fresh, existing_urls)
                result.saved = saved.saved
                result.errors.extend(f"{provider}: {error}" for error in saved.errors)
        except Exception as exc:
            logger.opt(exception=exc).error(f"{provider}: crawl failed")
            result.errors.append(f"{provider}: {exc}")
        finally:
            await scraper.close()

        return result
