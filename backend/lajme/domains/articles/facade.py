"""
Articles domain facade.

Single entry point for API endpoints and Celery tasks; callers do not need to
know which service owns an operation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from lajme.core.config import settings
from lajme.models import Article

from .dtos import ArticlePage, ArticleStatistics, CleanupResult, CrawlSummary, DailyDigest
from .scrapers import ScraperRegistry
from .services.crawler_service import CrawlerService
from .services.query_service import ArticleQueryService
from .services.retention_service import RetentionService


@dataclass
class ArticlesFacade:
    """Facade coordinating article services and repositories."""

    session: AsyncSession
    registry: ScraperRegistry = field(default_factory=ScraperRegistry)

    @property
    def query_service(self) -> ArticleQueryService:
        return ArticleQueryService(self.session)

    @property
    def crawler_service(self) -> CrawlerService:
        return CrawlerService(self.session, registry=self.registry)

    @property
    def retention_service(self) -> RetentionService:
        return RetentionService(self.session)

    async def get_article(self, article_id: str) -> Optional[Article]:
        return await self.query_service.get_article(article_id)

    async def all_articles(
        self,
        *,
        page: int = 1,
        limit: Optional[int] = None,
        providers: Optional[List[str]] = None,
        threshold: Optional[float] = settings.SIMILARITY_THRESHOLD_DEFAULT,
    ) -> ArticlePage:
        return await self.query_service.all_articles(
            page=page,
            limit=limit,
            providers=providers,
            threshold=threshold,
        )

    async def daily_articles(
        self,
        *,
        mode: str = "exact",
        providers: Optional[List[str]] = None,
        threshold: Optional[float] = settings.SIMILARITY_THRESHOLD_DEFAULT,
        limit: Optional[int] = None,
    ) -> DailyDigest:
        return await self.query_service.daily_articles(
            mode=mode,
            providers=providers,
            threshold=threshold,
            limit=limit,
        )

    async def get_statistics(self) -> ArticleStatistics:
        return await self.query_service.get_statistics()

    async def crawl(self, providers: Optional[Iterable[str]] = None) -> CrawlSummary:
        if providers is None:
            return await self.crawler_service.crawl_all()
        return await self.crawler_service.crawl_providers(providers)

    async def cleanup(
        self,
        max_articles: Optional[int] = None,
        days_old: Optional[int] = None,
    ) -> CleanupResult:
        return await self.retention_service.cleanup(max_articles=max_articles, days_old=days_old)
