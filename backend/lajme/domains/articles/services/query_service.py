"""
Read-side use cases for articles.

Fetches candidate rows through ``ArticleRepository`` and runs them through the
ranking engine. Engine failures surface as ``ProcessingError`` so callers get
either a complete result or an error, never a partially filtered list.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, List, Optional, TypeVar

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from lajme.core.config import settings
from lajme.core.exceptions import (
    ArticleStoreError,
    InvalidThresholdError,
    ProcessingError,
    ValidationError,
)
from lajme.models import Article
from lajme.utils.datetime_utils import utc_today_window

from ..dtos import ArticlePage, ArticleStatistics, DailyDigest
from ..ranking import (
    AllForWindow,
    CandidateArticle,
    ExactCount,
    PerProvider,
    ProviderRanking,
    TitleNormalizer,
    dedupe,
    provider_slug,
    select,
)
from ..repositories import ArticleFilters, ArticleRepository

T = TypeVar("T")

DISABLE_FILTER_VALUES = {"none", "false", "0"}
THRESHOLD_VALID_VALUES = "Number between 0.5-0.95, or 'none'/'false'/'0' to disable"
DAILY_MODES = ("exact", "today", "per_provider")


def parse_similarity_threshold(raw: Optional[str]) -> Optional[float]:
    """Translate the ``similarity_threshold`` query value.

    Missing means the configured default; ``none``/``false``/``0`` disable
    filtering (``None``); anything else must be a number inside the accepted
    client range.
    """
    if raw is None or not raw.strip():
        return settings.SIMILARITY_THRESHOLD_DEFAULT
    value = raw.strip()
    if value.lower() in DISABLE_FILTER_VALUES:
        return None
    try:
        parsed = float(value)
    except ValueError:
        raise InvalidThresholdError(
            f'Invalid similarity_threshold: "{raw}". Must be a number between '
            f'{settings.SIMILARITY_THRESHOLD_MIN} and {settings.SIMILARITY_THRESHOLD_MAX}, or "none" to disable.',
            valid_values=THRESHOLD_VALID_VALUES,
        )
    if math.isnan(parsed) or not (
        settings.SIMILARITY_THRESHOLD_MIN <= parsed <= settings.SIMILARITY_THRESHOLD_MAX
    ):
        raise InvalidThresholdError(
            f"similarity_threshold must be between {settings.SIMILARITY_THRESHOLD_MIN} and "
            f"{settings.SIMILARITY_THRESHOLD_MAX}. Received: {value}",
            valid_values=THRESHOLD_VALID_VALUES,
        )
    return parsed


def parse_providers(raw: Optional[str]) -> Optional[List[str]]:
    """Split a comma list into canonical provider slugs; unknown names kept verbatim."""
    if not raw:
        return None
    providers: List[str] = []
    for part in raw.split(","):
        slug = provider_slug(part)
        if slug and slug not in providers:
            providers.append(slug)
    return providers or None


def parse_page(raw: Optional[str]) -> int:
    try:
        page = int(float(raw)) if raw else 1
    except (TypeError, ValueError, OverflowError):
        page = 1
    return max(1, page)


def parse_limit(raw: Optional[str]) -> int:
    try:
        limit = int(float(raw)) if raw else 0
    except (TypeError, ValueError, OverflowError):
        limit = 0
    if limit <= 0:
        limit = settings.ALL_ARTICLES_DEFAULT_LIMIT
    return min(settings.ALL_ARTICLES_MAX_LIMIT, limit)


def parse_window_limit(raw: Optional[str]) -> Optional[int]:
    """Optional positive cap for the ``today`` digest; missing means uncapped."""
    if raw is None or not raw.strip():
        return None
    try:
        limit = int(raw.strip())
    except ValueError:
        limit = 0
    if limit < 1:
        raise ValidationError(
            f"limit must be a positive integer. Received: {raw}",
            error="Invalid limit parameter",
        )
    return limit


def to_candidate(row: Article) -> CandidateArticle:
    return CandidateArticle(
        id=str(row.id) if row.id else None,
        title=row.title,
        url=row.url,
        image_url=row.image_url,
        publication_date=row.publication_date,
        publication_source=provider_slug(row.publication_source),
        created_at=row.created_at,
    )


@dataclass
class ArticleQueryService:
    """Encapsulates read-only article use cases."""

    session: AsyncSession

    @property
    def repo(self) -> ArticleRepository:
        return ArticleRepository(self.session)

    @property
    def ranking(self) -> ProviderRanking:
        return ProviderRanking(default_priority=settings.UNKNOWN_PROVIDER_PRIORITY)

    async def _fetch(self, filters: ArticleFilters) -> List[CandidateArticle]:
        try:
            rows = await self.repo.fetch_candidates(filters)
        except SQLAlchemyError as exc:
            logger.opt(exception=exc).error("Failed to fetch candidate articles")
            raise ArticleStoreError(f"Failed to fetch articles: {exc}") from exc
        return [to_candidate(row) for row in rows]

    def _run(self, step: str, func: Callable[[], T]) -> T:
        try:
            return func()
        except ValidationError:
            raise
        except Exception as exc:
            logger.opt(exception=exc).error(f"{step} failed")
            raise ProcessingError(f"{step} failed: {exc}", details=str(exc)) from exc

    async def get_article(self, article_id: str) -> Optional[Article]:
        return await self.repo.fetch_by_id(article_id)

    async def all_articles(
        self,
        *,
        page: int = 1,
        limit: Optional[int] = None,
        providers: Optional[List[str]] = None,
        threshold: Optional[float] = settings.SIMILARITY_THRESHOLD_DEFAULT,
    ) -> ArticlePage:
        """Newest articles, deduplicated, paginated after filtering."""
        page = max(1, page)
        limit = min(settings.ALL_ARTICLES_MAX_LIMIT, max(1, limit or settings.ALL_ARTICLES_DEFAULT_LIMIT))
        fetch_limit = min(
            settings.ALL_ARTICLES_FETCH_CAP,
            math.ceil(limit * settings.ALL_ARTICLES_FETCH_MULTIPLIER + (page - 1) * limit),
        )

        candidates = await self._fetch(ArticleFilters(limit=fetch_limit, providers=providers))
        processed = candidates
        if threshold is not None:
            normalizer = TitleNormalizer(settings.TITLE_CACHE_SIZE)
            processed = self._run(
                "Filtering",
                lambda: dedupe(candidates, threshold, ranking=self.ranking, normalizer=normalizer),
            )

        start = (page - 1) * limit
        logger.info(
            f"all-articles page={page} limit={limit} fetched={len(candidates)} "
            f"after_filtering={len(processed)}"
        )
        return ArticlePage(
            page=page,
            limit=limit,
            providers=providers,
            total_fetched=len(candidates),
            total_after_filtering=len(processed),
            similarity_threshold=threshold,
            data=processed[start:start + limit],
        )

    async def daily_articles(
        self,
        *,
        mode: str = "exact",
        providers: Optional[List[str]] = None,
        threshold: Optional[float] = settings.SIMILARITY_THRESHOLD_DEFAULT,
        limit: Optional[int] = None,
    ) -> DailyDigest:
        if mode == "exact":
            return await self._daily_exact(providers, threshold)
        if mode == "today":
            return await self._daily_today(providers, threshold, limit)
        if mode == "per_provider":
            return await self._daily_per_provider(providers, threshold)
        raise ValidationError(
            f"Unknown daily mode: {mode}",
            error="Invalid mode parameter",
            valid_values=", ".join(DAILY_MODES),
        )

    async def _daily_exact(
        self,
        providers: Optional[List[str]],
        threshold: Optional[float],
    ) -> DailyDigest:
        target = settings.DAILY_ARTICLES_TARGET
        batch = settings.DAILY_FETCH_BATCH_SIZE
        if providers:
            batch = max(batch, len(providers) * 4)
        normalizer = TitleNormalizer(settings.TITLE_CACHE_SIZE)

        candidates: List[CandidateArticle] = []
        iterations = 0
        while iterations < settings.DAILY_FETCH_MAX_ITERATIONS:
            iterations += 1
            candidates = await self._fetch(ArticleFilters(limit=batch, providers=providers))
            if threshold is None:
                distinct = len(candidates)
            else:
                pool = candidates
                distinct = len(self._run(
                    "Filtering",
                    lambda: dedupe(pool, threshold, ranking=self.ranking, normalizer=normalizer),
                ))
            logger.debug(
                f"daily exact: iteration {iterations} fetched {len(candidates)} rows, {distinct} distinct"
            )
            if distinct >= target or len(candidates) < batch:
                break
            next_batch = min(settings.DAILY_FETCH_MAX_BATCH_SIZE, math.ceil(batch * 1.5))
            if next_batch <= batch:
                break
            batch = next_batch

        selection_mode = ExactCount(
            count=target,
            top_provider_cap=settings.DAILY_TOP_PROVIDER_CAP,
            provider_cap=settings.DAILY_PROVIDER_CAP,
            fill_unfiltered=settings.DAILY_UNFILTERED_FALLBACK,
        )
        selected = self._run(
            "Selection",
            lambda: select(candidates, selection_mode, threshold, ranking=self.ranking, normalizer=normalizer),
        )
        if len(selected) < target:
            logger.warning(f"Daily digest short: {len(selected)}/{target} after {iterations} fetches")
        return DailyDigest(
            mode="exact",
            total_fetched=len(candidates),
            similarity_threshold=threshold,
            data=selected,
            target=target,
            fetch_iterations=iterations,
        )

    async def _daily_today(
        self,
        providers: Optional[List[str]],
        threshold: Optional[float],
        limit: Optional[int],
    ) -> DailyDigest:
        start, end = utc_today_window()
        candidates = await self._fetch(ArticleFilters(start=start, end=end, providers=providers))
        selected = self._run(
            "Selection",
            lambda: select(
                candidates,
                AllForWindow(limit=limit),
                threshold,
                ranking=self.ranking,
                normalizer=TitleNormalizer(settings.TITLE_CACHE_SIZE),
            ),
        )
        return DailyDigest(
            mode="today",
            total_fetched=len(candidates),
            similarity_threshold=threshold,
            data=selected,
        )

    async def _daily_per_provider(
        self,
        providers: Optional[List[str]],
        threshold: Optional[float],
    ) -> DailyDigest:
        candidates = await self._fetch(
            ArticleFilters(limit=settings.DAILY_PER_PROVIDER_POOL, providers=providers)
        )
        selected = self._run(
            "Selection",
            lambda: select(
                candidates,
                PerProvider(settings.DAILY_PER_PROVIDER),
                threshold,
                ranking=self.ranking,
                normalizer=TitleNormalizer(settings.TITLE_CACHE_SIZE),
            ),
        )
        return DailyDigest(
            mode="per_provider",
            total_fetched=len(candidates),
            similarity_threshold=threshold,
            data=selected,
        )

    async def get_statistics(self) -> ArticleStatistics:
        start, end = utc_today_window()
        try:
            total = await self.repo.count()
            raw_counts = await self.repo.count_by_source()
            today = await self.repo.count(ArticleFilters(start=start, end=end))
            latest = await self.repo.latest_created_at()
        except SQLAlchemyError as exc:
            raise ArticleStoreError(f"Failed to compute statistics: {exc}") from exc

        source_counts: dict = {}
        for source, count in raw_counts.items():
            slug = provider_slug(source) or source
            source_counts[slug] = source_counts.get(slug, 0) + count
        return ArticleStatistics(
            total_count=total,
            source_counts=source_counts,
            today_count=today,
            latest_created_at=latest,
        )
