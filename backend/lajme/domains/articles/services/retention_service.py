"""
Retention for the ``articles`` table.

Cleanup runs in two phases: first the oldest rows beyond ``max_articles`` are
removed, then every row older than ``days_old`` days.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from lajme.core.config import settings
from lajme.core.exceptions import ValidationError
from lajme.utils.datetime_utils import utc_now_naive

from ..dtos import CleanupResult, CountBasedDeletion
from ..repositories import ArticleRepository


def _require_positive(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(
            f"Invalid {name} value: {value}. Must be a positive integer.",
            error=f"Invalid {name}",
        )
    return value


@dataclass
class RetentionService:
    session: AsyncSession

    @property
    def repo(self) -> ArticleRepository:
        return ArticleRepository(self.session)

    async def cleanup_by_count(self, max_articles: int) -> CountBasedDeletion:
        total = await self.repo.count()
        if total <= max_articles:
            logger.info(f"Article count {total} is within limit {max_articles}")
            return CountBasedDeletion(deleted_count=0, total_articles=total, max_articles=max_articles)

        ids = await self.repo.oldest_ids(total - max_articles)
        deleted = await self.repo.delete_ids(ids)
        logger.info(f"Deleted {deleted} oldest articles to keep {max_articles}")
        return CountBasedDeletion(deleted_count=deleted, total_articles=total, max_articles=max_articles)

    async def cleanup(
        self,
        max_articles: Optional[int] = None,
        days_old: Optional[int] = None,
    ) -> CleanupResult:
        max_articles = _require_positive(
            "MAX_ARTICLES", settings.MAX_ARTICLES if max_articles is None else max_articles
        )
        days_old = _require_positive(
            "CLEANUP_DAYS_OLD", settings.CLEANUP_DAYS_OLD if days_old is None else days_old
        )
        cutoff = utc_now_naive() - timedelta(days=days_old)

        try:
            by_count = await self.cleanup_by_count(max_articles)
            by_age = await self.repo.delete_older_than(cutoff)
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.opt(exception=exc).error("Article cleanup failed")
            return CleanupResult(
                deleted_count=0,
                cutoff_date=cutoff,
                count_based_deletion=CountBasedDeletion(0, 0, max_articles),
                success=False,
                message=str(exc),
            )

        if by_count.deleted_count and by_age:
            message = (
                f"Successfully deleted {by_count.deleted_count} articles to maintain max limit of "
                f"{max_articles}, then deleted {by_age} additional articles older than {days_old} days"
            )
        elif by_count.deleted_count:
            message = f"Successfully deleted {by_count.deleted_count} articles to maintain max limit of {max_articles}"
        elif by_age:
            message = f"Successfully deleted {by_age} articles older than {days_old} days"
        else:
            message = (
                f"No articles needed to be deleted. Found {by_count.total_articles} articles "
                f"(limit: {max_articles})"
            )
        logger.info(message)

        return CleanupResult(
            deleted_count=by_age,
            cutoff_date=cutoff,
            count_based_deletion=by_count,
            success=True,
            message=message,
        )
