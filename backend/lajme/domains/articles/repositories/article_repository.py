"""
SQLAlchemy repository for the ``articles`` table.

Rows are read newest-first by ``created_at``. Provider filters match every
stored spelling of a provider so that legacy rows written with display names
are still found.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Set
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lajme.models import Article

from ..ranking.providers import stored_spellings


@dataclass
class ArticleFilters:
    limit: Optional[int] = None
    offset: int = 0
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    providers: Optional[List[str]] = None


class ArticleRepository:
    """Encapsulates persistence operations for articles."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    def _build_criteria(self, filters: ArticleFilters) -> List:
        criteria = []
        if filters.start is not None:
            criteria.append(Article.created_at >= filters.start)
        if filters.end is not None:
            criteria.append(Article.created_at < filters.end)
        if filters.providers:
            spellings: Set[str] = set()
            for provider in filters.providers:
                spellings.update(stored_spellings(provider))
            criteria.append(func.lower(Article.publication_source).in_(sorted(spellings)))
        return criteria

    async def fetch_candidates(self, filters: ArticleFilters) -> List[Article]:
        stmt = (
            select(Article)
            .where(*self._build_criteria(filters))
            .order_by(Article.created_at.desc(), Article.id)
            .offset(filters.offset)
        )
        if filters.limit is not None:
            stmt = stmt.limit(filters.limit)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def existing_urls(self) -> Set[str]:
        result = await self._session.execute(select(Article.url))
        return set(result.scalars().all())

    async def fetch_by_url(self, url: str) -> Optional[Article]:
        result = await self._session.execute(select(Article).where(Article.url == url))
        return result.scalar_one_or_none()

    async def fetch_by_id(self, article_id: UUID | str) -> Optional[Article]:
        target_id = article_id
        if isinstance(article_id, str):
            try:
                target_id = UUID(article_id)
            except ValueError:
                return None
        result = await self._session.execute(select(Article).where(Article.id == target_id))
        return result.scalar_one_or_none()

    async def exists(self, url: str) -> bool:
        result = await self._session.execute(
            select(func.count()).select_from(Article).where(Article.url == url)
        )
        return (result.scalar() or 0) > 0

    async def urls_present(self, urls: Iterable[str]) -> Set[str]:
        url_list = list(urls)
        if not url_list:
            return set()
        result = await self._session.execute(select(Article.url).where(Article.url.in_(url_list)))
        return set(result.scalars().all())

    async def insert_if_absent(self, articles: Sequence[Article]) -> List[Article]:
        """Add rows whose URL is not stored yet. Caller commits."""
        present = await self.urls_present(article.url for article in articles)
        inserted: List[Article] = []
        for article in articles:
            if article.url in present:
                continue
            present.add(article.url)
            self._session.add(article)
            inserted.append(article)
        if inserted:
            await self._session.flush()
        return inserted

    async def count(self, filters: Optional[ArticleFilters] = None) -> int:
        stmt = select(func.count()).select_from(Article)
        if filters is not None:
            stmt = stmt.where(*self._build_criteria(filters))
        result = await self._session.execute(stmt)
        return int(result.scalar() or 0)

    async def oldest_ids(self, limit: int) -> List[UUID]:
        if limit <= 0:
            return []
        result = await self._session.execute(
            select(Article.id).order_by(Article.created_at.asc(), Article.id).limit(limit)
        )
        return list(result.scalars().all())

    async def delete_ids(self, ids: Sequence[UUID]) -> int:
        if not ids:
            return 0
        result = await self._session.execute(delete(Article).where(Article.id.in_(list(ids))))
        return int(result.rowcount or 0)

    async def count_older_than(self, cutoff: datetime) -> int:
        result = await self._session.execute(
            select(func.count()).select_from(Article).where(Article.created_at < cutoff)
        )
        return int(result.scalar() or 0)

    async def delete_older_than(self, cutoff: datetime) -> int:
        result = await self._session.execute(delete(Article).where(Article.created_at < cutoff))
        return int(result.rowcount or 0)

    async def count_by_source(self) -> Dict[str, int]:
        result = await self._session.execute(
            select(Article.publication_source, func.count(Article.id))
            .group_by(Article.publication_source)
        )
        return {source: int(total) for source, total in result.all()}

    async def latest_created_at(self) -> Optional[datetime]:
        result = await self._session.execute(select(func.max(Article.created_at)))
        return result.scalar()
