"""
Persistence for subscriptions, daily usage and article views.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lajme.models import ArticleView, DailyUsage, SubscriptionPlan, UserSubscription


class SubscriptionRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_active_subscription(self, user_id: UUID) -> Optional[UserSubscription]:
        result = await self._session.execute(
            select(UserSubscription)
            .where(UserSubscription.user_id == user_id, UserSubscription.is_active.is_(True))
            .order_by(UserSubscription.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def add_subscription(self, subscription: UserSubscription) -> UserSubscription:
        self._session.add(subscription)
        await self._session.flush()
        return subscription

    async def get_plan(self, name: str) -> Optional[SubscriptionPlan]:
        result = await self._session.execute(
            select(SubscriptionPlan).where(SubscriptionPlan.name == name)
        )
        return result.scalar_one_or_none()

    async def get_usage(self, user_id: UUID, usage_date: date) -> Optional[DailyUsage]:
        result = await self._session.execute(
            select(DailyUsage).where(
                DailyUsage.user_id == user_id,
                DailyUsage.usage_date == usage_date,
            )
        )
        return result.scalar_one_or_none()

    async def get_or_create_usage(self, user_id: UUID, usage_date: date) -> DailyUsage:
        usage = await self.get_usage(user_id, usage_date)
        if usage is None:
            usage = DailyUsage(user_id=user_id, usage_date=usage_date, articles_viewed=0)
            self._session.add(usage)
            await self._session.flush()
        return usage

    async def find_view_since(
        self,
        user_id: UUID,
        article_id: UUID,
        since: datetime,
    ) -> Optional[ArticleView]:
        result = await self._session.execute(
            select(ArticleView)
            .where(
                ArticleView.user_id == user_id,
                ArticleView.article_id == article_id,
                ArticleView.viewed_at >= since,
            )
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def add_view(self, view: ArticleView) -> ArticleView:
        self._session.add(view)
        await self._session.flush()
        return view
