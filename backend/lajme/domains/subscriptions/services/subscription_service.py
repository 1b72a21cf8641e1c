"""
Subscription status and daily view quotas.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional
from uuid import UUID

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from lajme.core.config import settings
from lajme.core.exceptions import NotFoundError
from lajme.domains.articles.repositories import ArticleRepository
from lajme.models import ArticleView, SubscriptionType, UserSubscription
from lajme.utils.datetime_utils import utc_now_naive, utc_today_window

from ..repositories.subscription_repository import SubscriptionRepository


@dataclass
class AccessStatus:
    can_view_article: bool
    subscription_type: str
    remaining_views: Optional[int]
    daily_limit: Optional[int]
    is_trial_active: bool
    trial_days_remaining: Optional[int]
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "can_view_article": self.can_view_article,
            "subscription_type": self.subscription_type,
            "remaining_views": self.remaining_views,
            "daily_limit": self.daily_limit,
            "is_trial_active": self.is_trial_active,
            "trial_days_remaining": self.trial_days_remaining,
            "message": self.message,
        }


@dataclass
class ViewTrackingResult:
    success: bool
    counted: bool
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"success": self.success, "counted": self.counted, "message": self.message}


@dataclass
class SubscriptionService:
    session: AsyncSession

    @property
    def repo(self) -> SubscriptionRepository:
        return SubscriptionRepository(self.session)

    async def _ensure_subscription(self, user_id: UUID, now: datetime) -> UserSubscription:
        subscription = await self.repo.get_active_subscription(user_id)
        if subscription is None:
            subscription = await self.repo.add_subscription(
                UserSubscription(
                    user_id=user_id,
                    subscription_type=SubscriptionType.FREE_TRIAL.value,
                    trial_start_date=now,
                    trial_end_date=now + timedelta(days=settings.FREE_TRIAL_DAYS),
                    is_active=True,
                )
            )
            logger.info(f"Started {settings.FREE_TRIAL_DAYS}-day free trial for user {user_id}")

        if (
            subscription.subscription_type == SubscriptionType.FREE_TRIAL.value
            and subscription.trial_end_date is not None
            and now > subscription.trial_end_date
        ):
            subscription.subscription_type = SubscriptionType.FREE.value
            logger.info(f"Free trial expired for user {user_id}, moved to free tier")
        return subscription

    async def check_access(self, user_id: UUID, *, now: Optional[datetime] = None) -> AccessStatus:
        """Report whether ``user_id`` may open another article today."""
        now = now or utc_now_naive()
        subscription = await self._ensure_subscription(user_id, now)
        usage = await self.repo.get_or_create_usage(user_id, now.date())
        plan = await self.repo.get_plan(subscription.subscription_type)
        daily_limit = plan.daily_article_limit if plan else None

        can_view = True
        remaining: Optional[int] = None
        message = "You can view this article"
        is_trial_active = False
        trial_days_remaining: Optional[int] = None

        if subscription.subscription_type == SubscriptionType.FREE_TRIAL.value and subscription.trial_end_date:
            is_trial_active = True
            trial_days_remaining = math.ceil((subscription.trial_end_date - now).total_seconds() / 86400)

        if subscription.subscription_type == SubscriptionType.FREE.value and daily_limit:
            viewed = usage.articles_viewed or 0
            remaining = max(0, daily_limit - viewed)
            if viewed >= daily_limit:
                can_view = False
                message = (
                    f"You've reached your daily limit of {daily_limit} articles. "
                    "Upgrade to Premium for unlimited access!"
                )
            else:
                message = f"You have {remaining} articles remaining today"
        elif subscription.subscription_type == SubscriptionType.PREMIUM.value:
            message = "Unlimited access with Premium"
        elif subscription.subscription_type == SubscriptionType.FREE_TRIAL.value:
            message = f"Free trial active - {trial_days_remaining} days remaining"

        await self.session.commit()
        return AccessStatus(
            can_view_article=can_view,
            subscription_type=subscription.subscription_type,
            remaining_views=remaining,
            daily_limit=daily_limit,
            is_trial_active=is_trial_active,
            trial_days_remaining=trial_days_remaining,
            message=message,
        )

    async def track_view(
        self,
        user_id: UUID,
        article_id: UUID,
        *,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ViewTrackingResult:
        """Record a view; repeat views of one article on one UTC day count once."""
        now = now or utc_now_naive()
        article = await ArticleRepository(self.session).fetch_by_id(article_id)
        if article is None:
            raise NotFoundError(f"Article {article_id} not found")

        day_start, _ = utc_today_window(now)
        if await self.repo.find_view_since(user_id, article_id, day_start):
            return ViewTrackingResult(
                success=True,
                counted=False,
                message="Article view already recorded today",
            )

        await self.repo.add_view(
            ArticleView(
                user_id=user_id,
                article_id=article_id,
                viewed_at=now,
                ip_address=ip_address,
                user_agent=user_agent,
            )
        )
        usage = await self.repo.get_or_create_usage(user_id, now.date())
        usage.articles_viewed = (usage.articles_viewed or 0) + 1
        await self.session.commit()
        logger.info(f"Tracked view of article {article_id} for user {user_id}")
        return ViewTrackingResult(
            success=True,
            counted=True,
            message="Article view tracked successfully",
        )
