from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lajme.core.config import settings
from lajme.core.exceptions import NotFoundError
from lajme.domains.subscriptions import SubscriptionService
from lajme.models import ArticleView, DailyUsage, SubscriptionPlan, SubscriptionType, UserSubscription
from lajme.utils.datetime_utils import utc_now_naive
from tests.utils.article_builders import create_article

FREE_LIMIT = 3


async def _seed_plans(session: AsyncSession) -> None:
    session.add_all(
        [
            SubscriptionPlan(name=SubscriptionType.FREE_TRIAL.value, daily_article_limit=None),
            SubscriptionPlan(name=SubscriptionType.FREE.value, daily_article_limit=FREE_LIMIT),
            SubscriptionPlan(name=SubscriptionType.PREMIUM.value, daily_article_limit=None),
        ]
    )
    await session.commit()


async def _subscribe(session: AsyncSession, user_id, subscription_type: SubscriptionType, **kwargs) -> None:
    session.add(
        UserSubscription(
            user_id=user_id,
            subscription_type=subscription_type.value,
            is_active=True,
            **kwargs,
        )
    )
    await session.commit()


@pytest.mark.asyncio
async def test_new_user_starts_a_free_trial(async_session: AsyncSession) -> None:
    await _seed_plans(async_session)
    user_id = uuid4()

    status = await SubscriptionService(async_session).check_access(user_id)

    assert status.can_view_article is True
    assert status.subscription_type == "free_trial"
    assert status.is_trial_active is True
    assert status.trial_days_remaining == settings.FREE_TRIAL_DAYS
    assert status.message == f"Free trial active - {settings.FREE_TRIAL_DAYS} days remaining"
    usage = (await async_session.execute(select(DailyUsage))).scalar_one()
    assert usage.articles_viewed == 0


@pytest.mark.asyncio
async def test_expired_trial_falls_back_to_free(async_session: AsyncSession) -> None:
    await _seed_plans(async_session)
    user_id = uuid4()
    now = utc_now_naive()
    await _subscribe(
        async_session,
        user_id,
        SubscriptionType.FREE_TRIAL,
        trial_start_date=now - timedelta(days=20),
        trial_end_date=now - timedelta(days=6),
    )

    status = await SubscriptionService(async_session).check_access(user_id, now=now)

    assert status.subscription_type == "free"
    assert status.is_trial_active is False
    assert status.daily_limit == FREE_LIMIT
    assert status.remaining_views == FREE_LIMIT
    assert status.message == f"You have {FREE_LIMIT} articles remaining today"


@pytest.mark.asyncio
async def test_free_user_is_blocked_at_daily_limit(async_session: AsyncSession) -> None:
    await _seed_plans(async_session)
    user_id = uuid4()
    now = utc_now_naive()
    await _subscribe(async_session, user_id, SubscriptionType.FREE)
    async_session.add(DailyUsage(user_id=user_id, usage_date=now.date(), articles_viewed=FREE_LIMIT))
    await async_session.commit()

    status = await SubscriptionService(async_session).check_access(user_id, now=now)

    assert status.can_view_article is False
    assert status.remaining_views == 0
    assert "daily limit of 3 articles" in status.message


@pytest.mark.asyncio
async def test_premium_is_unlimited(async_session: AsyncSession) -> None:
    await _seed_plans(async_session)
    user_id = uuid4()
    await _subscribe(async_session, user_id, SubscriptionType.PREMIUM)

    status = await SubscriptionService(async_session).check_access(user_id)

    assert status.can_view_article is True
    assert status.daily_limit is None
    assert status.message == "Unlimited access with Premium"


@pytest.mark.asyncio
async def test_repeat_views_on_the_same_day_count_once(async_session: AsyncSession) -> None:
    article = await create_article(async_session)
    user_id = uuid4()
    service = SubscriptionService(async_session)
    now = utc_now_naive()

    first = await service.track_view(user_id, article.id, ip_address="10.0.0.1", user_agent="pytest", now=now)
    second = await service.track_view(user_id, article.id, now=now + timedelta(seconds=5))

    assert first.counted is True
    assert first.message == "Article view tracked successfully"
    assert second.counted is False
    assert second.message == "Article view already recorded today"
    usage = (await async_session.execute(select(DailyUsage))).scalar_one()
    assert usage.articles_viewed == 1
    view = (await async_session.execute(select(ArticleView))).scalar_one()
    assert view.ip_address == "10.0.0.1"


@pytest.mark.asyncio
async def test_views_on_different_articles_each_count(async_session: AsyncSession) -> None:
    first = await create_article(async_session)
    second = await create_article(async_session)
    user_id = uuid4()
    service = SubscriptionService(async_session)

    await service.track_view(user_id, first.id)
    await service.track_view(user_id, second.id)

    usage = (await async_session.execute(select(DailyUsage))).scalar_one()
    assert usage.articles_viewed == 2


@pytest.mark.asyncio
async def test_tracking_unknown_article_raises(async_session: AsyncSession) -> None:
    with pytest.raises(NotFoundError):
        await SubscriptionService(async_session).track_view(uuid4(), uuid4())
