"""
Subscription and view-quota models
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional
from uuid import UUID as PyUUID

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from lajme.utils.datetime_utils import utc_now_naive

from .base import BaseModel


class SubscriptionType(str, Enum):
    """Subscription tiers, also the names of the matching plans"""
    FREE_TRIAL = "free_trial"
    FREE = "free"
    PREMIUM = "premium"


class SubscriptionPlan(BaseModel):
    """Plan limits; a NULL daily limit means unlimited"""
    __tablename__ = "subscription_plans"

    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    daily_article_limit: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


class UserSubscription(BaseModel):
    __tablename__ = "user_subscriptions"

    user_id: Mapped[PyUUID] = mapped_column(Uuid, nullable=False, index=True)
    subscription_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=SubscriptionType.FREE_TRIAL.value,
        comment="free_trial, free or premium",
    )
    trial_start_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    trial_end_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<UserSubscription(user_id={self.user_id}, type={self.subscription_type})>"


class DailyUsage(BaseModel):
    __tablename__ = "daily_usage"

    user_id: Mapped[PyUUID] = mapped_column(Uuid, nullable=False, index=True)
    usage_date: Mapped[date] = mapped_column(Date, nullable=False)
    articles_viewed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("user_id", "usage_date", name="uq_daily_usage_user_date"),
    )


class ArticleView(BaseModel):
    __tablename__ = "article_views"

    user_id: Mapped[PyUUID] = mapped_column(Uuid, nullable=False, index=True)
    article_id: Mapped[PyUUID] = mapped_column(
        Uuid,
        ForeignKey("articles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    viewed_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utc_now_naive)
    ip_address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
