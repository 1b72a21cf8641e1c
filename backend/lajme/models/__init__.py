"""
Models package
"""

from .base import Base, BaseModel
from .article import Article, ArticleResponseSchema
from .subscription import (
    ArticleView,
    DailyUsage,
    SubscriptionPlan,
    SubscriptionType,
    UserSubscription,
)

__all__ = [
    "Base",
    "BaseModel",
    "Article",
    "ArticleResponseSchema",
    "ArticleView",
    "DailyUsage",
    "SubscriptionPlan",
    "SubscriptionType",
    "UserSubscription",
]
