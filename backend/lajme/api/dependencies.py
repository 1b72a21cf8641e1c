"""
API dependencies
"""

from typing import Optional
from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from lajme.core.database import get_db
from lajme.core.exceptions import AuthenticationError
from lajme.domains.articles import ArticlesFacade
from lajme.domains.subscriptions import SubscriptionService


async def get_current_user_id(
    x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
) -> UUID:
    """
    Resolve the caller from the ``X-User-Id`` header set by the auth gateway.

    Raises:
        AuthenticationError: If the header is missing or not a UUID
    """
    if not x_user_id:
        raise AuthenticationError("Missing X-User-Id header")
    try:
        return UUID(x_user_id.strip())
    except ValueError:
        raise AuthenticationError(f"Invalid user id: {x_user_id}")


def get_articles_facade(
    db: AsyncSession = Depends(get_db),
) -> ArticlesFacade:
    """
    Provide ArticlesFacade instance for request-scoped operations.
    """
    return ArticlesFacade(db)


def get_subscription_service(
    db: AsyncSession = Depends(get_db),
) -> SubscriptionService:
    """
    Provide SubscriptionService instance for request-scoped operations.
    """
    return SubscriptionService(db)
