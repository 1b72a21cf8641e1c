"""
Subscription status and article view tracking
"""

from typing import Any, Dict
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from lajme.api.dependencies import get_current_user_id, get_subscription_service
from lajme.domains.subscriptions import SubscriptionService

router = APIRouter(tags=["subscriptions"])


class TrackViewRequest(BaseModel):
    """Body of a view-tracking call"""

    model_config = ConfigDict(populate_by_name=True)

    article_id: UUID = Field(..., alias="articleId", description="Viewed article id")


@router.get("/check-subscription")
async def check_subscription(
    user_id: UUID = Depends(get_current_user_id),
    service: SubscriptionService = Depends(get_subscription_service),
) -> Dict[str, Any]:
    status = await service.check_access(user_id)
    return status.to_dict()


@router.post("/track-article-view")
async def track_article_view(
    payload: TrackViewRequest,
    request: Request,
    user_id: UUID = Depends(get_current_user_id),
    service: SubscriptionService = Depends(get_subscription_service),
) -> Dict[str, Any]:
    """
    Record that the caller opened an article; repeat views the same day count once.
    """
    forwarded = request.headers.get("x-forwarded-for")
    ip_address = forwarded.split(",")[0].strip() if forwarded else (
        request.client.host if request.client else None
    )
    logger.info(f"Track view request: user={user_id} article={payload.article_id}")
    result = await service.track_view(
        user_id,
        payload.article_id,
        ip_address=ip_address,
        user_agent=request.headers.get("user-agent"),
    )
    return result.to_dict()
