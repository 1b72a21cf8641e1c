"""
Crawling and retention endpoints
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query
from loguru import logger
from pydantic import BaseModel, Field

from lajme.api.dependencies import get_articles_facade
from lajme.domains.articles import ArticlesFacade
from lajme.domains.articles.services.query_service import parse_providers

router = APIRouter(tags=["maintenance"])


class CrawlRequest(BaseModel):
    providers: Optional[List[str]] = Field(None, description="Providers to crawl; all when omitted")


@router.post("/crawl")
async def crawl(
    payload: Optional[CrawlRequest] = Body(None),
    facade: ArticlesFacade = Depends(get_articles_facade),
) -> Dict[str, Any]:
    providers = None
    if payload and payload.providers:
        providers = parse_providers(",".join(payload.providers))
    logger.info(f"Manual crawl requested for {providers or 'all providers'}")
    summary = await facade.crawl(providers)
    return summary.to_dict()


@router.post("/crawl/{provider}")
async def crawl_provider(
    provider: str,
    facade: ArticlesFacade = Depends(get_articles_facade),
) -> Dict[str, Any]:
    logger.info(f"Manual crawl requested for {provider}")
    summary = await facade.crawl([provider])
    return summary.to_dict()


@router.post("/cleanup-old-articles")
async def cleanup_old_articles(
    max_articles: Optional[int] = Query(None, description="Keep at most this many articles"),
    days_old: Optional[int] = Query(None, description="Delete articles older than this many days"),
    facade: ArticlesFacade = Depends(get_articles_facade),
) -> Dict[str, Any]:
    result = await facade.cleanup(max_articles=max_articles, days_old=days_old)
    return result.to_dict()
