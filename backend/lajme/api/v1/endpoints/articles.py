"""
Article feed endpoints
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query
from loguru import logger

from lajme.api.dependencies import get_articles_facade
from lajme.core.exceptions import NotFoundError
from lajme.domains.articles import ArticlesFacade
from lajme.domains.articles.services.query_service import (
    parse_limit,
    parse_page,
    parse_providers,
    parse_similarity_threshold,
    parse_window_limit,
)
from lajme.models import ArticleResponseSchema

router = APIRouter(tags=["articles"])


@router.get("/all-articles")
async def get_all_articles(
    page: Optional[str] = Query(None, description="Page number, starting at 1"),
    limit: Optional[str] = Query(None, description="Items per page"),
    providers: Optional[str] = Query(None, description="Comma separated provider list"),
    similarity_threshold: Optional[str] = Query(
        None,
        description="Float in [0.5, 0.95], or none/false/0 to disable deduplication",
    ),
    facade: ArticlesFacade = Depends(get_articles_facade),
) -> Dict[str, Any]:
    """
    Newest articles across all providers with near-duplicate titles collapsed.
    """
    threshold = parse_similarity_threshold(similarity_threshold)
    logger.info(
        f"all-articles request: page={page} limit={limit} providers={providers} "
        f"similarity_threshold={similarity_threshold}"
    )
    result = await facade.all_articles(
        page=parse_page(page),
        limit=parse_limit(limit),
        providers=parse_providers(providers),
        threshold=threshold,
    )
    return result.to_dict()


@router.get("/daily-articles")
async def get_daily_articles(
    mode: str = Query("exact", description="exact, today or per_provider"),
    providers: Optional[str] = Query(None, description="Comma separated provider list"),
    similarity_threshold: Optional[str] = Query(None),
    limit: Optional[str] = Query(None, description="Cap for mode=today"),
    facade: ArticlesFacade = Depends(get_articles_facade),
) -> Dict[str, Any]:
    """
    Curated daily selection balanced across providers.
    """
    threshold = parse_similarity_threshold(similarity_threshold)
    logger.info(f"daily-articles request: mode={mode} providers={providers}")
    digest = await facade.daily_articles(
        mode=mode,
        providers=parse_providers(providers),
        threshold=threshold,
        limit=parse_window_limit(limit),
    )
    return digest.to_dict()


@router.get("/articles/stats")
async def get_article_stats(
    facade: ArticlesFacade = Depends(get_articles_facade),
) -> Dict[str, Any]:
    stats = await facade.get_statistics()
    return {
        "total_count": stats.total_count,
        "today_count": stats.today_count,
        "source_counts": stats.source_counts,
        "latest_created_at": stats.latest_created_at.isoformat() if stats.latest_created_at else None,
    }


@router.get("/articles/{article_id}", response_model=ArticleResponseSchema)
async def get_article(
    article_id: str,
    facade: ArticlesFacade = Depends(get_articles_facade),
):
    article = await facade.get_article(article_id)
    if article is None:
        raise NotFoundError(f"Article {article_id} not found")
    return article
