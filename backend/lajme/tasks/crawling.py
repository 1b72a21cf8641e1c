"""
Provider crawling tasks
"""

from typing import Any, Dict

from loguru import logger

from lajme.celery_app import celery_app
from lajme.core.celery_async import run_async_task
from lajme.core.database import AsyncSessionLocal
from lajme.domains.articles import ArticlesFacade


@celery_app.task(bind=True)
def crawl_provider(self, provider: str):
    """Scrape one provider's listing page and store new articles."""
    logger.info(f"Starting crawl task for {provider}")
    try:
        result = run_async_task(_crawl_async([provider]))
        logger.info(f"Crawl task for {provider} saved {result['total_saved']} article(s)")
        return result
    except Exception as e:
        logger.error(f"Crawl task for {provider} failed: {e}")
        raise self.retry(exc=e, countdown=60, max_retries=3)


@celery_app.task(bind=True)
def crawl_all(self):
    logger.info("Starting crawl task for all providers")
    try:
        return run_async_task(_crawl_async(None))
    except Exception as e:
        logger.error(f"Crawl task for all providers failed: {e}")
        raise self.retry(exc=e, countdown=60, max_retries=3)


async def _crawl_async(providers) -> Dict[str, Any]:
    async with AsyncSessionLocal() as db:
        summary = await ArticlesFacade(db).crawl(providers)
        return summary.to_dict()
