"""
Retention tasks
"""

from loguru import logger

from lajme.celery_app import celery_app
from lajme.core.celery_async import run_async_task
from lajme.core.database import AsyncSessionLocal
from lajme.domains.articles import ArticlesFacade


@celery_app.task(bind=True)
def cleanup_old_articles(self):
    """Trim the article table by count, then by age."""
    logger.info("Starting article cleanup task")
    try:
        result = run_async_task(_cleanup_async())
    except Exception as e:
        logger.error(f"Article cleanup task failed: {e}")
        raise self.retry(exc=e, countdown=60, max_retries=3)

    if not result["success"]:
        logger.error(f"Article cleanup reported failure: {result['message']}")
    return result


async def _cleanup_async():
    async with AsyncSessionLocal() as db:
        result = await ArticlesFacade(db).cleanup()
        return result.to_dict()
