"""
Articles domain package.

Provides the facade, services and repositories for scraped news articles, plus
the ``ranking`` engine used to deduplicate and order them.
"""

from .facade import ArticlesFacade  # noqa: F401
from .services.query_service import ArticleQueryService  # noqa: F401
from .services.ingestion_service import ArticleIngestionService  # noqa: F401
from .repositories import ArticleRepository  # noqa: F401
