"""
Service layer for the articles domain.

Contains orchestration logic for reading, ingesting, crawling and retiring
articles.
"""

from .crawler_service import CrawlerService
from .ingestion_service import ArticleIngestionService, SaveResult
from .query_service import ArticleQueryService
from .retention_service import RetentionService

__all__ = [
    "ArticleIngestionService",
    "ArticleQueryService",
    "CrawlerService",
    "RetentionService",
    "SaveResult",
]
