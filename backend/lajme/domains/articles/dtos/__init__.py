from .cleanup import CleanupResult, CountBasedDeletion
from .crawl import CrawlSummary, ProviderCrawlResult
from .listing import ArticlePage, DailyDigest
from .stats import ArticleStatistics

__all__ = [
    "ArticlePage",
    "ArticleStatistics",
    "CleanupResult",
    "CountBasedDeletion",
    "CrawlSummary",
    "DailyDigest",
    "ProviderCrawlResult",
]
