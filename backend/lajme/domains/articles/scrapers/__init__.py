"""
Scraper abstractions for the articles domain.
"""

from .interfaces import ScrapedArticle, ScraperProvider
from .registry import ScraperRegistry
from .sites import SITE_PROFILES, SiteProfile, SiteScraper

__all__ = [
    "SITE_PROFILES",
    "ScrapedArticle",
    "ScraperProvider",
    "ScraperRegistry",
    "SiteProfile",
    "SiteScraper",
]
