from .article_repository import ArticleFilters, ArticleRepository

__all__ = ["ArticleFilters", "ArticleRepository"]
