"""
Article model and schemas
"""

from datetime import datetime
from typing import Optional

from pydantic import Field
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, BaseSchema, BaseResponseSchema


class Article(BaseModel):
    """Scraped article, one row per unique URL"""
    __tablename__ = "articles"

    title: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(String(1000), nullable=False, unique=True, index=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    # Raw date text as shown on the source site; ordering uses created_at
    publication_date: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    publication_source: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True,
        comment="Canonical provider slug",
    )

    def __repr__(self) -> str:
        return f"<Article(id={self.id}, source={self.publication_source}, url={self.url})>"


class ArticleCreateSchema(BaseSchema):
    title: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1, max_length=1000)
    image_url: Optional[str] = None
    publication_date: Optional[str] = None
    publication_source: str = Field(..., min_length=1)


class ArticleResponseSchema(BaseResponseSchema):
    title: str
    url: str
    image_url: Optional[str] = None
    publication_date: Optional[str] = None
    publication_source: str
    created_at: datetime
