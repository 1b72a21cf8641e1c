"""
Declarative base and shared model/schema mixins
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel as PydanticBaseModel, ConfigDict
from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from lajme.utils.datetime_utils import utc_now_naive


class Base(DeclarativeBase):
    """Declarative base for all tables"""


class BaseModel(Base):
    """Abstract model with UUID primary key and audit timestamps (naive UTC)"""

    __abstract__ = True

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utc_now_naive, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utc_now_naive, onupdate=utc_now_naive
    )


class BaseSchema(PydanticBaseModel):
    """Base Pydantic schema reading attributes from ORM objects"""

    model_config = ConfigDict(from_attributes=True)


class BaseResponseSchema(BaseSchema):
    id: UUID
    created_at: datetime
    updated_at: Optional[datetime] = None
