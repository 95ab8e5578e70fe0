import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime

from docsync.core.db import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


class BaseModel(Base):
    """Базовая модель: строковый идентификатор и временные метки"""
    __abstract__ = True

    id = Column(String(32), primary_key=True, default=new_id)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
