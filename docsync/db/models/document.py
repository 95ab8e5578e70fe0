from sqlalchemy import Column, String, Text, Boolean, Index

from docsync.db.base import BaseModel


class Document(BaseModel):
    __tablename__ = "documents"

    title = Column(Text, nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    # Владелец задаётся внешним сервисом аутентификации, внешнего ключа нет
    user_id = Column(String(255), nullable=False)
    is_starred = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("ix_documents_user_updated", "user_id", "updated_at"),
    )
