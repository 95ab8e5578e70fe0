from datetime import datetime
from enum import Enum
from typing import Optional, List

from pydantic import BaseModel, Field, ConfigDict, field_validator

UNTITLED_DOCUMENT = "Untitled document"


class DocumentOrder(str, Enum):
    """Допустимые порядки выдачи списка документов"""
    UPDATED_AT_DESC = "updated_at_desc"
    UPDATED_AT_ASC = "updated_at_asc"
    CREATED_AT_DESC = "created_at_desc"
    TITLE_ASC = "title_asc"


class DocumentFilter(BaseModel):
    """Фильтр выборки: все заданные поля должны совпасть"""
    user_id: str = Field(..., min_length=1)
    id: Optional[str] = None


class DocumentCreate(BaseModel):
    """Схема для создания документа"""
    title: str = ""
    content: str = ""
    user_id: Optional[str] = None
    is_starred: bool = False


class DocumentUpdate(BaseModel):
    """Схема для частичного обновления документа"""
    # Пустой заголовок допустим: пользователь может стереть его целиком
    title: Optional[str] = None
    content: Optional[str] = None
    is_starred: Optional[bool] = None

    @field_validator("title", "content", "is_starred", mode="before")
    @classmethod
    def reject_explicit_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    def changes(self) -> dict:
        """Только явно переданные поля"""
        return self.model_dump(exclude_unset=True)


class DocumentResponse(BaseModel):
    """Схема для ответа с данными документа"""
    id: str
    title: str
    content: str
    user_id: str
    is_starred: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DocumentListResponse(BaseModel):
    """Схема для списка документов"""
    documents: List[DocumentResponse]
    total: int
