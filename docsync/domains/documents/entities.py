from datetime import datetime, timezone
from typing import Optional


def ensure_aware(value: datetime) -> datetime:
    """Приведение временной метки к UTC с явной зоной"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Document:
    """Сущность документа домена Documents"""

    def __init__(
        self,
        id: str,
        title: str = "",
        content: str = "",
        user_id: str = None,
        is_starred: bool = False,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self._id = id
        self._user_id = user_id
        self.title = title
        self.content = content
        self.is_starred = is_starred
        self.created_at = ensure_aware(created_at or datetime.now(timezone.utc))
        self.updated_at = ensure_aware(updated_at or self.created_at)

    @property
    def id(self) -> str:
        return self._id

    @property
    def user_id(self) -> str:
        return self._user_id

    def touch(self, updated_at: datetime) -> None:
        """Сдвиг updated_at вперёд, назад метка не двигается"""
        updated_at = ensure_aware(updated_at)
        if updated_at > self.updated_at:
            self.updated_at = updated_at

    def apply_saved(self, title: str, content: str, updated_at: datetime) -> None:
        """Фиксация значений, принятых хранилищем"""
        self.title = title
        self.content = content
        self.touch(updated_at)

    def is_owned_by(self, user_id: str) -> bool:
        return self._user_id == user_id

    def copy(self) -> "Document":
        return Document(
            id=self._id,
            title=self.title,
            content=self.content,
            user_id=self._user_id,
            is_starred=self.is_starred,
            created_at=self.created_at,
            updated_at=self.updated_at
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Document):
            return False
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"Document(id={self._id}, title={self.title!r}, is_starred={self.is_starred})"
