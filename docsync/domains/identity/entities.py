from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Identity:
    """Идентичность пользователя, выданная внешней аутентификацией"""
    id: str
    email: Optional[str] = None


@dataclass(frozen=True)
class AuthState:
    """Состояние сессии: пока is_loading, полю user доверять нельзя"""
    user: Optional[Identity] = None
    is_loading: bool = True
