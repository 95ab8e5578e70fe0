import logging
from typing import Callable, List, Optional

from docsync.core.security import verify_token
from docsync.domains.identity.entities import AuthState, Identity

logger = logging.getLogger(__name__)

AuthListener = Callable[[AuthState], None]


class AuthSession:
    """Наблюдаемая сессия аутентификации"""

    def __init__(self):
        self._state = AuthState()
        self._listeners: List[AuthListener] = []

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def user(self) -> Optional[Identity]:
        return None if self._state.is_loading else self._state.user

    def on_change(self, callback: AuthListener) -> Callable[[], None]:
        """Подписка на изменения; текущее состояние доставляется сразу"""
        self._listeners.append(callback)
        self._notify(callback, self._state)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def resolve(self, user: Optional[Identity]) -> None:
        """Первичное разрешение сессии"""
        self._set_state(AuthState(user=user, is_loading=False))

    def sign_in(self, user: Identity) -> None:
        self._set_state(AuthState(user=user, is_loading=False))

    def sign_in_with_token(self, token: str) -> Identity:
        """Вход по JWT токену, subject токена становится идентификатором"""
        payload = verify_token(token)

        if not payload or not payload.get("sub"):
            raise ValueError("Invalid token")

        user = Identity(id=str(payload["sub"]), email=payload.get("email"))
        self.sign_in(user)
        return user

    def sign_out(self) -> None:
        self._set_state(AuthState(user=None, is_loading=False))

    def _set_state(self, state: AuthState) -> None:
        if state == self._state:
            return

        self._state = state
        logger.info(
            f"Auth state changed: user={state.user.id if state.user else None}, "
            f"loading={state.is_loading}"
        )

        for listener in list(self._listeners):
            self._notify(listener, state)

    def _notify(self, listener: AuthListener, state: AuthState) -> None:
        try:
            listener(state)
        except Exception as e:
            logger.error(f"Auth listener {listener!r} failed: {e}")
