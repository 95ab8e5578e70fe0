from docsync.domains.identity.entities import Identity, AuthState
from docsync.domains.identity.session import AuthSession

__all__ = [
    "Identity",
    "AuthState",
    "AuthSession",
]
