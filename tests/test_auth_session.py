"""Tests for the observable auth session."""

import pytest

from docsync.core.security import create_access_token
from docsync.domains.identity.entities import AuthState, Identity
from docsync.domains.identity.session import AuthSession


class TestAuthSession:
    """Подписка и переходы состояния."""

    def test_current_state_delivered_on_subscribe(self):
        auth = AuthSession()
        seen = []

        auth.on_change(seen.append)

        assert seen == [AuthState(user=None, is_loading=True)]

    def test_transitions_are_broadcast(self):
        auth = AuthSession()
        seen = []
        auth.on_change(seen.append)

        auth.resolve(None)
        auth.sign_in(Identity(id="u1"))
        auth.sign_out()

        assert [state.user for state in seen[1:]] == [None, Identity(id="u1"), None]
        assert all(not state.is_loading for state in seen[1:])

    def test_user_hidden_while_loading(self):
        auth = AuthSession()
        assert auth.user is None

        auth.resolve(Identity(id="u1"))
        assert auth.user == Identity(id="u1")

    def test_unsubscribe_stops_notifications(self):
        auth = AuthSession()
        seen = []
        unsubscribe = auth.on_change(seen.append)

        unsubscribe()
        auth.resolve(Identity(id="u1"))

        assert len(seen) == 1

    def test_failing_listener_does_not_block_others(self):
        auth = AuthSession()
        seen = []

        def broken(state):
            raise RuntimeError("listener bug")

        auth.on_change(broken)
        auth.on_change(seen.append)
        auth.resolve(Identity(id="u1"))

        assert seen[-1].user == Identity(id="u1")


class TestTokenSignIn:
    """Вход по JWT токену."""

    def test_sign_in_with_valid_token(self):
        auth = AuthSession()
        token = create_access_token({"sub": "u42", "email": "u42@example.com"})

        user = auth.sign_in_with_token(token)

        assert user == Identity(id="u42", email="u42@example.com")
        assert auth.user == user

    def test_invalid_token_rejected(self):
        auth = AuthSession()

        with pytest.raises(ValueError, match="Invalid token"):
            auth.sign_in_with_token("not-a-jwt")

        assert auth.state.is_loading
