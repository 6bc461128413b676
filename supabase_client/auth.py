# supabase_client/auth.py
"""
Session / auth capability on top of the accessor's client handle.

Sign-in, sign-up and sign-out go through Supabase GoTrue; the resulting
session lives inside the client handle, so a `reinitialize()` also drops it.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from core.errors import AuthenticationError
from core.models import Actor
from supabase_client.config import ClientAccessor


def actor_from_session(session: Any) -> Optional[Actor]:
    """Extract the authenticated actor from a GoTrue session (or None)."""
    user = getattr(session, "user", None) if session is not None else None
    if user is None or getattr(user, "id", None) is None:
        return None
    return Actor(id=str(user.id), email=getattr(user, "email", None))


class AuthService:
    """Thin wrapper over `client.auth` with typed failures."""

    def __init__(self, accessor: ClientAccessor):
        self._accessor = accessor

    def current_user(self) -> Optional[Actor]:
        """Return the actor of the active session, None if signed out.

        A failing session lookup counts as signed out.
        """
        if not self._accessor.is_configured():
            return None
        try:
            session = self._accessor.get().auth.get_session()
        except Exception as e:  # noqa: BLE001 - any failure means "no session"
            print(f"[Supabase] ⚠️ Session lookup failed: {type(e).__name__}: {e}")
            return None
        return actor_from_session(session)

    def sign_in(self, email: str, password: str) -> Actor:
        return self._authenticate("sign_in_with_password", email, password)

    def sign_up(self, email: str, password: str) -> Actor:
        return self._authenticate("sign_up", email, password)

    def sign_out(self) -> None:
        try:
            self._accessor.get().auth.sign_out()
        except Exception as e:  # noqa: BLE001
            raise AuthenticationError(f"Sign-out failed: {e}") from e

    def on_change(self, callback: Callable[[str, Optional[Actor]], None]) -> Any:
        """Subscribe to login/logout events; returns the subscription."""
        def _listener(event, session):
            callback(str(event), actor_from_session(session))

        return self._accessor.get().auth.on_auth_state_change(_listener)

    def _authenticate(self, method: str, email: str, password: str) -> Actor:
        if not self._accessor.is_configured():
            raise AuthenticationError(
                "System not configured. Enter your Supabase credentials first."
            )
        auth = self._accessor.get().auth
        try:
            response = getattr(auth, method)({"email": email, "password": password})
        except Exception as e:  # noqa: BLE001 - GoTrue raises several error types
            raise AuthenticationError(str(e)) from e

        actor = actor_from_session(getattr(response, "session", None))
        if actor is None:
            user = getattr(response, "user", None)
            if user is not None and method == "sign_up":
                # Email confirmation pending: account exists, no session yet.
                raise AuthenticationError(
                    "Account created. Confirm your email address, then sign in."
                )
            raise AuthenticationError("Authentication failed: no session returned.")
        print(f"[Supabase] ✅ Authenticated as {actor.email or actor.id}")
        return actor
