"""
core/readiness.py
-----------------
Configuration readiness gate and the screen state machine.

`is_configured` is a pure predicate and is re-evaluated on every render;
it is never cached, because the persisted configuration can change without
going through `ClientAccessor.reinitialize()`.

Screen selection (first match wins):

    1. not is_configured(config)            -> SETUP
    2. session not resolved yet             -> LOADING
    3. session resolved, no actor           -> AUTH
    4. session resolved, actor present      -> READY
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from core.errors import AuthenticationError
from core.models import Actor, SupabaseConfig

SECURE_URL_PREFIX = "https://"
MIN_KEY_LENGTH = 20

# PostgREST codes meaning "your JWT / role is not good enough"
AUTH_ERROR_CODES = {"PGRST301", "PGRST302", "PGRST303", "42501"}


class AppState(str, Enum):
    SETUP = "setup"
    LOADING = "loading"
    AUTH = "auth"
    READY = "ready"


def is_configured(config: Optional[SupabaseConfig]) -> bool:
    """True iff the URL is https and the key is longer than MIN_KEY_LENGTH.

    A long key only *looks* real; validity is proven by the first successful
    backend call.
    """
    if config is None:
        return False
    url = (config.url or "").strip()
    key = (config.anon_key or "").strip()
    if not url or not url.startswith(SECURE_URL_PREFIX):
        return False
    return bool(key) and len(key) > MIN_KEY_LENGTH


def resolve_app_state(
    config: Optional[SupabaseConfig],
    session_resolved: bool,
    user: Optional[Actor],
) -> AppState:
    """Map (configuration, session) to the screen that should be rendered."""
    if not is_configured(config):
        return AppState.SETUP
    if not session_resolved:
        return AppState.LOADING
    if user is None:
        return AppState.AUTH
    return AppState.READY


def is_auth_session_error(exc: BaseException) -> bool:
    """Whether a failure means the session is gone and the UI must go to AUTH."""
    if isinstance(exc, AuthenticationError):
        return True
    code = getattr(exc, "code", None)
    if code is not None and str(code) in AUTH_ERROR_CODES:
        return True
    status = getattr(exc, "status", None)
    return status in (401, 403)
