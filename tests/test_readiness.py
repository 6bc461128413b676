# tests/test_readiness.py
import pytest

from core.errors import AuthenticationError, BackendError
from core.models import Actor, SupabaseConfig
from core.readiness import AppState, is_auth_session_error, is_configured, resolve_app_state

GOOD = SupabaseConfig(url="https://abc.supabase.co", anon_key="k" * 21)
USER = Actor(id="u1", email="a@b.c")


@pytest.mark.parametrize(
    "config, expected",
    [
        (None, False),
        (SupabaseConfig(), False),
        (SupabaseConfig(url="http://abc.supabase.co", anon_key="k" * 40), False),
        (SupabaseConfig(url="https://abc.supabase.co", anon_key="k" * 20), False),
        (SupabaseConfig(url="https://abc.supabase.co", anon_key=""), False),
        (SupabaseConfig(url="", anon_key="k" * 40), False),
        (GOOD, True),
    ],
)
def test_is_configured(config, expected):
    assert is_configured(config) is expected


def test_state_machine_first_match_wins():
    assert resolve_app_state(None, session_resolved=True, user=USER) == AppState.SETUP
    assert resolve_app_state(GOOD, session_resolved=False, user=USER) == AppState.LOADING
    assert resolve_app_state(GOOD, session_resolved=True, user=None) == AppState.AUTH
    assert resolve_app_state(GOOD, session_resolved=True, user=USER) == AppState.READY


class _PostgrestLike(Exception):
    def __init__(self, code=None, status=None):
        super().__init__("rejected")
        self.code = code
        self.status = status


def test_auth_session_error_classification():
    assert is_auth_session_error(AuthenticationError("no session"))
    assert is_auth_session_error(_PostgrestLike(code="42501"))
    assert is_auth_session_error(_PostgrestLike(code="PGRST301"))
    assert is_auth_session_error(_PostgrestLike(status=401))
    assert not is_auth_session_error(_PostgrestLike(code="23505"))
    assert not is_auth_session_error(BackendError("boom"))
