# ui/components/feedback.py
"""
Write feedback for Streamlit forms.

A failed write is always shown to the user and the form keeps its values so
the user can retry. An authentication failure signs the session out, which
sends the app back to the sign-in screen on the next render.
"""

from __future__ import annotations

from typing import Optional

import streamlit as st

from core.app_context import AppContext
from core.errors import AuthenticationError
from core.readiness import is_auth_session_error
from supabase_client.repository import WriteResult

FLASH_KEY = "_flash"
SNAPSHOT_KEY = "snapshot"
AUTH_NOTICE_KEY = "_auth_notice"


def flash(message: str) -> None:
    """Queue a success message for the next render."""
    st.session_state[FLASH_KEY] = message


def show_flash() -> None:
    message = st.session_state.pop(FLASH_KEY, None)
    if message:
        st.success(message)


def invalidate_data() -> None:
    """Force the next render to reload records from Supabase."""
    st.session_state.pop(SNAPSHOT_KEY, None)


def handle_write(ctx: AppContext, result: WriteResult, success: str) -> Optional[object]:
    """
    Report a write outcome.

    On success: queue `success`, drop cached data and rerun.
    On failure: show the error in place (form state untouched).
    """
    if result.ok:
        flash(success)
        invalidate_data()
        st.rerun()
        return result.data

    st.error(f"❌ {result.error}")
    if is_auth_session_error(result.error):
        try:
            ctx.auth.sign_out()
        except AuthenticationError as e:
            print(f"[Supabase] ⚠️ Sign-out after auth failure failed: {e}")
        st.session_state[AUTH_NOTICE_KEY] = f"Session ended: {result.error}"
        invalidate_data()
        st.rerun()
    return None
