# ui/views/auth.py
"""Sign-in / sign-up screen (state AUTH)."""

from __future__ import annotations

import streamlit as st

from core.app_context import AppContext
from core.errors import AuthenticationError
from ui.components.feedback import AUTH_NOTICE_KEY, flash, invalidate_data

MODE_KEY = "auth_mode_login"


def render(ctx: AppContext) -> None:
    st.session_state.setdefault(MODE_KEY, True)
    is_login = st.session_state[MODE_KEY]

    _, center, _ = st.columns([1, 2, 1])
    with center:
        st.title("🛡️ Get Rich OS")
        st.caption("Personal Operating System")

        notice = st.session_state.pop(AUTH_NOTICE_KEY, None)
        if notice:
            st.warning(notice)

        with st.form("auth_form", clear_on_submit=False):
            email = st.text_input("Email Address", placeholder="you@example.com")
            password = st.text_input("Secure Password", type="password", placeholder="••••••••")
            submitted = st.form_submit_button(
                "Access Platform" if is_login else "Initialize Account",
                width="stretch",
            )

        if submitted:
            if not email or not password:
                st.error("Email and password are required.")
            else:
                with st.spinner("Processing..."):
                    try:
                        actor = (ctx.auth.sign_in if is_login else ctx.auth.sign_up)(email, password)
                    except AuthenticationError as e:
                        st.error(str(e))
                    else:
                        flash(f"Welcome, {actor.display_name}.")
                        invalidate_data()
                        st.rerun()

        toggle = "Don't have an account? Create one" if is_login else "Already have an account? Log in"
        if st.button(toggle, width="stretch"):
            st.session_state[MODE_KEY] = not is_login
            st.rerun()
