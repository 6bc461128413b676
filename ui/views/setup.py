# ui/views/setup.py
"""Initial configuration screen (state SETUP)."""

from __future__ import annotations

import streamlit as st

from core.app_context import AppContext
from core.errors import ConfigurationError
from core.models import SupabaseConfig
from ui.components.feedback import flash, invalidate_data


def render_config_form(ctx: AppContext, key: str = "config_form") -> None:
    """Supabase URL + anon key form, shared by Setup and Settings."""
    current = ctx.store.get_config() or SupabaseConfig()
    with st.form(key, clear_on_submit=False):
        url = st.text_input(
            "Supabase Project URL",
            value=current.url,
            placeholder="https://xyz.supabase.co",
        )
        anon_key = st.text_input(
            "Anon Public Key",
            value=current.anon_key,
            type="password",
            placeholder="eyJhbG...",
        )
        st.caption(
            "Saving rebuilds the database client with the new keys. "
            "If keys are invalid, the app returns to this screen."
        )
        submitted = st.form_submit_button("💾 Save Configuration")

    if submitted:
        try:
            ctx.save_config(SupabaseConfig(url=url.strip(), anon_key=anon_key.strip()))
        except ConfigurationError as e:
            st.error(f"❌ {e}")
            return
        flash("Settings saved. Database client re-initialized.")
        invalidate_data()
        st.rerun()


def render(ctx: AppContext) -> None:
    st.title("🛡️ Get Rich OS")
    st.caption("Personal Operating System")

    st.subheader("⚙️ Initial Configuration Required")
    st.write(
        "The OS environment needs a Supabase project to store your business "
        "data securely. Paste your project URL and anon key below."
    )
    if ctx.accessor.config_source() == "env":
        st.warning(
            "SUPABASE_URL / SUPABASE_ANON_KEY are set in the environment but "
            "look invalid. Fix them there; saved values cannot override them."
        )
    render_config_form(ctx, key="setup_form")
