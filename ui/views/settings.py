# ui/views/settings.py
"""Settings: Supabase keys, profile, system status and local cache."""

from __future__ import annotations

import streamlit as st

from core.app_context import AppContext
from core.metadata import get_metadata
from core.models import Actor
from ui.components.feedback import flash, invalidate_data
from ui.components.system_status import render_status_card
from ui.views.setup import render_config_form


def render(ctx: AppContext, user: Actor) -> None:
    st.title("⚙️ Settings")

    left, right = st.columns(2)
    with left:
        st.subheader("🗄️ Database Keys")
        source = ctx.accessor.config_source()
        if source == "env":
            st.info("Keys come from the environment and override anything saved here.")
        render_config_form(ctx, key="settings_form")

    with right:
        st.subheader("👤 Profile")
        st.write(f"**{user.display_name}**")
        st.caption(user.email or user.id)

        st.subheader("🩺 System Status")
        probe = st.checkbox("Run live database check", value=False)
        render_status_card(ctx, probe=probe)

        st.subheader("🧹 Local Cache")
        if st.button("Clear Local Cache"):
            removed = ctx.store.clear_cache()
            invalidate_data()
            flash(f"Cleared {removed} cached collection(s).")
            st.rerun()

    meta = get_metadata()
    st.divider()
    st.caption(f"{meta['project']} v{meta['version']} · {meta['tagline']}")
