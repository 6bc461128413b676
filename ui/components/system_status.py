# ui/components/system_status.py
"""
System status card for the Settings page and the sidebar.

Features
--------
✅ Reads health straight from core.health (no HTTP hop).
✅ Graceful: never crashes the UI even if Supabase is unreachable.
✅ Color-coded indicators for database and AI readiness.
"""

from __future__ import annotations

from typing import Any, Dict

import streamlit as st

from core.app_context import AppContext
from core.health import system_health

STATUS_COLORS = {
    "ok": "green",
    "healthy": "green",
    "degraded": "orange",
    "error": "red",
    "offline": "red",
}


def get_status_color(status: str) -> str:
    """Public helper for coloring elements dynamically by status."""
    return STATUS_COLORS.get(status.lower(), "gray")


def _dot(ok: bool, label_ok: str, label_bad: str) -> str:
    color = "green" if ok else "red"
    label = label_ok if ok else label_bad
    return f"<span style='color:{color}; font-weight:600;'>● {label}</span>"


def render_status_card(ctx: AppContext, probe: bool = False) -> Dict[str, Any]:
    """
    Render database / AI status rows.

    Parameters
    ----------
    probe : bool
        If True, run a live Supabase query instead of only checking the
        configuration gate.
    """
    health = system_health(ctx, probe=probe)
    database_ok = health["supabase_connected"] if probe else health["supabase_configured"]

    col1, col2 = st.columns(2)
    col1.caption("Database Connection")
    col2.markdown(_dot(database_ok, "Active", "Offline"), unsafe_allow_html=True)
    col1.caption("AI Intelligence")
    col2.markdown(_dot(health["ai_ready"], "Ready", "No API key"), unsafe_allow_html=True)

    msg = health.get("message")
    if msg:
        st.caption(f"💬 {msg}")

    with st.expander("Advanced diagnostics", expanded=False):
        st.markdown(
            f"<span style='color:{get_status_color(health['status'])}; font-weight:600;'>"
            f"● {health['status'].upper()}</span>",
            unsafe_allow_html=True,
        )
        if health.get("cpu_load") is not None:
            st.write(f"🧠 CPU load: {health['cpu_load']}%")
        if health.get("memory_usage") is not None:
            st.write(f"💾 Memory: {health['memory_usage']} MB")
        st.write(f"⏱ Uptime: {health['uptime_sec']} s")
        st.json(health)
    return health
