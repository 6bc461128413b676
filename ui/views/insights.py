# ui/views/insights.py
"""AI insights page: on-demand Gemini analysis of the current snapshot."""

from __future__ import annotations

import streamlit as st

from core.app_context import AppContext, DashboardSnapshot
from ui.views.dashboard import render_insight_cards

INSIGHTS_KEY = "insights"


def refresh_insights(ctx: AppContext, snapshot: DashboardSnapshot) -> None:
    """Generate a fresh set; an empty result replaces the previous one."""
    with st.spinner("Analyzing your business data..."):
        st.session_state[INSIGHTS_KEY] = ctx.insights.generate(
            snapshot.invoices, snapshot.transactions, snapshot.projects
        )


def render(ctx: AppContext, snapshot: DashboardSnapshot) -> None:
    st.title("✨ AI Insights")
    st.caption(f"Model: {ctx.insights.model}")

    if not ctx.insights.available:
        st.warning("GEMINI_API_KEY is not set. Add it to `.env` to enable insights.")

    if st.button("🔄 Run Analysis", disabled=not ctx.insights.available):
        refresh_insights(ctx, snapshot)
        if not st.session_state[INSIGHTS_KEY]:
            st.info("The model returned no usable insights. Try again in a moment.")

    render_insight_cards(st.session_state.get(INSIGHTS_KEY, []), columns=1)
