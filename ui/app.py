"""
Get Rich OS — Streamlit Launcher
--------------------------------
Main entrypoint for the Get Rich OS app.

    streamlit run ui/app.py

Every render re-evaluates the screen state machine
(SETUP -> LOADING -> AUTH -> READY); nothing about readiness is cached
between reruns. One AppContext lives per browser session.
"""

import os
import sys

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.append(ROOT_DIR)

import streamlit as st

from core.app_context import AppContext, build_context, load_dashboard, resolve_session, run_sync
from core.config import NAVIGATION
from core.errors import AuthenticationError
from core.metadata import get_metadata
from core.readiness import AppState, resolve_app_state
from ui.components.feedback import SNAPSHOT_KEY, invalidate_data, show_flash
from ui.views import auth, dashboard, invoices, projects, settings, setup, transactions
from ui.views import insights as insights_view

CONTEXT_KEY = "_context"

st.set_page_config(page_title="Get Rich OS", page_icon="🛡️", layout="wide")


def get_context() -> AppContext:
    if CONTEXT_KEY not in st.session_state:
        st.session_state[CONTEXT_KEY] = build_context()
    return st.session_state[CONTEXT_KEY]


def get_snapshot(ctx: AppContext):
    """Records + stats for this session; dropped after every successful write."""
    if SNAPSHOT_KEY not in st.session_state:
        with st.spinner("Loading your records..."):
            st.session_state[SNAPSHOT_KEY] = run_sync(load_dashboard(ctx, with_insights=False))
    return st.session_state[SNAPSHOT_KEY]


def render_sidebar(ctx: AppContext, user) -> str:
    with st.sidebar:
        st.title("🛡️ Get Rich OS")
        st.caption(f"Signed in as **{user.display_name}**")
        labels = [label for label, _ in NAVIGATION]
        choice = st.radio("Navigation", labels, label_visibility="collapsed")
        st.divider()
        if st.button("🔄 Refresh Data"):
            invalidate_data()
            st.rerun()
        if st.button("🚪 Sign Out"):
            try:
                ctx.auth.sign_out()
            except AuthenticationError as e:
                st.error(str(e))
            else:
                invalidate_data()
                st.session_state.pop(insights_view.INSIGHTS_KEY, None)
                st.rerun()
        st.caption(f"v{get_metadata()['version']}")
    return dict(NAVIGATION)[choice]


def main() -> None:
    ctx = get_context()

    # Decided before any network call: SETUP, otherwise LOADING.
    state = resolve_app_state(ctx.config(), session_resolved=False, user=None)
    if state == AppState.SETUP:
        setup.render(ctx)
        return

    # LOADING: the session lookup runs behind a spinner.
    with st.spinner("Synchronizing Secure OS..."):
        state, user = resolve_session(ctx)

    if state == AppState.SETUP:
        setup.render(ctx)
        return
    if state == AppState.AUTH:
        auth.render(ctx)
        return

    page = render_sidebar(ctx, user)
    show_flash()
    snapshot = get_snapshot(ctx)

    if page == "dashboard":
        st.title(f"Welcome back, {user.display_name}")
        dashboard.render(snapshot, st.session_state.get(insights_view.INSIGHTS_KEY, []))
        if ctx.insights.available and st.button("✨ Refresh Insights"):
            insights_view.refresh_insights(ctx, snapshot)
            st.rerun()
    elif page == "invoices":
        invoices.render(ctx, snapshot.invoices)
    elif page == "projects":
        projects.render(ctx, snapshot.projects)
    elif page == "transactions":
        transactions.render(ctx, snapshot.transactions, snapshot.projects)
    elif page == "insights":
        insights_view.render(ctx, snapshot)
    elif page == "settings":
        settings.render(ctx, user)


main()
