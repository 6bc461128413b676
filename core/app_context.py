"""
core/app_context.py
-------------------
Application root: owns the local store, the Supabase client accessor and
every service built on it, and hands them to the API and the UI.

Nothing here is a module global. The FastAPI app keeps one context on
`app.state`; the Streamlit app keeps one per browser session in
`st.session_state`. Tests build contexts around fakes.
"""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field
from supabase import create_client

from analytics.insights import InsightGenerator
from analytics.metrics import DashboardStats, compute_dashboard_stats
from core.config import BACKEND_TIMEOUT_SEC
from core.models import AIInsight, Actor, Invoice, Project, SupabaseConfig, Transaction
from core.errors import ConfigurationError
from core.readiness import MIN_KEY_LENGTH, AppState, is_configured, resolve_app_state
from database.local_store import LocalStore
from supabase_client.auth import AuthService
from supabase_client.config import ClientAccessor, ClientFactory
from supabase_client.repository import (
    InvoiceRepository,
    ProjectRepository,
    ReadResult,
    Repository,
    TransactionRepository,
)


@dataclass
class AppContext:
    store: LocalStore
    accessor: ClientAccessor
    auth: AuthService
    invoices: InvoiceRepository
    projects: ProjectRepository
    transactions: TransactionRepository
    insights: InsightGenerator
    read_timeout: float = BACKEND_TIMEOUT_SEC

    def config(self) -> Optional[SupabaseConfig]:
        return self.accessor.resolve_config()

    def app_state(self, session_resolved: bool = True) -> AppState:
        """Re-evaluated on every call; never cached."""
        config = self.config()
        user = self.auth.current_user() if session_resolved else None
        return resolve_app_state(config, session_resolved, user)

    def save_config(self, config: SupabaseConfig) -> None:
        """Settings / setup flow: persist credentials and rebuild the client.

        Accepts a usable configuration or an all-blank one (logical reset);
        anything in between raises ConfigurationError and nothing is saved.
        """
        blank = not config.url.strip() and not config.anon_key.strip()
        if not blank and not is_configured(config):
            raise ConfigurationError(
                "Supabase URL must start with https:// and the anon key must be "
                f"longer than {MIN_KEY_LENGTH} characters."
            )
        self.accessor.save_and_reinitialize(config)


def resolve_session(ctx: AppContext) -> Tuple[AppState, Optional[Actor]]:
    """Leave LOADING: look up the session and re-evaluate the screen.

    SETUP is returned without touching the network.
    """
    config = ctx.config()
    state = resolve_app_state(config, session_resolved=False, user=None)
    if state != AppState.LOADING:
        return state, None
    user = ctx.auth.current_user()
    return resolve_app_state(config, session_resolved=True, user=user), user


def build_context(
    db_path: Optional[Path] = None,
    store: Optional[LocalStore] = None,
    client_factory: ClientFactory = create_client,
    insights: Optional[InsightGenerator] = None,
    environ: Mapping[str, str] = os.environ,
    debug: bool = False,
) -> AppContext:
    """Wire every service around one store and one accessor."""
    store = store if store is not None else LocalStore(db_path=db_path)
    accessor = ClientAccessor(store, factory=client_factory, environ=environ, debug=debug)
    auth = AuthService(accessor)
    return AppContext(
        store=store,
        accessor=accessor,
        auth=auth,
        invoices=InvoiceRepository(accessor, auth, store, debug=debug),
        projects=ProjectRepository(accessor, auth, store, debug=debug),
        transactions=TransactionRepository(accessor, auth, store, debug=debug),
        insights=insights if insights is not None else InsightGenerator(debug=debug),
    )


# --------------------------------------------------------------------------- #
# Dashboard loading
# --------------------------------------------------------------------------- #

class DashboardSnapshot(BaseModel):
    invoices: List[Invoice]
    projects: List[Project]
    transactions: List[Transaction]
    stats: DashboardStats
    insights: List[AIInsight]
    degraded: List[str] = Field(default_factory=list)


async def _bounded_list(repo: Repository, timeout: float) -> ReadResult:
    try:
        return await asyncio.wait_for(asyncio.to_thread(repo.list), timeout=timeout)
    except asyncio.TimeoutError:
        print(f"[Supabase] ⚠️ Fetch '{repo.table}' timed out after {timeout}s")
        return ReadResult(error="timeout")


async def load_dashboard(ctx: AppContext, with_insights: bool = True) -> DashboardSnapshot:
    """
    Load the three collections concurrently, then derive stats and insights.

    The reads are independent, so they fan out together and are joined before
    insight generation. Each read is bounded by `ctx.read_timeout`; expiry
    counts as a failed read (empty collection).
    """
    invoices, projects, transactions = await asyncio.gather(
        _bounded_list(ctx.invoices, ctx.read_timeout),
        _bounded_list(ctx.projects, ctx.read_timeout),
        _bounded_list(ctx.transactions, ctx.read_timeout),
    )
    degraded = [
        name
        for name, result in (
            ("invoices", invoices),
            ("projects", projects),
            ("transactions", transactions),
        )
        if result.degraded
    ]

    insights: List[AIInsight] = []
    if with_insights:
        insights = await asyncio.to_thread(
            ctx.insights.generate, invoices.items, transactions.items, projects.items
        )

    return DashboardSnapshot(
        invoices=invoices.items,
        projects=projects.items,
        transactions=transactions.items,
        stats=compute_dashboard_stats(invoices.items, transactions.items, projects.items),
        insights=insights,
        degraded=degraded,
    )


def run_sync(coro) -> Any:
    """Run a coroutine from synchronous code (Streamlit scripts)."""
    return asyncio.run(coro)
