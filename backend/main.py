"""
Get Rich OS Backend API
=======================

FastAPI service exposing bookkeeping records, dashboard metrics, AI insights,
configuration and health endpoints.

Design Intent
-------------
• Records
    - Invoices, projects and transactions live in Supabase (row-level
      security scopes every row to its owner).
    - Reads degrade to empty lists; failed writes surface as HTTP errors
      (401 unauthenticated, 503 unconfigured, 502 backend failure).

• Configuration
    - One Supabase client handle per process, owned by the AppContext on
      `app.state`. `POST /config` persists new credentials and rebuilds the
      handle; nothing else does.

• Analytics
    - `/dashboard` fans out the three reads concurrently, then derives stats
      and (optionally) Gemini insights. Insights never fail the request.

Run with:

    uvicorn backend.main:app --reload
"""

from __future__ import annotations

import os
import sys
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

# --------------------------------------------------------------------------- #
# Path setup: ensure project root on sys.path
# --------------------------------------------------------------------------- #

# Allows imports like `core.*`, `analytics.*`, `supabase_client.*` when running via uvicorn
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.append(ROOT_DIR)

from analytics.metrics import DashboardStats, compute_dashboard_stats
from backend.deps import get_context
from backend.routes.auth import router as auth_router
from backend.routes.records import invoices_router, projects_router, transactions_router
from core.app_context import AppContext, DashboardSnapshot, load_dashboard
from core.config import BACKEND_VERSION
from core.errors import ConfigurationError
from core.health import system_health
from core.metadata import get_metadata
from core.models import AIInsight, SupabaseConfig

# --------------------------------------------------------------------------- #
# FastAPI App
# --------------------------------------------------------------------------- #

app = FastAPI(
    title="Get Rich OS Backend API",
    version=BACKEND_VERSION,
    description=(
        "Backend for small-business bookkeeping.\n"
        "- Invoices, projects and ledger transactions stored in Supabase.\n"
        "- Dashboard metrics (revenue, earnings, VAT, expenses).\n"
        "- Gemini-generated business insights.\n"
        "- Configuration bootstrap and health."
    ),
)

app.include_router(auth_router)
app.include_router(invoices_router)
app.include_router(projects_router)
app.include_router(transactions_router)

# --------------------------------------------------------------------------- #
# Pydantic Models (Agent & UI Friendly)
# --------------------------------------------------------------------------- #

class ConfigState(BaseModel):
    """Readiness of the Supabase configuration. The anon key is never echoed."""
    state: str
    configured: bool
    source: Optional[str] = None
    url: Optional[str] = None


class ConfigRequest(BaseModel):
    url: str
    anon_key: str


# --------------------------------------------------------------------------- #
# Core Routes
# --------------------------------------------------------------------------- #

@app.get("/")
async def root(ctx: AppContext = Depends(get_context)):
    """
    Basic liveness probe.
    """
    return {
        "status": "ok",
        "message": "Get Rich OS Backend is live.",
        "version": app.version,
        "supabase_configured": ctx.accessor.is_configured(),
    }


@app.get("/health")
def health(ctx: AppContext = Depends(get_context)):
    """
    System health endpoint. Delegates to core.health.system_health.
    """
    return system_health(ctx)


@app.get("/status/summary")
def status_summary(ctx: AppContext = Depends(get_context)):
    """
    High-level status summary for dashboards & agents.
    """
    return {
        "backend_version": app.version,
        "metadata": get_metadata(),
        "supabase_configured": ctx.accessor.is_configured(),
        "config_source": ctx.accessor.config_source(),
        "ai_ready": ctx.insights.available,
    }


# --------------------------------------------------------------------------- #
# Configuration
# --------------------------------------------------------------------------- #

@app.get("/config/state", response_model=ConfigState)
def config_state(ctx: AppContext = Depends(get_context)):
    config = ctx.config()
    configured = ctx.accessor.is_configured()
    return ConfigState(
        state=ctx.app_state().value,
        configured=configured,
        source=ctx.accessor.config_source(),
        url=config.url if configured else None,
    )


@app.post("/config", response_model=ConfigState)
def save_config(body: ConfigRequest, ctx: AppContext = Depends(get_context)):
    """
    Persist Supabase credentials locally and rebuild the client handle.

    An environment override (SUPABASE_URL / SUPABASE_ANON_KEY) still wins
    over the saved values.
    """
    try:
        ctx.save_config(SupabaseConfig(url=body.url.strip(), anon_key=body.anon_key.strip()))
    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return config_state(ctx)


@app.post("/cache/clear")
def clear_cache(ctx: AppContext = Depends(get_context)):
    return {"status": "ok", "removed": ctx.store.clear_cache()}


# --------------------------------------------------------------------------- #
# Dashboard & Insights
# --------------------------------------------------------------------------- #

@app.get("/dashboard", response_model=DashboardSnapshot)
async def dashboard(insights: bool = False, ctx: AppContext = Depends(get_context)):
    """
    Load every collection concurrently and return records + aggregates.

    Pass `?insights=true` to include Gemini insights (slower).
    """
    return await load_dashboard(ctx, with_insights=insights)


@app.get("/dashboard/stats", response_model=DashboardStats)
def dashboard_stats(ctx: AppContext = Depends(get_context)):
    return compute_dashboard_stats(
        ctx.invoices.list().items,
        ctx.transactions.list().items,
        ctx.projects.list().items,
    )


@app.post("/insights", response_model=List[AIInsight])
def insights(ctx: AppContext = Depends(get_context)):
    """
    Generate a fresh list of insights. Returns [] when the model is
    unavailable; never fails.
    """
    return ctx.insights.generate(
        ctx.invoices.list().items,
        ctx.transactions.list().items,
        ctx.projects.list().items,
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("backend.main:app", host="127.0.0.1", port=8000, reload=False)
