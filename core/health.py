"""
core/health.py
-----------------------------------
System health diagnostics for the Get Rich OS backend and Settings page.

Purpose
-------
- Used by FastAPI `/health` endpoint and the Streamlit System Status card.
- Reports Supabase readiness (configuration gate) and connectivity.
- Reports whether the AI insight adapter has credentials.
- Reports uptime, version, CPU/memory usage.
- Returns JSON-safe dict ready for serialization.
"""

from __future__ import annotations

import platform
import time
from typing import Any, Dict

import psutil

from core.app_context import AppContext
from core.config import BACKEND_VERSION


# Cache the process start time for uptime calculation
START_TIME = time.time()


def system_health(ctx: AppContext, probe: bool = True) -> Dict[str, Any]:
    """
    Return structured health diagnostics.

    Parameters
    ----------
    ctx : AppContext
        Application root to inspect.
    probe : bool
        If True and Supabase is configured, run a one-row query to confirm
        the credentials actually work.

    Returns
    -------
    dict
        JSON-safe health report.
    """
    status = "ok"
    message = "Get Rich OS operational."
    config = ctx.config()
    supabase_configured = ctx.accessor.is_configured()
    supabase_connected = False

    # --- Supabase connectivity test ---
    if not supabase_configured:
        status = "degraded"
        message = "Supabase not configured."
    elif probe:
        try:
            ctx.accessor.get().table("invoices").select("id").limit(1).execute()
            supabase_connected = True
        except Exception as e:  # noqa: BLE001 - reported, not raised
            status = "degraded"
            message = f"Supabase check failed: {e.__class__.__name__}"

    # --- Process metrics (MB for memory) ---
    try:
        process = psutil.Process()
        cpu_load = psutil.cpu_percent(interval=0.1)
        memory_usage = round(process.memory_info().rss / (1024 * 1024), 2)
    except psutil.Error:
        cpu_load = None
        memory_usage = None

    return {
        "status": status,
        "message": message,
        "version": BACKEND_VERSION,
        "supabase_configured": supabase_configured,
        "supabase_connected": supabase_connected,
        "supabase_url": config.url if supabase_configured else None,
        "ai_ready": ctx.insights.available,
        "cpu_load": cpu_load,
        "memory_usage": memory_usage,
        "uptime_sec": round(time.time() - START_TIME, 2),
        "system": platform.system(),
        "release": platform.release(),
    }
