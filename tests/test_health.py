# tests/test_health.py
from core.health import system_health
from tests.conftest import VALID_URL


def test_configured_and_reachable(ctx):
    health = system_health(ctx)

    assert health["status"] == "ok"
    assert health["supabase_configured"] is True
    assert health["supabase_connected"] is True
    assert health["supabase_url"] == VALID_URL
    assert health["ai_ready"] is True


def test_unreachable_is_degraded(ctx, factory):
    ctx.accessor.get()
    factory.last.fail_with = ConnectionError("offline")

    health = system_health(ctx)
    assert health["status"] == "degraded"
    assert health["supabase_connected"] is False
    assert "ConnectionError" in health["message"]


def test_unconfigured(make_context):
    health = system_health(make_context(configured=False))

    assert health["status"] == "degraded"
    assert health["supabase_configured"] is False
    assert health["supabase_url"] is None


def test_no_probe_skips_query(ctx, factory):
    system_health(ctx, probe=False)
    assert factory.built == []
