# tests/test_app_context.py
import time
from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from core.app_context import load_dashboard, resolve_session, run_sync
from core.errors import ConfigurationError
from core.models import InvoiceCreate, PaymentStatus, SupabaseConfig, TransactionCreate, TransactionType
from core.readiness import AppState
from supabase_client.repository import ReadResult
from tests.conftest import VALID_KEY, VALID_URL


def _seed(ctx):
    ctx.invoices.add(
        InvoiceCreate.from_amount(
            invoice_number="INV-1", client_name="A", date=date(2026, 3, 1), amount=1000,
            status=PaymentStatus.PAID,
        )
    ).unwrap()
    ctx.invoices.add(
        InvoiceCreate.from_amount(
            invoice_number="INV-2", client_name="B", date=date(2026, 3, 2), amount=500,
        )
    ).unwrap()
    ctx.transactions.add(
        TransactionCreate(type=TransactionType.EXPENSE, category="Travel", amount=300, date=date(2026, 3, 3))
    ).unwrap()


def test_app_state_follows_configuration_and_session(make_context):
    ctx = make_context(configured=False)
    assert ctx.app_state() == AppState.SETUP

    ctx.save_config(SupabaseConfig(url=VALID_URL, anon_key=VALID_KEY))
    assert ctx.app_state(session_resolved=False) == AppState.LOADING
    assert ctx.app_state() == AppState.AUTH

    ctx.auth.sign_up("owner@getrich.rw", "pw")
    assert ctx.app_state() == AppState.READY


def test_save_config_rejects_malformed(ctx, store):
    with pytest.raises(ConfigurationError):
        ctx.save_config(SupabaseConfig(url="http://insecure.supabase.co", anon_key=VALID_KEY))
    assert store.get_config().url == VALID_URL


def test_blank_config_resets_to_setup(ctx, factory):
    ctx.save_config(SupabaseConfig(url="", anon_key=""))

    assert ctx.app_state() == AppState.SETUP
    assert factory.last.url != VALID_URL


def test_load_dashboard(signed_in_ctx):
    _seed(signed_in_ctx)

    snapshot = run_sync(load_dashboard(signed_in_ctx))
    assert len(snapshot.invoices) == 2
    assert len(snapshot.transactions) == 1
    assert snapshot.projects == []
    assert snapshot.stats.total_paid == 1000
    assert snapshot.stats.total_unpaid == 500
    assert snapshot.stats.total_expenses == 300
    assert len(snapshot.insights) == 2
    assert snapshot.degraded == []


def test_load_dashboard_without_insights(signed_in_ctx, genai_client):
    snapshot = run_sync(load_dashboard(signed_in_ctx, with_insights=False))

    assert snapshot.insights == []
    assert genai_client.models.requests == []


def test_load_dashboard_degrades_on_timeout(signed_in_ctx):
    _seed(signed_in_ctx)
    signed_in_ctx.read_timeout = 0.05

    def slow_list():
        time.sleep(0.5)
        return ReadResult()

    signed_in_ctx.projects.list = slow_list
    snapshot = run_sync(load_dashboard(signed_in_ctx, with_insights=False))

    assert snapshot.degraded == ["projects"]
    assert snapshot.projects == []
    assert len(snapshot.invoices) == 2


def test_load_dashboard_unconfigured_is_empty(make_context, factory):
    ctx = make_context(configured=False)

    snapshot = run_sync(load_dashboard(ctx, with_insights=False))
    assert snapshot.stats.invoice_count == 0
    assert factory.built == []


def test_load_dashboard_survives_local_cache_failure(signed_in_ctx, store, monkeypatch):
    _seed(signed_in_ctx)

    def locked(*args, **kwargs):
        raise OperationalError("UPDATE local_values", {}, Exception("database is locked"))

    monkeypatch.setattr(store, "save_value", locked)
    snapshot = run_sync(load_dashboard(signed_in_ctx, with_insights=False))

    assert len(snapshot.invoices) == 2
    assert snapshot.stats.total_expenses == 300
    assert snapshot.degraded == []


def test_resolve_session_skips_lookup_during_setup(make_context, factory):
    ctx = make_context(configured=False)

    assert resolve_session(ctx) == (AppState.SETUP, None)
    assert factory.built == []


def test_resolve_session_leaves_loading(ctx, factory):
    assert ctx.app_state(session_resolved=False) == AppState.LOADING
    assert resolve_session(ctx) == (AppState.AUTH, None)

    ctx.auth.sign_in("owner@getrich.rw", "correct-horse")
    state, user = resolve_session(ctx)
    assert state == AppState.READY
    assert user.email == "owner@getrich.rw"
