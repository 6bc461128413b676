# tests/test_repository.py
from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from core.errors import AuthenticationError, BackendError, ConfigurationError
from core.models import (
    InvoiceCreate,
    InvoiceUpdate,
    PaymentStatus,
    TransactionCreate,
    TransactionType,
)
from supabase_client.repository import classify_error
from tests.conftest import USER_ID


def _invoice(number="INV-001", amount=1000.0, day=date(2026, 3, 1)):
    return InvoiceCreate.from_amount(
        invoice_number=number, client_name="Kigali Motors", date=day, amount=amount
    )


class _RlsViolation(Exception):
    code = "42501"


def test_list_unconfigured_is_empty_without_io(make_context, factory):
    ctx = make_context(configured=False)

    result = ctx.invoices.list()
    assert result.items == []
    assert not result.degraded
    assert factory.built == []


def test_list_degrades_on_backend_error(ctx, factory):
    ctx.accessor.get()
    factory.last.fail_with = ConnectionError("network down")

    result = ctx.invoices.list()
    assert list(result) == []
    assert result.degraded
    assert "network down" in result.error


def test_add_without_actor_fails_without_io(ctx, factory):
    result = ctx.invoices.add(_invoice())

    assert not result.ok
    assert isinstance(result.error, AuthenticationError)
    assert all(call["action"] != "insert" for call in factory.last.calls)


def test_add_attaches_owner_and_returns_row(signed_in_ctx, factory):
    created = signed_in_ctx.invoices.add(_invoice()).unwrap()

    assert created.id
    assert created.user_id == USER_ID
    assert created.vat_amount == pytest.approx(180)
    assert created.earning == pytest.approx(210)
    insert = [c for c in factory.last.calls if c["action"] == "insert"][0]
    assert insert["payload"]["user_id"] == USER_ID
    assert "id" not in insert["payload"]


def test_list_is_ordered_descending_and_cached(signed_in_ctx, store):
    signed_in_ctx.invoices.add(_invoice("INV-001", day=date(2026, 1, 5)))
    signed_in_ctx.invoices.add(_invoice("INV-002", day=date(2026, 2, 5)))

    numbers = [i.invoice_number for i in signed_in_ctx.invoices.list()]
    assert numbers == ["INV-002", "INV-001"]
    assert [i.invoice_number for i in signed_in_ctx.invoices.cached()] == numbers
    assert len(store.get_cached("invoices")) == 2


def test_malformed_rows_are_skipped(signed_in_ctx, factory):
    signed_in_ctx.invoices.add(_invoice())
    factory.rows["invoices"].append({"id": "99", "date": "not-a-date"})

    assert len(signed_in_ctx.invoices.list()) == 1


def test_update_does_not_refresh_derived_fields(signed_in_ctx):
    created = signed_in_ctx.invoices.add(_invoice()).unwrap()

    assert signed_in_ctx.invoices.update(created.id, InvoiceUpdate(amount=2000.0)).ok
    stored = signed_in_ctx.invoices.list().items[0]
    assert stored.amount == 2000.0
    assert stored.earning == pytest.approx(210)


def test_update_sends_only_set_fields(signed_in_ctx, factory):
    created = signed_in_ctx.invoices.add(_invoice()).unwrap()
    signed_in_ctx.invoices.update(created.id, InvoiceUpdate(notes="called client"))

    update = [c for c in factory.last.calls if c["action"] == "update"][-1]
    assert update["payload"] == {"notes": "called client"}
    assert update["filters"] == [("id", created.id)]


def test_mark_paid(signed_in_ctx):
    created = signed_in_ctx.invoices.add(_invoice()).unwrap()

    assert signed_in_ctx.invoices.mark_paid(created.id, date(2026, 3, 9)).ok
    stored = signed_in_ctx.invoices.list().items[0]
    assert stored.status == PaymentStatus.PAID
    assert stored.payment_date == date(2026, 3, 9)


def test_delete(signed_in_ctx):
    txn = TransactionCreate(
        type=TransactionType.EXPENSE, category="Marketing", amount=300, date=date(2026, 3, 2)
    )
    created = signed_in_ctx.transactions.add(txn).unwrap()

    assert signed_in_ctx.transactions.delete(created.id).ok
    assert signed_in_ctx.transactions.list().items == []


def test_write_errors_propagate_typed(signed_in_ctx, factory):
    factory.last.fail_with = _RlsViolation("new row violates row-level security policy")
    result = signed_in_ctx.invoices.add(_invoice())
    assert isinstance(result.error, AuthenticationError)

    factory.last.fail_with = ConnectionError("timeout")
    result = signed_in_ctx.invoices.delete("1")
    assert isinstance(result.error, BackendError)


def test_insert_without_returned_row_is_an_error(signed_in_ctx, factory):
    factory.last.insert_returns_nothing = True
    result = signed_in_ctx.invoices.add(_invoice())
    assert isinstance(result.error, BackendError)


def test_writes_unconfigured(make_context):
    ctx = make_context(configured=False)
    assert isinstance(ctx.projects.delete("1").error, ConfigurationError)


def test_classify_error_keeps_our_errors():
    err = ConfigurationError("x")
    assert classify_error(err) is err


def _locked(*args, **kwargs):
    raise OperationalError("UPDATE local_values", {}, Exception("database is locked"))


def test_list_survives_local_cache_failure(signed_in_ctx, store, monkeypatch):
    signed_in_ctx.invoices.add(_invoice()).unwrap()
    monkeypatch.setattr(store, "save_value", _locked)

    result = signed_in_ctx.invoices.list()
    assert [i.invoice_number for i in result] == ["INV-001"]
    assert not result.degraded
