"""
Record routes
-------------
CRUD endpoints for invoices, projects and transactions.

- GET    /<kind>          list (never fails; empty on backend error)
- POST   /<kind>          create, owned by the signed-in actor
- PATCH  /<kind>/{id}     partial update
- DELETE /<kind>/{id}     delete

Invoices additionally expose `mark-paid` and `recompute` actions. Invoice
creation takes a draft without VAT / earning; both are derived from `amount`.
"""

from datetime import date as Date
from typing import Callable, List, Optional, Type

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from analytics.metrics import recompute_invoice
from backend.deps import get_context, unwrap_or_raise
from core.app_context import AppContext
from core.models import (
    Invoice,
    InvoiceCreate,
    InvoiceUpdate,
    PaymentStatus,
    Project,
    ProjectCreate,
    ProjectUpdate,
    Transaction,
    TransactionCreate,
    TransactionUpdate,
)


class InvoiceDraft(BaseModel):
    invoice_number: str
    client_name: str
    date: Date
    amount: float = Field(ge=0)
    status: PaymentStatus = PaymentStatus.UNPAID
    payment_date: Optional[Date] = None
    notes: Optional[str] = None

    def to_create(self) -> InvoiceCreate:
        return InvoiceCreate.from_amount(**self.model_dump())


class MarkPaid(BaseModel):
    payment_date: Optional[Date] = None


def build_router(
    kind: str,
    record_model: Type[BaseModel],
    create_model: Type[BaseModel],
    update_model: Type[BaseModel],
    prepare: Callable[[BaseModel], BaseModel] = lambda body: body,
) -> APIRouter:
    """Standard list/create/update/delete router for one repository."""
    router = APIRouter(prefix=f"/{kind}", tags=[kind])

    def repo(ctx: AppContext):
        return getattr(ctx, kind)

    @router.get("", response_model=List[record_model])
    def list_records(ctx: AppContext = Depends(get_context)):
        return repo(ctx).list().items

    @router.post("", response_model=record_model, status_code=201)
    def create_record(body: create_model, ctx: AppContext = Depends(get_context)):
        return unwrap_or_raise(repo(ctx).add(prepare(body)))

    @router.patch("/{record_id}")
    def update_record(record_id: str, body: update_model, ctx: AppContext = Depends(get_context)):
        unwrap_or_raise(repo(ctx).update(record_id, body))
        return {"status": "ok", "id": record_id}

    @router.delete("/{record_id}")
    def delete_record(record_id: str, ctx: AppContext = Depends(get_context)):
        unwrap_or_raise(repo(ctx).delete(record_id))
        return {"status": "ok", "id": record_id}

    return router


invoices_router = build_router(
    "invoices", Invoice, InvoiceDraft, InvoiceUpdate, prepare=lambda body: body.to_create()
)
projects_router = build_router("projects", Project, ProjectCreate, ProjectUpdate)
transactions_router = build_router("transactions", Transaction, TransactionCreate, TransactionUpdate)


@invoices_router.post("/{record_id}/mark-paid")
def mark_invoice_paid(record_id: str, body: MarkPaid, ctx: AppContext = Depends(get_context)):
    unwrap_or_raise(ctx.invoices.mark_paid(record_id, body.payment_date))
    return {"status": "ok", "id": record_id}


@invoices_router.post("/{record_id}/recompute")
def recompute_invoice_amounts(record_id: str, ctx: AppContext = Depends(get_context)):
    """Refresh stored vat_amount / earning from the invoice's current amount."""
    match = next((i for i in ctx.invoices.list().items if i.id == record_id), None)
    if match is None:
        raise HTTPException(status_code=404, detail=f"Invoice {record_id} not found")
    changes = recompute_invoice(match)
    unwrap_or_raise(ctx.invoices.update(record_id, changes))
    return {"status": "ok", "id": record_id, **changes.model_dump(exclude_unset=True)}
