# ui/views/invoices.py
"""Invoices: list, create, mark paid, edit, recompute, delete."""

from __future__ import annotations

from datetime import date

import pandas as pd
import streamlit as st

from analytics.metrics import derive_invoice_amounts, is_stale, recompute_invoice
from core.app_context import AppContext
from core.config import EARNING_RATE, VAT_RATE, format_currency
from core.models import Invoice, InvoiceCreate, InvoiceUpdate, PaymentStatus
from ui.components.feedback import handle_write
from ui.components.selection import RecordChoices, select_record

STATUSES = [s.value for s in PaymentStatus]


def describe_invoice(invoice: Invoice) -> str:
    return f"{invoice.invoice_number} · {invoice.client_name} · {format_currency(invoice.amount)}"


def _table(invoices: list[Invoice]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "Number": i.invoice_number,
                "Client": i.client_name,
                "Date": i.date,
                "Amount": i.amount,
                "VAT": i.vat_amount,
                "Earning": i.earning,
                "Status": i.status.value,
                "Paid On": i.payment_date,
                "Stale": "⚠️" if is_stale(i) else "",
            }
            for i in invoices
        ]
    )


def render(ctx: AppContext, invoices: list[Invoice]) -> None:
    st.title("🧾 Invoices")

    with st.expander("➕ New Invoice", expanded=not invoices):
        with st.form("new_invoice", clear_on_submit=False):
            c1, c2 = st.columns(2)
            number = c1.text_input("Invoice Number", placeholder="INV-001")
            client = c2.text_input("Client Name")
            c3, c4 = st.columns(2)
            issued = c3.date_input("Date", value=date.today())
            amount = c4.number_input("Amount", min_value=0.0, step=1000.0)
            status = st.selectbox("Status", STATUSES)
            notes = st.text_area("Notes", height=80)
            vat, earning = derive_invoice_amounts(amount)
            st.caption(
                f"VAT ({VAT_RATE:.0%}): {format_currency(vat)} · "
                f"Earning ({EARNING_RATE:.0%}): {format_currency(earning)}"
            )
            submitted = st.form_submit_button("Save Invoice")

        if submitted:
            if not number or not client:
                st.error("Invoice number and client are required.")
            else:
                paid = PaymentStatus(status) == PaymentStatus.PAID
                draft = InvoiceCreate.from_amount(
                    invoice_number=number.strip(),
                    client_name=client.strip(),
                    date=issued,
                    amount=amount,
                    status=PaymentStatus(status),
                    payment_date=date.today() if paid else None,
                    notes=notes or None,
                )
                handle_write(ctx, ctx.invoices.add(draft), f"Invoice {number} saved.")

    if not invoices:
        st.info("No invoices yet.")
        return

    st.dataframe(_table(invoices), width="stretch", hide_index=True)
    if any(is_stale(i) for i in invoices):
        st.caption(
            "⚠️ Stale: VAT / earning were fixed at creation and no longer match "
            "the amount. Use *Recompute* below to refresh them."
        )

    st.subheader("Manage")
    choices = RecordChoices(invoices, describe_invoice)
    selected = choices.get(select_record("Invoice", choices))

    a1, a2, a3 = st.columns(3)
    if a1.button("✅ Mark Paid", disabled=selected.status == PaymentStatus.PAID):
        handle_write(ctx, ctx.invoices.mark_paid(selected.id), f"{selected.invoice_number} marked paid.")
    if a2.button("🔄 Recompute VAT / Earning", disabled=not is_stale(selected)):
        handle_write(
            ctx,
            ctx.invoices.update(selected.id, recompute_invoice(selected)),
            f"{selected.invoice_number} recomputed.",
        )
    if a3.button("🗑️ Delete"):
        handle_write(ctx, ctx.invoices.delete(selected.id), f"{selected.invoice_number} deleted.")

    with st.form(f"edit_invoice_{selected.id}", clear_on_submit=False):
        st.caption("Edit fields. Changing the amount does not refresh VAT / earning.")
        c1, c2 = st.columns(2)
        client = c1.text_input("Client Name", value=selected.client_name)
        amount = c2.number_input("Amount", min_value=0.0, value=float(selected.amount), step=1000.0)
        status = st.selectbox("Status", STATUSES, index=STATUSES.index(selected.status.value))
        notes = st.text_area("Notes", value=selected.notes or "", height=80)
        if st.form_submit_button("Update Invoice"):
            changes = InvoiceUpdate(
                client_name=client.strip(),
                amount=amount,
                status=PaymentStatus(status),
                notes=notes or None,
            )
            if changes.status == PaymentStatus.PAID and selected.payment_date is None:
                changes.payment_date = date.today()
            handle_write(ctx, ctx.invoices.update(selected.id, changes), f"{selected.invoice_number} updated.")
