"""
analytics/metrics.py
--------------------

Pure dashboard aggregates over invoices, transactions and projects.

This module must remain network-agnostic and pure:
- Input: lists of core.models records (already loaded by the repositories)
- Output: JSON-serializable models / a pandas DataFrame for charts

Used by core.app_context.load_dashboard, backend.main:/dashboard and the
Streamlit dashboard page.

Note on stored derived fields
-----------------------------
`vat_amount` and `earning` are fixed when an invoice is created. Editing
`amount` later leaves them stale; `is_stale` detects that and
`recompute_invoice` returns the corrected values (the caller decides whether
to persist them).
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

import pandas as pd
from pydantic import BaseModel

from core.config import EARNING_RATE, RENEWAL_WINDOW_DAYS, VAT_RATE
from core.models import (
    Invoice,
    InvoiceUpdate,
    PaymentStatus,
    Project,
    ProjectStatus,
    Transaction,
    TransactionType,
)

# Float comparison slack for the staleness check (amounts are whole francs)
_EPSILON = 1e-6


class DashboardStats(BaseModel):
    total_paid: float = 0.0
    total_unpaid: float = 0.0
    unpaid_count: int = 0
    total_earnings: float = 0.0
    total_expenses: float = 0.0
    total_income: float = 0.0
    expected_income: float = 0.0
    monthly_earnings: float = 0.0
    invoice_count: int = 0
    transaction_count: int = 0
    project_count: int = 0


class Renewal(BaseModel):
    project_id: str
    project_name: str
    kind: str              # "domain" | "hosting"
    due: date
    days_left: int


def compute_dashboard_stats(
    invoices: Sequence[Invoice],
    transactions: Sequence[Transaction] = (),
    projects: Sequence[Project] = (),
    today: Optional[date] = None,
) -> DashboardStats:
    """
    Compute the dashboard aggregates.

    Parameters
    ----------
    invoices, transactions, projects : sequences of records
        Collections as returned by the repositories.
    today : date, optional
        Reference day for `monthly_earnings` (defaults to today).

    Returns
    -------
    DashboardStats
        - total_paid      : sum of amount over Paid invoices
        - total_unpaid    : sum of amount over Unpaid invoices
        - unpaid_count    : number of Unpaid invoices
        - total_earnings  : sum of stored earning over Paid invoices
        - total_expenses  : sum of amount over Expense transactions
        - total_income    : sum of amount over Income transactions
        - expected_income : stored earning still owed by Unpaid invoices
        - monthly_earnings: earning of invoices paid in `today`'s month
    """
    today = today or date.today()
    paid = [i for i in invoices if i.status == PaymentStatus.PAID]
    unpaid = [i for i in invoices if i.status == PaymentStatus.UNPAID]

    monthly = 0.0
    for inv in paid:
        paid_on = inv.payment_date or inv.date
        if (paid_on.year, paid_on.month) == (today.year, today.month):
            monthly += inv.earning

    return DashboardStats(
        total_paid=sum(i.amount for i in paid),
        total_unpaid=sum(i.amount for i in unpaid),
        unpaid_count=len(unpaid),
        total_earnings=sum(i.earning for i in paid),
        total_expenses=_sum_by_type(transactions, TransactionType.EXPENSE),
        total_income=_sum_by_type(transactions, TransactionType.INCOME),
        expected_income=sum(i.earning for i in unpaid),
        monthly_earnings=monthly,
        invoice_count=len(invoices),
        transaction_count=len(transactions),
        project_count=len(projects),
    )


def _sum_by_type(transactions: Iterable[Transaction], kind: TransactionType) -> float:
    return sum(t.amount for t in transactions if t.type == kind)


# --------------------------------------------------------------------------- #
# Derived invoice fields
# --------------------------------------------------------------------------- #

def derive_invoice_amounts(
    amount: float,
    vat_rate: float = VAT_RATE,
    earning_rate: float = EARNING_RATE,
) -> Tuple[float, float]:
    """Return (vat_amount, earning) for a gross `amount`."""
    return amount * vat_rate, amount * earning_rate


def is_stale(
    invoice: Invoice,
    vat_rate: float = VAT_RATE,
    earning_rate: float = EARNING_RATE,
) -> bool:
    """True when the stored vat_amount / earning no longer match `amount`."""
    vat, earning = derive_invoice_amounts(invoice.amount, vat_rate, earning_rate)
    return abs(vat - invoice.vat_amount) > _EPSILON or abs(earning - invoice.earning) > _EPSILON


def recompute_invoice(
    invoice: Invoice,
    vat_rate: float = VAT_RATE,
    earning_rate: float = EARNING_RATE,
) -> InvoiceUpdate:
    """Partial update restoring vat_amount / earning from the current amount."""
    vat, earning = derive_invoice_amounts(invoice.amount, vat_rate, earning_rate)
    return InvoiceUpdate(vat_amount=vat, earning=earning)


# --------------------------------------------------------------------------- #
# Chart data
# --------------------------------------------------------------------------- #

CASHFLOW_COLUMNS = ["month", "revenue", "income", "expenses"]


def monthly_cashflow(
    invoices: Sequence[Invoice],
    transactions: Sequence[Transaction] = (),
) -> pd.DataFrame:
    """
    Month-by-month revenue (paid invoices), other income and expenses.

    Returns a DataFrame with columns month (YYYY-MM), revenue, income,
    expenses, sorted by month; empty when there is nothing to plot.
    """
    rows = []
    for inv in invoices:
        if inv.status != PaymentStatus.PAID:
            continue
        day = inv.payment_date or inv.date
        rows.append({"month": f"{day:%Y-%m}", "revenue": inv.amount})
    for txn in transactions:
        column = "expenses" if txn.type == TransactionType.EXPENSE else "income"
        rows.append({"month": f"{txn.date:%Y-%m}", column: txn.amount})

    if not rows:
        return pd.DataFrame(columns=CASHFLOW_COLUMNS)

    df = pd.DataFrame(rows).reindex(columns=CASHFLOW_COLUMNS).fillna(0.0)
    df = df.groupby("month", as_index=False)[["revenue", "income", "expenses"]].sum()
    return df.sort_values("month").reset_index(drop=True)


# --------------------------------------------------------------------------- #
# Renewals
# --------------------------------------------------------------------------- #

def upcoming_renewals(
    projects: Sequence[Project],
    today: Optional[date] = None,
    window_days: int = RENEWAL_WINDOW_DAYS,
) -> List[Renewal]:
    """Domain / hosting renewals due within `window_days` (overdue included),
    soonest first. Archived projects are ignored."""
    today = today or date.today()
    due: List[Renewal] = []
    for project in projects:
        if project.status == ProjectStatus.ARCHIVED:
            continue
        for kind, day in (("domain", project.domain_expiry), ("hosting", project.hosting_renewal)):
            if day is None:
                continue
            days_left = (day - today).days
            if days_left <= window_days:
                due.append(
                    Renewal(
                        project_id=project.id,
                        project_name=project.name,
                        kind=kind,
                        due=day,
                        days_left=days_left,
                    )
                )
    return sorted(due, key=lambda r: r.days_left)
