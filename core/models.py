"""
core/models.py
--------------
Typed records exchanged between Supabase, the analytics layer, the API and
the UI.

Column names are snake_case and match the Supabase tables `invoices`,
`projects` and `transactions`. Every persisted row also carries `user_id`
(attached by the repository at write time) and a server-side `created_at`.
"""

from __future__ import annotations

from datetime import date as Date
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.config import EARNING_RATE, VAT_RATE


# --------------------------------------------------------------------------- #
# Enums
# --------------------------------------------------------------------------- #

class PaymentStatus(str, Enum):
    PAID = "Paid"
    UNPAID = "Unpaid"


class TransactionType(str, Enum):
    INCOME = "Income"
    EXPENSE = "Expense"


class ProjectStatus(str, Enum):
    PLANNING = "Planning"
    ACTIVE = "Active"
    MAINTENANCE = "Maintenance"
    ARCHIVED = "Archived"


class InsightType(str, Enum):
    SUGGESTION = "suggestion"
    WARNING = "warning"
    TIP = "tip"


class _Record(BaseModel):
    # Supabase may hand back bigint ids; they are addressed as strings here.
    model_config = ConfigDict(coerce_numbers_to_str=True, use_enum_values=False)


# --------------------------------------------------------------------------- #
# Configuration & actor
# --------------------------------------------------------------------------- #

class SupabaseConfig(BaseModel):
    """Backend connection descriptor: project URL + public anon key."""
    model_config = ConfigDict(frozen=True)

    url: str = ""
    anon_key: str = ""


class Actor(BaseModel):
    """The authenticated user scoping every read and write."""
    id: str
    email: Optional[str] = None

    @property
    def display_name(self) -> str:
        return (self.email or "User").split("@")[0]


# --------------------------------------------------------------------------- #
# Invoices
# --------------------------------------------------------------------------- #

class InvoiceCreate(_Record):
    invoice_number: str
    client_name: str
    date: Date
    amount: float = Field(ge=0)
    vat_amount: float = 0.0      # VAT_RATE of amount, fixed at creation
    earning: float = 0.0         # EARNING_RATE of amount, fixed at creation
    status: PaymentStatus = PaymentStatus.UNPAID
    payment_date: Optional[Date] = None
    notes: Optional[str] = None

    @classmethod
    def from_amount(
        cls,
        *,
        invoice_number: str,
        client_name: str,
        date: Date,
        amount: float,
        status: PaymentStatus = PaymentStatus.UNPAID,
        payment_date: Optional[Date] = None,
        notes: Optional[str] = None,
        vat_rate: float = VAT_RATE,
        earning_rate: float = EARNING_RATE,
    ) -> "InvoiceCreate":
        """Build a new invoice with VAT and earning derived from `amount`."""
        return cls(
            invoice_number=invoice_number,
            client_name=client_name,
            date=date,
            amount=amount,
            vat_amount=amount * vat_rate,
            earning=amount * earning_rate,
            status=status,
            payment_date=payment_date,
            notes=notes,
        )


class Invoice(InvoiceCreate):
    id: str
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None


class InvoiceUpdate(_Record):
    """Partial invoice update. `vat_amount` / `earning` are NOT refreshed
    when `amount` changes; see analytics.metrics.recompute_invoice."""
    invoice_number: Optional[str] = None
    client_name: Optional[str] = None
    date: Optional[Date] = None
    amount: Optional[float] = Field(default=None, ge=0)
    vat_amount: Optional[float] = None
    earning: Optional[float] = None
    status: Optional[PaymentStatus] = None
    payment_date: Optional[Date] = None
    notes: Optional[str] = None


# --------------------------------------------------------------------------- #
# Transactions
# --------------------------------------------------------------------------- #

class TransactionCreate(_Record):
    type: TransactionType
    category: str
    amount: float = Field(ge=0)
    date: Date
    project_id: Optional[str] = None
    description: str = ""


class Transaction(TransactionCreate):
    id: str
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None


class TransactionUpdate(_Record):
    type: Optional[TransactionType] = None
    category: Optional[str] = None
    amount: Optional[float] = Field(default=None, ge=0)
    date: Optional[Date] = None
    project_id: Optional[str] = None
    description: Optional[str] = None


# --------------------------------------------------------------------------- #
# Projects
# --------------------------------------------------------------------------- #

class ProjectCreate(_Record):
    name: str
    description: str = ""
    status: ProjectStatus = ProjectStatus.PLANNING
    tech_stack: List[str] = Field(default_factory=list)
    credentials: Optional[Dict[str, str]] = None
    domain_name: Optional[str] = None
    domain_expiry: Optional[Date] = None
    hosting_provider: Optional[str] = None
    hosting_renewal: Optional[Date] = None


class Project(ProjectCreate):
    id: str
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None


class ProjectUpdate(_Record):
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    tech_stack: Optional[List[str]] = None
    credentials: Optional[Dict[str, str]] = None
    domain_name: Optional[str] = None
    domain_expiry: Optional[Date] = None
    hosting_provider: Optional[str] = None
    hosting_renewal: Optional[Date] = None


# --------------------------------------------------------------------------- #
# AI insights (ephemeral, never persisted)
# --------------------------------------------------------------------------- #

class AIInsight(BaseModel):
    title: str
    content: str
    type: InsightType
