# supabase_client/repository.py
"""
Typed CRUD facade over the Supabase tables `invoices`, `projects` and
`transactions`.

Read / write asymmetry
----------------------
- `list()` never fails: when the app is not configured it returns an empty
  result without touching the network, and any backend error is printed and
  degraded to an empty result. A failed read must not block rendering.
- `add()`, `update()` and `delete()` return a `WriteResult` carrying a typed
  error (`AuthenticationError`, `ConfigurationError`, `BackendError`).
  `WriteResult.unwrap()` raises it, so a failed write is never silent.

Visibility and ownership are enforced server-side by row-level security; the
repository attaches `user_id` of the current actor to every insert.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from core.errors import (
    AuthenticationError,
    BackendError,
    ConfigurationError,
    GetRichError,
)
from core.models import (
    Invoice,
    InvoiceUpdate,
    PaymentStatus,
    Project,
    Transaction,
)
from core.readiness import is_auth_session_error
from database.local_store import LocalStore
from supabase_client.auth import AuthService
from supabase_client.config import ClientAccessor

T = TypeVar("T", bound=BaseModel)
R = TypeVar("R")

# Columns the caller may never set directly.
PROTECTED_COLUMNS = ("id", "user_id", "created_at")

_json_payload = TypeAdapter(Dict[str, Any])


# --------------------------------------------------------------------------- #
# Result containers
# --------------------------------------------------------------------------- #

@dataclass
class ReadResult(Generic[T]):
    """Always success-shaped. `error` is informational only."""
    items: List[T] = field(default_factory=list)
    error: Optional[str] = None

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @property
    def degraded(self) -> bool:
        return self.error is not None


@dataclass
class WriteResult(Generic[R]):
    data: Optional[R] = None
    error: Optional[GetRichError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Optional[R]:
        """Return the data, or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.data

    @classmethod
    def success(cls, data: Optional[R] = None) -> "WriteResult[R]":
        return cls(data=data)

    @classmethod
    def failure(cls, error: GetRichError) -> "WriteResult[R]":
        return cls(error=error)


def classify_error(exc: BaseException) -> GetRichError:
    """Translate a Supabase / PostgREST / GoTrue exception to our taxonomy."""
    if isinstance(exc, GetRichError):
        return exc
    message = getattr(exc, "message", None) or str(exc) or type(exc).__name__
    if is_auth_session_error(exc):
        return AuthenticationError(message)
    return BackendError(message)


# --------------------------------------------------------------------------- #
# Generic repository
# --------------------------------------------------------------------------- #

class Repository(Generic[T]):
    """CRUD for one Supabase table. Subclasses set table/model/order."""

    table: str = ""
    model: Type[T]
    order_by: str = "created_at"

    def __init__(
        self,
        accessor: ClientAccessor,
        auth: AuthService,
        store: Optional[LocalStore] = None,
        debug: bool = False,
    ):
        self._accessor = accessor
        self._auth = auth
        self._store = store
        self._debug = debug

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #
    def list(self) -> ReadResult[T]:
        """All rows visible to the current actor, newest first."""
        if not self._accessor.is_configured():
            return ReadResult()

        try:
            client = self._accessor.get()
            if self._debug:
                print(f"[Supabase] → Fetching '{self.table}' ordered by {self.order_by} desc")
            res = (
                client.table(self.table)
                .select("*")
                .order(self.order_by, desc=True)
                .execute()
            )
            rows = res.data or []
        except Exception as e:  # noqa: BLE001 - reads degrade to empty
            print(f"[Supabase] ⚠️ Fetch '{self.table}' failed: {type(e).__name__}: {e}")
            return ReadResult(error=str(e) or type(e).__name__)

        items: List[T] = []
        for row in rows:
            try:
                items.append(self.model.model_validate(row))
            except ValidationError as e:
                print(f"[Supabase] ⚠️ Skipping malformed '{self.table}' row {row.get('id')}: {e.error_count()} error(s)")

        if self._debug:
            print(f"[Supabase] ← Got {len(items)} '{self.table}' records")
        if self._store is not None:
            try:
                self._store.save_cached(self.table, [i.model_dump(mode="json") for i in items])
            except SQLAlchemyError as e:
                print(f"[Store] ⚠️ Caching '{self.table}' failed: {type(e).__name__}: {e}")
        return ReadResult(items=items)

    def cached(self) -> List[T]:
        """Last successfully fetched copy from the local store."""
        if self._store is None:
            return []
        items: List[T] = []
        for row in self._store.get_cached(self.table):
            try:
                items.append(self.model.model_validate(row))
            except ValidationError:
                continue
        return items

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #
    def add(self, record: BaseModel) -> WriteResult[T]:
        """Insert `record` owned by the current actor; returns the stored row."""
        actor = self._auth.current_user()
        if actor is None:
            return WriteResult.failure(
                AuthenticationError(f"Sign in before adding to '{self.table}'.")
            )

        payload = record.model_dump(mode="json")
        for column in PROTECTED_COLUMNS:
            payload.pop(column, None)
        payload["user_id"] = actor.id

        try:
            if self._debug:
                print(f"[Supabase] → Inserting into '{self.table}' …")
                print(f"[Supabase] Payload keys: {list(payload.keys())}")
            res = self._accessor.get().table(self.table).insert(payload).execute()
        except Exception as e:  # noqa: BLE001
            print(f"[Supabase] ❌ Insert into '{self.table}' failed: {type(e).__name__}: {e}")
            return WriteResult.failure(classify_error(e))

        rows = res.data or []
        if not rows:
            return WriteResult.failure(
                BackendError(f"Insert into '{self.table}' returned no data (check RLS / schema).")
            )
        try:
            return WriteResult.success(self.model.model_validate(rows[0]))
        except ValidationError as e:
            return WriteResult.failure(BackendError(f"Unexpected row shape from '{self.table}': {e}"))

    def update(
        self,
        record_id: str,
        changes: Union[BaseModel, Dict[str, Any]],
    ) -> WriteResult[None]:
        """Apply a partial update keyed by id."""
        if isinstance(changes, BaseModel):
            payload = changes.model_dump(mode="json", exclude_unset=True)
        else:
            payload = _json_payload.dump_python(dict(changes), mode="json")
        for column in PROTECTED_COLUMNS:
            payload.pop(column, None)
        if not payload:
            return WriteResult.success()

        return self._write(
            "update",
            lambda table: table.update(payload).eq("id", str(record_id)).execute(),
        )

    def delete(self, record_id: str) -> WriteResult[None]:
        """Remove one row by id."""
        return self._write(
            "delete",
            lambda table: table.delete().eq("id", str(record_id)).execute(),
        )

    def _write(self, action: str, call) -> WriteResult[None]:
        if not self._accessor.is_configured():
            return WriteResult.failure(ConfigurationError("Supabase is not configured."))
        try:
            if self._debug:
                print(f"[Supabase] → {action.capitalize()} on '{self.table}' …")
            call(self._accessor.get().table(self.table))
        except Exception as e:  # noqa: BLE001
            print(f"[Supabase] ❌ {action.capitalize()} on '{self.table}' failed: {type(e).__name__}: {e}")
            return WriteResult.failure(classify_error(e))
        return WriteResult.success()


# --------------------------------------------------------------------------- #
# Concrete repositories
# --------------------------------------------------------------------------- #

class InvoiceRepository(Repository[Invoice]):
    table = "invoices"
    model = Invoice
    order_by = "date"

    def mark_paid(self, record_id: str, payment_date: Optional[date] = None) -> WriteResult[None]:
        return self.update(
            record_id,
            InvoiceUpdate(status=PaymentStatus.PAID, payment_date=payment_date or date.today()),
        )


class ProjectRepository(Repository[Project]):
    table = "projects"
    model = Project
    order_by = "created_at"


class TransactionRepository(Repository[Transaction]):
    table = "transactions"
    model = Transaction
    order_by = "date"
