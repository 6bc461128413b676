# database/local_store.py
"""
Local key/value persistence on the end-user's machine.

Holds the Supabase connection descriptor and optional cached copies of the
three record collections. Each value is a whole JSON blob: `save_*` fully
replaces the previous value inside one transaction (no merge). Nothing here
is encrypted.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import sessionmaker

from core.models import SupabaseConfig
from .db_setup import get_engine
from .models import LocalValue

# ---------------------------------------------------------------------
# Named values
# ---------------------------------------------------------------------
CONFIG_KEY = "getrich_supabase_config"
CACHE_KEYS = {
    "invoices": "getrich_invoices",
    "projects": "getrich_projects",
    "transactions": "getrich_transactions",
}


class LocalStore:
    """Single-writer, single-reader, synchronous store backed by SQLite."""

    def __init__(self, engine=None, db_path: Optional[Path] = None):
        self._engine = engine if engine is not None else get_engine(db_path)
        self._session = sessionmaker(bind=self._engine, autoflush=False, autocommit=False)

    # -----------------------------------------------------------------
    # Raw values
    # -----------------------------------------------------------------
    def get_value(self, key: str) -> Any:
        """Return the stored blob for `key`, or None if absent."""
        with self._session() as session:
            row = session.get(LocalValue, key)
            return None if row is None else row.value

    def save_value(self, key: str, value: Any) -> None:
        """Replace the blob stored under `key`."""
        with self._session() as session:
            row = session.get(LocalValue, key)
            if row is None:
                session.add(LocalValue(key=key, value=value))
            else:
                row.value = value
            session.commit()

    def delete_value(self, key: str) -> bool:
        """Delete `key`. Returns True if something was removed."""
        with self._session() as session:
            row = session.get(LocalValue, key)
            if row is None:
                return False
            session.delete(row)
            session.commit()
            return True

    # -----------------------------------------------------------------
    # Supabase configuration
    # -----------------------------------------------------------------
    def get_config(self) -> Optional[SupabaseConfig]:
        data = self.get_value(CONFIG_KEY)
        if not isinstance(data, dict):
            return None
        return SupabaseConfig(
            url=str(data.get("url") or ""),
            anon_key=str(data.get("anon_key") or ""),
        )

    def save_config(self, config: SupabaseConfig) -> None:
        # Both fields are written together; there is no partial update.
        print(f"[Store] Saving Supabase configuration for {config.url or '(blank)'}")
        self.save_value(CONFIG_KEY, {"url": config.url, "anon_key": config.anon_key})

    # -----------------------------------------------------------------
    # Cached collections
    # -----------------------------------------------------------------
    def get_cached(self, kind: str) -> List[Dict[str, Any]]:
        data = self.get_value(_cache_key(kind))
        return data if isinstance(data, list) else []

    def save_cached(self, kind: str, rows: List[Dict[str, Any]]) -> None:
        self.save_value(_cache_key(kind), list(rows))

    def clear_cache(self) -> int:
        """Drop every cached collection, keeping the configuration.
        Returns the number of cached collections removed."""
        removed = 0
        for key in CACHE_KEYS.values():
            if self.delete_value(key):
                removed += 1
        print(f"[Store] Cleared {removed} cached collection(s)")
        return removed


def _cache_key(kind: str) -> str:
    try:
        return CACHE_KEYS[kind]
    except KeyError:
        raise ValueError(f"Unknown collection '{kind}'. Expected one of {sorted(CACHE_KEYS)}.")
