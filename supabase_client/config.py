# supabase_client/config.py
"""
Backend client accessor.

Owns the one live Supabase client handle. The handle is built lazily from the
effective configuration and memoized; `reinitialize()` is the only supported
way to pick up changed credentials. Editing the persisted configuration
without calling it is unsupported: the memoized handle keeps the old
credentials until the next `reinitialize()`.

Effective configuration, in priority order:
    1. SUPABASE_URL + SUPABASE_ANON_KEY environment variables
    2. the configuration saved in the local store
    3. absent -> a non-functional placeholder handle
"""

from __future__ import annotations

import os
import threading
from typing import Any, Callable, Mapping, Optional

from supabase import Client, create_client

from core.config import (
    PLACEHOLDER_KEY,
    PLACEHOLDER_URL,
    SUPABASE_KEY_ENV,
    SUPABASE_URL_ENV,
)
from core.models import SupabaseConfig
from core.readiness import is_configured
from database.local_store import LocalStore

ClientFactory = Callable[[str, str], Any]


def resolve_config(
    store: Optional[LocalStore],
    environ: Mapping[str, str] = os.environ,
) -> Optional[SupabaseConfig]:
    """Return the effective configuration, or None when nothing is set."""
    env_url = environ.get(SUPABASE_URL_ENV)
    env_key = environ.get(SUPABASE_KEY_ENV)
    if env_url and env_key:
        return SupabaseConfig(url=env_url, anon_key=env_key)
    if store is not None:
        return store.get_config()
    return None


class ClientAccessor:
    """
    Lazily constructs and memoizes the Supabase client.

    Parameters
    ----------
    store : LocalStore
        Source of persisted credentials (and target of `save_and_reinitialize`).
    factory : callable
        `(url, key) -> client`. Defaults to `supabase.create_client`; tests
        pass a fake.
    environ : mapping
        Environment used for the override lookup.
    """

    def __init__(
        self,
        store: Optional[LocalStore] = None,
        factory: ClientFactory = create_client,
        environ: Mapping[str, str] = os.environ,
        debug: bool = False,
    ):
        self._store = store
        self._factory = factory
        self._environ = environ
        self._debug = debug
        self._handle: Optional[Client] = None
        self._lock = threading.Lock()

    # -----------------------------------------------------------------
    # Configuration
    # -----------------------------------------------------------------
    def resolve_config(self) -> Optional[SupabaseConfig]:
        return resolve_config(self._store, self._environ)

    def is_configured(self) -> bool:
        return is_configured(self.resolve_config())

    def config_source(self) -> Optional[str]:
        """'env', 'local' or None, mirroring the resolution order."""
        if self._environ.get(SUPABASE_URL_ENV) and self._environ.get(SUPABASE_KEY_ENV):
            return "env"
        if self._store is not None and self._store.get_config() is not None:
            return "local"
        return None

    # -----------------------------------------------------------------
    # Handle lifecycle
    # -----------------------------------------------------------------
    def get(self) -> Client:
        """Return the memoized handle, building it on first use."""
        with self._lock:
            if self._handle is None:
                self._handle = self._build()
            return self._handle

    handle = get

    def invalidate(self) -> None:
        """Drop the memoized handle; the next `get()` rebuilds it."""
        with self._lock:
            self._handle = None

    def reinitialize(self) -> Client:
        """Discard the current handle and build a fresh one.

        Calls already holding the old handle finish against it.
        """
        with self._lock:
            self._handle = self._build()
            return self._handle

    def save_and_reinitialize(self, config: SupabaseConfig) -> Client:
        """Persist new credentials, then rebuild the handle from them."""
        if self._store is None:
            raise RuntimeError("No local store attached; cannot save configuration.")
        self._store.save_config(config)
        return self.reinitialize()

    def _build(self) -> Client:
        config = self.resolve_config()
        if is_configured(config):
            url, key = config.url, config.anon_key
        else:
            url, key = PLACEHOLDER_URL, PLACEHOLDER_KEY
        if self._debug:
            print(f"[Supabase] Building client for {url}")
        return self._factory(url, key)
