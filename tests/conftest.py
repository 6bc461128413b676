"""Shared pytest fixtures: temporary store, fake Supabase, fake Gemini, API client."""

import itertools
import json
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from analytics.insights import InsightGenerator
from core.app_context import build_context
from core.models import SupabaseConfig
from database.local_store import LocalStore

VALID_URL = "https://demo-project.supabase.co"
VALID_KEY = "eyJhbGciOiJIUzI1NiJ9." + "k" * 40

USER_ID = "user-123"
USER_EMAIL = "owner@getrich.rw"
PASSWORD = "correct-horse"


# ---------------------------------------------------------------------
# Fake Supabase client
# ---------------------------------------------------------------------
class FakeQuery:
    """Chainable stand-in for a PostgREST query builder."""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.action = "select"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.desc = False

    def select(self, columns="*"):
        self.action = "select"
        return self

    def insert(self, payload):
        self.action = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.action = "update"
        self.payload = payload
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = column
        self.desc = desc
        return self

    def limit(self, n):
        return self

    def execute(self):
        self.client.calls.append(
            {
                "table": self.table,
                "action": self.action,
                "payload": self.payload,
                "filters": list(self.filters),
                "order": (self.order_by, self.desc),
            }
        )
        if self.client.fail_with is not None:
            raise self.client.fail_with

        rows = self.client.rows.setdefault(self.table, [])
        matches = [r for r in rows if all(str(r.get(c)) == str(v) for c, v in self.filters)]

        if self.action == "insert":
            if self.client.insert_returns_nothing:
                return SimpleNamespace(data=[])
            row = dict(self.payload)
            row["id"] = str(next(self.client.ids))
            row["created_at"] = datetime.now(timezone.utc).isoformat()
            rows.append(row)
            return SimpleNamespace(data=[row])
        if self.action == "update":
            for row in matches:
                row.update(self.payload)
            return SimpleNamespace(data=matches)
        if self.action == "delete":
            self.client.rows[self.table] = [r for r in rows if r not in matches]
            return SimpleNamespace(data=matches)

        data = [dict(r) for r in matches]
        if self.order_by:
            data.sort(key=lambda r: str(r.get(self.order_by) or ""), reverse=self.desc)
        return SimpleNamespace(data=data)


class FakeAuth:
    def __init__(self):
        self.user = None
        self.require_confirmation = False
        self.listeners = []
        self.calls = []

    def _session(self):
        return SimpleNamespace(user=self.user, access_token="token")

    def get_session(self):
        self.calls.append("get_session")
        return self._session() if self.user is not None else None

    def sign_in_with_password(self, credentials):
        self.calls.append("sign_in_with_password")
        if credentials["password"] != PASSWORD:
            raise RuntimeError("Invalid login credentials")
        self.user = SimpleNamespace(id=USER_ID, email=credentials["email"])
        return SimpleNamespace(user=self.user, session=self._session())

    def sign_up(self, credentials):
        self.calls.append("sign_up")
        user = SimpleNamespace(id=USER_ID, email=credentials["email"])
        if self.require_confirmation:
            return SimpleNamespace(user=user, session=None)
        self.user = user
        return SimpleNamespace(user=user, session=self._session())

    def sign_out(self):
        self.calls.append("sign_out")
        self.user = None

    def on_auth_state_change(self, callback):
        self.listeners.append(callback)
        return SimpleNamespace(unsubscribe=lambda: self.listeners.remove(callback))


class FakeSupabase:
    """In-memory client exposing `.table()` and `.auth` like supabase-py."""

    def __init__(self, url, key, rows=None):
        self.url = url
        self.key = key
        self.rows = rows if rows is not None else {}
        self.calls = []
        self.fail_with = None
        self.insert_returns_nothing = False
        self.ids = itertools.count(1)
        self.auth = FakeAuth()

    def table(self, name):
        return FakeQuery(self, name)


class FakeClientFactory:
    """`(url, key) -> FakeSupabase`, remembering every client it built.

    Rows are shared between builds so data survives a reinitialize, while
    the auth session (like a real client) does not.
    """

    def __init__(self):
        self.built = []
        self.rows = {}

    def __call__(self, url, key):
        client = FakeSupabase(url, key, rows=self.rows)
        self.built.append(client)
        return client

    @property
    def last(self):
        return self.built[-1]


# ---------------------------------------------------------------------
# Fake Gemini client
# ---------------------------------------------------------------------
class FakeModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.requests = []

    def generate_content(self, model, contents, config=None):
        self.requests.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


class FakeGenAI:
    def __init__(self, text=None, error=None):
        self.models = FakeModels(text=text, error=error)


SAMPLE_INSIGHTS = [
    {"title": "Chase unpaid invoices", "content": "500 RWF is still pending.", "type": "warning"},
    {"title": "Set aside VAT", "content": "Reserve 18% of paid revenue.", "type": "tip"},
]


# ---------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------
@pytest.fixture
def store(tmp_path):
    return LocalStore(db_path=tmp_path / "getrich.db")


@pytest.fixture
def factory():
    return FakeClientFactory()


@pytest.fixture
def genai_client():
    return FakeGenAI(text=json.dumps(SAMPLE_INSIGHTS))


@pytest.fixture
def make_context(store, factory, genai_client):
    """Build an AppContext around the fakes; configured by default."""

    def _make(configured=True, environ=None, insight_client=genai_client):
        if configured:
            store.save_config(SupabaseConfig(url=VALID_URL, anon_key=VALID_KEY))
        return build_context(
            store=store,
            client_factory=factory,
            insights=InsightGenerator(api_key="test-key", model="test-model", client=insight_client),
            environ=environ if environ is not None else {},
        )

    return _make


@pytest.fixture
def ctx(make_context):
    return make_context()


@pytest.fixture
def signed_in_ctx(ctx, factory):
    ctx.auth.sign_in(USER_EMAIL, PASSWORD)
    return ctx


@pytest.fixture
def api(ctx):
    from fastapi.testclient import TestClient

    from backend.deps import get_context
    from backend.main import app

    app.dependency_overrides[get_context] = lambda: ctx
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
