# tests/test_local_store.py
import pytest

from core.models import SupabaseConfig
from database.local_store import CONFIG_KEY, LocalStore


def test_config_absent_by_default(store):
    assert store.get_config() is None


def test_config_round_trip_survives_new_store(tmp_path):
    path = tmp_path / "getrich.db"
    LocalStore(db_path=path).save_config(SupabaseConfig(url="https://x.supabase.co", anon_key="a" * 30))

    reopened = LocalStore(db_path=path)
    assert reopened.get_config() == SupabaseConfig(url="https://x.supabase.co", anon_key="a" * 30)


def test_save_replaces_whole_value(store):
    store.save_config(SupabaseConfig(url="https://one.supabase.co", anon_key="a" * 30))
    store.save_config(SupabaseConfig(url="https://two.supabase.co", anon_key=""))

    config = store.get_config()
    assert config.url == "https://two.supabase.co"
    assert config.anon_key == ""


def test_malformed_config_blob_reads_as_absent(store):
    store.save_value(CONFIG_KEY, "not-a-dict")
    assert store.get_config() is None


def test_clear_cache_keeps_config(store):
    store.save_config(SupabaseConfig(url="https://x.supabase.co", anon_key="a" * 30))
    store.save_cached("invoices", [{"id": "1"}])
    store.save_cached("projects", [{"id": "2"}])

    assert store.get_cached("invoices") == [{"id": "1"}]
    assert store.clear_cache() == 2
    assert store.get_cached("invoices") == []
    assert store.get_cached("projects") == []
    assert store.get_config() is not None


def test_unknown_collection_rejected(store):
    with pytest.raises(ValueError):
        store.save_cached("clients", [])


def test_delete_value(store):
    store.save_value("k", {"a": 1})
    assert store.delete_value("k") is True
    assert store.delete_value("k") is False
    assert store.get_value("k") is None
