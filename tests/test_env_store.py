"""
Managed environment variables and the mapping they mirror into.
"""

import pytest

from core.env_store import EnvVarStore
from core.validation import is_valid_env_key, sanitize_env_key


@pytest.fixture
def environ():
    return {"PATH": "/usr/bin"}


@pytest.fixture
def store(environ):
    return EnvVarStore(environ)


def test_set_mirrors_into_environment(store, environ):
    var, created = store.set("API_URL", "https://example.test", description="Upstream")

    assert created is True
    assert var.updated_at is None
    assert environ["API_URL"] == "https://example.test"
    assert store.get("API_URL") is var


def test_set_existing_updates_in_place(store, environ):
    first, _ = store.set("API_URL", "one")
    second, created = store.set("API_URL", "two", is_secret=True)

    assert created is False
    assert second is first
    assert second.value == "two"
    assert second.is_secret is True
    assert second.updated_at is not None
    assert environ["API_URL"] == "two"
    assert len(store) == 1


def test_delete_removes_from_environment(store, environ):
    store.set("TOKEN", "abc")

    assert store.delete("TOKEN").key == "TOKEN"
    assert "TOKEN" not in environ
    assert store.delete("TOKEN") is None


def test_lookup_system_sees_unmanaged_values(store):
    assert store.get("PATH") is None
    assert store.lookup_system("PATH") == "/usr/bin"
    assert store.lookup_system("MISSING") is None


def test_list_filters_sorts_and_hides_secrets(store):
    store.set("ZETA", "z", description="last one")
    store.set("ALPHA", "a", description="Database host")
    store.set("DB_PASSWORD", "pw", is_secret=True)

    assert [v.key for v in store.list_vars()] == ["ALPHA", "ZETA"]
    assert [v.key for v in store.list_vars(include_secrets=True)] == ["ALPHA", "DB_PASSWORD", "ZETA"]
    assert [v.key for v in store.list_vars(filter="database")] == ["ALPHA"]
    assert [v.key for v in store.list_vars(filter="db", include_secrets=True)] == ["DB_PASSWORD"]
    assert store.secret_count() == 1


def test_default_store_does_not_touch_process_environment():
    store = EnvVarStore()
    store.set("SOME_TEST_ONLY_KEY", "1")
    assert store.lookup_system("SOME_TEST_ONLY_KEY") == "1"


@pytest.mark.parametrize(
    "raw, sanitized, valid",
    [
        ("db-host", "DB_HOST", True),
        ("api.key", "API_KEY", True),
        ("already_OK_1", "ALREADY_OK_1", True),
        ("1abc", "1ABC", False),
        ("_private", "_PRIVATE", False),
    ],
)
def test_key_sanitizing(raw, sanitized, valid):
    assert sanitize_env_key(raw) == sanitized
    assert is_valid_env_key(sanitized) is valid
