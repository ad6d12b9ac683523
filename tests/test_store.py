from __future__ import annotations

import json

import pytest

from sgsst_connector.core.schema import infer_schema
from sgsst_connector.core.store import (
    COMPANY_ID_KEY,
    SCHEMA_KEY,
    CredentialStore,
    InMemoryStore,
    JsonFileStore,
    StoreError,
)


def test_set_and_get_credentials():
    store = CredentialStore(InMemoryStore())

    assert store.set_credentials("ana", "secret") is True
    store.set_company_id("900123")
    creds = store.get_credentials()

    assert (creds.company_id, creds.username, creds.password) == ("900123", "ana", "secret")
    assert creds.is_complete()


def test_get_credentials_when_nothing_stored():
    creds = CredentialStore(InMemoryStore()).get_credentials()

    assert creds.username is None and creds.password is None and creds.company_id is None
    assert not creds.is_complete()


def test_reset_credentials_keeps_company_id():
    backing = InMemoryStore()
    store = CredentialStore(backing)
    store.set_company_id("900123")
    store.set_credentials("ana", "secret")

    store.reset_credentials()

    creds = store.get_credentials()
    assert creds.username is None
    assert creds.password is None
    assert creds.company_id == "900123"
    assert backing.snapshot() == {COMPANY_ID_KEY: "900123"}


def test_token_lifecycle():
    store = CredentialStore(InMemoryStore())
    assert store.get_token() is None

    store.set_token("tok")
    assert store.get_token() == "tok"

    store.clear_token()
    assert store.get_token() is None


def test_schema_persisted_and_reloaded_in_order():
    backing = InMemoryStore()
    store = CredentialStore(backing)
    schema = infer_schema({"b": 1, "a": "x", "c": True})

    store.set_schema(schema)

    assert json.loads(backing.get(SCHEMA_KEY))[0]["name"] == "b"
    assert [(f.name, f.data_type) for f in store.get_schema()] == [(f.name, f.data_type) for f in schema]


def test_unreadable_schema_reads_as_absent():
    store = CredentialStore(InMemoryStore({SCHEMA_KEY: "{broken"}))

    assert store.get_schema() is None


def test_json_file_store_persists_per_user(tmp_path):
    first = JsonFileStore(tmp_path, user="Ana María")
    first.set("dscc.username", "ana")
    first.set("dscc.password", "secret")
    first.delete("dscc.password")
    first.delete("missing")

    reopened = JsonFileStore(tmp_path, user="Ana María")
    other = JsonFileStore(tmp_path, user="bob")

    assert reopened.path.name == "ana_mar_a.json"
    assert reopened.get("dscc.username") == "ana"
    assert reopened.get("dscc.password") is None
    assert other.get("dscc.username") is None
    assert not list(tmp_path.glob("*.tmp"))


def test_json_file_store_rejects_non_object(tmp_path):
    (tmp_path / "default.json").write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(StoreError):
        JsonFileStore(tmp_path).get("anything")
