from __future__ import annotations

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest
from typer.testing import CliRunner

from sgsst_connector.adapters.api.sgsst import SGSSTClient
from sgsst_connector.config import ConnectorSettings
from sgsst_connector.core.store import CredentialStore, InMemoryStore
from sgsst_connector.services.connector import ConnectorService

BASE_URL = "https://sgsst.test/api"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeSGSST:
    """Routes login and collection requests to canned payloads and records every request."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.login_payload: Dict[str, Any] = {"data": {"token": "tok-1", "usuario": "u"}, "success": True}
        self.login_status = 200
        self.collections: Dict[str, Any] = {}
        self.collection_status = 200

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")
        if request.method == "POST" and path == "/seguridad/login":
            return httpx.Response(self.login_status, json=self.login_payload, request=request)
        if request.method == "GET" and path in self.collections:
            return httpx.Response(self.collection_status, json=self.collections[path], request=request)
        return httpx.Response(404, json={"message": "not found"}, request=request)

    def login_bodies(self) -> List[Dict[str, Any]]:
        return [json.loads(item.content) for item in self.requests if item.method == "POST"]

    def gets(self) -> List[httpx.Request]:
        return [item for item in self.requests if item.method == "GET"]


@pytest.fixture()
def fake_api() -> FakeSGSST:
    return FakeSGSST()


@pytest.fixture()
def client(fake_api: FakeSGSST) -> SGSSTClient:
    return SGSSTClient(base_url=BASE_URL, transport=httpx.MockTransport(fake_api))


@pytest.fixture()
def settings(tmp_path) -> ConnectorSettings:
    return ConnectorSettings(base_url=BASE_URL, store_dir=tmp_path / "store")


@pytest.fixture()
def memory_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture()
def service(settings, memory_store, client) -> ConnectorService:
    return ConnectorService(settings=settings, credentials=CredentialStore(memory_store), client=client)


@pytest.fixture()
def cli_runner() -> CliRunner:
    return CliRunner()
