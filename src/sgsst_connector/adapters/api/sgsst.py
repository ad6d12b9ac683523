"""
SGSST REST client and adapter.

Two calls are involved: ``POST /seguridad/login`` exchanges company id, user and
password for a session token, and ``GET <endpoint>`` with that token as a bearer
credential returns the record collection wrapped in ``{"data": [...]}``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import httpx

from ...config import DEFAULT_BASE_URL, ConnectorSettings
from ..base import DataSourceAdapter, VerificationResult
from .base import APIError, BaseAPIClient

LOGIN_PATH = "/seguridad/login"


def _extract_token(data: Any) -> Optional[str]:
    if isinstance(data, str):
        return data or None
    if isinstance(data, Mapping):
        for key in ("token", "access_token", "accessToken"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
    return None


class SGSSTClient(BaseAPIClient):
    """Client for the SGSST login and collection endpoints."""

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        max_attempts: int = 1,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        super().__init__(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            max_attempts=max_attempts,
            default_headers={"Accept": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: ConnectorSettings, *, transport: Optional[httpx.BaseTransport] = None) -> "SGSSTClient":
        return cls(
            base_url=settings.base_url,
            timeout=settings.timeout,
            max_attempts=settings.max_attempts,
            transport=transport,
        )

    def login(self, company_id: Optional[str], username: Optional[str], password: Optional[str]) -> Optional[str]:
        """
        Exchange credentials for a session token.

        Returns ``None`` when any argument is empty (no request is sent) and
        when the call fails for any reason. Callers cannot tell a network
        failure from rejected credentials.
        """

        if not company_id or not username or not password:
            return None

        payload = {"id_empresa": company_id, "usuario": username, "clave": password}
        try:
            body = self._post_json(LOGIN_PATH, json_body=payload)
        except APIError as exc:
            self.logger.warning("Login request failed", extra={"url": LOGIN_PATH, "error": str(exc)})
            return None

        data = body.get("data") if isinstance(body, Mapping) else None
        token = _extract_token(data)
        if token is None:
            self.logger.info("Login response carried no token", extra={"url": LOGIN_PATH})
        return token

    def fetch_collection(self, endpoint: str, token: str) -> List[Mapping[str, Any]]:
        """
        Retrieve every record exposed by ``endpoint``.

        The body must be ``{"data": [...]}``; a bare JSON list is accepted too.
        Records that are not JSON objects are rejected.
        """

        path = endpoint if endpoint.startswith("/") else f"/{endpoint}"
        payload = self._get_json(path, headers={"Authorization": f"Bearer {token}"})

        records = payload.get("data") if isinstance(payload, Mapping) else payload
        if not isinstance(records, list):
            raise APIError(f"Unexpected payload from {path}: expected a 'data' list.")
        for record in records:
            if not isinstance(record, Mapping):
                raise APIError(f"Unexpected record in {path}: expected an object, got {type(record).__name__}.")
        self.logger.debug("Fetched collection", extra={"endpoint": path, "row_count": len(records)})
        return records


@dataclass(slots=True)
class SGSSTAdapter(DataSourceAdapter):
    """Adapter that verifies credentials against the login endpoint."""

    client: SGSSTClient
    company_id: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    source_id: str = "sgsst_api"

    def verify(self) -> VerificationResult:
        missing = [name for name, value in (("company_id", self.company_id), ("username", self.username), ("password", self.password)) if not value]
        if missing:
            return VerificationResult(
                success=False,
                message=f"SGSST credentials incomplete: missing {', '.join(missing)}.",
                details={"missing": missing},
            )

        token = self.client.login(self.company_id, self.username, self.password)
        if not token:
            return VerificationResult(success=False, message="SGSST login failed: invalid credentials or service unreachable.")

        details: Dict[str, object] = {"base_url": self.client.base_url}
        return VerificationResult(success=True, message="SGSST login succeeded.", details=details)


__all__ = ["LOGIN_PATH", "SGSSTAdapter", "SGSSTClient"]
