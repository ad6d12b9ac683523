"""
User-scoped key/value storage and the credential store built on top of it.

The reporting host owns persistence; the connector only needs get/set/delete by
key. :class:`KeyValueStore` is that port. :class:`InMemoryStore` backs tests and
one-shot runs, :class:`JsonFileStore` keeps one JSON document per user for the
CLI.

:class:`CredentialStore` names the keys. ``reset_credentials`` removes the
username and password but leaves the company id in place; hosts rely on the id
surviving a credential reset.
"""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass, field
from logging import LoggerAdapter
from pathlib import Path
from typing import Dict, MutableMapping, Optional, Protocol

from .errors import ConnectorError
from .logging import get_logger
from .naming import normalize_identifier
from .schema import Schema, SchemaLoadError, schema_from_json, schema_to_json

USERNAME_KEY = "dscc.username"
PASSWORD_KEY = "dscc.password"
COMPANY_ID_KEY = "dscc.company_id"
TOKEN_KEY = "dscc.token"
SCHEMA_KEY = "dscc.schema"


class StoreError(ConnectorError):
    """Raised when the backing store cannot be read or written."""

    error_code = "STORE_ERROR"


class KeyValueStore(Protocol):
    """Storage port implemented by host-specific adapters."""

    def get(self, key: str) -> Optional[str]:
        """Return the stored value or ``None``."""

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""

    def delete(self, key: str) -> None:
        """Remove ``key``; missing keys are ignored."""


class InMemoryStore:
    """Process-local store."""

    def __init__(self, initial: Optional[MutableMapping[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)

    def snapshot(self) -> Dict[str, str]:
        return dict(self._values)


class JsonFileStore:
    """
    Store persisted as ``<root>/<user>.json``.

    Every write rewrites the document through a temporary file and
    :func:`os.replace`, so readers never observe a partial file.
    """

    def __init__(self, root: Path | str, user: str = "default") -> None:
        self.root = Path(root).expanduser()
        self.user = normalize_identifier(user) or "default"

    @property
    def path(self) -> Path:
        return self.root / f"{self.user}.json"

    def _load(self) -> Dict[str, str]:
        if not self.path.is_file():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, ValueError) as exc:
            raise StoreError(f"Could not read the credential store at {self.path}.", str(exc)) from exc
        if not isinstance(payload, dict):
            raise StoreError(f"Credential store at {self.path} is not a JSON object.")
        return {str(key): str(value) for key, value in payload.items()}

    def _dump(self, values: Dict[str, str]) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=f".{self.user}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(values, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise StoreError(f"Could not write the credential store at {self.path}.", str(exc)) from exc

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        values = self._load()
        values[key] = value
        self._dump(values)

    def delete(self, key: str) -> None:
        values = self._load()
        if values.pop(key, None) is not None:
            self._dump(values)


@dataclass(frozen=True, slots=True)
class Credentials:
    """Login input; members are ``None`` when not stored."""

    company_id: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    def is_complete(self) -> bool:
        return bool(self.company_id and self.username and self.password)


@dataclass(slots=True)
class CredentialStore:
    """Named accessors for credentials, session token, and schema."""

    store: KeyValueStore
    logger: LoggerAdapter = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")

    def set_credentials(self, username: str, password: str) -> bool:
        self.store.set(USERNAME_KEY, username)
        self.store.set(PASSWORD_KEY, password)
        return True

    def get_credentials(self) -> Credentials:
        return Credentials(
            company_id=self.store.get(COMPANY_ID_KEY),
            username=self.store.get(USERNAME_KEY),
            password=self.store.get(PASSWORD_KEY),
        )

    def reset_credentials(self) -> None:
        """Forget username and password. The company id is kept."""

        self.store.delete(USERNAME_KEY)
        self.store.delete(PASSWORD_KEY)

    def set_company_id(self, company_id: str) -> None:
        self.store.set(COMPANY_ID_KEY, company_id)

    def get_company_id(self) -> Optional[str]:
        return self.store.get(COMPANY_ID_KEY)

    def set_token(self, token: str) -> None:
        self.store.set(TOKEN_KEY, token)

    def get_token(self) -> Optional[str]:
        return self.store.get(TOKEN_KEY)

    def clear_token(self) -> None:
        self.store.delete(TOKEN_KEY)

    def set_schema(self, schema: Schema) -> None:
        self.store.set(SCHEMA_KEY, schema_to_json(schema))

    def get_schema(self) -> Optional[Schema]:
        """Return the persisted schema, or ``None`` when absent or unreadable."""

        raw = self.store.get(SCHEMA_KEY)
        if raw is None:
            return None
        try:
            return schema_from_json(raw)
        except SchemaLoadError as exc:
            self.logger.warning("Ignoring unreadable stored schema", extra={"error": exc.debug_detail})
            return None

    def clear_schema(self) -> None:
        self.store.delete(SCHEMA_KEY)


__all__ = [
    "COMPANY_ID_KEY",
    "CredentialStore",
    "Credentials",
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "PASSWORD_KEY",
    "SCHEMA_KEY",
    "StoreError",
    "TOKEN_KEY",
    "USERNAME_KEY",
]
