"""
Settings for the SGSST connector.

Settings are read from the ``[sgsst]`` table of a TOML secrets file. The lookup
order is:

1. Explicit ``SGSST_SECRETS_PATH`` environment variable.
2. Project-relative ``.secrets/secret.toml`` (both from CWD and the package root).
3. Project-relative ``.secrets/secrets.toml``.
4. Fallback to ``.secrets/secrets.example.toml`` for scaffolding values.

``SGSST_BASE_URL``, ``SGSST_STORE_DIR`` and ``SGSST_USER`` override the file.
Call :func:`load_settings` to obtain a :class:`ConnectorSettings` instance.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

DEFAULT_BASE_URL = "https://sgsst.co/api"
DEFAULT_ENDPOINT = "/pesv/vehiculo"
DEFAULT_TIMEOUT = 30.0
DEFAULT_STORE_DIR = Path.home() / ".config" / "sgsst-connector"
SCHEMA_MODES = ("dynamic", "static")


@dataclass(slots=True)
class ConnectorSettings:
    """
    Runtime configuration passed to the client and the connector service.

    Attributes
    ----------
    base_url:
        Root of the SGSST API; endpoints are appended to it.
    timeout:
        Per-request timeout in seconds.
    max_attempts:
        Attempts per HTTP call. ``1`` disables retries.
    default_endpoint:
        Endpoint suggested in the configuration form.
    schema_mode:
        ``dynamic`` infers the schema from a sample record, ``static`` serves
        the bundled (or ``static_schema_path``) YAML schema.
    static_schema_path:
        Optional YAML schema used in ``static`` mode.
    store_dir:
        Directory holding the per-user JSON credential store.
    user:
        Identity scoping the credential store.
    source_path:
        Secrets file the settings were read from, if any.
    """

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    max_attempts: int = 1
    default_endpoint: str = DEFAULT_ENDPOINT
    schema_mode: str = "dynamic"
    static_schema_path: Optional[Path] = None
    store_dir: Path = DEFAULT_STORE_DIR
    user: str = "default"
    source_path: Optional[Path] = None

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")
        if self.schema_mode not in SCHEMA_MODES:
            raise ValueError(f"schema_mode must be one of {', '.join(SCHEMA_MODES)}; got '{self.schema_mode}'.")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")


def _discover_project_root() -> Optional[Path]:
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / "pyproject.toml").is_file():
            return parent
    return None


def _candidate_paths() -> Iterable[Path]:
    env_override = os.getenv("SGSST_SECRETS_PATH")
    if env_override:
        yield Path(env_override).expanduser()

    search_roots = [Path.cwd()]
    package_root = _discover_project_root()
    if package_root and package_root not in search_roots:
        search_roots.append(package_root)

    for base in search_roots:
        secrets_dir = base / ".secrets"
        for filename in ("secret.toml", "secrets.toml", "secrets.example.toml"):
            yield secrets_dir / filename


def _load_toml(path: Path) -> Dict[str, Any]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _extract_settings(raw: Mapping[str, Any], source_path: Optional[Path]) -> ConnectorSettings:
    section = raw.get("sgsst", {}) if isinstance(raw, Mapping) else {}
    if not isinstance(section, Mapping):
        section = {}

    def _text(key: str) -> Optional[str]:
        value = section.get(key)
        return str(value) if isinstance(value, str) and value else None

    def _number(key: str) -> Optional[float]:
        value = section.get(key)
        return float(value) if isinstance(value, (int, float)) and not isinstance(value, bool) else None

    timeout = _number("timeout")
    attempts = _number("max_attempts")
    static_schema = _text("static_schema_path")
    store_dir = os.getenv("SGSST_STORE_DIR") or _text("store_dir")

    return ConnectorSettings(
        base_url=os.getenv("SGSST_BASE_URL") or _text("base_url") or DEFAULT_BASE_URL,
        timeout=timeout if timeout is not None else DEFAULT_TIMEOUT,
        max_attempts=int(attempts) if attempts is not None else 1,
        default_endpoint=_text("default_endpoint") or DEFAULT_ENDPOINT,
        schema_mode=_text("schema_mode") or "dynamic",
        static_schema_path=Path(static_schema).expanduser() if static_schema else None,
        store_dir=Path(store_dir).expanduser() if store_dir else DEFAULT_STORE_DIR,
        user=os.getenv("SGSST_USER") or _text("user") or "default",
        source_path=source_path,
    )


def load_settings(strict: bool = False) -> ConnectorSettings:
    """
    Load settings from the first secrets file found.

    Parameters
    ----------
    strict:
        When ``True`` raise ``FileNotFoundError`` if no secrets file exists.
        Otherwise defaults (plus environment overrides) are returned.
    """

    for path in _candidate_paths():
        if path.is_file():
            return _extract_settings(_load_toml(path), path)

    if strict:
        raise FileNotFoundError("No secrets file found. Configure SGSST_SECRETS_PATH or .secrets/secret.toml.")

    return _extract_settings({}, None)


__all__ = [
    "ConnectorSettings",
    "DEFAULT_BASE_URL",
    "DEFAULT_ENDPOINT",
    "load_settings",
]
