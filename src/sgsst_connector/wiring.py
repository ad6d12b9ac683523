"""
Construction helpers wiring settings, storage and the HTTP client.
"""

from __future__ import annotations

from typing import Optional

from .adapters.api.sgsst import SGSSTClient
from .config import ConnectorSettings, load_settings
from .core.store import CredentialStore, JsonFileStore, KeyValueStore
from .services.connector import ConnectorService


def build_service(
    settings: Optional[ConnectorSettings] = None,
    *,
    store: Optional[KeyValueStore] = None,
    client: Optional[SGSSTClient] = None,
) -> ConnectorService:
    """
    Build a :class:`ConnectorService`.

    Missing collaborators default to :func:`load_settings`, a
    :class:`JsonFileStore` under ``settings.store_dir`` scoped to
    ``settings.user``, and an :class:`SGSSTClient` built from the settings.
    """

    resolved = settings or load_settings()
    backing = store if store is not None else JsonFileStore(resolved.store_dir, resolved.user)
    return ConnectorService(
        settings=resolved,
        credentials=CredentialStore(backing),
        client=client or SGSSTClient.from_settings(resolved),
    )
