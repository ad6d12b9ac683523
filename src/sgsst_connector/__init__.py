"""
Data connector bridging a reporting front-end to the SGSST HTTP API.

:class:`~sgsst_connector.services.ConnectorService` answers the host's
``get_config``/``get_schema``/``get_data`` style requests. Build one with
:func:`build_service`, which wires settings, the per-user credential store and
the HTTP client together.
"""

from .config import ConnectorSettings, load_settings
from .services import ConnectorService
from .wiring import build_service

__all__ = [
    "ConnectorService",
    "ConnectorSettings",
    "build_service",
    "load_settings",
]
