"""
Service layer answering the reporting host's requests.

:class:`ConnectorService` is the façade used by the CLI and by host bindings.
"""

from .config_form import TextInput, build_config, default_inputs
from .connector import ConnectionParams, ConnectorService, fetch_rows, parse_config_params

__all__ = [
    "ConnectionParams",
    "ConnectorService",
    "TextInput",
    "build_config",
    "default_inputs",
    "fetch_rows",
    "parse_config_params",
]
