"""
Core building blocks shared by the connector service and the CLI.

Identifier normalisation, the error taxonomy, schema handling and the
credential store live here; none of them perform network calls.
"""

from .errors import AuthenticationError, ConfigurationError, ConnectorError, FetchError, FieldNotFoundError, Result, report_error
from .logging import configure_logging, get_logger, log_progress
from .naming import normalize_identifier
from .schema import (
    ConceptType,
    DataType,
    FieldDescriptor,
    Schema,
    SchemaLoadError,
    decode_value,
    find_field,
    infer_schema,
    load_static_schema,
)
from .store import CredentialStore, Credentials, InMemoryStore, JsonFileStore, KeyValueStore, StoreError

__all__ = [
    "AuthenticationError",
    "ConceptType",
    "ConfigurationError",
    "ConnectorError",
    "CredentialStore",
    "Credentials",
    "DataType",
    "FetchError",
    "FieldDescriptor",
    "FieldNotFoundError",
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "Result",
    "Schema",
    "SchemaLoadError",
    "StoreError",
    "configure_logging",
    "decode_value",
    "find_field",
    "get_logger",
    "infer_schema",
    "load_static_schema",
    "log_progress",
    "normalize_identifier",
    "report_error",
]
