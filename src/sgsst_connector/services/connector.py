"""
Connector façade answering the reporting host's entry points.

``ConnectorService`` receives its settings, credential store and HTTP client at
construction; there is no module-level state. Each host entry point returns a
plain mapping in the host's wire shape. Internally the work is split into
``resolve_*`` operations returning :class:`~sgsst_connector.core.errors.Result`
values, and the entry points turn a failed result into ``{"errorCode": ...}``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import LoggerAdapter
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from ..adapters.api.base import APIError
from ..adapters.api.sgsst import SGSSTAdapter, SGSSTClient
from ..adapters.base import VerificationResult
from ..config import ConnectorSettings
from ..core.errors import AuthenticationError, ConfigurationError, ConnectorError, FetchError, Result, report_error
from ..core.logging import get_logger, log_progress
from ..core.schema import FieldDescriptor, Schema, find_field, infer_schema, load_static_schema
from ..core.store import CredentialStore, Credentials
from .config_form import build_config, default_inputs

REQUIRED_PARAMS = ("endpoint", "company_id", "username", "password")
_PARAM_ALIASES = {"user_name": "username", "apiUrl": "endpoint", "api_url": "endpoint"}

RequestedField = Union[Mapping[str, Any], FieldDescriptor]


@dataclass(frozen=True, slots=True)
class ConnectionParams:
    """Validated ``configParams`` of a host request."""

    endpoint: str
    credentials: Credentials


def parse_config_params(config_params: Optional[Mapping[str, Any]]) -> ConnectionParams:
    """Validate ``configParams``; report a configuration error when any required value is missing."""

    if not config_params:
        report_error("Please enter all required fields.", "Request carried no configParams.", error_cls=ConfigurationError)

    values: Dict[str, str] = {}
    for key, value in config_params.items():
        canonical = _PARAM_ALIASES.get(key, key)
        text = str(value).strip() if value is not None else ""
        if text and not values.get(canonical):
            values[canonical] = text

    missing = [name for name in REQUIRED_PARAMS if not values.get(name)]
    if missing:
        report_error("Please enter all required fields.", f"Missing configParams: {', '.join(missing)}.", error_cls=ConfigurationError)

    return ConnectionParams(
        endpoint=values["endpoint"],
        credentials=Credentials(company_id=values["company_id"], username=values["username"], password=values["password"]),
    )


def _field_keys(requested: RequestedField) -> tuple[str, Optional[str]]:
    if isinstance(requested, FieldDescriptor):
        return requested.name, requested.label
    label = requested.get("label")
    return str(requested["name"]), str(label) if label else None


def fetch_rows(client: SGSSTClient, endpoint: str, token: str, requested_fields: Sequence[RequestedField]) -> List[Dict[str, List[Any]]]:
    """
    Fetch ``endpoint`` and project every record onto ``requested_fields``.

    Each field is read by name, falling back to its label when the record uses
    the display name as key. Missing keys produce ``None``.

    ``token`` is used as given. A token the API has since expired surfaces as a
    :class:`FetchError`; it stays persisted until ``reset_auth`` or a new
    schema request replaces it.
    """

    try:
        records = client.fetch_collection(endpoint, token)
    except APIError as exc:
        report_error(f"Could not fetch data from {endpoint}.", str(exc), error_cls=FetchError)

    keys = [_field_keys(requested) for requested in requested_fields]
    rows: List[Dict[str, List[Any]]] = []
    for record in records:
        values = []
        for name, label in keys:
            if name in record or not label:
                values.append(record.get(name))
            else:
                values.append(record.get(label))
        rows.append({"values": values})
    return rows


@dataclass(slots=True)
class ConnectorService:
    """Host-facing connector built from explicit settings, storage and client."""

    settings: ConnectorSettings
    credentials: CredentialStore
    client: SGSSTClient
    logger: LoggerAdapter = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.logger = get_logger(self.__class__.__name__, extra={"schema_mode": self.settings.schema_mode})

    # ---- authentication entry points ----

    def get_auth_type(self) -> Dict[str, str]:
        return {"type": "USER_PASS", "helpUrl": f"{self.settings.base_url}/api-docs"}

    def verify_credentials(self) -> VerificationResult:
        stored = self.credentials.get_credentials()
        adapter = SGSSTAdapter(
            client=self.client,
            company_id=stored.company_id,
            username=stored.username,
            password=stored.password,
        )
        return adapter.verify()

    def is_auth_valid(self) -> bool:
        """Re-run the login with the stored credentials."""

        result = self.verify_credentials()
        log_progress(self.logger, result.message, phase="auth", status="valid" if result.success else "invalid")
        return result.success

    def set_credentials(self, request: Mapping[str, Any]) -> Dict[str, str]:
        user_pass = request.get("userPass") if isinstance(request, Mapping) else None
        if not isinstance(user_pass, Mapping) or not user_pass.get("username") or not user_pass.get("password"):
            return {"errorCode": "INVALID_CREDENTIALS"}
        self.credentials.set_credentials(str(user_pass["username"]), str(user_pass["password"]))
        company_id = user_pass.get("companyId") or user_pass.get("company_id")
        if company_id:
            self.credentials.set_company_id(str(company_id))
        return {"errorCode": "NONE"}

    def reset_auth(self) -> None:
        self.credentials.reset_credentials()
        self.credentials.clear_token()

    def is_admin_user(self) -> bool:
        return True

    def get_config(self) -> Dict[str, Any]:
        return build_config(default_inputs(self.settings.default_endpoint))

    # ---- schema ----

    def authenticate(self, params: ConnectionParams) -> Result[str]:
        creds = params.credentials
        token = self.client.login(creds.company_id, creds.username, creds.password)
        if not token:
            log_progress(self.logger, "Authentication failed", phase="auth", status="failed")
            return Result.failure(AuthenticationError("Invalid credentials. Check your company id, username and password."))
        self.credentials.set_token(token)
        if creds.company_id:
            self.credentials.set_company_id(creds.company_id)
        log_progress(self.logger, "Authenticated", phase="auth", status="ok")
        return Result.success(token)

    def resolve_schema(self, config_params: Optional[Mapping[str, Any]]) -> Result[Schema]:
        """
        Validate config, authenticate, and produce the schema.

        In ``dynamic`` mode the first record at ``endpoint`` is sampled and the
        inferred schema is persisted. In ``static`` mode the YAML schema is
        returned after authentication succeeds.
        """

        try:
            params = parse_config_params(config_params)
        except ConnectorError as exc:
            return Result.failure(exc)

        auth = self.authenticate(params)
        if not auth.ok:
            return Result.failure(auth.error)

        try:
            schema = self._build_schema(params.endpoint, auth.unwrap())
        except ConnectorError as exc:
            return Result.failure(exc)
        self.credentials.set_schema(schema)
        log_progress(self.logger, "Schema resolved", phase="schema", status="ok", extra={"endpoint": params.endpoint, "field_count": len(schema)})
        return Result.success(schema)

    def _build_schema(self, endpoint: str, token: str) -> Schema:
        if self.settings.schema_mode == "static":
            return load_static_schema(self.settings.static_schema_path)
        try:
            records = self.client.fetch_collection(endpoint, token)
        except APIError as exc:
            report_error(f"Could not fetch a sample record from {endpoint}.", str(exc), error_cls=FetchError)
        if not records:
            report_error(f"{endpoint} returned no records to infer a schema from.", error_cls=FetchError)
        return infer_schema(records[0])

    def get_schema(self, request: Mapping[str, Any]) -> Dict[str, Any]:
        result = self.resolve_schema(request.get("configParams"))
        if not result.ok:
            return self._error_response(result.error)
        return {"schema": [field.to_dict() for field in result.unwrap()]}

    # ---- data ----

    def resolve_data(self, request: Mapping[str, Any]) -> Result[Dict[str, Any]]:
        """Look up every requested field in the persisted schema and fetch the rows."""

        config_params = request.get("configParams")
        try:
            params = parse_config_params(config_params)
            schema = self._current_schema()
        except ConnectorError as exc:
            return Result.failure(exc)

        if schema is None:
            resolved = self.resolve_schema(config_params)
            if not resolved.ok:
                return Result.failure(resolved.error)
            schema = resolved.unwrap()

        token = self.credentials.get_token()
        if not token:
            auth = self.authenticate(params)
            if not auth.ok:
                return Result.failure(auth.error)
            token = auth.unwrap()

        requested = request.get("fields") or []
        try:
            descriptors = [find_field(schema, str(item.get("name", ""))) for item in requested]
            rows = fetch_rows(self.client, params.endpoint, token, descriptors)
        except ConnectorError as exc:
            return Result.failure(exc)

        log_progress(self.logger, "Rows fetched", phase="data", status="ok", extra={"endpoint": params.endpoint, "row_count": len(rows)})
        return Result.success({"schema": [item.to_dict() for item in descriptors], "rows": rows})

    def _current_schema(self) -> Optional[Schema]:
        if self.settings.schema_mode == "static":
            return load_static_schema(self.settings.static_schema_path)
        return self.credentials.get_schema()

    def get_data(self, request: Mapping[str, Any]) -> Dict[str, Any]:
        result = self.resolve_data(request)
        if not result.ok:
            return self._error_response(result.error)
        return result.unwrap()

    def _error_response(self, error: ConnectorError) -> Dict[str, str]:
        self.logger.warning(error.user_message, extra={"error_code": error.error_code, "detail": error.debug_detail})
        return error.to_response()


__all__ = ["ConnectionParams", "ConnectorService", "fetch_rows", "parse_config_params"]
