"""
Typer application playing the reporting host locally.

``auth`` commands manage the stored credentials; ``config``, ``schema`` and
``data`` issue the same requests the host would send and print the JSON
responses.
"""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from ..config import SCHEMA_MODES, ConnectorSettings, load_settings
from ..core.logging import configure_logging
from ..services import ConnectorService
from ..wiring import build_service

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "SGSST data connector.\n\n"
        "Command groups:\n"
        "- auth: store, check, and reset API credentials.\n"
        "- config / schema / data: run the reporting host requests locally."
    ),
)
auth_app = typer.Typer(help="Manage the credentials stored for the current user.")
app.add_typer(auth_app, name="auth")


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def _require_service(ctx: typer.Context) -> ConnectorService:
    state = ctx.ensure_object(dict)
    service = state.get("service")
    if not isinstance(service, ConnectorService):
        raise typer.Exit(code=2)
    return service


def _fail_on_error(response: Dict[str, Any]) -> None:
    if response.get("errorCode", "NONE") != "NONE":
        message = response.get("errorMessage")
        typer.echo(f"{response['errorCode']}: {message}" if message else response["errorCode"], err=True)
        raise typer.Exit(code=1)


def _stored_config_params(service: ConnectorService, endpoint: Optional[str]) -> Dict[str, Optional[str]]:
    stored = service.credentials.get_credentials()
    return {
        "company_id": stored.company_id,
        "username": stored.username,
        "password": stored.password,
        "endpoint": endpoint or service.settings.default_endpoint,
    }


@app.callback(invoke_without_command=False)
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Override the SGSST API base URL."),
    store_dir: Optional[Path] = typer.Option(None, "--store-dir", help="Directory holding the credential store.", file_okay=False),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="User scope for stored credentials."),
    schema_mode: Optional[str] = typer.Option(None, "--schema-mode", help=f"Schema mode: {', '.join(SCHEMA_MODES)}."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (DEBUG, INFO, WARNING...)."),
) -> None:
    """Resolve settings and build the connector service for child commands."""

    configure_logging(log_level, force=log_level is not None)
    overrides: Dict[str, Any] = {}
    if base_url:
        overrides["base_url"] = base_url
    if store_dir:
        overrides["store_dir"] = store_dir
    if user:
        overrides["user"] = user
    if schema_mode:
        overrides["schema_mode"] = schema_mode
    try:
        settings = load_settings()
        resolved: ConnectorSettings = dataclasses.replace(settings, **overrides) if overrides else settings
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    state = ctx.ensure_object(dict)
    state["service"] = build_service(resolved)


@auth_app.command("login")
def auth_login(
    ctx: typer.Context,
    company_id: str = typer.Option(..., "--company-id", prompt=True, help="Company identifier."),
    username: str = typer.Option(..., "--username", prompt=True, help="API username."),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True, help="API password."),
) -> None:
    """Store credentials and verify them against the login endpoint."""

    service = _require_service(ctx)
    response = service.set_credentials({"userPass": {"username": username, "password": password, "companyId": company_id}})
    _fail_on_error(response)
    if not service.is_auth_valid():
        typer.echo("Credentials stored but the login failed.", err=True)
        raise typer.Exit(code=1)
    typer.echo("Credentials stored and verified.")


@auth_app.command("status")
def auth_status(ctx: typer.Context) -> None:
    """Check whether the stored credentials still log in."""

    service = _require_service(ctx)
    result = service.verify_credentials()
    typer.echo(result.message)
    if not result.success:
        raise typer.Exit(code=1)


@auth_app.command("reset")
def auth_reset(ctx: typer.Context) -> None:
    """Forget the stored username, password and token. The company id is kept."""

    service = _require_service(ctx)
    service.reset_auth()
    typer.echo("Credentials reset.")


@app.command("config")
def show_config(ctx: typer.Context) -> None:
    """Print the configuration form served to the host."""

    _echo_json(_require_service(ctx).get_config())


@app.command("schema")
def show_schema(
    ctx: typer.Context,
    endpoint: Optional[str] = typer.Option(None, "--endpoint", "-e", help="API path to sample, e.g. /pesv/vehiculo."),
) -> None:
    """Authenticate, resolve the schema for ENDPOINT and print it."""

    service = _require_service(ctx)
    response = service.get_schema({"configParams": _stored_config_params(service, endpoint)})
    _fail_on_error(response)
    _echo_json(response)


@app.command("data")
def show_data(
    ctx: typer.Context,
    field_names: List[str] = typer.Option(..., "--field", "-f", help="Field name to include. Can be repeated."),
    endpoint: Optional[str] = typer.Option(None, "--endpoint", "-e", help="API path to query."),
) -> None:
    """Fetch rows for the requested fields and print them."""

    service = _require_service(ctx)
    request = {
        "configParams": _stored_config_params(service, endpoint),
        "fields": [{"name": name} for name in field_names],
    }
    response = service.get_data(request)
    _fail_on_error(response)
    _echo_json(response)


if __name__ == "__main__":  # pragma: no cover
    app()
