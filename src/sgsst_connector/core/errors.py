"""
Connector error taxonomy and the request-level error reporter.

Every failure that reaches the host is a :class:`ConnectorError`. The subclass
identifies the failure kind and fixes the ``error_code`` surfaced to the host;
``user_message`` is shown to the end user while ``debug_detail`` keeps the
underlying cause for logs.

Service operations return :class:`Result` values so the outermost request
handler decides how a failure is rendered. :func:`report_error` is the
non-returning path used inside components.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, Optional, Type, TypeVar

from .logging import get_logger

T = TypeVar("T")


class ConnectorError(RuntimeError):
    """Base class for failures surfaced to the reporting host."""

    error_code = "CONNECTOR_ERROR"

    def __init__(self, user_message: str, debug_detail: Optional[str] = None) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.debug_detail = debug_detail or user_message

    def to_response(self) -> dict[str, str]:
        """Render the error in the host's ``{errorCode}`` shape."""

        return {"errorCode": self.error_code, "errorMessage": self.user_message}


class ConfigurationError(ConnectorError):
    """Required configuration parameters are missing or empty."""

    error_code = "MISSING_REQUIRED_FIELDS"


class AuthenticationError(ConnectorError):
    """The remote login rejected the credentials or could not be reached."""

    error_code = "INVALID_CREDENTIALS"


class FetchError(ConnectorError):
    """The remote data request failed or returned an unexpected payload."""

    error_code = "FETCH_FAILED"


class FieldNotFoundError(ConnectorError):
    """A requested field is not part of the persisted schema."""

    error_code = "FIELD_NOT_FOUND"


def report_error(
    message: str,
    debug_detail: Optional[str] = None,
    *,
    error_cls: Type[ConnectorError] = ConnectorError,
) -> NoReturn:
    """
    Surface ``message`` to the user and abort the current operation.

    ``debug_detail`` (or ``message`` when absent) goes to the debug log. The
    function always raises ``error_cls``.
    """

    get_logger(__name__).debug(debug_detail or message, extra={"error_code": error_cls.error_code})
    raise error_cls(message, debug_detail)


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    """
    Outcome of a service operation.

    Exactly one of ``value`` and ``error`` is meaningful: ``error`` is ``None``
    on success.
    """

    value: Optional[T] = None
    error: Optional[ConnectorError] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ConnectorError) -> "Result[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the carried error."""

        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "ConnectorError",
    "FetchError",
    "FieldNotFoundError",
    "Result",
    "report_error",
]
