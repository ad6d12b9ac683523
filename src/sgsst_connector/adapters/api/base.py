"""
Shared HTTP utilities for API adapters.

A thin HTTPX wrapper: synchronous, no global state, one client per request, and
descriptive :class:`APIError` messages when endpoints fail. Retries go through
tenacity but are off unless ``max_attempts`` is raised above one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import LoggerAdapter
from typing import Any, Mapping, MutableMapping, Optional

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ...core.logging import get_logger
from ..base import AdapterError

DEFAULT_TIMEOUT = 30.0


class APIError(AdapterError):
    """Raised when an HTTP API call fails."""


@dataclass(slots=True)
class BaseAPIClient:
    """
    Base synchronous HTTP client.

    Parameters
    ----------
    base_url:
        Root URL for the upstream service.
    timeout:
        Request timeout in seconds.
    max_attempts:
        Total attempts per request for transport errors. ``1`` sends once.
    default_headers:
        Headers automatically attached to every request.
    transport:
        Optional HTTPX transport, e.g. :class:`httpx.MockTransport` in tests.
    """

    base_url: str
    timeout: float = DEFAULT_TIMEOUT
    max_attempts: int = 1
    default_headers: MutableMapping[str, str] = field(default_factory=dict)
    transport: Optional[httpx.BaseTransport] = field(default=None, repr=False)
    logger: LoggerAdapter = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.logger = get_logger(
            f"{self.__class__.__module__}.{self.__class__.__name__}",
            extra={"base_url": self.base_url},
        )

    def _build_client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=dict(self.default_headers),
            follow_redirects=True,
            transport=self.transport,
        )

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise APIError(f"HTTP {exc.response.status_code} error for {exc.request.method} {exc.request.url}: {exc.response.text}") from exc

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        self.logger.debug("HTTP request", extra={"method": method, "url": url})

        @retry(
            retry=retry_if_exception_type(httpx.TransportError),
            wait=wait_exponential(multiplier=1, min=1, max=8),
            stop=stop_after_attempt(self.max_attempts),
            reraise=True,
        )
        def _send() -> httpx.Response:
            with self._build_client() as client:
                return client.request(method, url, **kwargs)

        try:
            response = _send()
        except httpx.HTTPError as exc:
            self.logger.error(
                "HTTP error during request",
                extra={"method": method, "url": url, "attempt": self.max_attempts, "error": str(exc)},
            )
            raise APIError(f"HTTP error while calling {method} {url}: {exc}") from exc

        self._raise_for_status(response)
        self.logger.debug("HTTP response", extra={"status_code": response.status_code, "url": str(response.url)})
        return response

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise APIError(f"Failed to decode JSON from {response.url}: {exc}") from exc

    def _get_json(
        self,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        response = self._request("GET", url, params=params, headers=dict(headers) if headers else None)
        return self._decode(response)

    def _post_json(
        self,
        url: str,
        *,
        json_body: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        response = self._request("POST", url, json=json_body, headers=dict(headers) if headers else None)
        return self._decode(response)
