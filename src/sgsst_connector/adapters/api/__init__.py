"""
HTTP API clients and adapters.

* ``Client`` classes wrap low-level HTTP calls.
* ``Adapter`` classes provide :class:`~sgsst_connector.adapters.base.DataSourceAdapter`
  implementations used for credential verification.
"""

from .base import APIError, BaseAPIClient
from .sgsst import LOGIN_PATH, SGSSTAdapter, SGSSTClient

__all__ = [
    "APIError",
    "BaseAPIClient",
    "LOGIN_PATH",
    "SGSSTAdapter",
    "SGSSTClient",
]
