"""
Adapter interfaces for the remote SGSST API.

Each adapter exposes a small, deterministic surface that the service layer
composes into host requests.
"""

from .base import AdapterError, DataSourceAdapter, VerificationResult

__all__ = [
    "AdapterError",
    "DataSourceAdapter",
    "VerificationResult",
]
