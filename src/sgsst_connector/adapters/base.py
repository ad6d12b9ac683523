"""
Base protocols for remote data source adapters.

Adapters stay narrow: they verify connectivity and perform well-defined fetch
operations. Schema handling, credential storage and request orchestration live
in the service layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Protocol


class AdapterError(RuntimeError):
    """Raised when an adapter encounters a non-recoverable error."""


@dataclass(slots=True)
class VerificationResult:
    """
    Structured response returned by adapter verification routines.

    Attributes
    ----------
    success:
        Indicates whether the verification succeeded.
    message:
        Human-readable summary.
    details:
        Optional structured metadata such as the endpoint or record count.
    """

    success: bool
    message: str
    details: Optional[Mapping[str, object]] = None


class DataSourceAdapter(Protocol):
    """Protocol implemented by data source adapters."""

    def verify(self) -> VerificationResult:
        """Perform a lightweight connectivity check."""

    @property
    def source_id(self) -> str:
        """Identifier of the remote source."""
