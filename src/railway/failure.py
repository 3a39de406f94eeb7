"""
Failure description — structured error information for the failure track.

ErrorCode enum + an immutable FailureDescription carrying the code, a
human-readable message, the optional underlying exception, and a timestamp.

The codes are the csr-inspector error taxonomy. Each one maps to exactly one
kind of message the caller renders ("invalid certificate", "not a chain", ...),
so a failure is always distinguishable without inspecting its message.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum, unique
from typing import Optional


@unique
class ErrorCode(Enum):
    """
    Structured error codes for the failure track.

    Organized by HTTP status range for natural REST API mapping:
    - Client errors (4xx): VALIDATION, PEM_FORMAT, CSR_FORMAT, CERTIFICATE_FORMAT, CHAIN
    - Server errors (5xx): CONFIGURATION, TECHNICAL, UNKNOWN
    """

    # --- Client-side errors (4xx HTTP range) ---
    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Missing, empty, or oversized input (→ 400)."""

    PEM_FORMAT_ERROR = "PEM_FORMAT_ERROR"
    """No BEGIN/END block, mismatched labels, wrong label, bad base64 (→ 422)."""

    CSR_FORMAT_ERROR = "CSR_FORMAT_ERROR"
    """PKCS#10 DER is truncated, mistagged, or structurally invalid (→ 422)."""

    CERTIFICATE_FORMAT_ERROR = "CERTIFICATE_FORMAT_ERROR"
    """X.509 DER is truncated, mistagged, or structurally invalid (→ 422)."""

    CHAIN_ERROR = "CHAIN_ERROR"
    """A certificate bundle does not form a valid issuer chain (→ 422)."""

    # --- Server-side errors (5xx HTTP range) ---
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    """System misconfiguration (→ 500)."""

    TECHNICAL_ERROR = "TECHNICAL_ERROR"
    """Infrastructure issues (→ 500)."""

    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    """Unexpected/unclassified failures (→ 500)."""


@dataclass(frozen=True, slots=True)
class FailureDescription:
    """
    Immutable failure descriptor carrying error code, message, optional exception, and timestamp.

    >>> desc = FailureDescription(ErrorCode.PEM_FORMAT_ERROR, "No PEM block found")
    >>> desc.code
    <ErrorCode.PEM_FORMAT_ERROR: 'PEM_FORMAT_ERROR'>
    >>> desc.message
    'No PEM block found'
    """

    code: ErrorCode
    message: str
    exception: Optional[BaseException] = field(default=None, repr=False)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def cause(self) -> str | None:
        """Short description of the underlying exception, if any (safe to log)."""
        if self.exception is None:
            return None
        return f"{type(self.exception).__name__}: {self.exception}"
