"""
Engine — the public operations of csr_inspector.

Each parse is a short railway:

  decode_pem(text, labels)
    → parse_*_der(block.der)
      → ParsedCSR / ParsedCertificate

Failures short-circuit and come back as Result.failure with a code that
tells the caller which message to render. Nothing here raises, caches, or
touches the network, the filesystem, or the environment.
"""

from __future__ import annotations

import structlog
from railway import FailureDescription
from railway.result import Result

from csr_inspector.adapters.der_parser import parse_certificate_der, parse_csr_der
from csr_inspector.adapters.pem_decoder import CERTIFICATE_LABELS, CSR_LABELS, decode_pem
from csr_inspector.domain.models import (
    MatchResult,
    NotACertificate,
    ParsedCertificate,
    ParsedCSR,
)
from csr_inspector.helpers import REJECTED_SENTINEL, password_is_valid
from csr_inspector.matching import match

log = structlog.get_logger()


def _log_failure(event: str):
    def _log(error: FailureDescription) -> None:
        log.info(event, error_code=error.code.value, reason=error.message, cause=error.cause())
    return _log


def parse_csr(pem: str) -> Result[ParsedCSR]:
    """
    Parse a PEM-encoded PKCS#10 certificate signing request.

    Failures: PEM_FORMAT_ERROR for the envelope, CSR_FORMAT_ERROR for the DER.
    """
    return (
        decode_pem(pem, CSR_LABELS)
        .flat_map(lambda block: parse_csr_der(block.der))
        .peek_failure(_log_failure("csr.parse_failed"))
    )


def parse_certificate(pem: str) -> Result[ParsedCertificate | NotACertificate]:
    """
    Parse a PEM-encoded X.509 certificate.

    The certificate slot of a rejected request holds the literal "rejected"
    instead of PEM. That marker is recognized before any decoding and comes
    back as Success(NotACertificate()), never as a format error.

    Failures: PEM_FORMAT_ERROR for the envelope, CERTIFICATE_FORMAT_ERROR for the DER.
    """
    if pem.strip() == REJECTED_SENTINEL:
        return Result.success(NotACertificate())
    return (
        decode_pem(pem, CERTIFICATE_LABELS)
        .flat_map(lambda block: parse_certificate_der(block.der))
        .peek_failure(_log_failure("certificate.parse_failed"))
    )


def matches_csr(csr: ParsedCSR, cert: ParsedCertificate) -> MatchResult:
    """Decide whether `cert` was issued for `csr` (public-key identity only)."""
    return match(csr, cert)


def is_strong_password(password: str) -> bool:
    return password_is_valid(password)
