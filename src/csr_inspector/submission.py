"""
Certificate upload gate — evaluates the four conditions for accepting a certificate.

  1. the uploaded text is non-empty;
  2. it parses as a certificate;
  3. it differs from the certificate already stored for the request;
  4. its public key matches the request's.

Every condition is evaluated on its own so the caller can report each one.
All texts are compared after stripping surrounding whitespace; the
"identical" test is a plain string comparison, not a semantic one.
"""

from __future__ import annotations

import structlog
from railway import ErrorCode
from railway.result import Result

from csr_inspector.domain.models import ParsedCertificate, SubmissionCheck
from csr_inspector.engine import matches_csr, parse_certificate, parse_csr

log = structlog.get_logger()


def _uploaded_certificate(text: str) -> Result[ParsedCertificate]:
    # The "rejected" marker parses, but it is a status, not an uploadable certificate.
    return parse_certificate(text).ensure(
        lambda value: isinstance(value, ParsedCertificate),
        ErrorCode.CERTIFICATE_FORMAT_ERROR,
        "Status marker is not a certificate",
    )


def check_submission(csr_text: str, existing_certificate_text: str, certificate_text: str) -> SubmissionCheck:
    """Evaluate an upload of `certificate_text` for the request `csr_text`."""
    certificate_text = certificate_text.strip()
    non_empty = bool(certificate_text)
    certificate = (
        _uploaded_certificate(certificate_text)
        if non_empty
        else Result.failure(ErrorCode.VALIDATION_ERROR, "No certificate was provided")
    )
    matched = Result.combine(parse_csr(csr_text), certificate, matches_csr)

    check = SubmissionCheck(
        non_empty=non_empty,
        parses=certificate.is_success(),
        differs_from_existing=certificate_text != existing_certificate_text.strip(),
        matches_request=matched.map(lambda result: result.matched).get_or_else(False),
    )
    log.debug("submission.checked", verdict=check.verdict.name)
    return check
