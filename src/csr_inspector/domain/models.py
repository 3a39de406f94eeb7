"""
Domain models — immutable data structures for CSRs, certificates, and match outcomes.

These are pure value objects with no behavior beyond derived properties.
They are created fresh for every input string, never cached, and compared
structurally only.

All models are frozen dataclasses (immutable) following functional principles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, unique

# ─────────────────────── Subject vocabulary ───────────────────────

COMMON_NAME = "Common Name"
COUNTRY = "Country"
STATE_OR_PROVINCE = "State or Province"
LOCALITY = "Locality"
ORGANIZATION = "Organization"
ORGANIZATIONAL_UNIT = "Organizational Unit"
EMAIL_ADDRESS = "Email Address"

# Dotted OID → vocabulary label. Adding a supported attribute is one line here.
SUBJECT_ATTRIBUTE_LABELS: dict[str, str] = {
    "2.5.4.3": COMMON_NAME,
    "2.5.4.6": COUNTRY,
    "2.5.4.8": STATE_OR_PROVINCE,
    "2.5.4.7": LOCALITY,
    "2.5.4.10": ORGANIZATION,
    "2.5.4.11": ORGANIZATIONAL_UNIT,
    "1.2.840.113549.1.9.1": EMAIL_ADDRESS,
}


@dataclass(frozen=True, slots=True)
class SubjectAttribute:
    """One distinguished-name attribute drawn from the fixed vocabulary."""

    name: str
    value: str


def _lookup(subject: tuple[SubjectAttribute, ...], name: str) -> str | None:
    for attribute in subject:
        if attribute.name == name:
            return attribute.value
    return None


@dataclass(frozen=True, slots=True)
class ParsedCSR:
    """
    A decoded PKCS#10 certificate signing request.

    The `public_key` field holds the verbatim DER of the request's
    subjectPublicKeyInfo. It is an identity used for equality only.
    """

    subject: tuple[SubjectAttribute, ...]
    public_key: bytes = field(repr=False)
    sans_dns: frozenset[str] = frozenset()
    sans_ip: frozenset[str] = frozenset()
    is_ca: bool = False

    @property
    def common_name(self) -> str | None:
        return _lookup(self.subject, COMMON_NAME)

    def subject_value(self, name: str) -> str | None:
        """Return the value of the named subject attribute, or None if absent."""
        return _lookup(self.subject, name)


@dataclass(frozen=True, slots=True)
class ParsedCertificate:
    """
    A decoded X.509 certificate.

    Validity bounds are timezone-aware UTC datetimes regardless of whether
    they were encoded as UTCTime or GeneralizedTime. `public_key` lives in
    the same representation domain as ParsedCSR.public_key.
    """

    subject: tuple[SubjectAttribute, ...]
    issuer: tuple[SubjectAttribute, ...]
    not_before: datetime
    not_after: datetime
    serial_number: int
    public_key: bytes = field(repr=False)
    sans_dns: frozenset[str] = frozenset()
    sans_ip: frozenset[str] = frozenset()
    is_ca: bool = False

    @property
    def common_name(self) -> str | None:
        return _lookup(self.subject, COMMON_NAME)

    @property
    def serial_hex(self) -> str:
        return hex(self.serial_number)

    def subject_value(self, name: str) -> str | None:
        """Return the value of the named subject attribute, or None if absent."""
        return _lookup(self.subject, name)


@dataclass(frozen=True, slots=True)
class NotACertificate:
    """
    The certificate slot holds the "rejected" status marker, not a certificate.

    A legitimate state (the request was rejected), never a parse failure.
    """

    marker: str = "rejected"


# ─────────────────────── Matching ───────────────────────


@unique
class MatchReason(Enum):
    MATCH = "MATCH"
    PUBLIC_KEY_MISMATCH = "PUBLIC_KEY_MISMATCH"


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Outcome of comparing a CSR against a certificate."""

    reason: MatchReason

    @property
    def matched(self) -> bool:
        return self.reason is MatchReason.MATCH


@unique
class SubmissionVerdict(Enum):
    """
    The single message shown for a certificate upload.

    Values are the messages rendered to the user; evaluation order is
    EMPTY → INVALID_CERTIFICATE → IDENTICAL_CERTIFICATE → CERTIFICATE_MISMATCH → VALID.
    """

    EMPTY = ""
    INVALID_CERTIFICATE = "Invalid Certificate"
    IDENTICAL_CERTIFICATE = "Certificate is identical to the one uploaded"
    CERTIFICATE_MISMATCH = "Certificate does not match the request"
    VALID = "Valid Certificate"

    @property
    def message(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class SubmissionCheck:
    """
    The four independent conditions gating a certificate upload.

    Each flag is evaluated on its own; `verdict` picks the first failing one
    in display order.
    """

    non_empty: bool
    parses: bool
    differs_from_existing: bool
    matches_request: bool

    @property
    def verdict(self) -> SubmissionVerdict:
        if not self.non_empty:
            return SubmissionVerdict.EMPTY
        if not self.parses:
            return SubmissionVerdict.INVALID_CERTIFICATE
        if not self.differs_from_existing:
            return SubmissionVerdict.IDENTICAL_CERTIFICATE
        if not self.matches_request:
            return SubmissionVerdict.CERTIFICATE_MISMATCH
        return SubmissionVerdict.VALID

    @property
    def can_submit(self) -> bool:
        return self.verdict is SubmissionVerdict.VALID


@unique
class CertificateStatus(Enum):
    """Lifecycle state of a request, derived from its certificate text slot."""

    OUTSTANDING = "outstanding"
    REJECTED = "rejected"
    FULFILLED = "fulfilled"
