"""Small deterministic predicates consumed by the presentation layer."""

from __future__ import annotations

import string

from csr_inspector.domain.models import CertificateStatus

MIN_PASSWORD_LENGTH = 8
REJECTED_SENTINEL = "rejected"

_UPPER = frozenset(string.ascii_uppercase)
_LOWER = frozenset(string.ascii_lowercase)
_DIGIT_OR_SYMBOL = frozenset(string.digits + string.punctuation)


def password_is_valid(password: str) -> bool:
    """
    True iff the password has at least 8 characters, an ASCII uppercase
    letter, an ASCII lowercase letter, and an ASCII digit or symbol.
    """
    chars = set(password)
    return (
        len(password) >= MIN_PASSWORD_LENGTH
        and not chars.isdisjoint(_UPPER)
        and not chars.isdisjoint(_LOWER)
        and not chars.isdisjoint(_DIGIT_OR_SYMBOL)
    )


def certificate_status(certificate_text: str) -> CertificateStatus:
    """Derive a request's lifecycle state from its stored certificate text."""
    text = certificate_text.strip()
    if not text:
        return CertificateStatus.OUTSTANDING
    if text == REJECTED_SENTINEL:
        return CertificateStatus.REJECTED
    return CertificateStatus.FULFILLED
