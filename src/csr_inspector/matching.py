"""
Matcher — decides whether a certificate was issued for a CSR.

Domain layer — pure, total, no I/O. The sole criterion is byte-exact
equality of the two subjectPublicKeyInfo encodings. Subject fields are not
compared: a CA may rewrite them during issuance.

Issuer trust is not established here. A certificate carrying the CSR's key
matches regardless of who signed it.
"""

from __future__ import annotations

from csr_inspector.domain.models import MatchReason, MatchResult, ParsedCertificate, ParsedCSR


def match(csr: ParsedCSR, cert: ParsedCertificate) -> MatchResult:
    """Compare public keys; never raises for two already-parsed values."""
    if csr.public_key == cert.public_key:
        return MatchResult(MatchReason.MATCH)
    return MatchResult(MatchReason.PUBLIC_KEY_MISMATCH)
