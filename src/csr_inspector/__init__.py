"""
csr_inspector — certificate signing request / certificate inspection engine.

Decodes PEM-encoded PKCS#10 CSRs and X.509 certificates into structured
subject/validity records and decides whether an uploaded certificate was
issued for a given CSR.

Built on the Railway-Oriented Programming (ROP) layer: every fallible
operation returns a Result instead of raising.
"""

from csr_inspector.engine import (
    is_strong_password,
    matches_csr,
    parse_certificate,
    parse_csr,
)

__all__ = [
    "is_strong_password",
    "matches_csr",
    "parse_certificate",
    "parse_csr",
]

__version__ = "0.1.0"
