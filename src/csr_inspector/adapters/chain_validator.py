"""
Certificate chain validator — verifies an uploaded PEM bundle is an issuer chain.

Adapter layer using:
  - pem_decoder: split the bundle into CERTIFICATE blocks
  - der_parser (asn1crypto): structured ParsedCertificate records
  - cryptography (PyCA): raw Name comparison and signature verification

Rules, applied in order:
  1. every block is a CERTIFICATE and decodes;
  2. at least two certificates are present (leaf first, then its issuers);
  3. for each adjacent pair, the issuer DN of the first equals the subject
     DN of the second, the second may issue certificates (CA basic
     constraint, or a v1 certificate), and the first is signed by the
     second's key;
  4. every certificate strictly between the first and the last carries the
     CA basic constraint.

The chain is not anchored to any trust store: the last certificate is
not checked against anything beyond its own issuing ability.
"""

from __future__ import annotations

import structlog
from cryptography import x509
from railway import ErrorCode
from railway.result import Result

from csr_inspector.adapters.der_parser import parse_certificate_der
from csr_inspector.adapters.pem_decoder import CERTIFICATE_LABELS, PemBlock, decode_pem_blocks
from csr_inspector.domain.models import ParsedCertificate

log = structlog.get_logger()

type _Link = tuple[ParsedCertificate, x509.Certificate]


def _load_link(position: int, block: PemBlock) -> Result[_Link]:
    """Decode one block both ways: asn1crypto for the record, cryptography for verification."""
    loaded = Result.from_computation(
        lambda: x509.load_der_x509_certificate(block.der),
        ErrorCode.CERTIFICATE_FORMAT_ERROR,
        f"Certificate {position} could not be decoded",
    )
    return Result.combine(parse_certificate_der(block.der), loaded, lambda parsed, cert: (parsed, cert))


def _may_issue(parent: x509.Certificate) -> bool:
    """
    Whether `parent` may sign other certificates.

    A v3 issuer must carry Basic Constraints with CA:true. A v1 certificate
    predates extensions and is allowed to issue.
    """
    try:
        return parent.extensions.get_extension_for_class(x509.BasicConstraints).value.ca
    except x509.ExtensionNotFound:
        return parent.version is not x509.Version.v3


def _signed_by(child: x509.Certificate, parent: x509.Certificate) -> x509.Certificate:
    child.verify_directly_issued_by(parent)
    return child


def _verify_pair(position: int, child: x509.Certificate, parent: x509.Certificate) -> Result[x509.Certificate]:
    link = f"Invalid certificate chain: certificate {position}, certificate {position + 1}"
    if child.issuer.public_bytes() != parent.subject.public_bytes():
        return Result.failure(ErrorCode.CHAIN_ERROR, f"{link}: subjects do not match")
    return (
        Result.from_computation(
            lambda: _may_issue(parent),
            ErrorCode.CHAIN_ERROR,
            f"{link}: certificate {position + 1} extensions could not be decoded",
        )
        .ensure(
            lambda may_issue: may_issue,
            ErrorCode.CHAIN_ERROR,
            f"{link}: certificate {position + 1} is not a certificate authority",
        )
        .flat_map(lambda _: Result.from_computation(
            lambda: _signed_by(child, parent),
            ErrorCode.CHAIN_ERROR,
            f"{link}: keys do not match",
        ))
    )


def _verify_links(links: list[_Link]) -> Result[list[_Link]]:
    checks = (
        _verify_pair(i, links[i][1], links[i + 1][1])
        for i in range(len(links) - 1)
    )
    return Result.all_of(checks).map(lambda _: links)


def _verify_intermediates(links: list[_Link]) -> Result[list[_Link]]:
    for position in range(1, len(links) - 1):
        if not links[position][0].is_ca:
            return Result.failure(
                ErrorCode.CHAIN_ERROR,
                f"Invalid certificate chain: certificate {position} is not a certificate authority",
            )
    return Result.success(links)


def validate_certificate_chain(bundle: str) -> Result[tuple[ParsedCertificate, ...]]:
    """
    Validate a PEM bundle as a leaf-first certificate chain.

    Returns the parsed certificates in bundle order on success.
    Returns Result.failure(CHAIN_ERROR, ...) when the bundle is too short or
    a link is broken, and the PEM / certificate format error otherwise.
    """
    return (
        decode_pem_blocks(bundle, CERTIFICATE_LABELS)
        .flat_map(lambda blocks: Result.all_of(_load_link(i, b) for i, b in enumerate(blocks)))
        .ensure(
            lambda links: len(links) >= 2,
            ErrorCode.CHAIN_ERROR,
            "Less than 2 certificate PEM strings were found",
        )
        .flat_map(_verify_links)
        .flat_map(_verify_intermediates)
        .peek(lambda links: log.info("chain.validated", length=len(links), leaf=links[0][0].common_name))
        .peek_failure(lambda err: log.warning("chain.invalid", error_code=err.code.value, reason=err.message))
        .map(lambda links: tuple(parsed for parsed, _ in links))
    )
