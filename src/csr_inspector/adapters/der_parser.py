"""
DER parser adapter — PKCS#10 requests and X.509 certificates via asn1crypto.

Pipeline:
  DER bytes
    → asn1crypto: CertificationRequest.load(strict=True) / Certificate.load(strict=True)
    → walk subject Name, extension request / extensions, subjectPublicKeyInfo
    → ParsedCSR / ParsedCertificate (domain model)

asn1crypto checks every header and length prefix against the remaining
buffer before it descends. Each record is decoded in full once, so truncated
input, claimed lengths past the end of the data, trailing bytes, wrong outer
tags, and malformed values nested in fields the record never reads all raise
ValueError. Those exceptions are caught once at this adapter boundary via
Result.from_computation(): a parse either yields a complete record or a
failure, never a partially filled one.

Neither the CSR self-signature nor the certificate signature is verified
here. Both are decoded structurally only.
"""

from __future__ import annotations

from datetime import UTC, datetime

import structlog
from asn1crypto import core
from asn1crypto import csr as asn1_csr
from asn1crypto import x509 as asn1_x509
from railway import ErrorCode
from railway.result import Result

from csr_inspector.domain.models import (
    SUBJECT_ATTRIBUTE_LABELS,
    ParsedCertificate,
    ParsedCSR,
    SubjectAttribute,
)

log = structlog.get_logger()

EXTENSION_REQUEST_OID = "1.2.840.113549.1.9.14"
SUBJECT_ALT_NAME_OID = "2.5.29.17"
BASIC_CONSTRAINTS_OID = "2.5.29.19"


# ─────────────────────── Shared Extraction ───────────────────────


def _require(sequence: core.Sequence, name: str) -> core.Asn1Value:
    """Return a sequence field, raising ValueError if it is absent."""
    value = sequence[name]
    if value is None or isinstance(value, core.Void):
        raise ValueError(f"Required field {name!r} is missing")
    return value


def _name_attributes(name: asn1_x509.Name) -> tuple[SubjectAttribute, ...]:
    """
    Map a distinguished name onto the subject vocabulary.

    Unknown attribute types are skipped. When a type repeats, the first
    occurrence in DER order wins.
    """
    found: dict[str, SubjectAttribute] = {}
    for rdn in name.chosen:
        for type_and_value in rdn:
            label = SUBJECT_ATTRIBUTE_LABELS.get(type_and_value["type"].dotted)
            if label is None or label in found:
                continue
            found[label] = SubjectAttribute(name=label, value=str(type_and_value["value"].native))
    return tuple(found.values())


def _alt_names(general_names: asn1_x509.GeneralNames | None) -> tuple[frozenset[str], frozenset[str]]:
    """Split a GeneralNames value into (DNS names, IP addresses)."""
    if general_names is None:
        return frozenset(), frozenset()
    dns = frozenset(gn.native for gn in general_names if gn.name == "dns_name")
    ips = frozenset(gn.native for gn in general_names if gn.name == "ip_address")
    return dns, ips


def _is_ca(basic_constraints: asn1_x509.BasicConstraints | None) -> bool:
    if basic_constraints is None:
        return False
    return bool(basic_constraints["ca"].native)


def _utc(time_value: asn1_x509.Time) -> datetime:
    """
    Convert a Time CHOICE to an aware UTC datetime.

    asn1crypto applies the RFC 5280 cutover for UTCTime (YY < 50 → 20YY,
    otherwise 19YY). GeneralizedTime is taken as encoded. DER requires the
    "Z" suffix; a time without a zone would be read in the host's local
    time, so it is rejected.
    """
    value = time_value.native
    if not isinstance(value, datetime):
        raise ValueError(f"Unsupported validity time: {value!r}")
    if value.tzinfo is None:
        raise ValueError(f"Validity time has no UTC designator: {value!r}")
    return value.astimezone(UTC)


# ─────────────────────── PKCS#10 ───────────────────────


def _requested_extensions(info: asn1_csr.CertificationRequestInfo) -> dict[str, core.ParsableOctetString]:
    """
    Collect the extensions inside the PKCS#9 extensionRequest attribute.

    Returns a dotted-OID → extnValue mapping (contents still undecoded);
    an absent attribute yields an empty mapping.
    """
    extensions: dict[str, core.ParsableOctetString] = {}
    attributes = info["attributes"]
    if attributes is None or isinstance(attributes, core.Void):
        return extensions

    for attribute in attributes:
        if attribute["type"].dotted != EXTENSION_REQUEST_OID:
            continue
        for extension_set in attribute["values"]:
            for extension in extension_set:
                oid = extension["extn_id"].dotted
                if oid not in extensions:
                    extensions[oid] = extension["extn_value"]
    return extensions


def _decode_csr(der: bytes) -> ParsedCSR:
    """Internal decode — may raise (caught by from_computation)."""
    request = asn1_csr.CertificationRequest.load(der, strict=True)
    info = _require(request, "certification_request_info")

    # Nested values decode lazily; walk the whole tree once so malformed DER
    # anywhere (signature, key material, attribute values) is rejected here.
    request.native  # noqa: B018
    signature_algorithm = _require(request, "signature_algorithm")["algorithm"].dotted

    subject = _name_attributes(_require(info, "subject"))
    public_key_info = _require(info, "subject_pk_info")
    key_algorithm = public_key_info["algorithm"]["algorithm"].dotted

    extensions = _requested_extensions(info)
    alt_names = extensions.get(SUBJECT_ALT_NAME_OID)
    basic_constraints = extensions.get(BASIC_CONSTRAINTS_OID)
    sans_dns, sans_ip = _alt_names(alt_names.parsed if alt_names is not None else None)

    parsed = ParsedCSR(
        subject=subject,
        public_key=public_key_info.dump(),
        sans_dns=sans_dns,
        sans_ip=sans_ip,
        is_ca=_is_ca(basic_constraints.parsed if basic_constraints is not None else None),
    )
    log.debug(
        "csr.decoded",
        common_name=parsed.common_name,
        sans=len(sans_dns) + len(sans_ip),
        is_ca=parsed.is_ca,
        key_algorithm=key_algorithm,
        signature_algorithm=signature_algorithm,
        key_bytes=len(parsed.public_key),
    )
    return parsed


def parse_csr_der(der: bytes) -> Result[ParsedCSR]:
    """
    Parse DER-encoded PKCS#10 bytes into a ParsedCSR.

    Returns Result.failure(CSR_FORMAT_ERROR, ...) for truncated input,
    a wrong outer tag, a missing subject or public key, or an undecodable
    signature field.
    """
    return Result.from_computation(
        lambda: _decode_csr(der),
        ErrorCode.CSR_FORMAT_ERROR,
        "Certificate request could not be decoded",
    )


# ─────────────────────── X.509 ───────────────────────


def _decode_certificate(der: bytes) -> ParsedCertificate:
    """Internal decode — may raise (caught by from_computation)."""
    certificate = asn1_x509.Certificate.load(der, strict=True)
    tbs = _require(certificate, "tbs_certificate")

    certificate.native  # noqa: B018
    signature_algorithm = _require(certificate, "signature_algorithm")["algorithm"].dotted

    validity = _require(tbs, "validity")
    sans_dns, sans_ip = _alt_names(certificate.subject_alt_name_value)

    parsed = ParsedCertificate(
        subject=_name_attributes(_require(tbs, "subject")),
        issuer=_name_attributes(_require(tbs, "issuer")),
        not_before=_utc(validity["not_before"]),
        not_after=_utc(validity["not_after"]),
        serial_number=_require(tbs, "serial_number").native,
        public_key=_require(tbs, "subject_public_key_info").dump(),
        sans_dns=sans_dns,
        sans_ip=sans_ip,
        is_ca=_is_ca(certificate.basic_constraints_value),
    )
    log.debug(
        "certificate.decoded",
        common_name=parsed.common_name,
        serial=parsed.serial_hex,
        not_after=parsed.not_after.isoformat(),
        signature_algorithm=signature_algorithm,
        key_bytes=len(parsed.public_key),
    )
    return parsed


def parse_certificate_der(der: bytes) -> Result[ParsedCertificate]:
    """
    Parse DER-encoded X.509 bytes into a ParsedCertificate.

    Returns Result.failure(CERTIFICATE_FORMAT_ERROR, ...) on any structural
    decode failure, including a single missing trailing byte.
    """
    return Result.from_computation(
        lambda: _decode_certificate(der),
        ErrorCode.CERTIFICATE_FORMAT_ERROR,
        "Certificate could not be decoded",
    )
