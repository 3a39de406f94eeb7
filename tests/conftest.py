"""
Shared test fixtures and helpers for the csr-inspector test suite.

Keys, CSRs, and certificates are generated on the fly with cryptography,
so every test works on real DER produced by an independent encoder.
"""

from __future__ import annotations

import ipaddress
from datetime import UTC, datetime, timedelta

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.x509.oid import NameOID

type PrivateKey = ec.EllipticCurvePrivateKey | rsa.RSAPrivateKey

NOT_BEFORE = datetime(2025, 1, 1, tzinfo=UTC)
NOT_AFTER = datetime(2026, 1, 1, tzinfo=UTC)


def new_key() -> ec.EllipticCurvePrivateKey:
    """Generate a fresh P-256 key (fast enough to create per test)."""
    return ec.generate_private_key(ec.SECP256R1())


def make_name(common_name: str, **extra: str) -> x509.Name:
    """
    Build an X.509 Name: optional country/organization, then the common name.

        make_name("example.com", country="US", organization="Example Inc")
    """
    attributes = []
    if "country" in extra:
        attributes.append(x509.NameAttribute(NameOID.COUNTRY_NAME, extra["country"]))
    if "state" in extra:
        attributes.append(x509.NameAttribute(NameOID.STATE_OR_PROVINCE_NAME, extra["state"]))
    if "organization" in extra:
        attributes.append(x509.NameAttribute(NameOID.ORGANIZATION_NAME, extra["organization"]))
    attributes.append(x509.NameAttribute(NameOID.COMMON_NAME, common_name))
    return x509.Name(attributes)


def make_csr(
    key: PrivateKey,
    common_name: str = "example.com",
    dns: list[str] | None = None,
    ips: list[str] | None = None,
    is_ca: bool | None = None,
    name: x509.Name | None = None,
) -> x509.CertificateSigningRequest:
    """Build a signed CSR; SAN and Basic Constraints are requested only when given."""
    builder = x509.CertificateSigningRequestBuilder().subject_name(name or make_name(common_name))
    general_names: list[x509.GeneralName] = [x509.DNSName(d) for d in dns or []]
    general_names += [x509.IPAddress(ipaddress.ip_address(ip)) for ip in ips or []]
    if general_names:
        builder = builder.add_extension(x509.SubjectAlternativeName(general_names), critical=False)
    if is_ca is not None:
        builder = builder.add_extension(x509.BasicConstraints(ca=is_ca, path_length=None), critical=True)
    return builder.sign(key, hashes.SHA256())


def make_certificate(
    subject_key: PrivateKey,
    common_name: str = "example.com",
    issuer_key: PrivateKey | None = None,
    issuer_name: x509.Name | None = None,
    is_ca: bool = False,
    dns: list[str] | None = None,
    serial_number: int = 0x1234,
    not_before: datetime = NOT_BEFORE,
    not_after: datetime = NOT_AFTER,
    subject_name: x509.Name | None = None,
) -> x509.Certificate:
    """Build a certificate for `subject_key`; self-signed unless an issuer is given."""
    subject = subject_name or make_name(common_name)
    builder = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer_name or subject)
        .public_key(subject_key.public_key())
        .serial_number(serial_number)
        .not_valid_before(not_before)
        .not_valid_after(not_after)
        .add_extension(x509.BasicConstraints(ca=is_ca, path_length=None), critical=True)
    )
    if dns:
        builder = builder.add_extension(
            x509.SubjectAlternativeName([x509.DNSName(d) for d in dns]), critical=False,
        )
    return builder.sign(issuer_key or subject_key, hashes.SHA256())


def to_pem(obj: x509.Certificate | x509.CertificateSigningRequest) -> str:
    return obj.public_bytes(serialization.Encoding.PEM).decode("ascii")


def to_der(obj: x509.Certificate | x509.CertificateSigningRequest) -> bytes:
    return obj.public_bytes(serialization.Encoding.DER)


# ─────────────────────── Fixtures ───────────────────────


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    """A single RSA-2048 key shared by the session (generation is slow)."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture()
def key() -> ec.EllipticCurvePrivateKey:
    return new_key()


@pytest.fixture()
def other_key() -> ec.EllipticCurvePrivateKey:
    return new_key()


@pytest.fixture()
def csr_pem(key: ec.EllipticCurvePrivateKey) -> str:
    """CN=example.com requesting SAN DNS example.com + www.example.com, no CA flag."""
    return to_pem(make_csr(key, dns=["example.com", "www.example.com"]))


@pytest.fixture()
def certificate_pem(key: ec.EllipticCurvePrivateKey, other_key: ec.EllipticCurvePrivateKey) -> str:
    """A certificate for `key`, issued by a CA holding `other_key`."""
    return to_pem(
        make_certificate(
            key,
            issuer_key=other_key,
            issuer_name=make_name("Example CA", organization="Example Inc"),
            dns=["example.com", "www.example.com"],
        )
    )
