"""
FastAPI ASGI application — the inspection engine behind a JSON API.

The web UI posts PEM text here instead of decoding it in the browser:
parse a CSR for display, parse a certificate (or the "rejected" marker),
check an upload against its request, validate a chain bundle, and check a
password against the strength policy.

Every engine call returns a Result; railway.http_support turns failures into
an ErrorResponse body with the mapped status (format errors → 422,
validation → 400). Handlers are plain `def` endpoints, so FastAPI runs the
synchronous parsing in its threadpool rather than on the event loop.

Entry point for production: uvicorn csr_inspector.asgi:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import hashlib
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from railway import ErrorCode
from railway.http_support import build_fastapi_response
from railway.result import Result

from csr_inspector import __version__
from csr_inspector.adapters.chain_validator import validate_certificate_chain
from csr_inspector.config import AppSettings, LimitSettings
from csr_inspector.domain.models import (
    NotACertificate,
    ParsedCertificate,
    ParsedCSR,
    SubjectAttribute,
)
from csr_inspector.engine import is_strong_password, matches_csr, parse_certificate, parse_csr
from csr_inspector.helpers import certificate_status
from csr_inspector.main import configure_structlog
from csr_inspector.submission import check_submission

# ─────────────────────── Global State ───────────────────────
# Set during app startup; handlers fall back to defaults when it is absent.

_settings: AppSettings | None = None
log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Load settings and configure logging on startup."""
    global _settings

    try:
        _settings = AppSettings()
    except Exception as e:
        log.error("asgi.startup_error", error=f"Configuration error: {e}")
        raise

    configure_structlog(_settings.log_level)
    log.info(
        "asgi.startup_complete",
        version=__version__,
        max_pem_chars=_settings.limits.max_pem_chars,
    )

    yield

    log.info("asgi.shutdown_complete")


app = FastAPI(
    title="csr-inspector",
    description="Certificate signing request and certificate inspection engine",
    version=__version__,
    lifespan=lifespan,
)


# ─────────────────────── Request Bodies ───────────────────────


class PemRequest(BaseModel):
    pem: str


class MatchRequest(BaseModel):
    csr: str
    certificate: str


class SubmissionRequest(BaseModel):
    csr: str
    certificate: str
    existing_certificate: str = ""


class PasswordRequest(BaseModel):
    password: str


# ─────────────────────── Serialization ───────────────────────


def _subject_to_list(subject: tuple[SubjectAttribute, ...]) -> list[dict[str, str]]:
    return [{"type": attribute.name, "value": attribute.value} for attribute in subject]


def _fingerprint(public_key: bytes) -> str:
    """SHA-256 of the subjectPublicKeyInfo, the key identity shown to users."""
    return hashlib.sha256(public_key).hexdigest()


def csr_to_dict(csr: ParsedCSR) -> dict[str, Any]:
    return {
        "common_name": csr.common_name,
        "subject": _subject_to_list(csr.subject),
        "sans_dns": sorted(csr.sans_dns),
        "sans_ip": sorted(csr.sans_ip),
        "is_ca": csr.is_ca,
        "public_key_sha256": _fingerprint(csr.public_key),
    }


def certificate_to_dict(cert: ParsedCertificate) -> dict[str, Any]:
    return {
        "status": "fulfilled",
        "common_name": cert.common_name,
        "subject": _subject_to_list(cert.subject),
        "issuer": _subject_to_list(cert.issuer),
        "not_before": cert.not_before.isoformat(),
        "not_after": cert.not_after.isoformat(),
        "serial_number": cert.serial_hex,
        "sans_dns": sorted(cert.sans_dns),
        "sans_ip": sorted(cert.sans_ip),
        "is_ca": cert.is_ca,
        "public_key_sha256": _fingerprint(cert.public_key),
    }


def _parsed_certificate_to_dict(value: ParsedCertificate | NotACertificate) -> dict[str, Any]:
    if isinstance(value, NotACertificate):
        return {"status": certificate_status(value.marker).value}
    return certificate_to_dict(value)


# ─────────────────────── Input Guard ───────────────────────


def _max_pem_chars() -> int:
    limits = _settings.limits if _settings is not None else LimitSettings()
    return limits.max_pem_chars


def _bounded(field_name: str, text: str) -> Result[str]:
    """Refuse oversized input before any decoding is attempted."""
    limit = _max_pem_chars()
    return (
        Result.success(text)
        .ensure(
            lambda t: len(t) <= limit,
            ErrorCode.VALIDATION_ERROR,
            f"Field {field_name!r} exceeds {limit} characters",
        )
        .peek_failure(lambda err: log.warning("asgi.request_rejected", field=field_name, reason=err.message))
    )


def _required(field_name: str, text: str) -> Result[str]:
    return _bounded(field_name, text).ensure(
        lambda t: bool(t.strip()),
        ErrorCode.VALIDATION_ERROR,
        f"Field {field_name!r} is empty",
    )


# ─────────────────────── Endpoints ───────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    """Liveness check: the engine has no dependencies, so being up is being healthy."""
    return {"status": "healthy"}


@app.get("/info")
def info() -> dict[str, Any]:
    return {
        "name": "csr-inspector",
        "version": __version__,
        "max_pem_chars": _max_pem_chars(),
    }


@app.post("/csr/parse")
def parse_csr_endpoint(request: PemRequest) -> JSONResponse:
    """Decode a CSR for display (subject, SANs, CA flag, key fingerprint)."""
    result = _required("pem", request.pem).flat_map(parse_csr).map(csr_to_dict)
    return build_fastapi_response(result)


@app.post("/certificate/parse")
def parse_certificate_endpoint(request: PemRequest) -> JSONResponse:
    """Decode a certificate, or report the rejected status for the marker."""
    result = (
        _required("pem", request.pem)
        .flat_map(parse_certificate)
        .map(_parsed_certificate_to_dict)
    )
    return build_fastapi_response(result)


@app.post("/certificate/match")
def match_endpoint(request: MatchRequest) -> JSONResponse:
    """
    Compare a certificate against a CSR.

    A mismatch is a successful comparison (200, matched=false); a body that
    does not parse is a 422 naming which side failed.
    """
    csr = _required("csr", request.csr).flat_map(parse_csr)
    certificate = (
        _required("certificate", request.certificate)
        .flat_map(parse_certificate)
        .ensure(
            lambda value: isinstance(value, ParsedCertificate),
            ErrorCode.CERTIFICATE_FORMAT_ERROR,
            "Status marker is not a certificate",
        )
    )
    result = Result.combine(csr, certificate, matches_csr).map(
        lambda outcome: {"matched": outcome.matched, "reason": outcome.reason.value}
    )
    return build_fastapi_response(result)


@app.post("/certificate/submission")
def submission_endpoint(request: SubmissionRequest) -> JSONResponse:
    """Evaluate the four upload conditions and the resulting verdict."""
    result = (
        Result.all_of([
            _bounded("csr", request.csr),
            _bounded("existing_certificate", request.existing_certificate),
            _bounded("certificate", request.certificate),
        ])
        .map(lambda texts: check_submission(*texts))
        .map(lambda check: {
            "non_empty": check.non_empty,
            "parses": check.parses,
            "differs_from_existing": check.differs_from_existing,
            "matches_request": check.matches_request,
            "verdict": check.verdict.name,
            "message": check.verdict.message,
            "can_submit": check.can_submit,
        })
    )
    return build_fastapi_response(result)


@app.post("/certificate/chain")
def chain_endpoint(request: PemRequest) -> JSONResponse:
    """Validate a leaf-first PEM bundle and return its certificates."""
    result = (
        _required("pem", request.pem)
        .flat_map(validate_certificate_chain)
        .map(lambda certs: {"certificates": [certificate_to_dict(c) for c in certs]})
    )
    return build_fastapi_response(result)


@app.post("/password/check")
def password_endpoint(request: PasswordRequest) -> dict[str, bool]:
    return {"valid": is_strong_password(request.password)}
