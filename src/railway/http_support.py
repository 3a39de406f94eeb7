"""
HTTP integration — ErrorCode→HTTP status mapping and response builders.

Framework-agnostic core plus a FastAPI adapter used by csr_inspector.asgi.

    status = HttpStatusMapper.map_error_code(ErrorCode.PEM_FORMAT_ERROR)  # → 422

    return build_fastapi_response(result.map(csr_to_dict))
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, TypeVar

from fastapi.responses import JSONResponse

from railway.failure import ErrorCode, FailureDescription
from railway.result import Result

T = TypeVar("T")


# ──────────────────────── Error Code → HTTP Status Mapping ────────────────────────


class HttpStatusMapper:
    """Maps ErrorCode enum values to HTTP status codes."""

    _CODE_TO_STATUS: dict[ErrorCode, int] = {
        # Client errors (4xx)
        ErrorCode.VALIDATION_ERROR: 400,
        ErrorCode.PEM_FORMAT_ERROR: 422,
        ErrorCode.CSR_FORMAT_ERROR: 422,
        ErrorCode.CERTIFICATE_FORMAT_ERROR: 422,
        ErrorCode.CHAIN_ERROR: 422,
        # Server errors (5xx)
        ErrorCode.CONFIGURATION_ERROR: 500,
        ErrorCode.TECHNICAL_ERROR: 500,
        ErrorCode.UNKNOWN_ERROR: 500,
    }

    @classmethod
    def map_error_code(cls, code: ErrorCode) -> int:
        """Map an ErrorCode to an HTTP status code."""
        return cls._CODE_TO_STATUS.get(code, 500)

    @classmethod
    def map_failure(cls, failure: FailureDescription) -> int:
        """Map a FailureDescription to an HTTP status code."""
        return cls.map_error_code(failure.code)


# ──────────────────────── Error Response DTO ────────────────────────


@dataclass(frozen=True, slots=True)
class ErrorResponse:
    """
    Standardized error response body.

        {
            "error_code": "PEM_FORMAT_ERROR",
            "message": "No PEM block found",
            "timestamp": "2026-02-17T10:30:00+00:00"
        }
    """

    error_code: str
    message: str
    timestamp: str

    @staticmethod
    def from_failure(failure: FailureDescription) -> ErrorResponse:
        return ErrorResponse(
            error_code=failure.code.value,
            message=failure.message,
            timestamp=failure.timestamp.isoformat(),
        )

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


# ──────────────────────── Response Builders ────────────────────────


def build_response(
    result: Result[T],
    success_status: int = 200,
) -> tuple[Any, int]:
    """
    Build a (body, status_code) tuple from a Result.

        body, status = build_response(result)
    """
    return result.either(
        on_success=lambda value: (value, success_status),
        on_failure=lambda error: (
            ErrorResponse.from_failure(error).to_dict(),
            HttpStatusMapper.map_failure(error),
        ),
    )


def build_fastapi_response(
    result: Result[T],
    success_status: int = 200,
) -> JSONResponse:
    """
    Build a FastAPI JSONResponse from a Result whose success value is JSON-ready.

        @app.post("/csr/parse")
        def parse(request: PemRequest) -> JSONResponse:
            return build_fastapi_response(parse_csr(request.pem).map(csr_to_dict))
    """
    body, status = build_response(result, success_status)
    return JSONResponse(content=body, status_code=status)
