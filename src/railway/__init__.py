"""
Railway-Oriented Programming (ROP) layer for csr-inspector.

Explicit, composable, functional error handling — no exceptions in the engine.

    from railway import Result, ErrorCode

    def require_text(text: str) -> Result[str]:
        if not text.strip():
            return Result.failure(ErrorCode.VALIDATION_ERROR, "Input is empty")
        return Result.success(text)

    result = (
        require_text(pem)
        .flat_map(lambda text: decode_pem(text, CSR_LABELS))
        .flat_map(lambda block: parse_csr_der(block.der))
    )
"""

from railway.result import Result, Success, Failure
from railway.failure import ErrorCode, FailureDescription
from railway.assertions import ResultAssertions

__all__ = [
    "Result",
    "Success",
    "Failure",
    "ErrorCode",
    "FailureDescription",
    "ResultAssertions",
]

__version__ = "1.1.0"
