"""
PEM decoder adapter — strips the text armor around DER structures.

    -----BEGIN CERTIFICATE REQUEST-----
    MIICvDCCAaQCAQAwdzELMAkGA1UEBhMCVVMx...
    -----END CERTIFICATE REQUEST-----

Text before the first BEGIN line and after its END line is ignored, so
copy-pasted noise around a block is tolerated. The body must be strict
base64: any character outside the alphabet, or bad padding, is a failure.

decode_pem() uses only the first block. decode_pem_blocks() walks them all
and is used where a bundle (certificate chain) is expected.
"""

from __future__ import annotations

import base64
import re
import textwrap
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from railway import ErrorCode
from railway.result import Result

CSR_LABELS = ("CERTIFICATE REQUEST", "NEW CERTIFICATE REQUEST")
CERTIFICATE_LABELS = ("CERTIFICATE",)

_BEGIN = re.compile(r"^-----BEGIN ([A-Z0-9 ]+)-----$")
_END = re.compile(r"^-----END ([A-Z0-9 ]+)-----$")


@dataclass(frozen=True, slots=True)
class PemBlock:
    """One decoded PEM block: its label and the DER bytes it wraps."""

    label: str
    der: bytes = field(repr=False)


def _decode_body(label: str, body: list[str]) -> Result[PemBlock]:
    encoded = "".join("".join(body).split())
    if not encoded:
        return Result.failure(ErrorCode.PEM_FORMAT_ERROR, f"PEM block {label!r} is empty")
    return Result.from_computation(
        lambda: PemBlock(label=label, der=base64.b64decode(encoded, validate=True)),
        ErrorCode.PEM_FORMAT_ERROR,
        f"PEM block {label!r} is not valid base64",
    )


def _iter_blocks(text: str) -> Iterator[Result[PemBlock]]:
    """
    Yield one Result per BEGIN/END block, in order.

    A structural error (missing or mismatched END) is yielded as a failure
    and stops the scan, since nothing after it can be trusted.
    """
    label: str | None = None
    body: list[str] = []

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if label is None:
            begin = _BEGIN.match(line)
            if begin:
                label, body = begin.group(1), []
            continue

        end = _END.match(line)
        if end:
            if end.group(1) != label:
                yield Result.failure(
                    ErrorCode.PEM_FORMAT_ERROR,
                    f"PEM delimiters do not match: BEGIN {label!r}, END {end.group(1)!r}",
                )
                return
            yield _decode_body(label, body)
            label = None
        elif line.startswith("-----"):
            yield Result.failure(
                ErrorCode.PEM_FORMAT_ERROR,
                f"PEM block {label!r} has no END delimiter",
            )
            return
        elif ":" in line and not body:
            # RFC 7468 explanatory header (e.g. "Proc-Type: 4,ENCRYPTED")
            continue
        else:
            body.append(line)

    if label is not None:
        yield Result.failure(
            ErrorCode.PEM_FORMAT_ERROR,
            f"PEM block {label!r} has no END delimiter",
        )


def _check_label(block: PemBlock, labels: Sequence[str]) -> Result[PemBlock]:
    if block.label in labels:
        return Result.success(block)
    return Result.failure(
        ErrorCode.PEM_FORMAT_ERROR,
        f"PEM block is a {block.label!r}, expected {' or '.join(repr(lbl) for lbl in labels)}",
    )


def decode_pem(text: str, labels: Sequence[str]) -> Result[PemBlock]:
    """
    Decode the first PEM block in `text`, which must carry one of `labels`.

    Returns Result.failure(PEM_FORMAT_ERROR, ...) when no block is found,
    the delimiters are mismatched, the label is not accepted, or the body
    is not strict base64.
    """
    first = next(_iter_blocks(text), None)
    if first is None:
        return Result.failure(
            ErrorCode.PEM_FORMAT_ERROR,
            "PEM string not found or malformed: no BEGIN/END block",
        )
    return first.flat_map(lambda block: _check_label(block, labels))


def decode_pem_blocks(text: str, labels: Sequence[str]) -> Result[list[PemBlock]]:
    """Decode every PEM block in `text`; all of them must carry one of `labels`."""
    return (
        Result.all_of(_iter_blocks(text))
        .ensure(
            lambda blocks: len(blocks) > 0,
            ErrorCode.PEM_FORMAT_ERROR,
            "PEM string not found or malformed: no BEGIN/END block",
        )
        .flat_map(lambda blocks: Result.all_of(_check_label(b, labels) for b in blocks))
    )


def encode_pem(label: str, der: bytes) -> str:
    """Armor DER bytes as PEM with 64-column base64 lines."""
    body = "\n".join(textwrap.wrap(base64.b64encode(der).decode("ascii"), 64))
    return f"-----BEGIN {label}-----\n{body}\n-----END {label}-----\n"


def sanitize_certificate_bundle(text: str) -> Result[str]:
    """
    Re-encode every certificate block of a bundle in canonical form.

    The result has no leading or trailing whitespace and a single newline
    between consecutive certificates.
    """
    return decode_pem_blocks(text, CERTIFICATE_LABELS).map(
        lambda blocks: "".join(encode_pem(b.label, b.der) for b in blocks).strip()
    )
