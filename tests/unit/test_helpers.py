"""Unit tests for the presentation-layer predicates."""

from __future__ import annotations

import pytest

from csr_inspector.domain.models import CertificateStatus
from csr_inspector.helpers import MIN_PASSWORD_LENGTH, certificate_status, password_is_valid


class TestPasswordIsValid:
    def test_minimum_length_boundary(self) -> None:
        assert MIN_PASSWORD_LENGTH == 8
        assert not password_is_valid("Abcdef1")
        assert password_is_valid("Abcdefg1")

    @pytest.mark.parametrize("symbol", list("!@#$%^&*()-_=+[]{};:'\",.<>/?\\|`~"))
    def test_any_ascii_punctuation_counts_as_symbol(self, symbol: str) -> None:
        assert password_is_valid("Abcdefg" + symbol)

    def test_whitespace_is_not_a_symbol(self) -> None:
        assert not password_is_valid("Abcdefg ")

    def test_long_lowercase_is_still_weak(self) -> None:
        assert not password_is_valid("a" * 64)


class TestCertificateStatus:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("", CertificateStatus.OUTSTANDING),
            ("  \n", CertificateStatus.OUTSTANDING),
            ("rejected", CertificateStatus.REJECTED),
            (" rejected\n", CertificateStatus.REJECTED),
            ("-----BEGIN CERTIFICATE-----", CertificateStatus.FULFILLED),
            ("REJECTED", CertificateStatus.FULFILLED),
        ],
    )
    def test_status_from_stored_text(self, text: str, expected: CertificateStatus) -> None:
        assert certificate_status(text) is expected
