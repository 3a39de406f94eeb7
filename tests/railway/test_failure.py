"""Tests for FailureDescription and the ErrorCode taxonomy."""

import pytest

from railway import ErrorCode, FailureDescription


class TestErrorCode:
    def test_all_8_error_codes_exist(self):
        assert len(list(ErrorCode)) == 8

    def test_format_error_codes_are_distinct(self):
        format_codes = {
            ErrorCode.PEM_FORMAT_ERROR,
            ErrorCode.CSR_FORMAT_ERROR,
            ErrorCode.CERTIFICATE_FORMAT_ERROR,
            ErrorCode.CHAIN_ERROR,
        }
        assert len(format_codes) == 4

    def test_error_code_values_match_names(self):
        for code in ErrorCode:
            assert code.value == code.name


class TestFailureDescription:
    def test_creation_with_code_and_message(self):
        desc = FailureDescription(ErrorCode.PEM_FORMAT_ERROR, "No PEM block found")
        assert desc.code == ErrorCode.PEM_FORMAT_ERROR
        assert desc.message == "No PEM block found"
        assert desc.exception is None
        assert desc.timestamp is not None

    def test_creation_with_exception(self):
        ex = ValueError("Insufficient data")
        desc = FailureDescription(ErrorCode.CSR_FORMAT_ERROR, "decode failed", ex)
        assert desc.exception is ex

    def test_immutability(self):
        desc = FailureDescription(ErrorCode.VALIDATION_ERROR, "test")
        with pytest.raises(AttributeError):
            desc.message = "changed"  # type: ignore

    def test_timestamp_is_utc(self):
        desc = FailureDescription(ErrorCode.VALIDATION_ERROR, "test")
        assert desc.timestamp.tzinfo is not None

    def test_cause_without_exception(self):
        desc = FailureDescription(ErrorCode.VALIDATION_ERROR, "empty")
        assert desc.cause() is None

    def test_cause_names_exception_type(self):
        desc = FailureDescription(ErrorCode.CERTIFICATE_FORMAT_ERROR, "x", ValueError("truncated"))
        assert desc.cause() == "ValueError: truncated"
