"""Tests for HTTP integration — status mapping and response builders."""

import json

import pytest

from railway import ErrorCode, FailureDescription, Result
from railway.http_support import ErrorResponse, HttpStatusMapper, build_fastapi_response, build_response


class TestHttpStatusMapper:
    @pytest.mark.parametrize(
        "code,expected_status",
        [
            (ErrorCode.VALIDATION_ERROR, 400),
            (ErrorCode.PEM_FORMAT_ERROR, 422),
            (ErrorCode.CSR_FORMAT_ERROR, 422),
            (ErrorCode.CERTIFICATE_FORMAT_ERROR, 422),
            (ErrorCode.CHAIN_ERROR, 422),
            (ErrorCode.CONFIGURATION_ERROR, 500),
            (ErrorCode.TECHNICAL_ERROR, 500),
            (ErrorCode.UNKNOWN_ERROR, 500),
        ],
    )
    def test_error_code_to_http_status(self, code, expected_status):
        assert HttpStatusMapper.map_error_code(code) == expected_status

    def test_every_code_is_mapped(self):
        for code in ErrorCode:
            assert code in HttpStatusMapper._CODE_TO_STATUS

    def test_map_failure_description(self):
        failure = FailureDescription(ErrorCode.PEM_FORMAT_ERROR, "bad armor")
        assert HttpStatusMapper.map_failure(failure) == 422


class TestErrorResponse:
    def test_from_failure(self):
        failure = FailureDescription(ErrorCode.VALIDATION_ERROR, "bad input")
        response = ErrorResponse.from_failure(failure)
        assert response.error_code == "VALIDATION_ERROR"
        assert response.message == "bad input"
        assert response.timestamp == failure.timestamp.isoformat()

    def test_to_dict(self):
        failure = FailureDescription(ErrorCode.CHAIN_ERROR, "not a chain")
        d = ErrorResponse.from_failure(failure).to_dict()
        assert d["error_code"] == "CHAIN_ERROR"
        assert d["message"] == "not a chain"
        assert "timestamp" in d


class TestBuildResponse:
    def test_success_response(self):
        body, status = build_response(Result.success({"common_name": "example.com"}))
        assert status == 200
        assert body == {"common_name": "example.com"}

    def test_success_with_custom_status(self):
        _, status = build_response(Result.success({"id": 1}), success_status=201)
        assert status == 201

    def test_failure_response(self):
        result = Result.failure(ErrorCode.CSR_FORMAT_ERROR, "Certificate request could not be decoded")
        body, status = build_response(result)
        assert status == 422
        assert body["error_code"] == "CSR_FORMAT_ERROR"
        assert body["message"] == "Certificate request could not be decoded"

    def test_fastapi_response_carries_status_and_body(self):
        response = build_fastapi_response(Result.failure(ErrorCode.VALIDATION_ERROR, "empty"))
        assert response.status_code == 400
        assert json.loads(response.body)["error_code"] == "VALIDATION_ERROR"
