"""
Unit Tests for Error Types and Tool Error Responses
"""

import pytest

from burnwatch.errors import (
    ConfigurationError,
    ErrorCode,
    ReportDecodeError,
    ToolExitError,
    ToolNotFoundError,
    extract_error_code,
    make_error_response,
)


class TestExtractErrorCode:
    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (ToolNotFoundError(reason="no usable npx located"), ErrorCode.TOOL_NOT_FOUND),
            (ToolExitError(3), ErrorCode.TOOL_EXIT_NONZERO),
            (ReportDecodeError("Invalid report: missing totals"), ErrorCode.DECODE_FAILURE),
            (ConfigurationError("bad interval"), ErrorCode.INTERNAL_ERROR),
            (RuntimeError("boom"), ErrorCode.INTERNAL_ERROR),
        ],
    )
    def test_maps_fetch_failures(self, error, code):
        assert extract_error_code(error) == code


class TestFetchErrors:
    def test_tool_exit_message(self):
        error = ToolExitError(7, details={"subcommand": "daily"})
        assert error.message == "tool exit 7"
        assert error.details == {"subcommand": "daily", "exit_code": 7}
        assert error.status_code == 502

    def test_tool_not_found_reason(self):
        error = ToolNotFoundError(reason="exec format error")
        assert error.details["reason"] == "exec format error"
        assert error.details["package"] == "npx"


class TestMakeErrorResponse:
    def test_shape(self):
        response = make_error_response(ErrorCode.NEEDS_SETUP, "setup required", {"needs_setup": True})
        assert response == {
            "success": False,
            "error_code": "NEEDS_SETUP",
            "message": "setup required",
            "details": {"needs_setup": True},
        }

    def test_details_default_empty(self):
        assert make_error_response(ErrorCode.INTERNAL_ERROR, "x")["details"] == {}
