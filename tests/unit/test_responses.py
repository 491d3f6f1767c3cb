"""
Tests for the response envelope helpers.
"""

from pester_shim.core.responses import (
    RESPONSE_VERSION,
    ErrorCode,
    ErrorType,
    ToolResponse,
    error_response,
    success_response,
)


class TestToolResponse:
    def test_default_meta_carries_version(self):
        response = ToolResponse(success=True)
        assert response.data == {}
        assert response.error is None
        assert response.meta == {"version": RESPONSE_VERSION}


class TestSuccessResponse:
    """Tests for the success_response helper function."""

    def test_creates_success_true(self):
        response = success_response({"mode": "by_line"})
        assert response.success is True
        assert response.data == {"mode": "by_line"}
        assert response.error is None

    def test_omits_empty_meta_fields(self):
        response = success_response({}, warnings=[], telemetry={})
        assert response.meta == {"version": RESPONSE_VERSION}

    def test_includes_warnings_telemetry_and_request_id(self):
        response = success_response(
            {},
            warnings=["Failed to load Pester"],
            telemetry={"duration_ms": 1.5},
            request_id="cli_abc123",
            meta={"host": "pwsh"},
        )
        assert response.meta["warnings"] == ["Failed to load Pester"]
        assert response.meta["telemetry"] == {"duration_ms": 1.5}
        assert response.meta["request_id"] == "cli_abc123"
        assert response.meta["host"] == "pwsh"


class TestErrorResponse:
    """Tests for the error_response helper function."""

    def test_defaults_to_internal_error(self):
        response = error_response("boom")
        assert response.success is False
        assert response.error == "boom"
        assert response.data == {"error_code": "INTERNAL_ERROR", "error_type": "internal"}

    def test_enum_codes_are_serialized_by_value(self):
        response = error_response(
            "Pester 5.2.0 must be run by line number",
            error_code=ErrorCode.CONTRACT_VIOLATION,
            error_type=ErrorType.INTERNAL,
            remediation="pass --line-number",
            details={"mode": "by_name"},
        )
        assert response.data["error_code"] == "CONTRACT_VIOLATION"
        assert response.data["remediation"] == "pass --line-number"
        assert response.data["details"] == {"mode": "by_name"}

    def test_string_codes_pass_through(self):
        response = error_response("x", error_code="INVOCATION_FAILED", error_type="unavailable")
        assert response.data["error_code"] == "INVOCATION_FAILED"
        assert response.data["error_type"] == "unavailable"
