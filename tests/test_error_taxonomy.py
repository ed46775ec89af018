"""Tests for Structured Error Taxonomy.

This test suite validates that:
1. All errors inherit from StructuredError
2. All errors have predictable to_dict() schema
3. Error categories and severities are correct
4. Record errors are distinguishable from fatal routing errors
5. Details are preserved in serialization
"""
from datetime import datetime

from corda_rest_adapter.errors import (
    ConfigurationError,
    ErrorCategory,
    ErrorSeverity,
    InvalidParameterJSONError,
    MissingParameterError,
    ParameterError,
    RecordError,
    RemoteApiError,
    StructuredError,
    TransportFailure,
    UnsupportedOperationError,
    UnsupportedResourceError,
)


class TestStructuredErrorBase:
    """Test base StructuredError functionality."""

    def test_structured_error_creation(self):
        """Test creating a basic structured error."""
        error = StructuredError(
            "Test error message",
            category=ErrorCategory.TRANSPORT,
            severity=ErrorSeverity.ERROR,
            retryable=True,
            details={"key": "value"}
        )

        assert str(error) == "Test error message"
        assert error.message == "Test error message"
        assert error.category == ErrorCategory.TRANSPORT
        assert error.retryable is True
        assert error.details == {"key": "value"}
        assert isinstance(error.timestamp, datetime)

    def test_structured_error_to_dict(self):
        """Test that to_dict() returns predictable schema."""
        error = StructuredError("Test message", details={"context": "test"})

        error_dict = error.to_dict()

        assert set(error_dict) == {
            "error_type", "message", "category", "severity",
            "retryable", "details", "timestamp",
        }
        assert error_dict["error_type"] == "StructuredError"
        assert error_dict["category"] == "unknown"
        assert error_dict["severity"] == "error"
        assert error_dict["retryable"] is False
        assert "T" in error_dict["timestamp"]


class TestRoutingErrors:
    """Test fatal routing errors."""

    def test_unsupported_resource(self):
        error = UnsupportedResourceError("ledgerMagic")

        assert error.message == 'The resource "ledgerMagic" is not supported'
        assert error.category == ErrorCategory.ROUTING
        assert error.details == {"resource": "ledgerMagic"}
        assert not isinstance(error, RecordError)

    def test_unsupported_operation(self):
        error = UnsupportedOperationError("mintNFT", "tokenManagement")

        assert error.message == "Unknown operation: mintNFT"
        assert error.to_dict()["details"] == {"operation": "mintNFT", "resource": "tokenManagement"}
        assert not isinstance(error, RecordError)


class TestParameterErrors:
    """Test parameter errors."""

    def test_invalid_json_carries_name_and_parse_error(self):
        error = InvalidParameterJSONError("flowArgs", "Expecting value: line 1 column 1 (char 0)")

        assert isinstance(error, ParameterError)
        assert isinstance(error, RecordError)
        assert error.category == ErrorCategory.VALIDATION
        assert error.parameter == "flowArgs"
        assert "flowArgs" in error.message
        assert "Expecting value" in error.message
        assert error.to_dict()["details"]["parse_error"].startswith("Expecting value")

    def test_missing_parameter(self):
        error = MissingParameterError("runId", 3)

        assert error.details == {"parameter": "runId", "item_index": 3}
        assert error.retryable is False


class TestTransportErrors:
    """Test remote API and transport errors."""

    def test_remote_api_error_carries_status_and_body(self):
        error = RemoteApiError("Gateway returned HTTP 404: no state",
                               status_code=404, body={"message": "no state"})

        error_dict = error.to_dict()
        assert error_dict["category"] == "remote_api"
        assert error_dict["details"]["status_code"] == 404
        assert error_dict["details"]["body"] == {"message": "no state"}
        assert error.retryable is False

    def test_server_errors_are_retryable(self):
        assert RemoteApiError("x", status_code=503).retryable is True

    def test_transport_failure(self):
        error = TransportFailure("connection refused", details={"url": "http://x"})

        assert isinstance(error, RecordError)
        assert error.category == ErrorCategory.TRANSPORT
        assert error.retryable is True
        assert error.to_dict()["error_type"] == "TransportFailure"


class TestConfigurationError:
    def test_configuration_error_is_critical(self):
        error = ConfigurationError("Missing required environment variable: CORDA_USERNAME")

        assert error.severity == ErrorSeverity.CRITICAL
        assert error.category == ErrorCategory.CONFIGURATION
        assert error.retryable is False
