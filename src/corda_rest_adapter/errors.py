"""Structured Error Taxonomy for the Corda REST adapter.

This module provides the error classification used by the router, the
batch executors and the transport layer:
- Hierarchical error categories (Routing, Validation, Remote API, Transport, etc.)
- Severity levels (INFO, WARNING, ERROR, CRITICAL)
- Retryability indicators (informational only, nothing here retries)
- Structured JSON serialization for all errors

Two families matter to the batch loop:
- Fatal errors (UnsupportedResourceError, UnsupportedOperationError) always
  abort the whole batch before any record is processed.
- Record errors (RecordError subclasses) belong to one record and are either
  captured into that record's output or abort the batch, depending on the
  continue-on-failure flag.

Example:
    >>> try:
    ...     raise RemoteApiError("Not found", status_code=404, body={"message": "no state"})
    ... except StructuredError as e:
    ...     error_json = e.to_dict()
    ...     print(error_json["error_type"])
    ...     print(error_json["details"]["status_code"])
"""
from enum import Enum
from typing import Optional, Dict, Any
from datetime import datetime, timezone


class ErrorCategory(Enum):
    """Error categories for classification."""
    ROUTING = "routing"            # Unknown resource/operation
    VALIDATION = "validation"      # Missing or malformed parameters
    REMOTE_API = "remote_api"      # Gateway answered with an error status
    TRANSPORT = "transport"        # No structured response (network, I/O)
    CONFIGURATION = "configuration"  # Configuration/setup errors
    UNKNOWN = "unknown"            # Unclassified errors


class ErrorSeverity(Enum):
    """Error severity levels."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class StructuredError(Exception):
    """Base class for all structured errors.

    Provides consistent structure for error handling and serialization.
    All errors include category, severity, retryability, and context.

    Attributes:
        message: Human-readable error message
        category: ErrorCategory classification
        severity: ErrorSeverity level
        retryable: Whether the operation could succeed if repeated
        details: Additional context (dict)
        timestamp: When the error occurred

    Example:
        >>> error = StructuredError(
        ...     "Something went wrong",
        ...     category=ErrorCategory.TRANSPORT,
        ...     severity=ErrorSeverity.ERROR,
        ...     retryable=True,
        ...     details={"url": "http://localhost:10006"}
        ... )
        >>> error_dict = error.to_dict()
        >>> assert error_dict["error_type"] == "StructuredError"
        >>> assert error_dict["retryable"] is True
    """

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        retryable: bool = False,
        details: Optional[Dict[str, Any]] = None
    ):
        """Initialize structured error.

        Args:
            message: Human-readable error message
            category: Error category (default: UNKNOWN)
            severity: Error severity (default: ERROR)
            retryable: Whether operation can be retried (default: False)
            details: Additional context dictionary (default: None)
        """
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.retryable = retryable
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to structured dictionary.

        Returns:
            Dictionary with error details in predictable schema:
            {
                "error_type": "ErrorClassName",
                "message": "Human-readable message",
                "category": "routing|validation|remote_api|...",
                "severity": "info|warning|error|critical",
                "retryable": true|false,
                "details": {...},
                "timestamp": "2026-01-01T12:00:00.000000+00:00"
            }
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "retryable": self.retryable,
            "details": self.details,
            "timestamp": self.timestamp.isoformat()
        }


class UnsupportedResourceError(StructuredError):
    """Raised when the selected resource is not one of the five known ones.

    Always fatal for the batch: nothing is dispatched.
    """

    def __init__(self, resource: Any):
        super().__init__(
            message=f'The resource "{resource}" is not supported',
            category=ErrorCategory.ROUTING,
            severity=ErrorSeverity.ERROR,
            retryable=False,
            details={"resource": resource}
        )
        self.resource = resource


class UnsupportedOperationError(StructuredError):
    """Raised when the operation is not declared under the selected resource.

    Always fatal for the batch.
    """

    def __init__(self, operation: Any, resource: Optional[str] = None):
        super().__init__(
            message=f"Unknown operation: {operation}",
            category=ErrorCategory.ROUTING,
            severity=ErrorSeverity.ERROR,
            retryable=False,
            details={"operation": operation, "resource": resource}
        )
        self.operation = operation
        self.resource = resource


class RecordError(StructuredError):
    """Base for errors that belong to a single record.

    These are the errors the continue-on-failure flag applies to.
    """


class ParameterError(RecordError):
    """Error caused by a bad or missing parameter value.

    Example:
        >>> raise ParameterError(
        ...     "Parameter 'amount' must be a number",
        ...     details={"parameter": "amount"}
        ... )
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.ERROR,
            retryable=False,  # Needs an input change
            details=details
        )


class MissingParameterError(ParameterError):
    """Raised when a required parameter has no value for a record."""

    def __init__(self, parameter: str, index: int):
        super().__init__(
            message=f'Missing required parameter "{parameter}"',
            details={"parameter": parameter, "item_index": index}
        )
        self.parameter = parameter


class InvalidParameterJSONError(ParameterError):
    """Raised when a JSON-text parameter cannot be parsed.

    Carries the parameter name and the underlying parse error text.

    Example:
        >>> raise InvalidParameterJSONError("flowArgs", "Expecting value: line 1 column 1 (char 0)")
    """

    def __init__(self, parameter: str, parse_error: str):
        super().__init__(
            message=f'Invalid JSON in parameter "{parameter}": {parse_error}',
            details={"parameter": parameter, "parse_error": parse_error}
        )
        self.parameter = parameter
        self.parse_error = parse_error


class RemoteApiError(RecordError):
    """The REST gateway answered with an error status.

    Carries the HTTP status code and the response body when available.

    Example:
        >>> raise RemoteApiError(
        ...     "Flow not found",
        ...     status_code=404,
        ...     body={"message": "Flow not found"}
        ... )
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Any = None,
        details: Optional[Dict[str, Any]] = None
    ):
        merged = {"status_code": status_code, "body": body}
        merged.update(details or {})
        super().__init__(
            message=message,
            category=ErrorCategory.REMOTE_API,
            severity=ErrorSeverity.ERROR,
            retryable=status_code is not None and status_code >= 500,
            details=merged
        )
        self.status_code = status_code
        self.body = body


class TransportFailure(RecordError):
    """The call produced no structured response.

    Connection refused, DNS failure, timeout, or an upload file that could
    not be read.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.TRANSPORT,
            severity=ErrorSeverity.ERROR,
            retryable=True,  # Network issues are often transient
            details=details
        )


class ConfigurationError(StructuredError):
    """Error in adapter configuration.

    Raised when required configuration is missing, e.g. no credentials in
    the environment.

    Example:
        >>> raise ConfigurationError(
        ...     "Missing required environment variable: CORDA_USERNAME",
        ...     details={"variable": "CORDA_USERNAME"}
        ... )
    """

    def __init__(
        self,
        message: str,
        retryable: bool = False,  # Config errors need manual fix
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.CRITICAL,
            retryable=retryable,
            details=details
        )
