"""Structured exception classes for the Ad Exchange Seller client.

Every failure a call can produce is one of the classes below. None of
them is retried by the client; they are raised to the caller as-is.
"""

import json
from typing import Any, Dict, List, Mapping, Optional

from .models.base_models import ErrorItem


class AdExchangeSellerError(Exception):
    """Base exception for all Ad Exchange Seller client errors.

    :param message: Human-readable error message
    :param code: Optional error code for programmatic handling
    :param details: Optional dictionary containing additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize the exception with message, code, and details."""
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format.

        :return: Dictionary containing error code, message, and details
        """
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }

    def to_json(self) -> str:
        """Convert exception to JSON string.

        :return: JSON-encoded string representation of the exception
        """
        return json.dumps(self.to_dict())


class ApiError(AdExchangeSellerError):
    """Raised when the API answers with a non-2xx status.

    The structured error payload, when the body carries one, is decoded
    into :attr:`errors` and :attr:`message`. The raw body is always kept
    in :attr:`response_body`.

    :param message: Description of the API error
    :param status_code: HTTP status code from the API response
    :param headers: Response headers
    :param response_body: Raw response body text
    :param errors: Per-field error details from the error payload
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        headers: Optional[Mapping[str, str]] = None,
        response_body: Optional[str] = None,
        errors: Optional[List[ErrorItem]] = None,
    ):
        """Initialize API error with message and response details."""
        details: Dict[str, Any] = {}
        if status_code:
            details["status_code"] = status_code
        if response_body:
            details["response_body"] = response_body
        if errors:
            details["errors"] = [e.model_dump(exclude_none=True) for e in errors]
        super().__init__(message=message, code="API_ERROR", details=details)
        self.status_code = status_code
        self.headers = dict(headers or {})
        self.response_body = response_body
        self.errors = list(errors or [])


class NotModifiedError(ApiError):
    """Raised when a conditional fetch finds the cache tag unchanged.

    The server answered 304 to an ``If-None-Match`` request. Callers
    usually treat this as "no update" rather than a failure. The body
    is never decoded.

    :param headers: Response headers of the 304 response
    """

    def __init__(self, headers: Optional[Mapping[str, str]] = None):
        """Initialize not-modified error with the response headers."""
        super().__init__(
            message="Resource not modified", status_code=304, headers=headers
        )
        self.code = "NOT_MODIFIED"

    @property
    def etag(self) -> Optional[str]:
        """Return the cache-validation tag echoed by the server, if any."""
        for key, value in self.headers.items():
            if key.lower() == "etag":
                return value
        return None


class TransportError(AdExchangeSellerError):
    """Raised when a request fails before any status was received.

    Covers connection failures, protocol errors and timeouts.

    :param message: Description of the transport failure
    :param operation: Optional name of the operation that failed
    :param original_error: The underlying transport exception
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """Initialize transport error with message and optional context."""
        details: Dict[str, Any] = {}
        if operation:
            details["operation"] = operation
        if original_error:
            details["error_type"] = type(original_error).__name__
        super().__init__(message=message, code="TRANSPORT_ERROR", details=details)
        self.operation = operation
        self.original_error = original_error


class DecodeError(AdExchangeSellerError):
    """Raised when a 2xx body does not parse as the expected shape.

    :param message: Description of the decode failure
    :param status_code: HTTP status code of the response
    :param headers: Response headers
    :param response_body: Excerpt of the body that failed to decode
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        headers: Optional[Mapping[str, str]] = None,
        response_body: Optional[str] = None,
    ):
        """Initialize decode error with message and response details."""
        details: Dict[str, Any] = {}
        if status_code:
            details["status_code"] = status_code
        if response_body:
            details["response_body"] = response_body
        super().__init__(message=message, code="DECODE_ERROR", details=details)
        self.status_code = status_code
        self.headers = dict(headers or {})
        self.response_body = response_body


class ConfigurationError(AdExchangeSellerError):
    """Raised for configuration-related errors.

    :param message: Description of the configuration error
    :param setting: Optional name of the problematic setting
    """

    def __init__(self, message: str, setting: Optional[str] = None):
        """Initialize configuration error with message and optional setting."""
        details = {}
        if setting:
            details["setting"] = setting
        super().__init__(message=message, code="CONFIGURATION_ERROR", details=details)


class ValidationError(AdExchangeSellerError):
    """Raised when call arguments fail validation before sending.

    :param message: Description of the validation error
    :param field: Optional name of the field that failed validation
    :param value: Optional value that caused the validation failure
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
    ):
        """Initialize validation error with message and optional field/value."""
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        super().__init__(message=message, code="VALIDATION_ERROR", details=details)
        self.field = field
        self.value = value


def is_not_modified(error: BaseException) -> bool:
    """Return whether an error is a conditional-fetch short-circuit.

    :param error: Exception raised by a call
    :return: True if the call failed because the resource was unchanged
    """
    return isinstance(error, NotModifiedError)
