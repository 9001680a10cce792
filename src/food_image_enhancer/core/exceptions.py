"""Custom exception classes for the enhancer."""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Standardized failure kinds surfaced to callers."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    ENCODING_ERROR = "ENCODING_ERROR"
    HTTP_ERROR = "HTTP_ERROR"
    EMPTY_RESULT = "EMPTY_RESULT"
    MISSING_FIELD = "MISSING_FIELD"
    UNKNOWN_FAILURE = "UNKNOWN_FAILURE"


# HTTP status returned by our own API for each failure kind
STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION_ERROR: 422,
    ErrorKind.ENCODING_ERROR: 400,
    ErrorKind.HTTP_ERROR: 502,
    ErrorKind.EMPTY_RESULT: 502,
    ErrorKind.MISSING_FIELD: 502,
    ErrorKind.UNKNOWN_FAILURE: 500,
}


class EnhancerError(Exception):
    """Base exception for enhancer errors."""

    kind: ErrorKind = ErrorKind.UNKNOWN_FAILURE

    def __init__(self, message: str, details: Any = None):
        self.message = message
        self.status_code = STATUS_CODES[self.kind]
        self.details = details
        super().__init__(message)


class ValidationError(EnhancerError):
    """Missing API key, missing required image, or oversized upload."""

    kind = ErrorKind.VALIDATION_ERROR


class EncodingError(EnhancerError):
    """Image could not be read or encoded/decoded."""

    kind = ErrorKind.ENCODING_ERROR


class HttpError(EnhancerError):
    """Non-2xx response from a hosted model."""

    kind = ErrorKind.HTTP_ERROR

    def __init__(self, message: str, upstream_status: int, detail: str = ""):
        super().__init__(
            message=message,
            details={"upstream_status": upstream_status, "detail": detail},
        )
        self.upstream_status = upstream_status
        self.detail = detail


class EmptyResultError(EnhancerError):
    """Segmentation endpoint returned no candidates."""

    kind = ErrorKind.EMPTY_RESULT


class MissingFieldError(EnhancerError):
    """Segmentation response lacks a required field."""

    kind = ErrorKind.MISSING_FIELD

    def __init__(self, field: str, message: str | None = None):
        super().__init__(
            message=message or f"Response is missing the '{field}' field",
            details={"field": field},
        )
        self.field = field


class UnknownFailure(EnhancerError):
    """Catch-all for anything unexpected."""

    kind = ErrorKind.UNKNOWN_FAILURE
