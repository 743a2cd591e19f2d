"""Custom exceptions for Weather Search with error codes and HTTP status codes."""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error responses and log events."""

    # Generic errors
    WEATHER_SEARCH_ERROR = "WEATHER_SEARCH_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    # Fetch errors (raised by the weather client)
    FETCH_ERROR = "FETCH_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"
    NETWORK_FAILURE = "NETWORK_FAILURE"
    DECODING_FAILED = "DECODING_FAILED"

    # Orchestrator outcomes (recorded as state, never raised)
    EMPTY_RESULT = "EMPTY_RESULT"
    LOCATION_DENIED = "LOCATION_DENIED"
    INPUT_INVALID = "INPUT_INVALID"

    # Configuration errors
    CONFIG_ERROR = "CONFIG_ERROR"
    CONFIG_INVALID = "CONFIG_INVALID"


class WeatherSearchException(Exception):
    """Base exception for weather search errors with HTTP status code support.

    All custom exceptions inherit from this class so the presentation layer
    can map them to structured error responses.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.WEATHER_SEARCH_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        """Initialize weather search exception.

        Args:
            message: Human-readable error message
            code: Error code from ErrorCode enum
            status_code: HTTP status code (default 500)
            details: Additional error context/details
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class FetchError(WeatherSearchException):
    """A single weather fetch did not produce a record."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.FETCH_ERROR,
        status_code: int = 502,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, status_code, details)


class InvalidRequestError(FetchError):
    """The request URL could not be constructed; no network call was made."""

    def __init__(self, message: str = "Unable to build the weather request.", details: dict[str, Any] | None = None):
        super().__init__(
            message,
            code=ErrorCode.INVALID_REQUEST,
            status_code=400,
            details=details,
        )


class NetworkFailureError(FetchError):
    """Transport failure or non-2xx response.

    The message is the underlying error's description.
    """

    def __init__(self, underlying: Exception, details: dict[str, Any] | None = None):
        self.underlying = underlying
        super().__init__(
            str(underlying) or type(underlying).__name__,
            code=ErrorCode.NETWORK_FAILURE,
            status_code=502,
            details=details,
        )


class DecodingFailedError(FetchError):
    """Response body did not match the expected weather shape."""

    def __init__(self, message: str = "Could not parse the weather response.", details: dict[str, Any] | None = None):
        super().__init__(
            message,
            code=ErrorCode.DECODING_FAILED,
            status_code=502,
            details=details,
        )


class ConfigurationException(WeatherSearchException):
    """Configuration errors detected at construction time."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, status_code, details)


class ServiceUnavailableError(WeatherSearchException):
    """A service the request depends on has not been started."""

    def __init__(self, service: str):
        super().__init__(
            f"{service} is not available.",
            code=ErrorCode.SERVICE_UNAVAILABLE,
            status_code=503,
            details={"service": service},
        )
