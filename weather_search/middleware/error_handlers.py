"""Exception handlers mapping WeatherSearchException to JSON error bodies.

Search failures are reported inside SearchState and never reach these
handlers; what does is missing services (503), rate limiting (429) and bugs.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from weather_search.exceptions import ErrorCode, WeatherSearchException
from weather_search.logging_config import get_logger, log_with_context
from weather_search.models.base_models import ErrorResponse

logger = get_logger(__name__)


def _error_body(code: str, message: str, details: dict | None = None) -> dict:
    return {"error": ErrorResponse(code=code, message=message, details=details or {}).model_dump()}


async def weather_search_exception_handler(request: Request, exc: WeatherSearchException) -> JSONResponse:
    log_with_context(
        logger,
        "warning" if exc.status_code < 500 else "error",
        exc.message,
        error_code=exc.code.value,
        status_code=exc.status_code,
        method=request.method,
        path=request.url.path,
        event_type="request_error",
    )
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.code.value, exc.message, exc.details))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the traceback and answer with a generic 500; internals stay out of the body."""
    logger.error(
        "Unhandled exception on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
        extra={"error_type": type(exc).__name__, "event_type": "unhandled_error"},
    )
    return JSONResponse(status_code=500, content=_error_body(ErrorCode.INTERNAL_ERROR.value, "Internal server error"))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(WeatherSearchException, weather_search_exception_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
