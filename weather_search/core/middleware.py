"""Middleware: CORS for local front ends, slowapi rate limiting and access logging."""

import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter
from slowapi.util import get_remote_address

from weather_search.logging_config import get_logger, log_with_context

logger = get_logger(__name__)

# Shared by every router that applies @limiter.limit
limiter = Limiter(key_func=get_remote_address)

# Front ends served from this machine, any port
ALLOWED_ORIGIN_REGEX = r"http://(localhost|127\.0\.0\.1)(:\d+)?"


def setup_middleware(app: FastAPI) -> Limiter:
    """Install CORS and request logging, and attach the rate limiter to app.state."""
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=ALLOWED_ORIGIN_REGEX,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    log_with_context(
        logger,
        "debug",
        "CORS configured",
        pattern=ALLOWED_ORIGIN_REGEX,
        event_type="security_config",
    )

    app.state.limiter = limiter

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log method, path, status and duration of every request."""
        started = time.perf_counter()
        response = await call_next(request)
        log_with_context(
            logger,
            "info",
            f"{request.method} {request.url.path} {response.status_code}",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
            event_type="api_request",
        )
        return response

    return limiter
