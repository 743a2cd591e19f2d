"""Main FastAPI application entry point."""

import os
from pathlib import Path

from dotenv import load_dotenv

from weather_search.core.app_factory import create_app
from weather_search.logging_config import setup_logging

# Load environment variables from .env file
load_dotenv(Path(__file__).parent.parent / ".env")

# Configure structured logging (JSON to file + console)
log_level = os.getenv("LOG_LEVEL", "INFO")
setup_logging(log_level)

# Create application
app = create_app()


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Weather Search API", "docs": "/docs"}


def run() -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    from weather_search.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "weather_search.main:app",
        host=settings.api_host,
        port=settings.api_port,
    )


if __name__ == "__main__":
    run()
