from pathlib import Path

import httpx
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent  # weather-search/

DEFAULT_WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"


class Settings(BaseSettings):
    """Application settings with validation.

    The API key is required and will raise a validation error if missing.
    Secrets must be provided via environment variables or .env file.
    """

    # API server settings
    api_host: str = Field(default="127.0.0.1", min_length=1, description="API server host")
    api_port: int = Field(ge=1, le=65535, default=8000, description="API server port")
    log_level: str = Field(default="INFO", description="Root log level")

    # Weather API
    weather_api_key: str = Field(min_length=1, description="OpenWeatherMap API key")
    weather_base_url: str = Field(default=DEFAULT_WEATHER_URL, description="Current weather endpoint")
    fence_stale_responses: bool = Field(
        default=False,
        description="Discard fetch results older than the most recently dispatched fetch",
    )

    # Device location (optional - without it location searches are denied)
    weather_latitude: float | None = Field(default=None, ge=-90, le=90, description="Latitude of this device")
    weather_longitude: float | None = Field(default=None, ge=-180, le=180, description="Longitude of this device")

    # Connectivity monitor
    connectivity_probe_url: str = Field(
        default="https://api.openweathermap.org",
        pattern=r"^https?://",
        description="URL probed to decide whether the network is reachable",
    )
    connectivity_interval_seconds: float = Field(default=5.0, gt=0, description="Seconds between probes")

    # Persistence
    state_file: Path = Field(default=BASE_DIR / "data" / "preferences.json", description="Last-search store")

    model_config = SettingsConfigDict(
        env_file=Path(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    @field_validator("weather_api_key", mode="after")
    @classmethod
    def validate_weather_api_key(cls, v: str) -> str:
        """Ensure weather_api_key is not whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("weather_api_key must not be empty")
        return v

    @field_validator("weather_base_url", mode="after")
    @classmethod
    def validate_weather_base_url(cls, v: str) -> str:
        """Ensure the weather endpoint is an absolute http(s) URL."""
        try:
            url = httpx.URL(v)
        except httpx.InvalidURL as e:
            raise ValueError(f"weather_base_url is not a valid URL: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError("weather_base_url must be an absolute http:// or https:// URL")
        return v

    @field_validator("log_level", mode="after")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return v

    @model_validator(mode="after")
    def validate_coordinates_pair(self) -> "Settings":
        """Latitude and longitude must be configured together."""
        if (self.weather_latitude is None) != (self.weather_longitude is None):
            raise ValueError("weather_latitude and weather_longitude must be set together")
        return self


# Singleton settings instance (cached for performance)
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get singleton Settings instance for dependency injection.

    Avoids re-reading the .env file on every request.

    Returns:
        Cached Settings instance
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
