"""Weather client for the OpenWeatherMap current-weather API."""

import httpx
from pydantic import ValidationError

from weather_search.config import DEFAULT_WEATHER_URL
from weather_search.exceptions import (
    ConfigurationException,
    DecodingFailedError,
    ErrorCode,
    InvalidRequestError,
    NetworkFailureError,
)
from weather_search.logging_config import get_logger, log_with_context, redact_url
from weather_search.models.weather import CityQuery, CoordinatesQuery, CurrentWeather, WeatherQuery, WeatherRecord
from weather_search.services.url_builder import URLBuilder, build_url

logger = get_logger(__name__)


class WeatherClient:
    """Fetches current weather for a city name or a pair of coordinates.

    Each call issues at most one GET through the injected httpx client and
    either returns a WeatherRecord or raises a FetchError subclass. The client
    holds no search state and never retries.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        base_url: str = DEFAULT_WEATHER_URL,
        url_builder: URLBuilder = build_url,
    ):
        """Initialize the weather client.

        Args:
            client: Shared HTTP client used as the transport
            api_key: OpenWeatherMap API key (sent as appid)
            base_url: Current weather endpoint
            url_builder: Capability that turns base_url + params into a URL

        Raises:
            ConfigurationException: If base_url cannot be parsed as an absolute http(s) URL
        """
        self._validate_base_url(base_url)
        self._client = client
        self._api_key = api_key
        self._base_url = base_url
        self._url_builder = url_builder

    @staticmethod
    def _validate_base_url(base_url: str) -> None:
        try:
            url = httpx.URL(base_url)
        except httpx.InvalidURL as e:
            raise ConfigurationException(
                f"Weather base URL cannot be parsed: {e}",
                code=ErrorCode.CONFIG_INVALID,
                details={"base_url": base_url},
            ) from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ConfigurationException(
                "Weather base URL must be an absolute http:// or https:// URL",
                code=ErrorCode.CONFIG_INVALID,
                details={"base_url": base_url},
            )

    async def fetch_by_city(self, name: str) -> WeatherRecord:
        """Fetch current weather for a city name.

        Args:
            name: City name, sent verbatim as the q parameter

        Returns:
            Parsed WeatherRecord (conditions may be empty)

        Raises:
            InvalidRequestError: If no URL could be built
            NetworkFailureError: On transport failure or non-2xx status
            DecodingFailedError: If the body does not match the weather shape
        """
        return await self.fetch(CityQuery(city_name=name))

    async def fetch_by_coordinates(self, lat: float, lon: float) -> WeatherRecord:
        """Fetch current weather for a coordinate pair.

        Raises the same errors as fetch_by_city.
        """
        return await self.fetch(CoordinatesQuery(latitude=lat, longitude=lon))

    async def fetch(self, query: WeatherQuery) -> WeatherRecord:
        params = query.to_params()
        params["appid"] = self._api_key
        params["units"] = "metric"

        url = self._url_builder(self._base_url, params)
        if url is None:
            log_with_context(
                logger,
                "warning",
                "Could not build weather request URL",
                query_kind=query.kind,
                event_type="weather_invalid_request",
            )
            raise InvalidRequestError(details={"query_kind": query.kind})

        log_with_context(
            logger,
            "debug",
            "Fetching weather",
            url=redact_url(url),
            event_type="weather_fetch",
        )

        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            log_with_context(
                logger,
                "warning",
                "Weather API returned error status",
                status_code=e.response.status_code,
                event_type="weather_http_error",
            )
            raise NetworkFailureError(e, details={"status_code": e.response.status_code}) from e
        except httpx.HTTPError as e:
            log_with_context(
                logger,
                "warning",
                "Weather API request failed",
                error=str(e),
                error_type=type(e).__name__,
                event_type="weather_network_error",
            )
            raise NetworkFailureError(e, details={"error_type": type(e).__name__}) from e

        try:
            current_weather = CurrentWeather.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            log_with_context(
                logger,
                "warning",
                "Weather response did not match the expected shape",
                error=str(e),
                event_type="weather_decoding_error",
            )
            raise DecodingFailedError(details={"error": str(e)}) from e

        return WeatherRecord.from_openweather(current_weather)
