"""Pydantic models for weather data."""

from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

ICON_URL_TEMPLATE = "https://openweathermap.org/img/wn/{icon}@2x.png"


class WeatherInfo(BaseModel):
    """Weather condition info from OpenWeatherMap."""

    id: int
    main: str
    description: str
    icon: str


class MainInfo(BaseModel):
    """Main weather metrics from OpenWeatherMap."""

    temp: float
    humidity: int
    temp_min: float
    temp_max: float


class CurrentWeather(BaseModel):
    """Raw OpenWeatherMap API response model.

    Only the fields this client reads are declared; everything else is ignored.
    """

    model_config = ConfigDict(extra="ignore")

    name: str
    main: MainInfo
    weather: list[WeatherInfo]


class ConditionDetail(BaseModel):
    """A single weather condition (e.g. "Clear" / "clear sky")."""

    model_config = ConfigDict(frozen=True)

    id: int
    category: str
    description: str
    icon_code: str


class WeatherRecord(BaseModel):
    """Result of a successful fetch, as presented to the UI."""

    model_config = ConfigDict(frozen=True)

    location_name: str
    temperature_c: float
    temperature_min_c: float
    temperature_max_c: float
    humidity_pct: int = Field(ge=0, le=100)
    conditions: list[ConditionDetail] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def icon_url(self) -> str | None:
        """Get OpenWeatherMap icon URL from the first condition's icon code."""
        if not self.conditions or not self.conditions[0].icon_code:
            return None
        return ICON_URL_TEMPLATE.format(icon=self.conditions[0].icon_code)

    @property
    def condition_category(self) -> str:
        return self.conditions[0].category if self.conditions else ""

    @property
    def condition_description(self) -> str:
        return self.conditions[0].description if self.conditions else ""

    @classmethod
    def from_openweather(cls, data: CurrentWeather) -> "WeatherRecord":
        """Create WeatherRecord from OpenWeatherMap data.

        Args:
            data: Raw CurrentWeather data from OpenWeatherMap API

        Returns:
            WeatherRecord with the conditions in wire order
        """
        return cls(
            location_name=data.name,
            temperature_c=data.main.temp,
            temperature_min_c=data.main.temp_min,
            temperature_max_c=data.main.temp_max,
            humidity_pct=data.main.humidity,
            conditions=[
                ConditionDetail(id=w.id, category=w.main, description=w.description, icon_code=w.icon)
                for w in data.weather
            ],
        )


class CityQuery(BaseModel):
    """Query by literal city name."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["city"] = "city"
    city_name: str

    def to_params(self) -> dict[str, str]:
        return {"q": self.city_name}


def _decimal(value: float) -> str:
    """Shortest round-tripping digits of value, never in exponent notation."""
    return format(Decimal(repr(value)), "f")


class CoordinatesQuery(BaseModel):
    """Query by geographic coordinates."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["coordinates"] = "coordinates"
    latitude: float
    longitude: float

    def to_params(self) -> dict[str, str]:
        return {"lat": _decimal(self.latitude), "lon": _decimal(self.longitude)}


WeatherQuery = Annotated[CityQuery | CoordinatesQuery, Field(discriminator="kind")]
