"""Pydantic models for device location."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class LocationPermission(str, Enum):
    """Authorization state reported by the location provider."""

    NOT_DETERMINED = "not_determined"
    DENIED = "denied"
    RESTRICTED = "restricted"
    AUTHORIZED_WHEN_IN_USE = "authorized_when_in_use"
    AUTHORIZED_ALWAYS = "authorized_always"
    UNKNOWN = "unknown"

    @property
    def is_authorized(self) -> bool:
        return self in (LocationPermission.AUTHORIZED_WHEN_IN_USE, LocationPermission.AUTHORIZED_ALWAYS)

    @property
    def is_blocked(self) -> bool:
        return self in (LocationPermission.DENIED, LocationPermission.RESTRICTED)


class Coordinate(BaseModel):
    """A single resolved geographic fix."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
