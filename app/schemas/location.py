from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class LocationCoordinates(BaseModel):
    lat: Optional[float] = None
    lng: Optional[float] = None


class LocationCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(min_length=1)
    county: str
    address: str
    coordinates: LocationCoordinates
    site_type: str = Field(pattern="^(outdoor|indoor|rooftop|ground)$")
    site_id: str
    status: str = Field(default="active", pattern="^(active|inactive|maintenance|pending)$")


class LocationUpdate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: Optional[str] = None
    county: Optional[str] = None
    address: Optional[str] = None
    coordinates: Optional[LocationCoordinates] = None
    site_type: Optional[str] = Field(default=None, pattern="^(outdoor|indoor|rooftop|ground)$")
    site_id: Optional[str] = None
    status: Optional[str] = Field(default=None, pattern="^(active|inactive|maintenance|pending)$")


class LocationAggregateStats(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total: int = 0
    active: int = 0
    inactive: int = 0
    maintenance: int = 0
    counties: int = 0
    outdoor_sites: int = 0
    indoor_sites: int = 0

    total_trend: str = "N/A"
    active_trend: str = "N/A"
    outdoor_trend: str = "N/A"
    maintenance_trend: str = "N/A"
