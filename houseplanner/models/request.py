from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Coordinate(BaseModel):
    """A (lat, lng) pair; longitude is wrapped into [-180, 180]."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90.0, le=90.0)
    lng: float

    @field_validator("lng")
    @classmethod
    def _wrap_longitude(cls, value: float) -> float:
        if -180.0 <= value <= 180.0:
            return value
        wrapped = (value + 180.0) % 360.0 - 180.0
        return 180.0 if wrapped == -180.0 and value > 0 else wrapped

    def as_tuple(self):
        return (self.lat, self.lng)


class SearchRequest(BaseModel):
    center: Coordinate
    categories: List[str] = []
    limit: Optional[int] = Field(default=None, ge=1)
