from .request import Coordinate, SearchRequest
from .response import (
    Amenity,
    CategoryInfo,
    LocationSuggestion,
    Route,
    RouteResult,
    SearchResponse,
)

__all__ = [
    "Amenity",
    "CategoryInfo",
    "Coordinate",
    "LocationSuggestion",
    "Route",
    "RouteResult",
    "SearchRequest",
    "SearchResponse",
]
