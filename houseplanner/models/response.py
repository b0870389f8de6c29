"""
Response models for amenity search
Amenities, routes and geocoding suggestions handed to the map/list UI
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from houseplanner.config.amenity_types import AmenityCategory
from houseplanner.models.request import Coordinate


class Amenity(BaseModel):
    """A point of interest found near the origin"""
    id: str
    category: AmenityCategory
    position: Coordinate
    name: str
    tags: Dict[str, str] = {}
    address: str = ""
    distance_km: float
    rank: int
    colour: str
    walking_minutes: float = 0.0
    driving_minutes: float = 0.0
    osm_type: Optional[str] = None
    osm_id: Optional[int] = None


class Route(BaseModel):
    """Travel path from the origin to one amenity"""
    path: List[Coordinate]
    distance: float  # meters
    duration: float  # seconds
    is_estimate: bool = False
    profile: str = "walking"
    source: str = "estimate"  # backend name, or "estimate" for the straight-line fallback
    category: Optional[AmenityCategory] = None
    colour: Optional[str] = None
    destination: Optional[Amenity] = None


class LocationSuggestion(BaseModel):
    """Forward-geocoding candidate"""
    position: Coordinate
    label: str
    display_name: str
    highlighted: str


class RouteResult(BaseModel):
    """Route as presented in the result list"""
    amenity_id: str
    category: AmenityCategory
    colour: str
    name: str
    rank: int
    path: List[Coordinate]
    distance: float
    duration: float
    is_estimate: bool
    source: str
    distance_label: str
    summary: str


class CategoryInfo(BaseModel):
    name: str
    tag: str
    colour: str


class SearchResponse(BaseModel):
    """Search response model"""
    success: bool = True
    message: str = "success"
    origin: Optional[Coordinate] = None
    categories: List[AmenityCategory] = []
    amenities: List[Amenity] = []
    routes: List[RouteResult] = []
    total_count: int = 0
    estimated_count: int = 0
    criteria: Dict[str, Any] = {}
