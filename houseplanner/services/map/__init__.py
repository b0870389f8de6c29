# Map service package
from .map_service import MapService, MapServiceError, RoutingBackend
from .nominatim_service import NominatimGeocoder
from .overpass_service import OverpassAmenityLocator
from .routing_service import GraphHopperBackend, OSRMBackend, RouteResolver

__all__ = [
    "MapService",
    "MapServiceError",
    "RoutingBackend",
    "NominatimGeocoder",
    "OverpassAmenityLocator",
    "OSRMBackend",
    "GraphHopperBackend",
    "RouteResolver",
]
