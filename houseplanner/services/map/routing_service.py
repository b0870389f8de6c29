"""
Route resolution: real routing backends tried in priority order, with a
straight-line estimate as the final fallback
"""
import logging
from typing import List, Optional
from urllib.parse import urlparse

from houseplanner.config import settings
from houseplanner.models.request import Coordinate
from houseplanner.models.response import Route
from houseplanner.services.map.distance import direct_distance, travel_time
from houseplanner.services.map.map_service import MapServiceError, RoutingBackend
from houseplanner.services.map.polyline import decode_polyline

logger = logging.getLogger(__name__)

_GRAPHHOPPER_PROFILES = {"walking": "foot", "driving": "car"}


class OSRMBackend(RoutingBackend):
    """OSRM-compatible server (project-osrm.org, routing.openstreetmap.de)"""

    def __init__(self, base_url: str, **kwargs):
        super().__init__(**kwargs)
        self.base_url = base_url.rstrip("/")

    @property
    def name(self) -> str:
        parsed = urlparse(self.base_url)
        return f"{parsed.netloc}{parsed.path}" or self.base_url

    async def fetch_route(
        self, origin: Coordinate, destination: Coordinate, profile: str
    ) -> Route:
        url = (
            f"{self.base_url}/route/v1/{profile}/"
            f"{origin.lng},{origin.lat};{destination.lng},{destination.lat}"
        )
        data = await self._request_json(
            "GET", url, params={"overview": "full", "geometries": "polyline"}
        )

        if not isinstance(data, dict) or data.get("code", "Ok") != "Ok":
            code = data.get("code") if isinstance(data, dict) else None
            raise MapServiceError(f"{self.name} returned code {code!r}")
        routes = data.get("routes")
        if not isinstance(routes, list) or not routes:
            raise MapServiceError(f"{self.name} returned no routes")

        route = routes[0]
        try:
            path = decode_polyline(route["geometry"])
            distance = float(route["distance"])
            duration = float(route["duration"])
        except (KeyError, TypeError, ValueError) as e:
            raise MapServiceError(f"{self.name} returned a malformed route: {e}") from e
        if not path:
            raise MapServiceError(f"{self.name} returned an empty path")

        return Route(
            path=path,
            distance=distance,
            duration=duration,
            is_estimate=False,
            profile=profile,
            source=self.name,
        )


class GraphHopperBackend(RoutingBackend):
    """GraphHopper Directions API (requires an API key)"""

    def __init__(self, api_key: str, base_url: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.api_key = api_key
        self.base_url = base_url or settings.graphhopper_url

    @property
    def name(self) -> str:
        return "graphhopper"

    async def fetch_route(
        self, origin: Coordinate, destination: Coordinate, profile: str
    ) -> Route:
        params = {
            "point": [f"{origin.lat},{origin.lng}", f"{destination.lat},{destination.lng}"],
            "profile": _GRAPHHOPPER_PROFILES.get(profile, "foot"),
            "points_encoded": "false",
            "key": self.api_key,
        }
        data = await self._request_json("GET", self.base_url, params=params)

        paths = data.get("paths") if isinstance(data, dict) else None
        if not isinstance(paths, list) or not paths:
            raise MapServiceError("graphhopper returned no paths")

        try:
            first = paths[0]
            # GeoJSON order is [lon, lat]
            path = [
                Coordinate(lat=float(lat), lng=float(lon))
                for lon, lat, *_ in first["points"]["coordinates"]
            ]
            distance = float(first["distance"])
            duration = float(first["time"]) / 1000
        except (KeyError, TypeError, ValueError) as e:
            raise MapServiceError(f"graphhopper returned a malformed path: {e}") from e
        if not path:
            raise MapServiceError("graphhopper returned an empty path")

        return Route(
            path=path,
            distance=distance,
            duration=duration,
            is_estimate=False,
            profile=profile,
            source=self.name,
        )


def build_default_backends(**kwargs) -> List[RoutingBackend]:
    """Backends from settings, in priority order"""
    backends: List[RoutingBackend] = [
        OSRMBackend(url, **kwargs) for url in settings.routing_backends
    ]
    if settings.graphhopper_api_key:
        backends.append(GraphHopperBackend(settings.graphhopper_api_key, **kwargs))
    return backends


def estimate_route(
    origin: Coordinate, destination: Coordinate, mode: Optional[str] = None
) -> Route:
    """Straight-line route with an average-speed duration"""
    mode = mode or settings.estimate_mode
    distance_km = direct_distance(origin, destination)
    return Route(
        path=[origin, destination],
        distance=distance_km * 1000,
        duration=travel_time(distance_km, mode) * 60,
        is_estimate=True,
        profile=mode,
        source="estimate",
    )


class RouteResolver:
    """Resolves one origin/destination pair to a Route; never raises on service failure"""

    def __init__(
        self,
        backends: Optional[List[RoutingBackend]] = None,
        profile: Optional[str] = None,
        estimate_mode: Optional[str] = None,
        **backend_kwargs,
    ):
        self.backends = (
            backends if backends is not None else build_default_backends(**backend_kwargs)
        )
        self.profile = profile or settings.routing_profile
        self.estimate_mode = estimate_mode or settings.estimate_mode
        # Validates the mode up front instead of on the first fallback
        travel_time(0.0, self.estimate_mode)

    async def resolve(
        self, origin: Coordinate, destination: Coordinate, profile: Optional[str] = None
    ) -> Route:
        profile = profile or self.profile

        for backend in self.backends:
            try:
                route = await backend.fetch_route(origin, destination, profile)
                logger.debug(
                    "Route via %s: %.0fm, %.0fs", backend.name, route.distance, route.duration
                )
                return route
            except MapServiceError as e:
                logger.warning("Routing via %s failed: %s", backend.name, e)

        logger.warning(
            "All routing backends failed for %s -> %s, using straight-line estimate",
            origin.as_tuple(),
            destination.as_tuple(),
        )
        return estimate_route(origin, destination, self.estimate_mode)
