import logging
import time
from typing import Dict, List, Optional

from houseplanner.config import settings
from houseplanner.config.amenity_types import (
    AmenityCategory,
    get_colour_for_category,
    get_tag_for_category,
    get_unnamed_label,
    parse_category,
)
from houseplanner.models.request import Coordinate
from houseplanner.models.response import Amenity
from houseplanner.services.map.distance import (
    BoundingWindow,
    direct_distance,
    search_window,
    travel_time,
)
from houseplanner.services.map.map_service import MapService, MapServiceError

logger = logging.getLogger(__name__)

ELEMENT_TYPES = ("node", "way", "relation")


def _address_from_tags(tags: Dict[str, str]) -> str:
    street = tags.get("addr:street")
    house_number = tags.get("addr:housenumber")
    parts = []
    if street:
        parts.append(f"{house_number} {street}" if house_number else street)
    for field in ("addr:suburb", "addr:city", "addr:province", "addr:state"):
        value = tags.get(field)
        if value and value not in parts:
            parts.append(value)
    return ", ".join(parts)


class OverpassAmenityLocator(MapService):
    """Finds the nearest amenities of one category using the Overpass API"""

    service_name = "overpass"

    def __init__(
        self,
        base_url: Optional[str] = None,
        radius_km: Optional[float] = None,
        max_radius_km: Optional[float] = None,
        **kwargs,
    ):
        kwargs.setdefault("timeout", settings.overpass_timeout_s)
        super().__init__(**kwargs)
        self.base_url = base_url or settings.overpass_url
        self.radius_km = radius_km if radius_km is not None else settings.search_radius_km
        self.max_radius_km = max(
            self.radius_km,
            max_radius_km if max_radius_km is not None else settings.max_search_radius_km,
        )

    def build_query(self, category: AmenityCategory, window: BoundingWindow) -> str:
        """Overpass QL: node, way and relation statements for the tag inside the window"""
        key, value = get_tag_for_category(category)
        bbox = window.to_overpass()
        statements = "\n  ".join(
            f'{element_type}["{key}"="{value}"]({bbox});' for element_type in ELEMENT_TYPES
        )
        return (
            f"[out:json][timeout:{int(self._timeout)}];\n"
            f"(\n  {statements}\n);\n"
            "out center tags;"
        )

    async def _fetch_elements(self, query: str) -> List[Dict]:
        data = await self._request_json("POST", self.base_url, data={"data": query})
        if not isinstance(data, dict) or not isinstance(data.get("elements"), list):
            raise MapServiceError("Overpass response is missing 'elements'")
        return data["elements"]

    def _normalize_element(self, element, category: AmenityCategory) -> Optional[Dict]:
        """Coordinate, name and tags of one element; None when it has no usable position."""
        if not isinstance(element, dict):
            return None

        # Nodes carry lat/lon directly, ways and relations a "center" object
        source = element if element.get("lat") is not None else element.get("center")
        if not isinstance(source, dict):
            return None
        try:
            position = Coordinate(lat=float(source["lat"]), lng=float(source["lon"]))
        except (KeyError, TypeError, ValueError):
            return None

        tags = element.get("tags")
        tags = {str(k): str(v) for k, v in tags.items()} if isinstance(tags, dict) else {}

        return {
            "position": position,
            "name": tags.get("name") or get_unnamed_label(category),
            "tags": tags,
            "osm_type": element.get("type"),
            "osm_id": element.get("id") if isinstance(element.get("id"), int) else None,
        }

    async def find_nearby(
        self,
        origin: Coordinate,
        category,
        limit: Optional[int] = None,
        *,
        stamp: Optional[int] = None,
    ) -> List[Amenity]:
        """
        Nearest `limit` amenities of a category, ranked by distance.

        The window starts at radius_km and doubles up to max_radius_km while a
        successful query finds nothing. Any failed or malformed response
        returns [] so one category cannot abort a whole search.
        """
        category = parse_category(category)
        if limit is None:
            limit = settings.default_results_per_category
        limit = max(1, min(limit, settings.max_results_per_category))
        if stamp is None:
            stamp = int(time.time() * 1000)

        radius = self.radius_km
        while True:
            window = search_window(origin, radius)
            try:
                elements = await self._fetch_elements(self.build_query(category, window))
            except MapServiceError as e:
                logger.warning("Failed to fetch %s near %s: %s", category.value, origin.as_tuple(), e)
                return []

            candidates = [
                candidate
                for candidate in (self._normalize_element(el, category) for el in elements)
                if candidate is not None
            ]
            if candidates or radius >= self.max_radius_km:
                break

            radius = min(radius * 2, self.max_radius_km)
            logger.info("No %s found, widening search to %.1f km", category.value, radius)

        if not candidates:
            logger.info("No %s within %.1f km of %s", category.value, radius, origin.as_tuple())
            return []

        return self._rank(origin, category, candidates, limit, stamp)

    def _rank(
        self,
        origin: Coordinate,
        category: AmenityCategory,
        candidates: List[Dict],
        limit: int,
        stamp: int,
    ) -> List[Amenity]:
        for candidate in candidates:
            candidate["distance_km"] = direct_distance(origin, candidate["position"])
        candidates.sort(key=lambda c: c["distance_km"])

        colour = get_colour_for_category(category)
        amenities = []
        for index, candidate in enumerate(candidates[:limit], start=1):
            distance_km = candidate["distance_km"]
            amenities.append(
                Amenity(
                    id=f"{stamp}-{category.slug}-{index}",
                    category=category,
                    position=candidate["position"],
                    name=candidate["name"],
                    tags=candidate["tags"],
                    address=_address_from_tags(candidate["tags"]),
                    distance_km=round(distance_km, 3),
                    rank=index,
                    colour=colour,
                    walking_minutes=round(travel_time(distance_km, "walking"), 1),
                    driving_minutes=round(travel_time(distance_km, "driving"), 1),
                    osm_type=candidate["osm_type"],
                    osm_id=candidate["osm_id"],
                )
            )

        return amenities
