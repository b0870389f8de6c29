import html
import logging
import re
from typing import Dict, List, Optional

from houseplanner.config import settings
from houseplanner.models.request import Coordinate
from houseplanner.models.response import LocationSuggestion
from houseplanner.services.map.map_service import MapService, MapServiceError

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
MIN_SUGGESTIONS = 5
MAX_SUGGESTIONS = 15
MAX_QUERY_LENGTH = 200

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")

# Structured address fields, most specific first
_NEIGHBOURHOOD_FIELDS = ("neighbourhood", "suburb", "quarter", "city_district")
_CITY_FIELDS = ("city", "town", "village", "hamlet", "municipality")


def sanitize_query(text: Optional[str]) -> str:
    """Strip control characters, collapse whitespace and cap the length."""
    if not text:
        return ""
    cleaned = _CONTROL_CHARS.sub(" ", str(text))
    return " ".join(cleaned.split())[:MAX_QUERY_LENGTH]


def _first(address: Dict[str, str], fields) -> Optional[str]:
    for field in fields:
        value = address.get(field)
        if value:
            return value
    return None


def format_address(address: Optional[Dict[str, str]], fallback: Optional[str] = None) -> str:
    """
    Build a short label from Nominatim address components:
    house number + road, neighbourhood, city, state.
    Falls back to the raw display string when no component is present.
    """
    address = address or {}
    parts = []

    road = address.get("road") or address.get("pedestrian") or address.get("footway")
    if road:
        house_number = address.get("house_number")
        parts.append(f"{house_number} {road}" if house_number else road)

    for value in (
        _first(address, _NEIGHBOURHOOD_FIELDS),
        _first(address, _CITY_FIELDS),
        address.get("state"),
    ):
        if value and value not in parts:
            parts.append(value)

    if parts:
        return ", ".join(parts)
    return fallback or ""


def highlight_matches(label: str, query: str) -> str:
    """HTML-escape label and wrap case-insensitive query term matches in <mark>."""
    terms = sorted({t for t in sanitize_query(query).split() if t}, key=len, reverse=True)
    if not terms:
        return html.escape(label)

    pattern = re.compile("|".join(re.escape(term) for term in terms), re.IGNORECASE)
    pieces = []
    position = 0
    for match in pattern.finditer(label):
        pieces.append(html.escape(label[position:match.start()]))
        pieces.append(f"<mark>{html.escape(match.group(0))}</mark>")
        position = match.end()
    pieces.append(html.escape(label[position:]))
    return "".join(pieces)


def format_coordinate(coordinate: Coordinate) -> str:
    return f"{coordinate.lat:.6f}, {coordinate.lng:.6f}"


class NominatimGeocoder(MapService):
    """Forward and reverse geocoding against Nominatim"""

    service_name = "nominatim"

    def __init__(self, base_url: Optional[str] = None, limit: Optional[int] = None, **kwargs):
        super().__init__(**kwargs)
        self.base_url = (base_url or settings.nominatim_url).rstrip("/")
        limit = settings.suggestion_limit if limit is None else limit
        self.limit = max(MIN_SUGGESTIONS, min(MAX_SUGGESTIONS, limit))

    async def suggest(self, text: str) -> List[LocationSuggestion]:
        """Candidate locations for partial input; [] on short input or any failure."""
        query = sanitize_query(text)
        if len(query) < MIN_QUERY_LENGTH:
            return []

        params = {
            "q": query,
            "format": "jsonv2",
            "addressdetails": 1,
            "limit": self.limit,
        }
        if settings.country_codes:
            params["countrycodes"] = settings.country_codes
        if settings.viewbox:
            params["viewbox"] = settings.viewbox

        try:
            data = await self._request_json("GET", f"{self.base_url}/search", params=params)
        except MapServiceError as e:
            logger.warning("Address suggestions unavailable for %r: %s", query, e)
            return []

        if not isinstance(data, list):
            logger.warning("Unexpected Nominatim search payload: %s", type(data).__name__)
            return []

        suggestions = []
        for item in data[: self.limit]:
            if not isinstance(item, dict):
                continue
            try:
                position = Coordinate(lat=float(item["lat"]), lng=float(item["lon"]))
            except (KeyError, TypeError, ValueError):
                continue

            display_name = item.get("display_name") or format_coordinate(position)
            label = format_address(item.get("address"), display_name)
            suggestions.append(
                LocationSuggestion(
                    position=position,
                    label=label,
                    display_name=display_name,
                    highlighted=highlight_matches(label, query),
                )
            )

        return suggestions

    async def reverse_lookup(self, coordinate: Coordinate) -> str:
        """Human-readable address for a point, or its numeric rendering on failure."""
        params = {
            "lat": coordinate.lat,
            "lon": coordinate.lng,
            "format": "jsonv2",
            "addressdetails": 1,
        }

        try:
            data = await self._request_json("GET", f"{self.base_url}/reverse", params=params)
        except MapServiceError as e:
            logger.warning("Reverse lookup failed for %s: %s", format_coordinate(coordinate), e)
            return format_coordinate(coordinate)

        if not isinstance(data, dict) or "error" in data:
            return format_coordinate(coordinate)

        label = format_address(data.get("address"), data.get("display_name"))
        return label or format_coordinate(coordinate)
