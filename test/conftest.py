"""
Shared test fixtures.

Third-party services are replaced by ``httpx.MockTransport`` handlers or by
in-memory fakes of the locator/resolver, so tests run without network access.
"""

import json
import math
from typing import Callable, Dict, List, Optional
from urllib.parse import parse_qs

import httpx
import pytest

from houseplanner.config.amenity_types import get_colour_for_category
from houseplanner.models.request import Coordinate
from houseplanner.models.response import Amenity, Route
from houseplanner.services.map.api_counter import api_counter
from houseplanner.services.map.distance import EARTH_RADIUS_KM
from houseplanner.services.map.routing_service import estimate_route

CALGARY = Coordinate(lat=51.0447, lng=-114.0719)


def point_north_of(origin: Coordinate, distance_km: float) -> Coordinate:
    """Point due north of origin at exactly distance_km great-circle distance."""
    return Coordinate(
        lat=origin.lat + math.degrees(distance_km / EARTH_RADIUS_KM), lng=origin.lng
    )


def overpass_node(node_id: int, position: Coordinate, name: Optional[str] = None, **tags) -> Dict:
    node_tags = dict(tags)
    if name is not None:
        node_tags["name"] = name
    return {
        "type": "node",
        "id": node_id,
        "lat": position.lat,
        "lon": position.lng,
        "tags": node_tags,
    }


def overpass_query_of(request: httpx.Request) -> str:
    """Overpass QL sent in the form-encoded POST body."""
    return parse_qs(request.content.decode())["data"][0]


def mock_transport(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.MockTransport:
    return httpx.MockTransport(handler)


def json_response(payload, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(payload).encode(),
                          headers={"Content-Type": "application/json"})


@pytest.fixture(autouse=True)
def reset_api_counter():
    api_counter.reset()
    yield
    api_counter.reset()


@pytest.fixture
def calgary() -> Coordinate:
    return CALGARY


class FakeLocator:
    """Locator returning canned amenities per category, recording each call."""

    def __init__(self, results: Optional[Dict] = None, failing=(), gate=None):
        self.results = results or {}
        self.failing = set(failing)
        self.gate = gate
        self.calls: List = []

    async def find_nearby(self, origin, category, limit=None, *, stamp=None):
        self.calls.append((origin, category, limit))
        if self.gate is not None:
            await self.gate.wait()
        if category in self.failing:
            raise RuntimeError(f"{category.value} lookup exploded")
        found = self.results.get(category, [])
        if callable(found):
            found = found(origin)
        return list(found)[:limit]


class FakeResolver:
    """Resolver producing straight-line estimates, optionally failing for some destinations."""

    def __init__(self, failing_destinations=()):
        self.failing_destinations = set(failing_destinations)
        self.calls: List = []

    async def resolve(self, origin, destination, profile=None) -> Route:
        self.calls.append((origin, destination))
        if destination in self.failing_destinations:
            raise RuntimeError(f"route to {destination.as_tuple()} exploded")
        return estimate_route(origin, destination, "walking")


def make_amenity(category, name: str, position: Coordinate, rank: int, distance_km: float) -> Amenity:
    return Amenity(
        id=f"0-{category.slug}-{rank}",
        category=category,
        position=position,
        name=name,
        distance_km=distance_km,
        rank=rank,
        colour=get_colour_for_category(category),
    )
