#!/usr/bin/env python3
"""
Test for the HTTP API endpoints
"""
import pytest
from fastapi.testclient import TestClient

import houseplanner.main as main
from conftest import CALGARY, FakeLocator, FakeResolver, make_amenity, point_north_of
from houseplanner.config.amenity_types import AmenityCategory
from houseplanner.models.request import Coordinate
from houseplanner.models.response import LocationSuggestion
from houseplanner.services.search.orchestrator import SearchOrchestrator
from houseplanner.services.search_service import SearchService


class StubGeocoder:
    def __init__(self):
        self.queries = []

    async def suggest(self, text):
        self.queries.append(text)
        return [
            LocationSuggestion(
                position=CALGARY,
                label="Calgary, Alberta",
                display_name="Calgary, Alberta, Canada",
                highlighted="<mark>Calgary</mark>, Alberta",
            )
        ]

    async def reverse_lookup(self, coord):
        return f"Near {coord.lat:.2f}, {coord.lng:.2f}"


@pytest.fixture
def client(monkeypatch):
    locator = FakeLocator(
        {
            AmenityCategory.SCHOOLS: lambda origin: [
                make_amenity(AmenityCategory.SCHOOLS, "Riverside", point_north_of(origin, 0.4), 1, 0.4),
                make_amenity(AmenityCategory.SCHOOLS, "Hillhurst", point_north_of(origin, 0.9), 2, 0.9),
            ]
        }
    )
    service = SearchService(
        lambda: SearchOrchestrator(locator=locator, resolver=FakeResolver(), route_delay_s=0)
    )
    monkeypatch.setattr(main, "search_service", service)
    monkeypatch.setattr(main, "geocoder", StubGeocoder())
    return TestClient(main.app)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["default_center"] == {"lat": 51.0447, "lng": -114.0719}


def test_categories(client):
    response = client.get("/api/v1/amenities/categories")
    assert response.status_code == 200
    names = [c["name"] for c in response.json()]
    assert names == ["EV-Chargers", "Hospitals", "Schools", "Restaurants", "Supermarkets"]
    assert response.json()[4]["tag"] == "shop=supermarket"


def test_search(client):
    response = client.post(
        "/api/v1/amenities/search",
        json={"center": {"lat": CALGARY.lat, "lng": CALGARY.lng}, "categories": ["schools"], "limit": 3},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["total_count"] == 2
    assert [a["name"] for a in body["amenities"]] == ["Riverside", "Hillhurst"]
    assert len(body["routes"]) == 2
    assert body["routes"][0]["distance_label"] == "0.40km*"
    assert body["categories"] == ["Schools"]


def test_search_without_categories(client):
    response = client.post(
        "/api/v1/amenities/search",
        json={"center": {"lat": CALGARY.lat, "lng": CALGARY.lng}, "categories": []},
    )
    assert response.status_code == 200
    assert response.json()["amenities"] == []
    assert response.json()["routes"] == []


def test_search_unknown_category(client):
    response = client.post(
        "/api/v1/amenities/search",
        json={"center": {"lat": CALGARY.lat, "lng": CALGARY.lng}, "categories": ["Casinos"]},
    )
    assert response.status_code == 422
    assert "Casinos" in response.json()["detail"]


def test_internal_validation_error_is_server_error(monkeypatch):
    class BrokenSearchService:
        async def search(self, request):
            # Builds an invalid model internally; not the client's fault
            Coordinate(lat=500.0, lng=0.0)

    monkeypatch.setattr(main, "search_service", BrokenSearchService())
    response = TestClient(main.app).post(
        "/api/v1/amenities/search",
        json={"center": {"lat": CALGARY.lat, "lng": CALGARY.lng}, "categories": ["Schools"]},
    )
    assert response.status_code == 500


def test_search_invalid_latitude(client):
    response = client.post(
        "/api/v1/amenities/search",
        json={"center": {"lat": 123.0, "lng": 0.0}, "categories": ["Schools"]},
    )
    assert response.status_code == 422


def test_suggest(client):
    response = client.get("/api/v1/geocode/suggest", params={"q": "Calgary"})
    assert response.status_code == 200
    assert response.json()[0]["label"] == "Calgary, Alberta"


def test_reverse(client):
    response = client.get("/api/v1/geocode/reverse", params={"lat": 51.0447, "lng": -114.0719})
    assert response.status_code == 200
    assert response.json() == {"address": "Near 51.04, -114.07"}


if __name__ == "__main__":
    pytest.main([__file__])
