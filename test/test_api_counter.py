"""Daily call budget per service."""

from houseplanner.services.map.api_counter import APICounter


def test_budget_tracked_per_service():
    counter = APICounter(max_calls_per_day=2)

    counter.record_call("overpass")
    counter.record_call("overpass")

    assert counter.can_make_call("overpass") is False
    assert counter.get_remaining_calls("overpass") == 0
    assert counter.can_make_call("nominatim") is True
    assert counter.get_remaining_calls("nominatim") == 2


def test_reset_restores_budget():
    counter = APICounter(max_calls_per_day=1)
    counter.record_call("osrm")
    counter.reset()
    assert counter.can_make_call("osrm") is True


def test_limit_defaults_to_settings(monkeypatch):
    from houseplanner.config import settings

    monkeypatch.setattr(settings, "max_api_calls_per_day", 7)
    assert APICounter().get_remaining_calls("overpass") == 7
