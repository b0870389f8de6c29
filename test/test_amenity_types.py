"""
Tests for amenity category configuration
Checks tag/colour/label coverage and category parsing
"""

import pytest

from houseplanner.config.amenity_types import (
    CATEGORY_COLOURS,
    CATEGORY_TAGS,
    UNNAMED_LABELS,
    AmenityCategory,
    UnknownCategoryError,
    normalize_categories,
    parse_category,
)


def test_every_category_is_configured():
    for category in AmenityCategory:
        assert category in CATEGORY_TAGS
        assert category in CATEGORY_COLOURS
        assert category in UNNAMED_LABELS


def test_colours_are_distinct():
    assert len(set(CATEGORY_COLOURS.values())) == len(AmenityCategory)


def test_supermarkets_use_shop_tag():
    assert CATEGORY_TAGS[AmenityCategory.SUPERMARKETS] == ("shop", "supermarket")
    assert CATEGORY_TAGS[AmenityCategory.EV_CHARGERS] == ("amenity", "charging_station")


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Schools", AmenityCategory.SCHOOLS),
        ("school", AmenityCategory.SCHOOLS),
        (" EV-Chargers ", AmenityCategory.EV_CHARGERS),
        ("ev_chargers", AmenityCategory.EV_CHARGERS),
        (AmenityCategory.HOSPITALS, AmenityCategory.HOSPITALS),
    ],
)
def test_parse_category(value, expected):
    assert parse_category(value) is expected


def test_unknown_category_rejected():
    with pytest.raises(UnknownCategoryError):
        parse_category("Casinos")
    with pytest.raises(UnknownCategoryError):
        normalize_categories(["Schools", 42])


def test_normalize_orders_and_deduplicates():
    result = normalize_categories(["Supermarkets", "schools", "EV-Chargers", "Schools"])
    assert result == [
        AmenityCategory.EV_CHARGERS,
        AmenityCategory.SCHOOLS,
        AmenityCategory.SUPERMARKETS,
    ]


def test_normalize_empty():
    assert normalize_categories([]) == []
