"""
Amenity Category Configuration
Tag predicates, colours and fallback labels for every searchable amenity type.
"""

from enum import Enum
from typing import Dict, Iterable, List, Tuple


class UnknownCategoryError(ValueError):
    """A category name that matches no AmenityCategory value or alias."""


class AmenityCategory(str, Enum):
    """Searchable amenity categories, in processing order."""

    EV_CHARGERS = "EV-Chargers"
    HOSPITALS = "Hospitals"
    SCHOOLS = "Schools"
    RESTAURANTS = "Restaurants"
    SUPERMARKETS = "Supermarkets"

    @property
    def slug(self) -> str:
        return self.value.lower()


# Category -> OSM (key, value) tag predicate
CATEGORY_TAGS: Dict[AmenityCategory, Tuple[str, str]] = {
    AmenityCategory.EV_CHARGERS: ("amenity", "charging_station"),
    AmenityCategory.HOSPITALS: ("amenity", "hospital"),
    AmenityCategory.SCHOOLS: ("amenity", "school"),
    AmenityCategory.RESTAURANTS: ("amenity", "restaurant"),
    AmenityCategory.SUPERMARKETS: ("shop", "supermarket"),
}

# Legend / marker / route colours
CATEGORY_COLOURS: Dict[AmenityCategory, str] = {
    AmenityCategory.EV_CHARGERS: "#2ecc71",
    AmenityCategory.HOSPITALS: "#e74c3c",
    AmenityCategory.SCHOOLS: "#f1c40f",
    AmenityCategory.RESTAURANTS: "#e67e22",
    AmenityCategory.SUPERMARKETS: "#3498db",
}

# Display name used when an element carries no name tag
UNNAMED_LABELS: Dict[AmenityCategory, str] = {
    AmenityCategory.EV_CHARGERS: "Unnamed EV Charger",
    AmenityCategory.HOSPITALS: "Unnamed Hospital",
    AmenityCategory.SCHOOLS: "Unnamed School",
    AmenityCategory.RESTAURANTS: "Unnamed Restaurant",
    AmenityCategory.SUPERMARKETS: "Unnamed Supermarket",
}

# Lower-cased aliases accepted from clients
_CATEGORY_ALIASES: Dict[str, AmenityCategory] = {
    "ev-chargers": AmenityCategory.EV_CHARGERS,
    "ev_chargers": AmenityCategory.EV_CHARGERS,
    "ev chargers": AmenityCategory.EV_CHARGERS,
    "charging": AmenityCategory.EV_CHARGERS,
    "hospitals": AmenityCategory.HOSPITALS,
    "hospital": AmenityCategory.HOSPITALS,
    "schools": AmenityCategory.SCHOOLS,
    "school": AmenityCategory.SCHOOLS,
    "restaurants": AmenityCategory.RESTAURANTS,
    "restaurant": AmenityCategory.RESTAURANTS,
    "supermarkets": AmenityCategory.SUPERMARKETS,
    "supermarket": AmenityCategory.SUPERMARKETS,
}


def get_tag_for_category(category: AmenityCategory) -> Tuple[str, str]:
    """Get the OSM tag predicate for a category."""
    return CATEGORY_TAGS[category]


def get_colour_for_category(category: AmenityCategory) -> str:
    return CATEGORY_COLOURS[category]


def get_unnamed_label(category: AmenityCategory) -> str:
    return UNNAMED_LABELS[category]


def parse_category(value) -> AmenityCategory:
    """Resolve a category from its enum value, name or a known alias."""
    if isinstance(value, AmenityCategory):
        return value
    if isinstance(value, str):
        key = value.strip()
        try:
            return AmenityCategory(key)
        except ValueError:
            pass
        category = _CATEGORY_ALIASES.get(key.lower())
        if category is not None:
            return category
    raise UnknownCategoryError(f"Unknown amenity category: {value!r}")


def normalize_categories(values: Iterable) -> List[AmenityCategory]:
    """Deduplicate categories and put them in processing (declaration) order."""
    selected = {parse_category(value) for value in values}
    return [category for category in AmenityCategory if category in selected]
