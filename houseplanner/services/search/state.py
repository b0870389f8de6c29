"""Session-scoped search state owned by the SearchOrchestrator."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from houseplanner.config import settings
from houseplanner.config.amenity_types import AmenityCategory
from houseplanner.models.request import Coordinate
from houseplanner.models.response import Amenity, Route


def clamp_result_count(count: Optional[int]) -> int:
    if count is None:
        return settings.default_results_per_category
    return max(1, min(int(count), settings.max_results_per_category))


@dataclass(frozen=True)
class SearchSnapshot:
    """Read-only view of SearchState handed to observers and the presentation layer."""

    origin: Optional[Coordinate]
    categories: Tuple[AmenityCategory, ...]
    result_count: int
    amenities: Tuple[Amenity, ...]
    routes: Tuple[Route, ...]
    is_searching: bool
    completed_runs: int


@dataclass
class SearchState:
    """Mutable search state. Only the orchestrator writes to it."""

    origin: Optional[Coordinate] = None
    categories: List[AmenityCategory] = field(default_factory=list)
    result_count: int = field(default_factory=lambda: settings.default_results_per_category)
    amenities: List[Amenity] = field(default_factory=list)
    routes: List[Route] = field(default_factory=list)
    is_searching: bool = False
    completed_runs: int = 0

    @property
    def can_search(self) -> bool:
        return self.origin is not None and bool(self.categories)

    def begin(self) -> None:
        """Drop the previous batch entirely and mark the search as running."""
        self.amenities = []
        self.routes = []
        self.is_searching = True

    def finish(self) -> None:
        self.is_searching = False
        self.completed_runs += 1

    def snapshot(self) -> SearchSnapshot:
        return SearchSnapshot(
            origin=self.origin,
            categories=tuple(self.categories),
            result_count=self.result_count,
            amenities=tuple(self.amenities),
            routes=tuple(self.routes),
            is_searching=self.is_searching,
            completed_runs=self.completed_runs,
        )
