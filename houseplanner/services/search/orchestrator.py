"""
Search orchestrator: drives the amenity locator per category and the route
resolver per amenity, and owns the session's SearchState.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Iterable, List, Optional, Union

from houseplanner.config import settings
from houseplanner.config.amenity_types import normalize_categories, parse_category
from houseplanner.models.request import Coordinate
from houseplanner.services.map.overpass_service import OverpassAmenityLocator
from houseplanner.services.map.routing_service import RouteResolver
from houseplanner.services.search.state import SearchSnapshot, SearchState, clamp_result_count

logger = logging.getLogger(__name__)

Observer = Callable[[SearchSnapshot], Union[None, Awaitable[None]]]


class SearchOrchestrator:
    """
    Idle -> Searching -> Idle.

    Only one pass runs at a time. A trigger that arrives while a pass is
    running is coalesced: the running pass completes, then exactly one fresh
    pass runs with the latest inputs.
    """

    def __init__(
        self,
        locator: Optional[OverpassAmenityLocator] = None,
        resolver: Optional[RouteResolver] = None,
        state: Optional[SearchState] = None,
        route_delay_s: Optional[float] = None,
    ) -> None:
        self._locator = locator or OverpassAmenityLocator()
        self._resolver = resolver or RouteResolver()
        self._state = state or SearchState()
        self._route_delay_s = (
            settings.route_request_delay_ms / 1000 if route_delay_s is None else route_delay_s
        )
        self._observers: List[Observer] = []
        self._running = False
        self._rerun_requested = False

    @property
    def state(self) -> SearchSnapshot:
        return self._state.snapshot()

    @property
    def is_searching(self) -> bool:
        return self._state.is_searching

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register a state observer; returns a function that unsubscribes it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    async def _notify(self) -> None:
        snapshot = self._state.snapshot()
        for observer in list(self._observers):
            outcome = observer(snapshot)
            if asyncio.iscoroutine(outcome):
                await outcome

    # Input changes. Each one re-triggers a search.

    async def set_origin(self, origin: Coordinate) -> SearchSnapshot:
        self._state.origin = origin
        return await self._trigger()

    async def set_categories(self, categories: Iterable) -> SearchSnapshot:
        self._state.categories = normalize_categories(categories)
        return await self._trigger()

    async def toggle_category(self, category) -> SearchSnapshot:
        category = parse_category(category)
        selected = set(self._state.categories)
        selected.symmetric_difference_update({category})
        self._state.categories = normalize_categories(selected)
        return await self._trigger()

    async def set_result_count(self, count: int) -> SearchSnapshot:
        self._state.result_count = clamp_result_count(count)
        return await self._trigger()

    async def run_search(
        self,
        origin: Optional[Coordinate] = None,
        categories: Optional[Iterable] = None,
        limit: Optional[int] = None,
    ) -> SearchSnapshot:
        """Search with the given inputs (or the current ones when omitted)."""
        # Validate before touching the state so a bad category set changes nothing
        normalized = normalize_categories(categories) if categories is not None else None

        if origin is not None:
            self._state.origin = origin
        if normalized is not None:
            self._state.categories = normalized
        if limit is not None:
            self._state.result_count = clamp_result_count(limit)

        return await self._trigger()

    async def _trigger(self) -> SearchSnapshot:
        # _running covers the whole loop, including the completion notify
        # after is_searching has already been cleared
        if self._running:
            logger.debug("Search in progress, queueing a rerun with the latest inputs")
            self._rerun_requested = True
            return self.state

        self._running = True
        try:
            while True:
                self._rerun_requested = False
                await self._execute()
                if not self._rerun_requested:
                    break
        finally:
            self._running = False

        return self.state

    async def _execute(self) -> None:
        state = self._state
        if not state.can_search:
            logger.debug("Search skipped: origin or categories not selected")
            return

        origin = state.origin
        categories = list(state.categories)
        limit = state.result_count
        stamp = int(time.time() * 1000)

        state.begin()
        logger.info(
            "Searching %s near %s (%d per category)",
            [c.value for c in categories],
            origin.as_tuple(),
            limit,
        )

        try:
            await self._notify()

            for category in categories:
                try:
                    amenities = await self._locator.find_nearby(
                        origin, category, limit, stamp=stamp
                    )
                except Exception as e:
                    logger.error("Error searching %s: %s", category.value, e)
                    continue

                state.amenities.extend(amenities)
                logger.info("Found %d %s", len(amenities), category.value)
                await self._notify()

            # Sequential on purpose: the free routing servers are rate limited
            for index, amenity in enumerate(list(state.amenities)):
                if index and self._route_delay_s > 0:
                    await asyncio.sleep(self._route_delay_s)

                try:
                    route = await self._resolver.resolve(origin, amenity.position)
                except Exception as e:
                    logger.error("Error routing to %s: %s", amenity.name, e)
                    continue

                state.routes.append(
                    route.model_copy(
                        update={
                            "category": amenity.category,
                            "colour": amenity.colour,
                            "destination": amenity,
                        }
                    )
                )
                await self._notify()
        finally:
            state.finish()

        estimated = sum(1 for route in state.routes if route.is_estimate)
        logger.info(
            "Search finished: %d amenities, %d routes (%d estimated)",
            len(state.amenities),
            len(state.routes),
            estimated,
        )
        await self._notify()
