"""Debounced address suggestions for one input field."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Union

from houseplanner.config import settings
from houseplanner.models.response import LocationSuggestion
from houseplanner.services.map.nominatim_service import NominatimGeocoder

logger = logging.getLogger(__name__)

ResultsCallback = Callable[[List[LocationSuggestion]], Union[None, Awaitable[None]]]


class DebouncedSuggester:
    """
    Waits for the input to stay unchanged for the quiet period before asking
    the geocoder. A new submission cancels the pending one, and results of a
    superseded generation are dropped even if they arrive late.
    """

    def __init__(
        self,
        geocoder: Optional[NominatimGeocoder] = None,
        delay_s: Optional[float] = None,
        on_results: Optional[ResultsCallback] = None,
    ) -> None:
        self._geocoder = geocoder or NominatimGeocoder()
        self._delay_s = settings.suggest_debounce_ms / 1000 if delay_s is None else delay_s
        self._on_results = on_results
        self._generation = 0
        self._pending: Optional[asyncio.Task] = None
        self.latest: List[LocationSuggestion] = []

    @property
    def generation(self) -> int:
        return self._generation

    def submit(self, text: str) -> asyncio.Task:
        """Schedule a lookup for text, cancelling any lookup still pending."""
        self.cancel()
        self._generation += 1
        self._pending = asyncio.create_task(self._run(text, self._generation))
        return self._pending

    def cancel(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def _run(self, text: str, generation: int) -> Optional[List[LocationSuggestion]]:
        await asyncio.sleep(self._delay_s)
        results = await self._geocoder.suggest(text)

        if generation != self._generation:
            logger.debug("Dropping stale suggestions for %r", text)
            return None

        self.latest = results
        if self._on_results is not None:
            outcome = self._on_results(results)
            if asyncio.iscoroutine(outcome):
                await outcome
        return results
