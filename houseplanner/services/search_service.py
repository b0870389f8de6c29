"""
Main amenity search service
Runs one orchestrated search per request and builds the API response
"""
from typing import Callable, Optional

from houseplanner.models.request import SearchRequest
from houseplanner.models.response import SearchResponse
from houseplanner.services.search.orchestrator import SearchOrchestrator
from houseplanner.services.search.response_builder import ResponseBuilderService


class SearchService:
    """
    Amenity search service

    Architecture: Amenity lookup per category → Route resolution per amenity → Response building
    """

    def __init__(self, orchestrator_factory: Optional[Callable[[], SearchOrchestrator]] = None):
        self.orchestrator_factory = orchestrator_factory or SearchOrchestrator
        self.response_builder = ResponseBuilderService()

    async def search(self, request: SearchRequest) -> SearchResponse:
        # Fresh orchestrator: nothing is shared between requests
        orchestrator = self.orchestrator_factory()
        snapshot = await orchestrator.run_search(
            origin=request.center,
            categories=request.categories,
            limit=request.limit,
        )
        return self.response_builder.build_response(snapshot)
