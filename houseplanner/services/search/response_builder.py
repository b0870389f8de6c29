"""
Response builder service - converts the orchestrator's search state to the API response format
Includes route geometry, display labels and the estimate marker
"""
import logging
from typing import List

from houseplanner.models.response import Route, RouteResult, SearchResponse
from houseplanner.services.search.state import SearchSnapshot

logger = logging.getLogger(__name__)

ESTIMATE_MARKER = "*"


def distance_label(route: Route) -> str:
    label = f"{route.distance / 1000:.2f}km"
    return f"{label}{ESTIMATE_MARKER}" if route.is_estimate else label


def route_summary(route: Route) -> str:
    """e.g. "Schools: Riverside Elementary - 0.84km (10 mins walking)" """
    destination = route.destination
    name = destination.name if destination else "Unknown"
    category = route.category.value if route.category else "Amenity"
    minutes = round(route.duration / 60)
    return f"{category}: {name} - {distance_label(route)} ({minutes} mins {route.profile})"


class ResponseBuilderService:
    """Response builder service - converts search state to API response format"""

    def build_routes(self, snapshot: SearchSnapshot) -> List[RouteResult]:
        results = []
        for route in snapshot.routes:
            destination = route.destination
            if destination is None or route.category is None:
                logger.warning("Skipping route without destination amenity")
                continue

            results.append(
                RouteResult(
                    amenity_id=destination.id,
                    category=route.category,
                    colour=route.colour or destination.colour,
                    name=destination.name,
                    rank=destination.rank,
                    path=route.path,
                    distance=route.distance,
                    duration=route.duration,
                    is_estimate=route.is_estimate,
                    source=route.source,
                    distance_label=distance_label(route),
                    summary=route_summary(route),
                )
            )
        return results

    def build_response(self, snapshot: SearchSnapshot) -> SearchResponse:
        """
        Build API response from a finished search

        Args:
            snapshot: Search state after the orchestrator's pass

        Returns:
            SearchResponse with amenities and presentable routes
        """
        routes = self.build_routes(snapshot)
        estimated = sum(1 for route in routes if route.is_estimate)

        if not snapshot.amenities:
            message = "No amenities of the selected types within range"
        else:
            message = f"Found {len(snapshot.amenities)} amenities"

        return SearchResponse(
            success=True,
            message=message,
            origin=snapshot.origin,
            categories=list(snapshot.categories),
            amenities=list(snapshot.amenities),
            routes=routes,
            total_count=len(snapshot.amenities),
            estimated_count=estimated,
            criteria={
                "center": snapshot.origin.model_dump() if snapshot.origin else None,
                "categories": [c.value for c in snapshot.categories],
                "limit": snapshot.result_count,
            },
        )
