import logging
from typing import List

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from houseplanner.config import settings
from houseplanner.config.amenity_types import (
    AmenityCategory,
    UnknownCategoryError,
    get_colour_for_category,
    get_tag_for_category,
)
from houseplanner.models.request import Coordinate, SearchRequest
from houseplanner.models.response import CategoryInfo, LocationSuggestion, SearchResponse
from houseplanner.services.map.nominatim_service import NominatimGeocoder
from houseplanner.services.search_service import SearchService

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="HousePlanner API",
    description="Find amenities near a home address and route to them",
    version=settings.api_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify exact origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

search_service = SearchService()
geocoder = NominatimGeocoder()


# main api
@app.post("/api/v1/amenities/search", response_model=SearchResponse)
async def search_amenities(request: SearchRequest):
    """Nearest amenities of each selected category, with routes from the center"""
    try:
        return await search_service.search(request)
    except UnknownCategoryError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.exception("Amenity search failed")
        raise HTTPException(status_code=500, detail=f"Amenity search failed: {str(e)}")


@app.get("/api/v1/amenities/categories", response_model=List[CategoryInfo])
async def list_categories():
    """Supported categories with their tag and legend colour"""
    return [
        CategoryInfo(
            name=category.value,
            tag="=".join(get_tag_for_category(category)),
            colour=get_colour_for_category(category),
        )
        for category in AmenityCategory
    ]


@app.get("/api/v1/geocode/suggest", response_model=List[LocationSuggestion])
async def suggest_addresses(q: str = Query(default="", max_length=200)):
    """
    Address autocomplete candidates for one query.

    Interactive clients debounce keystrokes before calling this, the way
    houseplanner.services.DebouncedSuggester does for in-process callers.
    """
    return await geocoder.suggest(q)


@app.get("/api/v1/geocode/reverse")
async def reverse_geocode(
    lat: float = Query(ge=-90, le=90),
    lng: float = Query(ge=-180, le=180),
):
    """Address for a clicked map point"""
    address = await geocoder.reverse_lookup(Coordinate(lat=lat, lng=lng))
    return {"address": address}


@app.get("/health")
async def health_check():
    """Health check"""
    return {
        "status": "healthy",
        "version": settings.api_version,
        "default_center": {
            "lat": settings.default_center_lat,
            "lng": settings.default_center_lng,
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
