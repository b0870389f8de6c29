from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # API configuration
    api_version: str = "1.0"
    log_level: str = "INFO"

    # OpenStreetMap services
    nominatim_url: str = "https://nominatim.openstreetmap.org"
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    # Nominatim usage policy requires an identifying User-Agent
    user_agent: str = "HousePlanner/1.0 (amenity finder)"

    # Routing backends, tried in this order before falling back to an estimate
    routing_backends: List[str] = [
        "https://routing.openstreetmap.de/routed-foot",
        "https://router.project-osrm.org",
    ]
    routing_profile: str = "walking"
    graphhopper_url: str = "https://graphhopper.com/api/1/route"
    graphhopper_api_key: Optional[str] = None

    # Timeouts (seconds)
    http_timeout_s: float = 10.0
    overpass_timeout_s: float = 25.0

    # Geocoding
    country_codes: Optional[str] = "ca"
    viewbox: Optional[str] = None  # "west,north,east,south" bias for suggestions
    suggestion_limit: int = 5
    suggest_debounce_ms: int = 300

    # Amenity search
    search_radius_km: float = 2.0
    max_search_radius_km: float = 16.0
    default_results_per_category: int = 3
    max_results_per_category: int = 20
    default_center_lat: float = 51.0447  # Calgary
    default_center_lng: float = -114.0719

    # Travel estimates
    walking_speed_kmh: float = 5.0
    driving_speed_kmh: float = 30.0
    estimate_mode: str = "walking"

    # Courtesy delay between consecutive routing calls
    route_request_delay_ms: int = 100

    # API call limits (per service, per day)
    max_api_calls_per_day: int = 1000

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
