"""
API Call Counter - daily call budget per third-party service
"""
from datetime import date
from typing import Dict, Optional, Tuple

from houseplanner.config import settings


class APICounter:
    """API call counter, keyed by service name and day"""

    def __init__(self, max_calls_per_day: Optional[int] = None):
        self.max_calls_per_day = max_calls_per_day
        self.call_count: Dict[Tuple[str, str], int] = {}
        self.current_date = date.today()

    @property
    def limit(self) -> int:
        if self.max_calls_per_day is not None:
            return self.max_calls_per_day
        return settings.max_api_calls_per_day

    def _today_key(self, service: str) -> Tuple[str, str]:
        today = date.today()

        # Reset counter if date changes
        if today != self.current_date:
            self.call_count.clear()
            self.current_date = today

        return (service, today.isoformat())

    def can_make_call(self, service: str) -> bool:
        """Check if the service can be called today"""
        return self.call_count.get(self._today_key(service), 0) < self.limit

    def record_call(self, service: str) -> None:
        """Record one call to the service"""
        key = self._today_key(service)
        self.call_count[key] = self.call_count.get(key, 0) + 1

    def get_remaining_calls(self, service: str) -> int:
        """Get remaining call count for the service"""
        current_calls = self.call_count.get(self._today_key(service), 0)
        return max(0, self.limit - current_calls)

    def reset(self) -> None:
        self.call_count.clear()


# Global counter instance
api_counter = APICounter()
