import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from houseplanner.config import settings
from houseplanner.models.request import Coordinate
from houseplanner.models.response import Route
from houseplanner.services.map.api_counter import APICounter, api_counter

logger = logging.getLogger(__name__)


class MapServiceError(Exception):
    """A third-party map service call failed or returned an unusable body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MapService(ABC):
    """Base class for OpenStreetMap-backed HTTP services"""

    service_name = "map"

    def __init__(
        self,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        counter: Optional[APICounter] = None,
        timeout: Optional[float] = None,
    ):
        self._transport = transport
        self._counter = counter or api_counter
        self._timeout = timeout if timeout is not None else settings.http_timeout_s

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=self._transport,
            timeout=self._timeout,
            headers={"User-Agent": settings.user_agent},
        )

    async def _request_json(self, method: str, url: str, **kwargs) -> Any:
        """Send one request and return the decoded JSON body.

        Every failure (limit reached, transport error, timeout, non-2xx,
        non-JSON body) is raised as MapServiceError.
        """
        if not self._counter.can_make_call(self.service_name):
            raise MapServiceError(
                f"API call limit exceeded for {self.service_name}. "
                f"Max calls per day: {self._counter.limit}"
            )

        try:
            async with self._client() as client:
                response = await client.request(method, url, **kwargs)
                self._counter.record_call(self.service_name)
                response.raise_for_status()
                return response.json()

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 429:
                raise MapServiceError(f"{self.service_name} quota exceeded", status) from e
            elif status == 400:
                raise MapServiceError(
                    f"Bad request (400) to {self.service_name}", status
                ) from e
            else:
                raise MapServiceError(
                    f"{self.service_name} error: {status}", status
                ) from e
        except httpx.TimeoutException as e:
            raise MapServiceError(f"{self.service_name} request timed out") from e
        except httpx.HTTPError as e:
            raise MapServiceError(f"{self.service_name} request failed: {e}") from e
        except ValueError as e:
            raise MapServiceError(f"{self.service_name} returned malformed JSON") from e


class RoutingBackend(MapService):
    """A routing server that can compute a path between two points"""

    service_name = "routing"

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    async def fetch_route(
        self, origin: Coordinate, destination: Coordinate, profile: str
    ) -> Route:
        """Return a real (non-estimate) route or raise MapServiceError"""
        pass
