import logging
from typing import Optional

import httpx

from zanza.models import RoutesResponse
from zanza.routing import search_routes

logger = logging.getLogger(__name__)


class RouteSearchSession:
    """
    Holds the caller-visible "current search" result.

    Each search() takes a new generation number. A search that finishes after
    a newer one has started is stale: its result is dropped and search()
    returns None, so a late response can never overwrite a newer one.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self._client = client
        self._generation = 0
        self.current: Optional[RoutesResponse] = None

    @property
    def generation(self) -> int:
        return self._generation

    async def search(self, origin: str, destination: str) -> Optional[RoutesResponse]:
        self._generation += 1
        generation = self._generation
        # Previously selected routes are discarded as soon as a new search starts
        self.current = None

        result = await search_routes(origin, destination, client=self._client)

        if generation != self._generation:
            logger.info(
                "[SEARCH] dropping stale result %d (current generation %d)",
                generation, self._generation,
            )
            return None

        self.current = result
        return result
