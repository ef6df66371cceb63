import asyncio
import logging
from typing import Any, List, Optional, Tuple

import httpx

from zanza.classifier import classify_routes
from zanza.config import ROUTING_BASE_URL, ROUTING_PROFILE, ROUTING_TIMEOUT_S
from zanza.errors import (
    DestinationUnresolved,
    NoRoutesFound,
    OriginUnresolved,
    RoutingFailed,
    ZanzaError,
)
from zanza.geocoding import resolve_address
from zanza.http_client import client_scope
from zanza.models import Coordinate, RawRoutePath, RoutesResponse

logger = logging.getLogger(__name__)

MAX_ROUTE_ALTERNATIVES = 3


def _to_coordinates_list(geojson_coords: List[List[float]]) -> List[Coordinate]:
    # GeoJSON geometry is [lng, lat]
    return [Coordinate(lat=lat, lng=lng) for lng, lat in geojson_coords]


def _parse_routes(data: Any) -> List[RawRoutePath]:
    if not isinstance(data, dict):
        raise RoutingFailed("Unexpected routing payload")

    routes = data.get("routes") or []
    if not isinstance(routes, list):
        raise RoutingFailed("Unexpected routing payload")

    paths: List[RawRoutePath] = []
    for route in routes[:MAX_ROUTE_ALTERNATIVES]:
        try:
            geometry = route["geometry"]
            coords = geometry["coordinates"] if isinstance(geometry, dict) else geometry
            paths.append(
                RawRoutePath(
                    geometry=_to_coordinates_list(coords),
                    distance_m=float(route["distance"]),
                    duration_s=float(route["duration"]),
                )
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise RoutingFailed(f"Malformed route in routing response: {exc}") from exc
    return paths


async def fetch_route_paths(
    origin: Coordinate,
    destination: Coordinate,
    client: Optional[httpx.AsyncClient] = None,
    profile: str = ROUTING_PROFILE,
) -> List[RawRoutePath]:
    """
    Ask the routing service for alternative paths between two coordinates.

    Returns at most MAX_ROUTE_ALTERNATIVES paths in the service's own order.
    Raises NoRoutesFound when no path exists, RoutingFailed on any
    network, status or payload error.
    """
    url = (
        f"{ROUTING_BASE_URL}/route/v1/{profile}/"
        f"{origin.lng},{origin.lat};{destination.lng},{destination.lat}"
    )
    params = {"alternatives": "true", "overview": "full", "geometries": "geojson"}

    logger.info("[ROUTING] %s: %s -> %s", profile, origin, destination)

    async with client_scope(client, timeout=ROUTING_TIMEOUT_S) as http:
        try:
            resp = await http.get(url, params=params)
        except httpx.HTTPError as exc:
            logger.warning("[ROUTING] request failed: %s", exc)
            raise RoutingFailed(f"Could not reach the routing service: {exc}") from exc

    try:
        data = resp.json()
    except ValueError:
        data = None

    # OSRM answers an impossible route with HTTP 400 and code "NoRoute"
    if isinstance(data, dict) and data.get("code") in ("NoRoute", "NoSegment"):
        raise NoRoutesFound("No route exists between these addresses")

    if resp.status_code != 200:
        logger.warning("[ROUTING] HTTP %s: %s", resp.status_code, resp.text[:200])
        raise RoutingFailed(f"Routing failed with HTTP {resp.status_code}")
    if data is None:
        raise RoutingFailed("Routing service returned invalid JSON")

    paths = _parse_routes(data)
    if not paths:
        raise NoRoutesFound("No route exists between these addresses")

    logger.info("[ROUTING] %d alternative(s) received", len(paths))
    return paths


async def _resolve_endpoints(
    origin: str,
    destination: str,
    client: Optional[httpx.AsyncClient],
) -> Tuple[Coordinate, Coordinate]:
    # The two lookups are independent; run them together
    origin_result, destination_result = await asyncio.gather(
        resolve_address(origin, client=client),
        resolve_address(destination, client=client),
        return_exceptions=True,
    )

    for result in (origin_result, destination_result):
        if isinstance(result, BaseException) and not isinstance(result, ZanzaError):
            raise result

    if isinstance(origin_result, ZanzaError):
        raise OriginUnresolved(origin_result)
    if isinstance(destination_result, ZanzaError):
        raise DestinationUnresolved(destination_result)
    return origin_result, destination_result


async def collect_routes(
    origin: str,
    destination: str,
    client: Optional[httpx.AsyncClient] = None,
) -> List[RawRoutePath]:
    """
    Resolve both addresses, then fetch alternative paths between them.

    The routing service is only called once both ends resolved. A failed
    end raises OriginUnresolved / DestinationUnresolved wrapping the
    resolver's own error (origin wins when both fail).
    """
    origin_coord, destination_coord = await _resolve_endpoints(origin, destination, client)
    return await fetch_route_paths(origin_coord, destination_coord, client=client)


async def search_routes(
    origin: str,
    destination: str,
    client: Optional[httpx.AsyncClient] = None,
) -> RoutesResponse:
    paths = await collect_routes(origin, destination, client=client)
    return RoutesResponse(
        origin=origin,
        destination=destination,
        routes=classify_routes(paths, origin, destination),
    )
