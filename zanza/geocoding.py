import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from zanza.config import (
    CITY_BOUNDS_EAST,
    CITY_BOUNDS_NORTH,
    CITY_BOUNDS_SOUTH,
    CITY_BOUNDS_WEST,
    CITY_NAME,
    COUNTRY_NAME,
    GEOCODER_URL,
)
from zanza.errors import (
    AddressNotFound,
    AddressOutOfBounds,
    InvalidAddress,
    ResolutionFailed,
)
from zanza.http_client import client_scope
from zanza.models import CityBounds, Coordinate, ResolvedAddress

logger = logging.getLogger(__name__)

CITY_BOUNDS = CityBounds(
    south=CITY_BOUNDS_SOUTH,
    west=CITY_BOUNDS_WEST,
    north=CITY_BOUNDS_NORTH,
    east=CITY_BOUNDS_EAST,
)


def _qualify(text: str) -> str:
    # Globally common street names ("Rua Sete de Setembro") need the city to disambiguate
    if f", {CITY_NAME.lower()}" in text.lower():
        return text
    return f"{text}, {CITY_NAME}, {COUNTRY_NAME}"


def _parse_first_match(text: str, data: Any) -> Optional[Coordinate]:
    if not isinstance(data, list):
        raise ResolutionFailed(f"Unexpected geocoder payload for '{text}'")
    if not data:
        return None
    first = data[0]
    try:
        return Coordinate(lat=float(first["lat"]), lng=float(first["lon"]))
    except (KeyError, TypeError, ValueError, ValidationError) as exc:
        raise ResolutionFailed(f"Malformed geocoder result for '{text}': {exc}") from exc


async def resolve_address(
    text: str,
    client: Optional[httpx.AsyncClient] = None,
    bounds: CityBounds = CITY_BOUNDS,
) -> Coordinate:
    """
    Resolve a free-text address inside the city to a coordinate.

    Raises InvalidAddress for blank input (no request is made),
    AddressNotFound when the geocoder has no match, AddressOutOfBounds when
    the best match lies outside `bounds`, and ResolutionFailed for network,
    status or payload errors. Nothing is cached or retried.
    """
    if not text or not text.strip():
        raise InvalidAddress("Address must not be empty")

    query = _qualify(text.strip())
    params = {"q": query, "format": "json", "limit": 1}

    async with client_scope(client) as http:
        try:
            resp = await http.get(GEOCODER_URL, params=params)
        except httpx.HTTPError as exc:
            logger.warning("[GEOCODING] request for '%s' failed: %s", text, exc)
            raise ResolutionFailed(f"Could not reach the geocoding service: {exc}") from exc

    if resp.status_code != 200:
        logger.warning("[GEOCODING] '%s' -> HTTP %s", text, resp.status_code)
        raise ResolutionFailed(f"Geocoding failed with HTTP {resp.status_code}")

    try:
        data = resp.json()
    except ValueError as exc:
        raise ResolutionFailed(f"Geocoder returned invalid JSON for '{text}'") from exc

    coord = _parse_first_match(text, data)
    if coord is None:
        logger.info("[GEOCODING] '%s' (searched as '%s') -> no match", text, query)
        raise AddressNotFound(f"Address not found in {CITY_NAME}: '{text}'")

    logger.info(
        "[GEOCODING] '%s' (searched as '%s') -> lat=%.4f, lng=%.4f",
        text, query, coord.lat, coord.lng,
    )

    if not bounds.contains(coord):
        raise AddressOutOfBounds(
            f"'{text}' geocoded to lat={coord.lat:.4f}, lng={coord.lng:.4f} "
            f"which is outside {CITY_NAME}",
            lat=coord.lat,
            lng=coord.lng,
        )

    return coord


async def lookup_address(
    text: str,
    client: Optional[httpx.AsyncClient] = None,
    bounds: CityBounds = CITY_BOUNDS,
) -> ResolvedAddress:
    """Like resolve_address, but not-found and out-of-bounds yield coordinate=None."""
    try:
        coord = await resolve_address(text, client=client, bounds=bounds)
    except (AddressNotFound, AddressOutOfBounds):
        return ResolvedAddress(address=text, coordinate=None)
    return ResolvedAddress(address=text, coordinate=coord)
