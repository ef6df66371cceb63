import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from zanza.config import API_BASE_URL
from zanza.errors import ReviewSourceFailed
from zanza.http_client import client_scope
from zanza.models import RawReview

logger = logging.getLogger(__name__)

REVIEWS_PATH = "/avaliacoes"
USERS_PATH = "/usuarios"


def _auth_headers(token: Optional[str]) -> Dict[str, str]:
    if not token:
        return {}
    if token.lower().startswith("bearer "):
        return {"Authorization": token}
    return {"Authorization": f"Bearer {token}"}


async def _get_collection(
    path: str,
    client: Optional[httpx.AsyncClient],
    token: Optional[str],
) -> List[Any]:
    url = f"{API_BASE_URL}{path}"
    async with client_scope(client) as http:
        try:
            resp = await http.get(url, headers=_auth_headers(token))
        except httpx.HTTPError as exc:
            logger.warning("[REVIEWS] GET %s failed: %s", path, exc)
            raise ReviewSourceFailed(f"Could not reach the review service: {exc}") from exc

    if resp.status_code != 200:
        logger.warning("[REVIEWS] GET %s -> HTTP %s", path, resp.status_code)
        raise ReviewSourceFailed(f"Review service answered HTTP {resp.status_code}")

    try:
        data = resp.json()
    except ValueError as exc:
        raise ReviewSourceFailed(f"Review service returned invalid JSON for {path}") from exc

    if not isinstance(data, list):
        logger.warning("[REVIEWS] GET %s returned %s, treating as empty", path, type(data).__name__)
        return []
    return data


def parse_reviews(records: List[Any]) -> List[RawReview]:
    """Parse each record on its own; malformed ones are logged and skipped."""
    reviews: List[RawReview] = []
    for idx, record in enumerate(records):
        try:
            reviews.append(RawReview.from_record(record))
        except (TypeError, ValidationError) as exc:
            logger.warning("[REVIEWS] skipping malformed review #%d: %s", idx, exc)
    return reviews


async def fetch_review_records(
    client: Optional[httpx.AsyncClient] = None,
    token: Optional[str] = None,
) -> List[Any]:
    """Fetch the full review collection (no pagination) as raw records."""
    return await _get_collection(REVIEWS_PATH, client, token)


async def fetch_reviews(
    client: Optional[httpx.AsyncClient] = None,
    token: Optional[str] = None,
) -> List[RawReview]:
    records = await fetch_review_records(client, token)
    reviews = parse_reviews(records)
    logger.info("[REVIEWS] %d/%d review records usable", len(reviews), len(records))
    return reviews


async def fetch_active_user_count(
    client: Optional[httpx.AsyncClient] = None,
    token: Optional[str] = None,
) -> int:
    users = await _get_collection(USERS_PATH, client, token)
    return len(users)
