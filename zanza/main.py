"""
HTTP surface of the Zanza core.

Each request here is stateless. Clients that keep a "current search" across
requests should go through zanza.search.RouteSearchSession, which drops
results of searches superseded by a newer one.
"""

import asyncio
import logging
from typing import Optional

from fastapi import FastAPI, Header, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from zanza.config import APP_HOST, APP_PORT, CORS_ORIGINS, LOG_LEVEL
from zanza.community import (
    DEFAULT_TOP_NEIGHBORHOODS,
    DEFAULT_TOP_STREETS,
    summarize_community,
)
from zanza.errors import ZanzaError
from zanza.geocoding import resolve_address
from zanza.models import (
    CommunityResponse,
    ResolvedAddress,
    RouteRequest,
    RoutesResponse,
)
from zanza.reviews import fetch_active_user_count, fetch_review_records, parse_reviews
from zanza.routing import search_routes

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Zanza Backend", version="1.0.0")

# CORS: allow frontend dev server on localhost:5173, adjust via CORS_ORIGINS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ZanzaError)
async def zanza_error_handler(request: Request, exc: ZanzaError) -> JSONResponse:
    logger.info("[API] %s %s -> %s (%s)", request.method, request.url.path, exc.status_code, exc.code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/api/health")
async def health():
    return {"status": "ok"}


@app.get("/api/geocode", response_model=ResolvedAddress)
async def geocode(q: str = Query(default="", description="Free-text address in the city")) -> ResolvedAddress:
    coord = await resolve_address(q)
    return ResolvedAddress(address=q, coordinate=coord)


@app.post("/api/routes", response_model=RoutesResponse)
async def get_routes(payload: RouteRequest) -> RoutesResponse:
    """
    Resolve both addresses, fetch up to three alternatives and classify them:

    - 1st alternative: SAFE tier, "safe" category, rating 5
    - 2nd alternative: WARNING tier, "balanced" category, rating 4
    - 3rd alternative: DANGER tier, "fastest" category, rating 3
    """
    logger.info("[API_REQUEST] routes '%s' -> '%s'", payload.origin, payload.destination)
    return await search_routes(payload.origin, payload.destination)


@app.get("/api/community", response_model=CommunityResponse)
async def get_community(
    neighborhoods: int = Query(default=DEFAULT_TOP_NEIGHBORHOODS, ge=1, le=50),
    streets: int = Query(default=DEFAULT_TOP_STREETS, ge=1, le=50),
    authorization: Optional[str] = Header(default=None),
) -> CommunityResponse:
    """
    Safest neighborhoods and streets needing extra attention, computed from
    the full review collection on every call.
    """
    records, active_users = await asyncio.gather(
        fetch_review_records(token=authorization),
        fetch_active_user_count(token=authorization),
    )
    return summarize_community(
        parse_reviews(records),
        active_users,
        top_neighborhoods=neighborhoods,
        top_streets=streets,
        total_reviews=len(records),
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("zanza.main:app", host=APP_HOST, port=APP_PORT)
