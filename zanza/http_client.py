from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from zanza.config import HTTP_TIMEOUT_S, USER_AGENT


@asynccontextmanager
async def client_scope(
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = HTTP_TIMEOUT_S,
) -> AsyncIterator[httpx.AsyncClient]:
    """
    Yield the caller's client, or a short-lived one closed on exit.

    Passing a client lets callers share connections (and lets tests plug in
    an httpx.MockTransport); leaving it out keeps each call self-contained.
    """
    if client is not None:
        yield client
        return

    async with httpx.AsyncClient(
        timeout=timeout, headers={"User-Agent": USER_AGENT}
    ) as owned:
        yield owned
