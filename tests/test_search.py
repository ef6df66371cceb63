import asyncio

import pytest

from zanza.errors import NoRoutesFound
from zanza.models import RoutesResponse
from zanza.search import RouteSearchSession


def _response(origin: str, destination: str) -> RoutesResponse:
    return RoutesResponse(origin=origin, destination=destination, routes=[])


@pytest.mark.asyncio
async def test_completed_search_becomes_current(monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_search(origin, destination, client=None):
        return _response(origin, destination)

    monkeypatch.setattr("zanza.search.search_routes", fake_search)
    session = RouteSearchSession()

    result = await session.search("Centro", "Cambuí")

    assert result is session.current
    assert session.current.destination == "Cambuí"
    assert session.generation == 1


@pytest.mark.asyncio
async def test_late_response_does_not_overwrite_newer_search(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    release_first = asyncio.Event()

    async def fake_search(origin, destination, client=None):
        if origin == "slow":
            await release_first.wait()
        return _response(origin, destination)

    monkeypatch.setattr("zanza.search.search_routes", fake_search)
    session = RouteSearchSession()

    first = asyncio.create_task(session.search("slow", "Centro"))
    await asyncio.sleep(0)
    second = await session.search("fast", "Centro")
    release_first.set()
    stale = await first

    assert stale is None
    assert session.current is second
    assert session.current.origin == "fast"


@pytest.mark.asyncio
async def test_new_search_discards_previous_result(monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_search(origin, destination, client=None):
        if origin == "nowhere":
            raise NoRoutesFound("No route exists between these addresses")
        return _response(origin, destination)

    monkeypatch.setattr("zanza.search.search_routes", fake_search)
    session = RouteSearchSession()
    await session.search("Centro", "Cambuí")

    with pytest.raises(NoRoutesFound):
        await session.search("nowhere", "Cambuí")

    assert session.current is None
