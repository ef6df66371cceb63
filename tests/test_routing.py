import httpx
import pytest
from http_fakes import FakeServices, mock_client, osrm_route, three_routes

from zanza.errors import (
    AddressNotFound,
    AddressOutOfBounds,
    DestinationUnresolved,
    InvalidAddress,
    NoRoutesFound,
    OriginUnresolved,
    RoutingFailed,
)
from zanza.models import Coordinate, RouteCategory, SafetyTier
from zanza.routing import (
    MAX_ROUTE_ALTERNATIVES,
    collect_routes,
    fetch_route_paths,
    search_routes,
)


@pytest.mark.asyncio
async def test_collect_routes_requests_alternatives_between_resolved_points(services) -> None:
    async with mock_client(services) as client:
        paths = await collect_routes("Centro", "Barao Geraldo", client=client)

    assert len(paths) == 3
    (request,) = services.routing_requests()
    assert request.url.path.endswith("/route/v1/driving/-47.0608,-22.9056;-47.0795,-22.8233")
    assert request.url.params["alternatives"] == "true"
    assert request.url.params["overview"] == "full"
    assert request.url.params["geometries"] == "geojson"


@pytest.mark.asyncio
async def test_routing_is_only_called_after_both_lookups(services) -> None:
    async with mock_client(services) as client:
        await collect_routes("Centro", "Barao Geraldo", client=client)

    kinds = ["route" if "/route/v1/" in r.url.path else "geocode" for r in services.requests]
    assert kinds == ["geocode", "geocode", "route"]


@pytest.mark.asyncio
async def test_geojson_is_converted_from_lng_lat(services) -> None:
    async with mock_client(services) as client:
        paths = await collect_routes("Centro", "Barao Geraldo", client=client)

    first = paths[0]
    assert first.geometry[0] == Coordinate(lat=-22.9056, lng=-47.0608)
    assert first.geometry[-1] == Coordinate(lat=-22.8233, lng=-47.0795)
    assert first.distance_m == 11500.0
    assert first.duration_s == 900.0


@pytest.mark.asyncio
async def test_more_than_three_alternatives_are_truncated_in_order() -> None:
    routes = [
        osrm_route([[-47.06, -22.90], [-47.07, -22.82]], 1000.0 + i, 100.0 + i)
        for i in range(5)
    ]
    services = FakeServices(
        places={"Centro": {"lat": "-22.90", "lon": "-47.06"}, "Cambui": {"lat": "-22.89", "lon": "-47.05"}},
        routes=routes,
    )

    async with mock_client(services) as client:
        paths = await collect_routes("Centro", "Cambui", client=client)

    assert len(paths) == MAX_ROUTE_ALTERNATIVES
    assert [p.distance_m for p in paths] == [1000.0, 1001.0, 1002.0]


@pytest.mark.asyncio
async def test_unresolved_origin_short_circuits(services) -> None:
    async with mock_client(services) as client:
        with pytest.raises(OriginUnresolved) as raised:
            await collect_routes("Rua Inexistente", "Barao Geraldo", client=client)

    assert isinstance(raised.value.cause, AddressNotFound)
    assert raised.value.status_code == 404
    assert services.routing_requests() == []


@pytest.mark.asyncio
async def test_out_of_bounds_destination_keeps_its_reason(services) -> None:
    async with mock_client(services) as client:
        with pytest.raises(DestinationUnresolved) as raised:
            await collect_routes("Centro", "Se", client=client)

    assert isinstance(raised.value.cause, AddressOutOfBounds)
    assert raised.value.status_code == 422
    assert raised.value.to_dict()["side"] == "destination"
    assert raised.value.to_dict()["reason"] == "address_out_of_bounds"
    assert services.routing_requests() == []


@pytest.mark.asyncio
async def test_origin_is_reported_when_both_ends_fail(services) -> None:
    async with mock_client(services) as client:
        with pytest.raises(OriginUnresolved) as raised:
            await collect_routes("", "Se", client=client)

    assert isinstance(raised.value.cause, InvalidAddress)
    assert raised.value.code == "origin_unresolved"


@pytest.mark.asyncio
async def test_empty_route_list_is_no_routes_found(services) -> None:
    services.routes = []

    async with mock_client(services) as client:
        with pytest.raises(NoRoutesFound):
            await collect_routes("Centro", "Barao Geraldo", client=client)


@pytest.mark.asyncio
async def test_router_no_route_code_is_no_routes_found(services) -> None:
    services.routing_status = 400
    services.routing_body = {"code": "NoRoute", "message": "Impossible route between points"}

    async with mock_client(services) as client:
        with pytest.raises(NoRoutesFound):
            await collect_routes("Centro", "Barao Geraldo", client=client)


@pytest.mark.asyncio
async def test_router_server_error_is_failure_not_empty(services) -> None:
    services.routing_status = 500
    services.routing_body = {"code": "InternalError"}

    async with mock_client(services) as client:
        with pytest.raises(RoutingFailed) as raised:
            await collect_routes("Centro", "Barao Geraldo", client=client)

    assert not isinstance(raised.value, NoRoutesFound)
    assert raised.value.status_code == 502


@pytest.mark.asyncio
async def test_router_network_error_is_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    async with mock_client(handler) as client:
        with pytest.raises(RoutingFailed):
            await fetch_route_paths(
                Coordinate(lat=-22.90, lng=-47.06),
                Coordinate(lat=-22.82, lng=-47.07),
                client=client,
            )


@pytest.mark.asyncio
async def test_malformed_route_is_failure(services) -> None:
    services.routes = [{"geometry": {"coordinates": [[-47.06, -22.90]]}, "duration": 10.0}]

    async with mock_client(services) as client:
        with pytest.raises(RoutingFailed):
            await collect_routes("Centro", "Barao Geraldo", client=client)


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"code": "Ok", "routes": {"0": {"distance": 1.0}}}, {"code": "Ok", "routes": 5}])
async def test_non_list_routes_is_failure(services, body) -> None:
    services.routing_body = body

    async with mock_client(services) as client:
        with pytest.raises(RoutingFailed) as raised:
            await collect_routes("Centro", "Barao Geraldo", client=client)

    assert not isinstance(raised.value, NoRoutesFound)


@pytest.mark.asyncio
async def test_search_routes_classifies_collected_paths(services) -> None:
    async with mock_client(services) as client:
        result = await search_routes("Centro", "Barao Geraldo", client=client)

    assert result.origin == "Centro"
    assert result.destination == "Barao Geraldo"
    assert [r.safety_tier for r in result.routes] == [
        SafetyTier.SAFE,
        SafetyTier.WARNING,
        SafetyTier.DANGER,
    ]
    assert [r.category for r in result.routes] == [
        RouteCategory.SAFE,
        RouteCategory.BALANCED,
        RouteCategory.FASTEST,
    ]
    expected = three_routes()
    for route, raw in zip(result.routes, expected):
        first_lng, first_lat = raw["geometry"]["coordinates"][0]
        last_lng, last_lat = raw["geometry"]["coordinates"][-1]
        assert route.geometry[0] == Coordinate(lat=first_lat, lng=first_lng)
        assert route.geometry[-1] == Coordinate(lat=last_lat, lng=last_lng)
