import datetime as dt
import json

import pytest
import respx
from httpx import AsyncClient, Response

from gateway.exceptions.custom import HttpError, MalformedResponseError
from gateway.mappers.fallback import generate_rental, generate_restaurant
from gateway.mappers.pricing import local_confirmation
from gateway.schemas.booking import BookingRequest, ContactInfo
from gateway.schemas.criteria import Location, ReservationSlot, SearchCriteria
from gateway.services.backend_proxy import BackendProxyStrategy
from gateway.services.transport import TransportClient

BASE = "https://backend.test/api"


def _proxy(domain):
    return BackendProxyStrategy(domain, TransportClient(AsyncClient(), "backend", BASE))


def _envelope(data, success=True, status=200):
    return {"success": success, "data": data, "error": None, "status": status, "message": None}


@respx.mock
@pytest.mark.asyncio
async def test_search_uses_rental_route_and_skips_invalid_items():
    rental = generate_rental("fb-rental-rabat-01")
    route = respx.get(f"{BASE}/car-rentals/search").mock(
        return_value=Response(200, json=_envelope([rental.model_dump(mode="json", by_alias=True), {"id": "bad"}]))
    )

    items = await _proxy("rentals").search(SearchCriteria(location=Location(city="Rabat"), guests=3))

    assert items == [rental]
    params = route.calls.last.request.url.params
    assert params["city"] == "Rabat"
    assert params["guests"] == "3"


@respx.mock
@pytest.mark.asyncio
async def test_search_with_only_invalid_items_is_malformed():
    respx.get(f"{BASE}/hotels/search").mock(return_value=Response(200, json=_envelope([{"id": "bad"}])))

    with pytest.raises(MalformedResponseError):
        await _proxy("hotels").search(SearchCriteria())


@respx.mock
@pytest.mark.asyncio
async def test_empty_search_is_valid():
    respx.get(f"{BASE}/hotels/search").mock(return_value=Response(200, json=_envelope([])))

    assert await _proxy("hotels").search(SearchCriteria()) == []


@respx.mock
@pytest.mark.asyncio
async def test_failed_backend_envelope_raises():
    respx.get(f"{BASE}/hotels/h1").mock(
        return_value=Response(200, json={
            "success": False,
            "data": None,
            "error": {"service": "hotels", "message": "Hotel not found", "status": 404},
            "status": 404,
        })
    )

    with pytest.raises(HttpError) as exc_info:
        await _proxy("hotels").get_details("h1")
    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Hotel not found"


@respx.mock
@pytest.mark.asyncio
async def test_reference_list():
    respx.get(f"{BASE}/restaurants/cuisines").mock(
        return_value=Response(200, json=_envelope([{"id": "moroccan", "name": "Moroccan"}]))
    )

    entries = await _proxy("restaurants").list_reference("cuisines")

    assert entries[0].name == "Moroccan"


@respx.mock
@pytest.mark.asyncio
async def test_reservation_posts_canonical_request():
    restaurant = generate_restaurant("fb-restaurant-casablanca-01")
    request = BookingRequest(
        item_id=restaurant.id,
        slot=ReservationSlot(date=dt.date(2030, 6, 12), time="20:00"),
        contact=ContactInfo(first_name="Amina", last_name="Benali", email="a@b.ma", phone="+212600"),
    )
    confirmation = local_confirmation("restaurants", request, restaurant)
    route = respx.post(f"{BASE}/restaurants/reservations").mock(
        return_value=Response(201, json=_envelope(confirmation.model_dump(mode="json", by_alias=True), status=201))
    )

    result = await _proxy("restaurants").book(request)

    assert result == confirmation
    body = json.loads(route.calls.last.request.content)
    assert body["itemId"] == restaurant.id
    assert body["contact"]["firstName"] == "Amina"
