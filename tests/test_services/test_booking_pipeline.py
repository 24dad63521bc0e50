import datetime as dt
import re
from unittest.mock import AsyncMock, patch

import pytest

from gateway.exceptions.custom import HttpError
from gateway.mappers.fallback import generate_hotel
from gateway.mappers.pricing import local_confirmation
from gateway.schemas.booking import BookingRequest, ContactInfo, PartyComposition
from gateway.schemas.criteria import DateRange, Location, ReservationSlot, SearchCriteria
from gateway.services.booking_pipeline import BookingPipeline, booking_problem
from gateway.services.cache import CacheOrchestrator
from gateway.services.hotels import HotelAdapter
from gateway.services.restaurants import RestaurantAdapter
from gateway.services.strategies import FallbackStrategy, ProviderStrategy

STAY = DateRange(check_in=dt.date(2030, 6, 10), check_out=dt.date(2030, 6, 12))
SLOT = ReservationSlot(date=dt.date(2030, 6, 12), time="20:00")
CONTACT = ContactInfo(first_name="Amina", last_name="Benali", email="amina@example.com", phone="+212600000000")
CONFIRMATION_PATTERN = re.compile(r"^WC2030-[A-Z0-9]{10}$")


def _request(**overrides):
    values = {"item_id": "fb-hotel-casablanca-01", "date_range": STAY, "contact": CONTACT}
    values.update(overrides)
    return BookingRequest(**values)


@pytest.fixture
def strategy():
    mock = AsyncMock(spec=ProviderStrategy)
    mock.name = "mock"
    hotel = generate_hotel("fb-hotel-casablanca-01")
    mock.book.side_effect = lambda request: local_confirmation("hotels", request, hotel)
    mock.search.return_value = [hotel]
    return mock


@pytest.fixture
def cache():
    return CacheOrchestrator()


@pytest.fixture
def adapter(strategy, cache):
    return HotelAdapter(strategy, cache, pipeline=BookingPipeline(cache))


@pytest.mark.parametrize(
    "overrides,problem",
    [
        ({"item_id": "  "}, "Missing item id"),
        ({"contact": CONTACT.model_copy(update={"first_name": ""})}, "Missing contact first name"),
        ({"contact": CONTACT.model_copy(update={"phone": " "})}, "Missing contact phone"),
        ({"contact": CONTACT.model_copy(update={"email": "amina.example.com"})}, "Invalid contact email"),
        ({"party": PartyComposition(adults=0)}, "Party must include at least one guest"),
        ({"date_range": None}, "Check-in and check-out dates are required"),
    ],
)
@pytest.mark.asyncio
async def test_invalid_requests_are_rejected_locally(adapter, strategy, overrides, problem):
    envelope = await adapter.create_booking(_request(**overrides))

    assert envelope.success is False
    assert envelope.status == 422
    assert envelope.error.message == problem
    assert envelope.error.service == "hotels"
    strategy.book.assert_not_awaited()


def test_restaurants_need_a_slot():
    assert booking_problem(_request(date_range=None), requires_slot=True) == "Reservation date and time are required"
    assert booking_problem(_request(date_range=None, slot=SLOT), requires_slot=True) is None


@pytest.mark.asyncio
async def test_successful_booking_gets_confirmation_number(adapter):
    envelope = await adapter.create_booking(_request())

    assert envelope.success is True
    assert envelope.status == 201
    confirmation = envelope.data
    assert CONFIRMATION_PATTERN.match(confirmation.confirmation_number)
    assert confirmation.confirmation_number != confirmation.booking_id
    assert confirmation.status == "confirmed"


@pytest.mark.asyncio
async def test_identical_requests_book_twice(adapter, strategy):
    first = await adapter.create_booking(_request())
    second = await adapter.create_booking(_request())

    assert first.data.confirmation_number != second.data.confirmation_number
    assert first.data.booking_id != second.data.booking_id
    assert strategy.book.await_count == 2


def test_confirmation_number_collision_is_redrawn(cache):
    pipeline = BookingPipeline(cache, clock=lambda: 1_900_000_000.0)

    with patch("gateway.services.booking_pipeline.secrets.choice", side_effect=["A"] * 8 + ["B"] * 4):
        first = pipeline.confirmation_number()
        second = pipeline.confirmation_number()

    assert first.endswith("AAAA")
    assert second.endswith("BBBB")
    assert first[:-4] == second[:-4]


def test_issued_numbers_only_kept_for_current_millisecond(cache, clock):
    pipeline = BookingPipeline(cache, clock=clock)

    first = pipeline.confirmation_number()
    pipeline.confirmation_number()
    assert len(pipeline._issued) == 2

    clock.advance(0.001)
    later = pipeline.confirmation_number()

    assert pipeline._issued == {later}
    assert later[:-4] != first[:-4]


@pytest.mark.asyncio
async def test_booking_forces_fresh_search(adapter, strategy):
    criteria = SearchCriteria(location=Location(city="Casablanca"))

    await adapter.search(criteria)
    await adapter.search(criteria)
    assert strategy.search.await_count == 1

    await adapter.create_booking(_request())
    await adapter.search(criteria)

    assert strategy.search.await_count == 2


@pytest.mark.asyncio
async def test_failed_booking_keeps_cache_and_error(adapter, strategy):
    criteria = SearchCriteria(location=Location(city="Casablanca"))
    strategy.book.side_effect = HttpError("Sold out", status_code=409, service="backend")

    await adapter.search(criteria)
    envelope = await adapter.create_booking(_request())
    await adapter.search(criteria)

    assert envelope.success is False
    assert envelope.status == 409
    assert envelope.error.message == "Sold out"
    assert envelope.data is None
    assert strategy.search.await_count == 1


@pytest.mark.asyncio
async def test_restaurant_reservation_through_fallback():
    cache = CacheOrchestrator()
    adapter = RestaurantAdapter(FallbackStrategy("restaurants"), cache)
    request = BookingRequest(
        item_id="fb-restaurant-rabat-01",
        slot=SLOT,
        party=PartyComposition(adults=4),
        contact=CONTACT,
    )

    envelope = await adapter.create_booking(request)

    assert envelope.success is True
    assert envelope.data.booking_id.startswith("RST-")
    assert envelope.data.slot == SLOT
    assert CONFIRMATION_PATTERN.match(envelope.data.confirmation_number)
