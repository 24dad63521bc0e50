import logging
from datetime import date, timedelta
from typing import Any

import httpx

from gateway.exceptions.custom import HttpError
from gateway.mappers.booking_com_mapper import map_booking_com_hotel, map_booking_com_rooms
from gateway.mappers.normalize import city_key, display_city, filter_items, search_city
from gateway.schemas.booking_com import (
    BookingComDestinationResponse,
    BookingComHotel,
    BookingComRoomListResponse,
    BookingComSearchResponse,
)
from gateway.schemas.criteria import DateRange, ReservationSlot, SearchCriteria
from gateway.schemas.envelope import Envelope
from gateway.schemas.inventory import AvailabilityInfo, Hotel
from gateway.services.cache import CacheOrchestrator
from gateway.services.strategies import DirectProviderStrategy, ProviderStrategy, parse_payload, unwrap
from gateway.services.transport import TransportClient

logger = logging.getLogger(__name__)

DEFAULT_HOST = "booking-com15.p.rapidapi.com"
SEARCH_PATH = "/api/v1/hotels/searchHotels"
DETAILS_PATH = "/api/v1/hotels/getHotelDetails"
ROOMS_PATH = "/api/v1/hotels/getRoomList"
DESTINATION_PATH = "/api/v1/hotels/searchDestination"

# Booking.com destination ids for the host cities.
CITY_DESTINATION_IDS = {
    "casablanca": "-394633",
    "rabat": "-394634",
    "marrakech": "-394632",
    "tangier": "-394635",
    "agadir": "-394631",
    "fez": "-394636",
}


def default_stay(today: date | None = None) -> DateRange:
    """One night starting tomorrow; the search API requires dates."""
    start = (today or date.today()) + timedelta(days=1)
    return DateRange(check_in=start, check_out=start + timedelta(days=1))


def _payload(body: Any) -> Any:
    # booking-com15 wraps results as {"status": ..., "message": ..., "data": ...}
    if isinstance(body, dict) and "data" in body and "status" in body:
        return body["data"]
    return body


class BookingComHotelProvider(DirectProviderStrategy):
    name = "booking.com"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        api_host: str = DEFAULT_HOST,
        cache: CacheOrchestrator | None = None,
        backend: ProviderStrategy | None = None,
    ):
        super().__init__("hotels", backend=backend)
        self._transport = TransportClient(
            client,
            self.name,
            f"https://{api_host}",
            headers={"X-RapidAPI-Key": api_key, "X-RapidAPI-Host": api_host},
        )
        self._cache = cache

    async def _get(self, path: str, params: dict[str, Any]) -> Any:
        return _payload(unwrap(await self._transport.get(path, params)))

    async def _lookup_destination(self, city: str) -> Envelope:
        envelope = await self._transport.get(DESTINATION_PATH, {"query": city})
        if not envelope.success:
            return envelope
        results = parse_payload(BookingComDestinationResponse, {"data": _payload(envelope.data)}, self.name)
        for destination in results.data:
            if destination.dest_id is not None and (destination.search_type or "city").lower() == "city":
                return Envelope.ok(str(destination.dest_id))
        return Envelope.fail(
            HttpError(f"Unknown destination: {city}", status_code=404, service=self.name).to_api_error()
        )

    async def resolve_destination(self, city: str | None) -> str:
        key = city_key(display_city(city))
        if key in CITY_DESTINATION_IDS:
            return CITY_DESTINATION_IDS[key]
        if self._cache is None:
            return unwrap(await self._lookup_destination(key))
        envelope = await self._cache.get_or_fetch(
            "hotels", "destinations", {"city": key}, lambda: self._lookup_destination(key)
        )
        return unwrap(envelope)

    async def search(self, criteria: SearchCriteria) -> list[Hotel]:
        city = search_city(criteria.location)
        stay = criteria.date_range or default_stay()
        params = {
            "dest_id": await self.resolve_destination(city),
            "search_type": "CITY",
            "arrival_date": stay.check_in.isoformat(),
            "departure_date": stay.check_out.isoformat(),
            "adults": criteria.guests,
            "room_qty": 1,
            "page_number": 1,
            "languagecode": "en-us",
            "currency_code": "USD",
        }
        data = await self._get(SEARCH_PATH, params)
        response = parse_payload(BookingComSearchResponse, data, self.name)
        hotels = [map_booking_com_hotel(raw, city=city, index=i) for i, raw in enumerate(response.result)]
        logger.info("Booking.com returned %d hotels for %s", len(hotels), city)
        return filter_items(hotels, criteria)

    async def get_details(self, hotel_id: str) -> Hotel:
        stay = default_stay()
        params = {
            "hotel_id": hotel_id,
            "arrival_date": stay.check_in.isoformat(),
            "departure_date": stay.check_out.isoformat(),
            "languagecode": "en-us",
            "currency_code": "USD",
        }
        raw = parse_payload(BookingComHotel, await self._get(DETAILS_PATH, params), self.name)
        if raw.hotel_id is None:
            raw = raw.model_copy(update={"hotel_id": hotel_id})
        return map_booking_com_hotel(raw)

    async def check_availability(
        self,
        hotel_id: str,
        date_range: DateRange | None,
        slot: ReservationSlot | None,
        guests: int,
    ) -> AvailabilityInfo:
        stay = date_range or default_stay()
        params = {
            "hotel_id": hotel_id,
            "arrival_date": stay.check_in.isoformat(),
            "departure_date": stay.check_out.isoformat(),
            "adults": guests,
            "room_qty": 1,
            "currency_code": "USD",
        }
        response = parse_payload(BookingComRoomListResponse, await self._get(ROOMS_PATH, params), self.name)
        return map_booking_com_rooms(hotel_id, response.block, stay, guests)
