import logging
from typing import Any

import httpx

from gateway.exceptions.custom import HttpError
from gateway.mappers.airbnb_mapper import map_airbnb_availability, map_airbnb_listing
from gateway.mappers.normalize import DEFAULT_COUNTRY, filter_items, search_city
from gateway.schemas.airbnb import AirbnbAvailabilityResponse, AirbnbDetailsResponse, AirbnbSearchResponse
from gateway.schemas.criteria import DateRange, ReservationSlot, SearchCriteria
from gateway.schemas.inventory import AvailabilityInfo, Rental
from gateway.services.booking_com import default_stay
from gateway.services.strategies import DirectProviderStrategy, ProviderStrategy, parse_payload, unwrap
from gateway.services.transport import TransportClient

logger = logging.getLogger(__name__)

DEFAULT_HOST = "airbnb13.p.rapidapi.com"
SEARCH_PATH = "/search-location"
DETAILS_PATH = "/listing-details"
AVAILABILITY_PATH = "/check-availability"


class AirbnbRentalProvider(DirectProviderStrategy):
    name = "airbnb"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        api_host: str = DEFAULT_HOST,
        backend: ProviderStrategy | None = None,
    ):
        super().__init__("rentals", backend=backend)
        self._transport = TransportClient(
            client,
            self.name,
            f"https://{api_host}",
            headers={"X-RapidAPI-Key": api_key, "X-RapidAPI-Host": api_host},
        )

    async def _get(self, path: str, params: dict[str, Any]) -> Any:
        body = unwrap(await self._transport.get(path, params))
        if isinstance(body, dict) and body.get("error") is True:
            raise HttpError(str(body.get("message") or "Airbnb request failed"), status_code=502, service=self.name)
        return body

    async def search(self, criteria: SearchCriteria) -> list[Rental]:
        city = search_city(criteria.location)
        stay = criteria.date_range or default_stay()
        params = {
            "location": f"{city}, {DEFAULT_COUNTRY}",
            "checkin": stay.check_in.isoformat(),
            "checkout": stay.check_out.isoformat(),
            "adults": criteria.guests,
            "currency": "USD",
            "page": 1,
        }
        response = parse_payload(AirbnbSearchResponse, await self._get(SEARCH_PATH, params), self.name)
        rentals = [
            map_airbnb_listing(raw, city=city, nights=stay.nights, index=i)
            for i, raw in enumerate(response.results)
        ]
        logger.info("Airbnb returned %d listings for %s", len(rentals), city)
        return filter_items(rentals, criteria)

    async def get_details(self, rental_id: str) -> Rental:
        response = parse_payload(AirbnbDetailsResponse, await self._get(DETAILS_PATH, {"id": rental_id}), self.name)
        raw = response.results
        if raw.id is None:
            raw = raw.model_copy(update={"id": rental_id})
        return map_airbnb_listing(raw)

    async def check_availability(
        self,
        rental_id: str,
        date_range: DateRange | None,
        slot: ReservationSlot | None,
        guests: int,
    ) -> AvailabilityInfo:
        stay = date_range or default_stay()
        params = {
            "propertyId": rental_id,
            "checkin": stay.check_in.isoformat(),
            "checkout": stay.check_out.isoformat(),
            "adults": guests,
        }
        response = parse_payload(AirbnbAvailabilityResponse, await self._get(AVAILABILITY_PATH, params), self.name)
        return map_airbnb_availability(rental_id, response.results, stay)
