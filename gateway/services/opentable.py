import logging
from typing import Any

import httpx

from gateway.exceptions.custom import ConfigurationError
from gateway.mappers.normalize import filter_items, search_city
from gateway.mappers.opentable_mapper import map_opentable_restaurant
from gateway.schemas.criteria import DateRange, ReservationSlot, SearchCriteria
from gateway.schemas.inventory import AvailabilityInfo, Restaurant
from gateway.schemas.opentable import OpenTableRestaurant, OpenTableSearchResponse
from gateway.services.strategies import DirectProviderStrategy, ProviderStrategy, parse_payload, unwrap
from gateway.services.transport import TransportClient

logger = logging.getLogger(__name__)

DEFAULT_HOST = "opentable.p.rapidapi.com"
SEARCH_PATH = "/v1/restaurants/search"
DETAILS_PATH = "/v1/restaurants/{restaurant_id}"
PAGE_SIZE = 25


class OpenTableRestaurantProvider(DirectProviderStrategy):
    name = "opentable"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        api_host: str = DEFAULT_HOST,
        backend: ProviderStrategy | None = None,
    ):
        super().__init__("restaurants", backend=backend)
        self._transport = TransportClient(
            client,
            self.name,
            f"https://{api_host}",
            headers={"X-RapidAPI-Key": api_key, "X-RapidAPI-Host": api_host},
        )

    async def search(self, criteria: SearchCriteria) -> list[Restaurant]:
        city = search_city(criteria.location)
        params: dict[str, Any] = {"city": city, "country": "MA", "per_page": PAGE_SIZE, "page": 1}
        if criteria.filters.cuisine:
            params["cuisine_type"] = criteria.filters.cuisine
        data = unwrap(await self._transport.get(SEARCH_PATH, params))
        response = parse_payload(OpenTableSearchResponse, data, self.name)
        restaurants = [
            map_opentable_restaurant(raw, city=city, index=i) for i, raw in enumerate(response.restaurants)
        ]
        logger.info("OpenTable returned %d restaurants for %s", len(restaurants), city)
        return filter_items(restaurants, criteria)

    async def get_details(self, restaurant_id: str) -> Restaurant:
        data = unwrap(await self._transport.get(DETAILS_PATH.format(restaurant_id=restaurant_id)))
        raw = parse_payload(OpenTableRestaurant, data, self.name)
        if raw.id is None:
            raw = raw.model_copy(update={"id": restaurant_id})
        return map_opentable_restaurant(raw)

    async def check_availability(
        self,
        restaurant_id: str,
        date_range: DateRange | None,
        slot: ReservationSlot | None,
        guests: int,
    ) -> AvailabilityInfo:
        raise ConfigurationError("OpenTable does not expose table availability", service=self.name)
