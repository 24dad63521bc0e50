import logging
from typing import Any

from pydantic import ValidationError

from gateway.exceptions.custom import MalformedResponseError, error_from_api
from gateway.mappers.query import availability_to_query, criteria_to_query
from gateway.schemas.booking import BookingConfirmation, BookingRequest
from gateway.schemas.criteria import DateRange, ReservationSlot, SearchCriteria
from gateway.schemas.envelope import ApiError
from gateway.schemas.inventory import AvailabilityInfo, Hotel, ReferenceEntry, Rental, Restaurant
from gateway.services.strategies import Item, ProviderStrategy, parse_payload, unwrap
from gateway.services.transport import TransportClient

logger = logging.getLogger(__name__)

# Route roots of the backend proxy; rentals keep the legacy car-rentals path.
PROXY_PATHS = {"hotels": "hotels", "rentals": "car-rentals", "restaurants": "restaurants"}
BOOKING_PATHS = {"hotels": "bookings", "rentals": "bookings", "restaurants": "reservations"}
ITEM_MODELS: dict[str, type[Hotel] | type[Rental] | type[Restaurant]] = {
    "hotels": Hotel,
    "rentals": Rental,
    "restaurants": Restaurant,
}


class BackendProxyStrategy(ProviderStrategy):
    """Calls a backend that already answers in the canonical envelope shape."""

    name = "backend"

    def __init__(self, domain: str, transport: TransportClient):
        super().__init__(domain)
        self._transport = transport
        self._root = PROXY_PATHS[domain]
        self._item_model = ITEM_MODELS[domain]

    def _data(self, body: Any) -> Any:
        """Strip the backend's own envelope, raising the error it carries."""
        if isinstance(body, dict) and "success" in body:
            if not body["success"]:
                error = body.get("error") or {}
                raise error_from_api(
                    ApiError(
                        service=error.get("service") or self.name,
                        message=error.get("message") or body.get("message") or "Backend request failed",
                        status=error.get("status") or body.get("status") or 502,
                    )
                )
            return body.get("data")
        return body

    async def _get(self, path: str, params: dict[str, str] | None = None) -> Any:
        return self._data(unwrap(await self._transport.get(f"{self._root}/{path}", params)))

    async def search(self, criteria: SearchCriteria) -> list[Item]:
        data = await self._get("search", criteria_to_query(criteria))
        if not isinstance(data, list):
            raise MalformedResponseError("Search data is not a list", service=self.name)

        items = []
        for raw in data:
            try:
                items.append(self._item_model.model_validate(raw))
            except ValidationError as exc:
                logger.warning("Skipping invalid %s item from backend: %s", self.domain, exc.error_count())
        if data and not items:
            raise MalformedResponseError(f"No valid {self.domain} items in backend response", service=self.name)
        return items

    async def get_details(self, item_id: str) -> Item:
        return parse_payload(self._item_model, await self._get(item_id), self.name)

    async def check_availability(
        self,
        item_id: str,
        date_range: DateRange | None,
        slot: ReservationSlot | None,
        guests: int,
    ) -> AvailabilityInfo:
        data = await self._get(f"{item_id}/availability", availability_to_query(date_range, slot, guests))
        return parse_payload(AvailabilityInfo, data, self.name)

    async def list_reference(self, kind: str) -> list[ReferenceEntry]:
        data = await self._get(kind)
        if not isinstance(data, list):
            raise MalformedResponseError(f"{kind} data is not a list", service=self.name)
        return [parse_payload(ReferenceEntry, raw, self.name) for raw in data]

    async def book(self, request: BookingRequest) -> BookingConfirmation:
        path = f"{self._root}/{BOOKING_PATHS[self.domain]}"
        envelope = await self._transport.post(path, request.model_dump(mode="json", by_alias=True))
        return parse_payload(BookingConfirmation, self._data(unwrap(envelope)), self.name)
