import logging
from abc import ABC, abstractmethod
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from gateway.exceptions.custom import ConfigurationError, MalformedResponseError, error_from_api
from gateway.mappers import fallback
from gateway.mappers.pricing import local_confirmation
from gateway.schemas.booking import BookingConfirmation, BookingRequest
from gateway.schemas.criteria import DateRange, ReservationSlot, SearchCriteria
from gateway.schemas.envelope import Envelope
from gateway.schemas.inventory import AvailabilityInfo, Hotel, ReferenceEntry, Rental, Restaurant

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

Item = Hotel | Rental | Restaurant


def unwrap(envelope: Envelope) -> Any:
    """Return the data of a successful envelope, raise its typed error otherwise."""
    if not envelope.success:
        raise error_from_api(envelope.error)
    return envelope.data


def parse_payload(model: type[M], data: Any, service: str) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise MalformedResponseError(
            f"Unexpected {service} payload: {exc.error_count()} validation errors",
            service=service,
        ) from exc


class ProviderStrategy(ABC):
    """One way of answering a domain's operations.

    Implementations raise GatewayError subclasses; the owning adapter turns
    them into envelopes (or fallback data for reads).
    """

    name: str = "provider"

    def __init__(self, domain: str):
        self.domain = domain

    @abstractmethod
    async def search(self, criteria: SearchCriteria) -> list[Item]: ...

    @abstractmethod
    async def get_details(self, item_id: str) -> Item: ...

    @abstractmethod
    async def check_availability(
        self,
        item_id: str,
        date_range: DateRange | None,
        slot: ReservationSlot | None,
        guests: int,
    ) -> AvailabilityInfo: ...

    @abstractmethod
    async def list_reference(self, kind: str) -> list[ReferenceEntry]: ...

    @abstractmethod
    async def book(self, request: BookingRequest) -> BookingConfirmation: ...


class DirectProviderStrategy(ProviderStrategy):
    """Base for strategies that call a third-party inventory API.

    Third-party APIs only read inventory. Bookings go to the backend when one
    is configured, otherwise the local booking desk confirms them.
    """

    def __init__(self, domain: str, backend: ProviderStrategy | None = None):
        super().__init__(domain)
        self._backend = backend

    async def list_reference(self, kind: str) -> list[ReferenceEntry]:
        entries = fallback.reference_list(self.domain, kind)
        if entries is None:
            raise ConfigurationError(f"No {kind} list for {self.domain}", status_code=404, service=self.name)
        return entries

    async def book(self, request: BookingRequest) -> BookingConfirmation:
        if self._backend is not None:
            return await self._backend.book(request)
        item = await self.get_details(request.item_id)
        logger.info("Confirming %s booking for %s locally", self.domain, request.item_id)
        return local_confirmation(self.domain, request, item)


_GENERATORS = {
    "hotels": (fallback.generate_hotels, fallback.generate_hotel),
    "rentals": (fallback.generate_rentals, fallback.generate_rental),
    "restaurants": (fallback.generate_restaurants, fallback.generate_restaurant),
}


class FallbackStrategy(ProviderStrategy):
    """Serves deterministic synthetic inventory; never fails a read."""

    name = "fallback"

    def __init__(self, domain: str, seed: int = fallback.DEFAULT_SEED):
        super().__init__(domain)
        self.seed = seed
        self._search, self._generate = _GENERATORS[domain]

    async def search(self, criteria: SearchCriteria) -> list[Item]:
        return self._search(criteria, self.seed)

    async def get_details(self, item_id: str) -> Item:
        return self._generate(item_id, self.seed)

    async def check_availability(
        self,
        item_id: str,
        date_range: DateRange | None,
        slot: ReservationSlot | None,
        guests: int,
    ) -> AvailabilityInfo:
        return fallback.generate_availability(self.domain, item_id, date_range, slot, guests, self.seed)

    async def list_reference(self, kind: str) -> list[ReferenceEntry]:
        return fallback.reference_list(self.domain, kind) or []

    async def book(self, request: BookingRequest) -> BookingConfirmation:
        return local_confirmation(self.domain, request, self._generate(request.item_id, self.seed))
