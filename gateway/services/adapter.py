import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from gateway.config import Settings
from gateway.exceptions.custom import GatewayError, HttpError
from gateway.mappers.fallback import DEFAULT_SEED
from gateway.schemas.booking import BookingConfirmation, BookingRequest
from gateway.schemas.criteria import DateRange, ReservationSlot, SearchCriteria
from gateway.schemas.envelope import Envelope
from gateway.services.airbnb import AirbnbRentalProvider
from gateway.services.backend_proxy import BackendProxyStrategy
from gateway.services.booking_com import BookingComHotelProvider
from gateway.services.booking_pipeline import BookingPipeline
from gateway.services.cache import CacheOrchestrator
from gateway.services.opentable import OpenTableRestaurantProvider
from gateway.services.strategies import FallbackStrategy, ProviderStrategy
from gateway.services.transport import TransportClient

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "fallback"
LIST_OPERATIONS = ("search", "reference")


def resolve_strategy(
    domain: str,
    settings: Settings,
    client: httpx.AsyncClient,
    cache: CacheOrchestrator | None = None,
    seed: int = DEFAULT_SEED,
) -> ProviderStrategy:
    """Pick the data source for a domain: provider key, then backend, then fallback."""
    backend = None
    if settings.backend_base_url:
        backend = BackendProxyStrategy(domain, TransportClient(client, "backend", settings.backend_base_url))

    strategy: ProviderStrategy
    if domain == "hotels" and settings.booking_api_key:
        strategy = BookingComHotelProvider(
            client, settings.booking_api_key, settings.booking_api_host, cache=cache, backend=backend
        )
    elif domain == "rentals" and settings.airbnb_api_key:
        strategy = AirbnbRentalProvider(client, settings.airbnb_api_key, settings.airbnb_api_host, backend=backend)
    elif domain == "restaurants" and settings.opentable_api_key:
        strategy = OpenTableRestaurantProvider(
            client, settings.opentable_api_key, settings.opentable_api_host, backend=backend
        )
    elif backend is not None:
        strategy = backend
    else:
        strategy = FallbackStrategy(domain, seed)

    logger.info("%s adapter using %s", domain, strategy.name)
    return strategy


class DomainAdapter:
    """Envelope-returning facade over one domain's provider strategy.

    Reads go through the cache and never fail: any provider error is logged
    and answered with fallback data, flagged by ``message == "fallback"``.
    Bookings go through the booking pipeline and report failures as-is.
    """

    domain: str = ""
    reference_kinds: tuple[str, ...] = ()
    requires_slot = False

    def __init__(
        self,
        strategy: ProviderStrategy,
        cache: CacheOrchestrator,
        pipeline: BookingPipeline | None = None,
        seed: int = DEFAULT_SEED,
    ):
        self.strategy = strategy
        self._cache = cache
        self._pipeline = pipeline or BookingPipeline(cache)
        if isinstance(strategy, FallbackStrategy):
            self._fallback = strategy
        else:
            self._fallback = FallbackStrategy(self.domain, seed)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: httpx.AsyncClient,
        cache: CacheOrchestrator,
        pipeline: BookingPipeline | None = None,
        seed: int = DEFAULT_SEED,
    ) -> "DomainAdapter":
        strategy = resolve_strategy(cls.domain, settings, client, cache=cache, seed=seed)
        return cls(strategy, cache, pipeline=pipeline, seed=seed)

    async def _read(
        self,
        operation: str,
        params: dict[str, Any],
        call: Callable[[ProviderStrategy], Awaitable[Any]],
    ) -> Envelope:
        async def fetch() -> Envelope:
            if self.strategy is not self._fallback:
                try:
                    return Envelope.ok(await call(self.strategy))
                except GatewayError as exc:
                    logger.warning(
                        "%s %s via %s failed (%s %s: %s), serving fallback",
                        self.domain, operation, self.strategy.name, exc.kind, exc.status_code, exc.message,
                    )
                except Exception:
                    logger.exception("%s %s via %s crashed, serving fallback", self.domain, operation, self.strategy.name)
            try:
                return Envelope.ok(await call(self._fallback), message=FALLBACK_MESSAGE)
            except Exception:
                logger.exception("Fallback %s %s failed", self.domain, operation)
                empty = [] if operation in LIST_OPERATIONS else None
                return Envelope.ok(empty, message=FALLBACK_MESSAGE)

        return await self._cache.get_or_fetch(self.domain, operation, params, fetch)

    async def search(self, criteria: SearchCriteria) -> Envelope:
        return await self._read(
            "search",
            criteria.model_dump(mode="json"),
            lambda strategy: strategy.search(criteria),
        )

    async def get_details(self, item_id: str) -> Envelope:
        return await self._read("details", {"id": item_id}, lambda strategy: strategy.get_details(item_id))

    async def check_availability(
        self,
        item_id: str,
        date_range: DateRange | None = None,
        slot: ReservationSlot | None = None,
        guests: int = 2,
    ) -> Envelope:
        params = {
            "id": item_id,
            "date_range": date_range.model_dump(mode="json") if date_range else None,
            "slot": slot.model_dump(mode="json") if slot else None,
            "guests": guests,
        }
        return await self._read(
            "availability",
            params,
            lambda strategy: strategy.check_availability(item_id, date_range, slot, guests),
        )

    async def list_reference(self, kind: str) -> Envelope:
        if kind not in self.reference_kinds:
            error = HttpError(f"Unknown {self.domain} list: {kind}", status_code=404, service=self.domain)
            return Envelope.fail(error.to_api_error())
        return await self._read("reference", {"kind": kind}, lambda strategy: strategy.list_reference(kind))

    async def create_booking(self, request: BookingRequest) -> Envelope[BookingConfirmation]:
        return await self._pipeline.run(self, request)

    async def submit_booking(self, request: BookingRequest) -> Envelope[BookingConfirmation]:
        """Send an already validated booking to the strategy."""
        try:
            return Envelope.ok(await self.strategy.book(request), status=201)
        except GatewayError as exc:
            logger.error("%s booking via %s failed: %s", self.domain, self.strategy.name, exc.message)
            return Envelope.fail(exc.to_api_error())
        except Exception as exc:
            logger.exception("%s booking via %s crashed", self.domain, self.strategy.name)
            return Envelope.fail(GatewayError(str(exc), service=self.strategy.name).to_api_error())
