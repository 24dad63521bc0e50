import asyncio

import httpx

from gateway.config import Settings
from gateway.schemas.criteria import SearchCriteria
from gateway.schemas.envelope import Envelope
from gateway.schemas.inventory import AccommodationResults
from gateway.services.adapter import FALLBACK_MESSAGE, DomainAdapter
from gateway.services.booking_pipeline import BookingPipeline
from gateway.services.cache import CacheOrchestrator
from gateway.services.hotels import HotelAdapter
from gateway.services.rentals import RentalAdapter
from gateway.services.restaurants import RestaurantAdapter


class TravelGateway:
    def __init__(
        self,
        hotels: HotelAdapter,
        rentals: RentalAdapter,
        restaurants: RestaurantAdapter,
        cache: CacheOrchestrator,
    ):
        self.hotels = hotels
        self.rentals = rentals
        self.restaurants = restaurants
        self.cache = cache

    def adapter(self, domain: str) -> DomainAdapter:
        return {"hotels": self.hotels, "rentals": self.rentals, "restaurants": self.restaurants}[domain]

    async def search_accommodations(self, criteria: SearchCriteria) -> Envelope[AccommodationResults]:
        """Hotels and rentals for the same criteria, searched concurrently."""
        hotels, rentals = await asyncio.gather(self.hotels.search(criteria), self.rentals.search(criteria))
        results = AccommodationResults(hotels=hotels.data or [], rentals=rentals.data or [])
        message = FALLBACK_MESSAGE if FALLBACK_MESSAGE in (hotels.message, rentals.message) else None
        return Envelope.ok(results, message=message)


def build_gateway(settings: Settings, client: httpx.AsyncClient, cache: CacheOrchestrator | None = None) -> TravelGateway:
    cache = cache or CacheOrchestrator()
    pipeline = BookingPipeline(cache)
    seed = settings.fallback_seed
    return TravelGateway(
        hotels=HotelAdapter.from_settings(settings, client, cache, pipeline=pipeline, seed=seed),
        rentals=RentalAdapter.from_settings(settings, client, cache, pipeline=pipeline, seed=seed),
        restaurants=RestaurantAdapter.from_settings(settings, client, cache, pipeline=pipeline, seed=seed),
        cache=cache,
    )
