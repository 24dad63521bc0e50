import httpx
import pytest

from gateway.schemas.criteria import Location, SearchCriteria
from gateway.services.gateway import build_gateway
from gateway.services.strategies import FallbackStrategy


@pytest.fixture
def travel_gateway(make_settings):
    return build_gateway(make_settings(), httpx.AsyncClient())


def test_unconfigured_gateway_runs_on_fallback(travel_gateway):
    for domain in ("hotels", "rentals", "restaurants"):
        assert isinstance(travel_gateway.adapter(domain).strategy, FallbackStrategy)


def test_adapters_share_cache_and_pipeline(travel_gateway):
    hotels, rentals = travel_gateway.hotels, travel_gateway.rentals

    assert hotels._cache is travel_gateway.cache
    assert hotels._pipeline is rentals._pipeline


@pytest.mark.asyncio
async def test_casablanca_search(travel_gateway):
    envelope = await travel_gateway.hotels.search(SearchCriteria(location=Location(city="Casablanca"), limit=5))

    assert envelope.success is True
    assert len(envelope.data) <= 5
    assert all(h.city == "Casablanca" for h in envelope.data)


@pytest.mark.asyncio
async def test_search_accommodations_combines_hotels_and_rentals(travel_gateway):
    envelope = await travel_gateway.search_accommodations(SearchCriteria(location=Location(city="Agadir"), limit=3))

    assert envelope.success is True
    assert envelope.message == "fallback"
    assert 0 < len(envelope.data.hotels) <= 3
    assert 0 < len(envelope.data.rentals) <= 3
    assert all(r.kind == "rental" for r in envelope.data.rentals)
