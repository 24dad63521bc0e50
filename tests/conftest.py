import httpx
import pytest
from httpx import ASGITransport

from gateway.config import Settings

PROVIDER_ENV = (
    "BOOKING_API_KEY",
    "AIRBNB_API_KEY",
    "OPENTABLE_API_KEY",
    "BACKEND_BASE_URL",
)


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_settings():
    """Settings isolated from the environment and any .env file."""

    def _make(**overrides) -> Settings:
        values = {
            "booking_api_key": "",
            "airbnb_api_key": "",
            "opentable_api_key": "",
            "backend_base_url": "",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def mock_env(monkeypatch):
    # No provider keys and no backend: every domain runs on fallback data.
    for name in PROVIDER_ENV:
        monkeypatch.setenv(name, "")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")


@pytest.fixture
async def client(mock_env):
    from gateway.main import app, lifespan

    async with lifespan(app):
        async with httpx.AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as c:
            yield c
