"""
Shared test fixtures for the City Explorer API test suite.

Provides:
- a throwaway SQLite database per test with the cache tables created
- mocked cache store / provider gateway for resolver unit tests
- factories for raw provider payloads
"""

import os
from typing import Any
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker

# Ensure test env vars before any app imports
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("GOOGLE_MAPS_API_KEY", "test-maps-key")
os.environ.setdefault("DARK_SKY_API_KEY", "test-dark-sky-key")
os.environ.setdefault("MEETUP_API_KEY", "test-meetup-key")

from city_explorer.database import create_engine, init_db  # noqa: E402
from city_explorer.services.cache_store import CacheStore  # noqa: E402
from city_explorer.services.provider_gateway import ProviderGateway  # noqa: E402


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

@pytest.fixture
async def engine(tmp_path):
    """Async engine on a fresh SQLite file with all tables created."""
    engine = create_engine(f"sqlite:///{tmp_path / 'city_explorer_test.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
def store(session_factory):
    return CacheStore(session_factory)


# ---------------------------------------------------------------------------
# Mocked collaborators
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_store():
    """Cache store mock that misses on every read."""
    store = AsyncMock(spec=CacheStore)
    store.find_location_by_query.return_value = None
    store.find_forecasts_by_location.return_value = []
    store.find_meetups_by_location.return_value = []
    store.insert_location.return_value = 1
    return store


@pytest.fixture
def mock_gateway():
    return AsyncMock(spec=ProviderGateway)


# ---------------------------------------------------------------------------
# Provider payload factories
# ---------------------------------------------------------------------------

def make_geocode_candidate(
    address: str = "1600 Amphitheatre Pkwy, Mountain View, CA",
    lat: float = 37.4224,
    lng: float = -122.0842,
) -> dict[str, Any]:
    """One entry of a geocoding ``results`` list."""
    return {
        "formatted_address": address,
        "geometry": {
            "location": {"lat": lat, "lng": lng},
            "location_type": "ROOFTOP",
        },
        "place_id": "ChIJ2eUgeAK6j4ARbn5u_wAGqWA",
        "types": ["street_address"],
    }


def make_forecast_day(summary: str = "Partly cloudy throughout the day.", time: int = 1600000000) -> dict[str, Any]:
    """One entry of a forecast ``daily.data`` series (``time`` in epoch seconds)."""
    return {
        "time": time,
        "summary": summary,
        "icon": "partly-cloudy-day",
        "temperatureHigh": 71.3,
        "temperatureLow": 55.2,
    }


def make_meetup_event(
    name: str = "Python Night",
    link: str = "https://www.meetup.com/seattle-python/events/123/",
    created: int = 1600000000000,
    host: str = "Seattle Python Users",
) -> dict[str, Any]:
    """One entry of an events list (``created`` in epoch milliseconds)."""
    return {
        "id": "123",
        "name": name,
        "link": link,
        "created": created,
        "group": {"name": host, "urlname": "seattle-python"},
        "yes_rsvp_count": 12,
    }
