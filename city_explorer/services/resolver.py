"""
Resolver service: serve locations, forecasts and meetups from the cache,
falling back to the providers on a miss.
"""
import asyncio
from typing import Any, Awaitable, Callable, List, Set

from city_explorer.exceptions import NoEventData, NoLocationData, NoWeatherData
from city_explorer.models.location import Location
from city_explorer.models.meetup import MeetupEvent
from city_explorer.models.weather import ForecastDay
from city_explorer.services.cache_store import CacheStore
from city_explorer.services.normalizers import (
    normalize_forecast_day,
    normalize_location,
    normalize_meetup_event,
)
from city_explorer.services.provider_gateway import ProviderGateway
from city_explorer.utils.logger import get_logger

logger = get_logger(__name__)


class Resolver:
    """
    Cache-or-fetch resolution for the three resources.

    Every operation runs the same stages in order: cache lookup, provider
    fetch, normalize, persist, respond. A cache hit returns immediately and
    skips every later stage. Cached rows never expire.
    """

    def __init__(self, store: CacheStore, gateway: ProviderGateway):
        """
        Initialize resolver.

        Args:
            store: Cache store for reads and writes
            gateway: Provider gateway used on cache misses
        """
        self.store = store
        self.gateway = gateway
        self._pending_writes: Set[asyncio.Task] = set()

    async def resolve_location(self, search_query: str) -> Location:
        """
        Resolve a search string to a location.

        Args:
            search_query: Search string as entered by the user

        Returns:
            Location with its database ID

        Raises:
            NoLocationData: Geocoder returned no candidates
            FetchError: Any store, network or payload failure
        """
        cached = await self.store.find_location_by_query(search_query)
        if cached is not None:
            logger.debug(f"Location cache hit for '{search_query}'")
            return cached

        logger.info(f"Location cache miss for '{search_query}', geocoding")
        candidates = await self.gateway.geocode(search_query)
        if not candidates:
            raise NoLocationData(f"No geocoding results for '{search_query}'")

        location = normalize_location(candidates[0], search_query)
        location.id = await self.store.insert_location(location)
        logger.info(f"Stored location {location.id} for '{search_query}'")
        return location

    async def resolve_weather(self, location_id: int, latitude: float, longitude: float) -> List[ForecastDay]:
        """
        Resolve the daily forecast for a location.

        On a miss every forecast day is written in the background; the
        response does not wait for, or depend on, those writes.

        Raises:
            NoWeatherData: Forecast provider returned an empty series
            FetchError: Any store, network or payload failure
        """
        cached = await self.store.find_forecasts_by_location(location_id)
        if cached:
            logger.debug(f"Weather cache hit for location {location_id} ({len(cached)} days)")
            return cached

        logger.info(f"Weather cache miss for location {location_id}, fetching forecast")
        days = await self.gateway.forecast(latitude, longitude)
        if not days:
            raise NoWeatherData(f"Empty forecast for location {location_id}")

        forecasts = [normalize_forecast_day(day, location_id) for day in days]
        self._persist_all(self.store.insert_forecast, forecasts, f"forecast for location {location_id}")
        return forecasts

    async def resolve_meetups(self, location_id: int, latitude: float, longitude: float) -> List[MeetupEvent]:
        """
        Resolve upcoming meetup events near a location.

        Same caching and write behaviour as resolve_weather.

        Raises:
            NoEventData: Events provider returned no events
            FetchError: Any store, network or payload failure
        """
        cached = await self.store.find_meetups_by_location(location_id)
        if cached:
            logger.debug(f"Meetups cache hit for location {location_id} ({len(cached)} events)")
            return cached

        logger.info(f"Meetups cache miss for location {location_id}, fetching events")
        raw_events = await self.gateway.events(latitude, longitude)
        if not raw_events:
            raise NoEventData(f"No events found for location {location_id}")

        events = [normalize_meetup_event(event, location_id) for event in raw_events]
        self._persist_all(self.store.insert_meetup, events, f"meetup for location {location_id}")
        return events

    async def wait_for_pending_writes(self) -> None:
        """Wait until every background insert issued so far has finished."""
        while self._pending_writes:
            await asyncio.gather(*list(self._pending_writes), return_exceptions=True)

    def _persist_all(self, insert: Callable[[Any], Awaitable[None]], records: List[Any], description: str) -> None:
        """Issue one independent background insert per record."""
        for record in records:
            task = asyncio.create_task(insert(record), name=description)
            self._pending_writes.add(task)
            task.add_done_callback(self._on_write_done)
        logger.info(f"Caching {len(records)} x {description}")

    def _on_write_done(self, task: asyncio.Task) -> None:
        self._pending_writes.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Failed to cache {task.get_name()}: {error}", exc_info=error)
