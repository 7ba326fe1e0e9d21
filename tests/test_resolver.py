"""
Tests for Resolver.

Unit tests use mocked store/gateway; the integration class at the bottom runs
against a real SQLite-backed CacheStore with only the providers mocked.
"""

import asyncio
import logging

import pytest

from city_explorer.exceptions import (
    MalformedResponse,
    NoEventData,
    NoLocationData,
    NoWeatherData,
    ProviderUnreachable,
    StoreUnavailable,
)
from city_explorer.models.location import Location
from city_explorer.models.meetup import MeetupEvent
from city_explorer.models.weather import ForecastDay
from city_explorer.services.resolver import Resolver
from conftest import make_forecast_day, make_geocode_candidate, make_meetup_event


@pytest.fixture
def resolver(mock_store, mock_gateway):
    return Resolver(store=mock_store, gateway=mock_gateway)


# ---------------------------------------------------------------------------
# resolve_location
# ---------------------------------------------------------------------------

class TestResolveLocation:
    @pytest.mark.asyncio
    async def test_cache_hit_skips_provider(self, resolver, mock_store, mock_gateway):
        cached = Location(id=3, search_query="Seattle", formatted_query="Seattle, WA, USA",
                          latitude=47.6, longitude=-122.3)
        mock_store.find_location_by_query.return_value = cached

        result = await resolver.resolve_location("Seattle")

        assert result == cached
        mock_gateway.geocode.assert_not_awaited()
        mock_store.insert_location.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_miss_geocodes_and_inserts_once(self, resolver, mock_store, mock_gateway):
        mock_gateway.geocode.return_value = [make_geocode_candidate()]
        mock_store.insert_location.return_value = 42

        result = await resolver.resolve_location("1600 Amphitheatre Parkway")

        assert result.model_dump() == {
            "id": 42,
            "search_query": "1600 Amphitheatre Parkway",
            "formatted_query": "1600 Amphitheatre Pkwy, Mountain View, CA",
            "latitude": 37.4224,
            "longitude": -122.0842,
        }
        mock_gateway.geocode.assert_awaited_once_with("1600 Amphitheatre Parkway")
        mock_store.insert_location.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_uses_first_candidate(self, resolver, mock_gateway):
        mock_gateway.geocode.return_value = [
            make_geocode_candidate(address="Springfield, IL, USA", lat=39.78, lng=-89.65),
            make_geocode_candidate(address="Springfield, MA, USA", lat=42.1, lng=-72.59),
        ]

        result = await resolver.resolve_location("Springfield")

        assert result.formatted_query == "Springfield, IL, USA"

    @pytest.mark.asyncio
    async def test_no_candidates(self, resolver, mock_store, mock_gateway):
        mock_gateway.geocode.return_value = []

        with pytest.raises(NoLocationData):
            await resolver.resolve_location("xyzzy")
        mock_store.insert_location.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_provider_failure_propagates(self, resolver, mock_gateway):
        mock_gateway.geocode.side_effect = ProviderUnreachable("geocoding API error: 500")

        with pytest.raises(ProviderUnreachable):
            await resolver.resolve_location("Seattle")

    @pytest.mark.asyncio
    async def test_insert_failure_propagates(self, resolver, mock_store, mock_gateway):
        mock_gateway.geocode.return_value = [make_geocode_candidate()]
        mock_store.insert_location.side_effect = StoreUnavailable("database is locked")

        with pytest.raises(StoreUnavailable):
            await resolver.resolve_location("Seattle")

    @pytest.mark.asyncio
    async def test_read_failure_skips_provider(self, resolver, mock_store, mock_gateway):
        mock_store.find_location_by_query.side_effect = StoreUnavailable("connection refused")

        with pytest.raises(StoreUnavailable):
            await resolver.resolve_location("Seattle")
        mock_gateway.geocode.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_malformed_candidate(self, resolver, mock_store, mock_gateway):
        mock_gateway.geocode.return_value = [{"formatted_address": "Seattle, WA, USA"}]

        with pytest.raises(MalformedResponse):
            await resolver.resolve_location("Seattle")
        mock_store.insert_location.assert_not_awaited()


# ---------------------------------------------------------------------------
# resolve_weather
# ---------------------------------------------------------------------------

class TestResolveWeather:
    @pytest.mark.asyncio
    async def test_cache_hit_returns_rows_without_provider_call(self, resolver, mock_store, mock_gateway):
        cached = [ForecastDay(location_id=7, forecast="Clear.", time="Sun Sep 13 2020")]
        mock_store.find_forecasts_by_location.return_value = cached

        result = await resolver.resolve_weather(7, 47.6, -122.3)

        assert result == cached
        mock_gateway.forecast.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_miss_returns_normalized_series(self, resolver, mock_store, mock_gateway):
        mock_gateway.forecast.return_value = [
            make_forecast_day(summary="Clear.", time=1600000000),
            make_forecast_day(summary="Rain.", time=1600086400),
        ]

        result = await resolver.resolve_weather(7, 47.6, -122.3)
        await resolver.wait_for_pending_writes()

        assert result == [
            ForecastDay(location_id=7, forecast="Clear.", time="Sun Sep 13 2020"),
            ForecastDay(location_id=7, forecast="Rain.", time="Mon Sep 14 2020"),
        ]
        mock_gateway.forecast.assert_awaited_once_with(47.6, -122.3)
        assert mock_store.insert_forecast.await_count == 2

    @pytest.mark.asyncio
    async def test_empty_series(self, resolver, mock_store, mock_gateway):
        mock_gateway.forecast.return_value = []

        with pytest.raises(NoWeatherData):
            await resolver.resolve_weather(7, 47.6, -122.3)
        mock_store.insert_forecast.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_malformed_entry_writes_nothing(self, resolver, mock_store, mock_gateway):
        mock_gateway.forecast.return_value = [make_forecast_day(), {"summary": "No timestamp."}]

        with pytest.raises(MalformedResponse):
            await resolver.resolve_weather(7, 47.6, -122.3)
        await resolver.wait_for_pending_writes()
        mock_store.insert_forecast.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_insert_failure_does_not_fail_response(self, resolver, mock_store, mock_gateway, caplog):
        mock_gateway.forecast.return_value = [make_forecast_day(), make_forecast_day(), make_forecast_day()]
        mock_store.insert_forecast.side_effect = [None, StoreUnavailable("disk full"), None]

        with caplog.at_level(logging.ERROR, logger="city_explorer"):
            result = await resolver.resolve_weather(7, 47.6, -122.3)
            await resolver.wait_for_pending_writes()

        assert len(result) == 3
        assert mock_store.insert_forecast.await_count == 3
        assert "Failed to cache forecast for location 7" in caplog.text

    @pytest.mark.asyncio
    async def test_response_does_not_wait_for_writes(self, resolver, mock_store, mock_gateway):
        release = asyncio.Event()
        started = []

        async def slow_insert(record):
            started.append(record)
            await release.wait()

        mock_store.insert_forecast.side_effect = slow_insert
        mock_gateway.forecast.return_value = [make_forecast_day(), make_forecast_day()]

        result = await resolver.resolve_weather(7, 47.6, -122.3)
        assert len(result) == 2

        # Both inserts are in flight at once
        await asyncio.sleep(0)
        assert len(started) == 2

        release.set()
        await resolver.wait_for_pending_writes()
        assert mock_store.insert_forecast.await_count == 2


# ---------------------------------------------------------------------------
# resolve_meetups
# ---------------------------------------------------------------------------

class TestResolveMeetups:
    @pytest.mark.asyncio
    async def test_cache_hit(self, resolver, mock_store, mock_gateway):
        cached = [MeetupEvent(location_id=7, link="https://example.com/e/1", name="Board games",
                              creation_date="Sun Sep 13 2020", host="Tabletop Seattle")]
        mock_store.find_meetups_by_location.return_value = cached

        assert await resolver.resolve_meetups(7, 47.6, -122.3) == cached
        mock_gateway.events.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_miss_normalizes_and_persists(self, resolver, mock_store, mock_gateway):
        mock_gateway.events.return_value = [make_meetup_event(), make_meetup_event(name="Rust Night")]

        result = await resolver.resolve_meetups(7, 47.6, -122.3)
        await resolver.wait_for_pending_writes()

        assert [event.name for event in result] == ["Python Night", "Rust Night"]
        assert all(event.location_id == 7 for event in result)
        assert mock_store.insert_meetup.await_count == 2

    @pytest.mark.asyncio
    async def test_no_events(self, resolver, mock_gateway):
        mock_gateway.events.return_value = []

        with pytest.raises(NoEventData):
            await resolver.resolve_meetups(7, 47.6, -122.3)

    @pytest.mark.asyncio
    async def test_provider_failure_propagates(self, resolver, mock_gateway):
        mock_gateway.events.side_effect = ProviderUnreachable("events API error: 401")

        with pytest.raises(ProviderUnreachable):
            await resolver.resolve_meetups(7, 47.6, -122.3)


# ---------------------------------------------------------------------------
# Integration with a real CacheStore
# ---------------------------------------------------------------------------

class TestResolverWithStore:
    @pytest.fixture
    def resolver(self, store, mock_gateway):
        return Resolver(store=store, gateway=mock_gateway)

    @pytest.mark.asyncio
    async def test_location_second_call_served_from_cache(self, resolver, mock_gateway):
        mock_gateway.geocode.return_value = [make_geocode_candidate()]

        first = await resolver.resolve_location("1600 Amphitheatre Parkway")
        second = await resolver.resolve_location("1600 Amphitheatre Parkway")

        assert first == second
        assert first.id is not None
        mock_gateway.geocode.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_weather_cached_after_writes_complete(self, resolver, mock_gateway):
        mock_gateway.geocode.return_value = [make_geocode_candidate()]
        mock_gateway.forecast.return_value = [make_forecast_day(), make_forecast_day(time=1600086400)]
        location = await resolver.resolve_location("Mountain View")

        fetched = await resolver.resolve_weather(location.id, location.latitude, location.longitude)
        await resolver.wait_for_pending_writes()
        cached = await resolver.resolve_weather(location.id, location.latitude, location.longitude)

        assert sorted(cached, key=lambda day: day.time) == sorted(fetched, key=lambda day: day.time)
        mock_gateway.forecast.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_meetups_cached_after_writes_complete(self, resolver, mock_gateway):
        mock_gateway.geocode.return_value = [make_geocode_candidate()]
        mock_gateway.events.return_value = [make_meetup_event()]
        location = await resolver.resolve_location("Mountain View")

        fetched = await resolver.resolve_meetups(location.id, location.latitude, location.longitude)
        await resolver.wait_for_pending_writes()
        cached = await resolver.resolve_meetups(location.id, location.latitude, location.longitude)

        assert cached == fetched
        mock_gateway.events.assert_awaited_once()
