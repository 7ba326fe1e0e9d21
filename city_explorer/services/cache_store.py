"""
Cache store service for reading and writing cached provider data.
"""
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from city_explorer.database.models import LocationRow, MeetupRow, WeatherRow
from city_explorer.exceptions import StoreUnavailable
from city_explorer.models.location import Location
from city_explorer.models.meetup import MeetupEvent
from city_explorer.models.weather import ForecastDay

_DB_ERRORS = (SQLAlchemyError, OSError)


class CacheStore:
    """
    Append-only access to the locations, weathers and meetups tables.

    Reads are equality lookups and writes are single-row inserts; every
    database failure is raised as StoreUnavailable.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """
        Initialize cache store.

        Args:
            session_factory: Session factory bound to the application's engine
        """
        self.session_factory = session_factory

    async def find_location_by_query(self, query: str) -> Optional[Location]:
        """
        Get the cached location for a search query.

        Args:
            query: Search string exactly as the user entered it

        Returns:
            Location, or None if the query has not been geocoded yet
        """
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(LocationRow)
                    .where(LocationRow.search_query == query)
                    .order_by(LocationRow.id)
                )
                row = result.scalars().first()
        except _DB_ERRORS as e:
            raise StoreUnavailable(f"Failed to read location for '{query}': {str(e)}") from e

        if row is None:
            return None
        return Location.model_validate(row)

    async def insert_location(self, location: Location) -> int:
        """
        Insert a location.

        Args:
            location: Normalized location; its ``id`` is ignored

        Returns:
            Database ID generated for the new row
        """
        row = LocationRow(
            search_query=location.search_query,
            formatted_query=location.formatted_query,
            latitude=location.latitude,
            longitude=location.longitude
        )
        try:
            async with self.session_factory() as session:
                session.add(row)
                await session.flush()
                location_id = row.id
                await session.commit()
        except _DB_ERRORS as e:
            raise StoreUnavailable(
                f"Failed to insert location for '{location.search_query}': {str(e)}"
            ) from e

        return location_id

    async def find_forecasts_by_location(self, location_id: int) -> List[ForecastDay]:
        """Get all cached forecast days for a location, in insertion order."""
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(WeatherRow)
                    .where(WeatherRow.location_id == location_id)
                    .order_by(WeatherRow.id)
                )
                rows = result.scalars().all()
        except _DB_ERRORS as e:
            raise StoreUnavailable(f"Failed to read forecasts for location {location_id}: {str(e)}") from e

        return [ForecastDay.model_validate(row) for row in rows]

    async def insert_forecast(self, forecast: ForecastDay) -> None:
        """Insert one forecast day."""
        try:
            async with self.session_factory() as session:
                session.add(WeatherRow(
                    forecast=forecast.forecast,
                    time=forecast.time,
                    location_id=forecast.location_id
                ))
                await session.commit()
        except _DB_ERRORS as e:
            raise StoreUnavailable(
                f"Failed to insert forecast for location {forecast.location_id}: {str(e)}"
            ) from e

    async def find_meetups_by_location(self, location_id: int) -> List[MeetupEvent]:
        """Get all cached meetup events for a location, in insertion order."""
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(MeetupRow)
                    .where(MeetupRow.location_id == location_id)
                    .order_by(MeetupRow.id)
                )
                rows = result.scalars().all()
        except _DB_ERRORS as e:
            raise StoreUnavailable(f"Failed to read meetups for location {location_id}: {str(e)}") from e

        return [MeetupEvent.model_validate(row) for row in rows]

    async def insert_meetup(self, event: MeetupEvent) -> None:
        """Insert one meetup event."""
        try:
            async with self.session_factory() as session:
                session.add(MeetupRow(
                    link=event.link,
                    name=event.name,
                    creation_date=event.creation_date,
                    host=event.host,
                    location_id=event.location_id
                ))
                await session.commit()
        except _DB_ERRORS as e:
            raise StoreUnavailable(
                f"Failed to insert meetup for location {event.location_id}: {str(e)}"
            ) from e
