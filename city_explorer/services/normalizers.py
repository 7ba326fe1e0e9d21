"""
Normalizers turning raw provider payload fragments into canonical records.

Each function either returns a complete record or raises MalformedResponse;
missing or mistyped source fields never produce a partially populated record.
"""
from datetime import datetime, timezone
from typing import Any, Dict

from city_explorer.exceptions import MalformedResponse
from city_explorer.models.location import Location
from city_explorer.models.meetup import MeetupEvent
from city_explorer.models.weather import ForecastDay

# "Mon Oct 19 2026"
DATE_FORMAT = "%a %b %d %Y"

_PAYLOAD_ERRORS = (KeyError, IndexError, TypeError, ValueError, OverflowError)


def format_date(epoch_seconds: float) -> str:
    """Convert a UNIX timestamp to a calendar date string (UTC)."""
    return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc).strftime(DATE_FORMAT)


def normalize_location(candidate: Dict[str, Any], search_query: str) -> Location:
    """
    Build a Location from a geocoding candidate.

    Args:
        candidate: One entry of the geocoder's ``results`` list
        search_query: Search string the candidate was found for

    Returns:
        Location with ``id`` unset

    Raises:
        MalformedResponse: If the address or coordinates are missing
    """
    try:
        coordinates = candidate["geometry"]["location"]
        return Location(
            search_query=search_query,
            formatted_query=candidate["formatted_address"],
            latitude=coordinates["lat"],
            longitude=coordinates["lng"]
        )
    except _PAYLOAD_ERRORS as e:
        raise MalformedResponse(f"Invalid geocoding candidate for '{search_query}': {e!r}") from e


def normalize_forecast_day(day: Dict[str, Any], location_id: int) -> ForecastDay:
    """
    Build a ForecastDay from one entry of the forecast's daily series.

    ``time`` is given in epoch seconds.
    """
    try:
        return ForecastDay(
            location_id=location_id,
            forecast=day["summary"],
            time=format_date(day["time"])
        )
    except _PAYLOAD_ERRORS as e:
        raise MalformedResponse(f"Invalid forecast entry for location {location_id}: {e!r}") from e


def normalize_meetup_event(event: Dict[str, Any], location_id: int) -> MeetupEvent:
    """
    Build a MeetupEvent from one entry of the events list.

    ``created`` is given in epoch milliseconds.
    """
    try:
        return MeetupEvent(
            location_id=location_id,
            link=event["link"],
            name=event["name"],
            creation_date=format_date(event["created"] / 1000),
            host=event["group"]["name"]
        )
    except _PAYLOAD_ERRORS as e:
        raise MalformedResponse(f"Invalid meetup event for location {location_id}: {e!r}") from e
