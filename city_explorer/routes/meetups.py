"""
Meetups endpoint: upcoming events near a resolved location.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from city_explorer.dependencies import get_location_ref, get_resolver
from city_explorer.exceptions import FetchError
from city_explorer.models.location import LocationRef
from city_explorer.models.meetup import MeetupEvent
from city_explorer.routes.location import GENERIC_ERROR
from city_explorer.services.resolver import Resolver
from city_explorer.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.get(
    "/meetups",
    response_model=List[MeetupEvent],
    summary="Get nearby meetups",
    description="Upcoming meetup events near a location returned by /location"
)
async def get_meetups(
    location: LocationRef = Depends(get_location_ref),
    resolver: Resolver = Depends(get_resolver)
):
    """
    Get upcoming meetup events near a location.

    Raises:
        400: Missing or invalid location reference
        500: Events provider or database failure
    """
    try:
        return await resolver.resolve_meetups(location.id, location.latitude, location.longitude)
    except FetchError as e:
        logger.error(f"Meetups lookup for location {location.id} failed: {type(e).__name__}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=GENERIC_ERROR
        )
