"""
Location endpoint: geocode a search string, served from cache when possible.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from city_explorer.dependencies import get_resolver
from city_explorer.exceptions import FetchError
from city_explorer.models.location import Location
from city_explorer.services.resolver import Resolver
from city_explorer.utils.logger import get_logger

GENERIC_ERROR = "Sorry, something went wrong"

router = APIRouter()
logger = get_logger(__name__)


@router.get(
    "/location",
    response_model=Location,
    summary="Resolve a location",
    description="Geocode a search string; cached results are returned without calling the geocoder"
)
async def get_location(data: Optional[str] = None, resolver: Resolver = Depends(get_resolver)):
    """
    Resolve a search string to a location.

    Args:
        data: Search string, e.g. "Seattle" or "1600 Amphitheatre Parkway"

    Returns:
        Location: Geocoded location with its database ID

    Raises:
        400: Missing search string
        500: Geocoding or database failure
    """
    if data is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing query parameter 'data'"
        )

    try:
        return await resolver.resolve_location(data)
    except FetchError as e:
        logger.error(f"Location lookup for '{data}' failed: {type(e).__name__}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=GENERIC_ERROR
        )
