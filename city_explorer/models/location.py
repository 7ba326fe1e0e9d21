"""
Pydantic models for location data.
"""
from typing import Optional

from pydantic import BaseModel, Field


class Location(BaseModel):
    """Geocoded location, cached by the original search query."""

    id: Optional[int] = Field(None, description="Database ID, assigned on first insert")
    search_query: str = Field(..., description="Search string as entered by the user")
    formatted_query: str = Field(..., description="Canonical address returned by the geocoder")
    latitude: float = Field(..., description="Latitude in decimal degrees")
    longitude: float = Field(..., description="Longitude in decimal degrees")

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "examples": [
                {
                    "id": 1,
                    "search_query": "1600 Amphitheatre Parkway",
                    "formatted_query": "1600 Amphitheatre Pkwy, Mountain View, CA",
                    "latitude": 37.4224,
                    "longitude": -122.0842
                }
            ]
        }
    }


class LocationRef(BaseModel):
    """Location reference sent by clients when asking for weather or meetups."""

    id: int = Field(..., description="Location ID returned by /location")
    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")
