"""
Pydantic models for meetup event data.
"""
from pydantic import BaseModel, Field


class MeetupEvent(BaseModel):
    """Upcoming meetup event near a location."""

    location_id: int = Field(..., description="ID of the location this event was found for")
    link: str = Field(..., description="Event page URL")
    name: str = Field(..., description="Event title")
    creation_date: str = Field(..., description="Calendar date the event was created")
    host: str = Field(..., description="Name of the organizing group")

    model_config = {
        "from_attributes": True
    }
