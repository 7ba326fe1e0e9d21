"""
Pydantic models for weather data.
"""
from pydantic import BaseModel, Field


class ForecastDay(BaseModel):
    """One day of a location's forecast."""

    location_id: int = Field(..., description="ID of the location this forecast belongs to")
    forecast: str = Field(..., description="Summary of the day's weather")
    time: str = Field(..., description="Calendar date, e.g. 'Mon Oct 19 2026'")

    model_config = {
        "from_attributes": True
    }
