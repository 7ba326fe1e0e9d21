"""
Dependency injection for FastAPI.
Provides the resolver and parses the location reference query argument.
"""
import json

from fastapi import HTTPException, Request, status
from pydantic import ValidationError

from city_explorer.models.location import LocationRef
from city_explorer.services.resolver import Resolver


def get_resolver(request: Request) -> Resolver:
    """
    Get the resolver created during application startup.

    Returns:
        Resolver: Shared resolver bound to the application's engine and HTTP client
    """
    return request.app.state.resolver


def get_location_ref(request: Request) -> LocationRef:
    """
    Read the ``data`` query argument of /weather and /meetups.

    Accepts either a JSON object (``data={"id": 7, ...}``) or the bracketed
    form browsers send for nested objects (``data[id]=7&data[latitude]=...``).

    Raises:
        400: Missing or invalid location reference
    """
    params = request.query_params
    raw = params.get("data")

    if raw is not None:
        try:
            payload = json.loads(raw)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Query parameter 'data' must be a JSON object"
            )
    else:
        payload = {
            key[len("data["):-1]: value
            for key, value in params.items()
            if key.startswith("data[") and key.endswith("]")
        }
        if not payload:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Missing query parameter 'data'"
            )

    try:
        return LocationRef.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid location reference: {e.errors(include_url=False)}"
        )
