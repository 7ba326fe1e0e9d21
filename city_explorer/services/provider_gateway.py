"""
Async gateway to the geocoding, forecast and events providers.
"""
from typing import Any, Dict, List, Optional

import httpx

from city_explorer.exceptions import MalformedResponse, ProviderUnreachable
from city_explorer.utils.logger import get_logger

logger = get_logger(__name__)


class ProviderGateway:
    """
    Outbound calls to the three external data providers.

    Each operation makes exactly one request and returns the relevant part of
    the parsed payload. There is no retry; failures are raised as
    ProviderUnreachable or MalformedResponse.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        google_maps_api_key: Optional[str] = None,
        dark_sky_api_key: Optional[str] = None,
        meetup_api_key: Optional[str] = None,
        geocode_url: str = "https://maps.googleapis.com/maps/api/geocode/json",
        forecast_url: str = "https://api.darksky.net/forecast",
        events_url: str = "https://api.meetup.com/find/upcoming_events",
        events_page_size: int = 20
    ):
        """
        Initialize provider gateway.

        Args:
            client: Shared HTTP client; its timeout applies to every call
            google_maps_api_key: Geocoding API key
            dark_sky_api_key: Forecast API key
            meetup_api_key: Events API key
            geocode_url: Geocoding endpoint
            forecast_url: Forecast endpoint prefix (key and coordinates are appended)
            events_url: Upcoming events endpoint
            events_page_size: Number of events requested per call
        """
        self.client = client
        self.google_maps_api_key = google_maps_api_key
        self.dark_sky_api_key = dark_sky_api_key
        self.meetup_api_key = meetup_api_key
        self.geocode_url = geocode_url
        self.forecast_url = forecast_url.rstrip("/")
        self.events_url = events_url
        self.events_page_size = events_page_size

    async def geocode(self, query: str) -> List[Dict[str, Any]]:
        """
        Look up candidate locations for an address string.

        Args:
            query: Free-form address or place name

        Returns:
            Geocoding candidates, best match first (possibly empty)
        """
        key = self._require_key(self.google_maps_api_key, "GOOGLE_MAPS_API_KEY")
        body = await self._get_json(
            self.geocode_url,
            params={"key": key, "address": query},
            provider="geocoding"
        )
        return self._extract(body, ("results",), "geocoding")

    async def forecast(self, latitude: float, longitude: float) -> List[Dict[str, Any]]:
        """
        Fetch the daily forecast series for a coordinate pair.

        Args:
            latitude: Latitude coordinate
            longitude: Longitude coordinate

        Returns:
            Daily forecast entries (possibly empty)
        """
        key = self._require_key(self.dark_sky_api_key, "DARK_SKY_API_KEY")
        body = await self._get_json(
            f"{self.forecast_url}/{key}/{latitude},{longitude}",
            params=None,
            provider="forecast"
        )
        return self._extract(body, ("daily", "data"), "forecast")

    async def events(self, latitude: float, longitude: float) -> List[Dict[str, Any]]:
        """
        Fetch upcoming meetup events near a coordinate pair.

        Args:
            latitude: Latitude coordinate
            longitude: Longitude coordinate

        Returns:
            Event entries (possibly empty)
        """
        key = self._require_key(self.meetup_api_key, "MEETUP_API_KEY")
        body = await self._get_json(
            self.events_url,
            params={
                "lat": latitude,
                "lon": longitude,
                "sign": "true",
                "photo-host": "public",
                "page": self.events_page_size,
                "key": key
            },
            provider="events"
        )
        return self._extract(body, ("events",), "events")

    @staticmethod
    def _require_key(key: Optional[str], env_name: str) -> str:
        if not key:
            raise ProviderUnreachable(f"Missing {env_name}. Set it in your .env")
        return key

    async def _get_json(self, url: str, params: Optional[Dict[str, Any]], provider: str) -> Any:
        """
        Perform a single GET request and decode the JSON body.

        Raises:
            ProviderUnreachable: On network failure, timeout or non-2xx status
            MalformedResponse: If the body is not valid JSON
        """
        logger.debug(f"Requesting {provider} provider")
        try:
            response = await self.client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderUnreachable(
                f"{provider} API error: {e.response.status_code} {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            raise ProviderUnreachable(f"{provider} API request failed: {e!r}") from e

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponse(f"Invalid JSON response from {provider} API") from e

    @staticmethod
    def _extract(body: Any, path: tuple, provider: str) -> List[Dict[str, Any]]:
        """Walk ``path`` into the response body and return the list found there."""
        value = body
        for key in path:
            if not isinstance(value, dict) or key not in value:
                raise MalformedResponse(
                    f"{provider} API response is missing '{'.'.join(path)}'"
                )
            value = value[key]

        if not isinstance(value, list):
            raise MalformedResponse(
                f"{provider} API response field '{'.'.join(path)}' is not a list"
            )
        return value
