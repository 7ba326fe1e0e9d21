"""
Failure taxonomy for location, weather and meetup resolution.

Every error raised while resolving a resource is a FetchError. Handlers map
all of them to the same server-error response; the subclasses exist so the
logs say what actually went wrong.
"""


class FetchError(Exception):
    """Base class for any failure surfaced by resolution."""


class NoLocationData(FetchError):
    """Geocoding provider returned no candidates for the query."""


class NoWeatherData(FetchError):
    """Forecast provider returned an empty daily series."""


class NoEventData(FetchError):
    """Events provider returned an empty event list."""


class ProviderUnreachable(FetchError):
    """Network failure, timeout or non-success status from a provider."""


class StoreUnavailable(FetchError):
    """Read or write failure against the cache store."""


class MalformedResponse(FetchError):
    """Provider payload could not be parsed or lacks a required field."""
