"""
FastAPI main application for the City Explorer API.
"""
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import async_sessionmaker

from city_explorer import config
from city_explorer.database import DATABASE_URL, create_engine, init_db
from city_explorer.routes import health, location, meetups, weather
from city_explorer.services.cache_store import CacheStore
from city_explorer.services.provider_gateway import ProviderGateway
from city_explorer.services.resolver import Resolver
from city_explorer.utils.logger import get_logger, setup_logging

settings = config.load_config()
api_config = settings['api']

logger = get_logger(__name__)


def build_gateway(client: httpx.AsyncClient, providers_config: dict) -> ProviderGateway:
    """Create the provider gateway from the ``providers`` config section and env keys."""
    keys = config.provider_keys()
    return ProviderGateway(
        client,
        google_maps_api_key=keys["GOOGLE_MAPS_API_KEY"],
        dark_sky_api_key=keys["DARK_SKY_API_KEY"],
        meetup_api_key=keys["MEETUP_API_KEY"],
        geocode_url=providers_config.get("geocode_url", "https://maps.googleapis.com/maps/api/geocode/json"),
        forecast_url=providers_config.get("forecast_url", "https://api.darksky.net/forecast"),
        events_url=providers_config.get("events_url", "https://api.meetup.com/find/upcoming_events"),
        events_page_size=providers_config.get("events_page_size", 20)
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI.
    Creates the database engine, HTTP client and resolver on startup and
    releases them on shutdown.
    """
    setup_logging(settings['logging'])
    logger.info("Starting up API...")

    # Database
    engine = create_engine(DATABASE_URL, echo=settings['database'].get('echo', False))
    if settings['database'].get('create_tables', True):
        await init_db(engine)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    # Outbound HTTP
    client = httpx.AsyncClient(timeout=settings['providers'].get('timeout', 10))

    resolver = Resolver(
        store=CacheStore(session_factory),
        gateway=build_gateway(client, settings['providers'])
    )

    app.state.db_engine = engine
    app.state.resolver = resolver

    yield

    logger.info("Waiting for pending cache writes...")
    await resolver.wait_for_pending_writes()

    await client.aclose()
    await engine.dispose()
    logger.info("Shutting down API...")


# Create FastAPI application
app = FastAPI(
    title=api_config.get('title', 'City Explorer API'),
    version=api_config.get('version', '1.0.0'),
    description=api_config.get('description', ''),
    lifespan=lifespan,
)

# Configure CORS
cors_config = api_config.get('cors', {})
if cors_config.get('enabled', True):
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_config.get('origins', ["*"]),
        allow_credentials=cors_config.get('allow_credentials', False),
        allow_methods=cors_config.get('allow_methods', ["GET"]),
        allow_headers=cors_config.get('allow_headers', ["*"]),
    )

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(location.router, tags=["Location"])
app.include_router(weather.router, tags=["Weather"])
app.include_router(meetups.router, tags=["Meetups"])


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": app.title,
        "version": app.version,
        "description": app.description,
        "docs": "/docs",
        "health": "/health"
    }
