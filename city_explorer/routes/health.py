"""
Health check endpoint for monitoring API status.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Request, status
from sqlalchemy import text

from city_explorer import config

router = APIRouter()


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(request: Request):
    """
    Health check endpoint to verify API status.

    Returns:
        dict: System health status including database and provider credentials
    """
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "unknown",
        "providers": {}
    }

    # Check database connection
    try:
        async with request.app.state.db_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        health_status["database"] = "connected"
    except Exception as e:
        health_status["database"] = f"error: {str(e)}"
        health_status["status"] = "degraded"

    # Provider keys are only checked for presence; the providers are not called
    for name, key in config.provider_keys().items():
        health_status["providers"][name] = "configured" if key else "missing"

    return health_status
