from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from checkin_kiosk.config import config
from checkin_kiosk.models.database import get_redis
from checkin_kiosk.services.attendee_table import AttendeeTable
from checkin_kiosk.services.checkin_provider import get_attendee_table

health = APIRouter()


@health.get("/health")
async def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "service": "checkin-kiosk",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": config.get("environment") or "development",
    }


@health.get("/health/detailed")
async def detailed_health_check(
    redis_client=Depends(get_redis),
    table: AttendeeTable = Depends(get_attendee_table),
):
    """Detailed health check with cache and attendee store checks"""
    health_status = {
        "status": "healthy",
        "service": "checkin-kiosk",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": config.get("environment") or "development",
        "checks": {},
    }

    # A cache outage degrades to uncached reads, so it does not fail the check
    try:
        redis_client.ping()
        health_status["checks"]["cache"] = "healthy"
    except Exception as e:
        health_status["checks"]["cache"] = f"degraded: {str(e)}"

    try:
        grid = table.read_grid()
        health_status["checks"]["attendee_store"] = "healthy"
        health_status["checks"]["attendee_rows"] = max(len(grid) - 1, 0)
    except Exception as e:
        health_status["checks"]["attendee_store"] = f"unhealthy: {str(e)}"
        health_status["status"] = "unhealthy"

    if health_status["status"] == "unhealthy":
        raise HTTPException(status_code=503, detail=health_status)

    return health_status
