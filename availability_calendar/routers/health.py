"""
Health Check Endpoints

- /health/live - Liveness check (is process running)
- /health/ready - Readiness check (is the day store attached)
"""

from fastapi import APIRouter, Request
from datetime import datetime, timezone

from ..config import settings

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("/live")
async def liveness():
    """Process is up"""
    return {
        "status": "alive",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/ready")
async def readiness(request: Request):
    """Service can accept traffic once the calendar store exists"""
    store = getattr(request.app.state, "calendar_store", None)
    if store is None:
        return {"status": "not_ready", "environment": settings.environment}

    bounds = store.date_bounds()
    return {
        "status": "ready",
        "environment": settings.environment,
        "stored_days": len(store),
        "first_date": bounds[0] if bounds else None,
        "last_date": bounds[1] if bounds else None
    }
