"""Health check endpoints for load balancers and monitoring."""

from datetime import datetime

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text

from app.config import settings
from app.database import engine
from app.utils.redis_client import get_redis

router = APIRouter(tags=["health"])


async def _check_database() -> None:
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def _check_redis() -> None:
    redis_client = await get_redis()
    await redis_client.ping()


@router.get("/health")
async def health_check():
    """Liveness only; touches neither the database nor Redis."""
    return {
        "status": "ok",
        "service": "AgriRent",
        "environment": settings.environment,
        "timestamp": datetime.utcnow().isoformat(),
    }


@router.get("/health/ready")
async def readiness_check():
    """200 when the database and Redis both answer, 503 otherwise."""
    checks = {"service": "ok"}
    for name, probe in (("database", _check_database), ("redis", _check_redis)):
        try:
            await probe()
            checks[name] = "ok"
        except Exception as e:
            checks[name] = f"error: {str(e)[:100]}"

    healthy = all(result == "ok" for result in checks.values())
    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "service": "AgriRent",
            "checks": checks,
            "timestamp": datetime.utcnow().isoformat(),
        },
    )
