"""
Health Check Endpoints.

    GET /health        liveness: the process answers
    GET /health/ready  readiness: the database answers within the configured timeout

Neither route requires authentication.
"""

import asyncio
from typing import Any

from fastapi import APIRouter, HTTPException
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from second_brain.backend.core.config import get_app_config
from second_brain.backend.core.database import get_engine
from second_brain.backend.core.logging import get_logger
from second_brain.backend.core.utils import utc_now

router = APIRouter()
logger = get_logger(__name__)


async def check_database() -> dict[str, Any]:
    """
    Ping the database with SELECT 1.

    Returns:
        {"status": "not_configured"} when database.yaml has no host or name,
        {"status": "healthy", "latency_ms": n} on success,
        {"status": "unhealthy", "error": "..."} when the ping fails.
    """
    db_config = get_app_config().database
    if not db_config.host or not db_config.name:
        return {"status": "not_configured"}

    start = utc_now()
    try:
        async with get_engine().connect() as connection:
            await connection.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        return {"status": "unhealthy", "error": str(e)}

    return {"status": "healthy", "latency_ms": int((utc_now() - start).total_seconds() * 1000)}


@router.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": "healthy"}


@router.get("/health/ready")
async def readiness_check() -> dict[str, Any]:
    """200 when the database is reachable or not configured, 503 otherwise."""
    timeout = get_app_config().application.timeouts.database
    try:
        async with asyncio.timeout(timeout):
            database = await check_database()
    except TimeoutError:
        database = {"status": "unhealthy", "error": f"no response within {timeout}s"}

    report = {
        "status": "unhealthy" if database["status"] == "unhealthy" else "healthy",
        "checks": {"database": database},
        "timestamp": utc_now().isoformat(),
    }
    if report["status"] == "unhealthy":
        logger.warning("Readiness check failed", extra={"checks": report["checks"]})
        raise HTTPException(status_code=503, detail=report)
    return report
