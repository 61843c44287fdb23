"""
Health Check Endpoints.

Provides liveness, readiness, and detailed health checks.

Endpoints:
- /health: Liveness check (process running)
- /health/ready: Readiness check (database reachable)
- /health/detailed: Component status, including the trash scheduler
"""

import asyncio
from typing import Any

from fastapi import APIRouter, HTTPException, Request

from xnote.backend.core.logging import get_logger
from xnote.backend.core.utils import utc_now

router = APIRouter()
logger = get_logger(__name__)


async def check_database(request: Request) -> dict[str, Any]:
    """
    Check database connectivity.

    Returns:
        Dict with status, latency, and optional error message
    """
    database = getattr(request.app.state, "database", None)
    if database is None or not database.is_connected:
        return {"status": "not_configured"}

    try:
        start = utc_now()
        await database.ping()
        latency_ms = int((utc_now() - start).total_seconds() * 1000)
        return {"status": "healthy", "latency_ms": latency_ms}
    except Exception as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        return {"status": "unhealthy", "error": str(e)}


def trash_scheduler_status(request: Request) -> dict[str, Any]:
    scheduler = getattr(request.app.state, "trash_scheduler", None)
    if scheduler is None:
        return {"status": "disabled"}
    return {
        "status": "running" if scheduler.running else "stopped",
        "retention_days": scheduler.retention_days,
        "purge_time": f"{scheduler.purge_hour:02d}:{scheduler.purge_minute:02d}",
    }


@router.get("/health")
async def health_check() -> dict[str, str]:
    """
    Liveness check.

    Returns 200 if the process is running. No dependency checks.
    """
    return {"status": "healthy"}


@router.get("/health/ready")
async def readiness_check(request: Request) -> dict[str, Any]:
    """
    Readiness check.

    Returns 503 if the database is unhealthy or does not answer in time.
    """
    from xnote.backend.core.config import get_app_config
    timeout = get_app_config().application.timeouts.database

    try:
        async with asyncio.timeout(timeout):
            db_result = await check_database(request)
    except TimeoutError:
        db_result = {"status": "unhealthy", "error": "timed out"}

    checks = {"database": db_result}

    if db_result.get("status") == "unhealthy":
        logger.warning("Readiness check failed", extra={"checks": checks})
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "checks": checks,
                "timestamp": utc_now().isoformat(),
            },
        )

    return {
        "status": "healthy",
        "checks": checks,
        "timestamp": utc_now().isoformat(),
    }


@router.get("/health/detailed")
async def detailed_health_check(request: Request) -> dict[str, Any]:
    """Detailed health check with application info and background job status."""
    from xnote.backend.core.config import get_app_config

    checks = {"database": await check_database(request)}

    app_settings = get_app_config().application
    app_info = {
        "name": app_settings.name,
        "env": app_settings.environment,
        "debug": app_settings.debug,
        "version": app_settings.version,
    }

    overall_status = "unhealthy" if checks["database"]["status"] == "unhealthy" else "healthy"

    return {
        "status": overall_status,
        "application": app_info,
        "checks": checks,
        "trash_scheduler": trash_scheduler_status(request),
        "timestamp": utc_now().isoformat(),
    }
