import asyncio
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter
from fastapi.concurrency import run_in_threadpool

from src.core.config.settings import settings
from src.core.dependencies import LeadCapture
from src.core.logging import logger

from .schemas import HealthResponse

router = APIRouter()


async def _probe(name: str, check) -> Dict[str, Any]:
    try:
        healthy = await run_in_threadpool(check)
    except Exception as e:
        logger.error("health_check_failed", service=name, error=str(e))
        return {"status": "unhealthy", "error": str(e)}
    return {"status": "healthy" if healthy else "unhealthy"}


@router.get("/", response_model=HealthResponse)
async def health_check(lead_capture: LeadCapture):
    """
    Health check covering the backends the application is configured to use.
    """
    names = list(lead_capture.health_checks)
    results = await asyncio.gather(*(_probe(name, lead_capture.health_checks[name]) for name in names))
    services = dict(zip(names, results))

    overall_status = "ok" if all(result["status"] == "healthy" for result in results) else "degraded"

    return HealthResponse(
        status=overall_status,
        env=settings.APP_ENV,
        version=settings.VERSION,
        services=services,
        timestamp=datetime.now(timezone.utc),
    )
