"""Metrics endpoint for exposing lead-capture counters.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends

from src.core.dependencies import LeadCapture, require_admin_key

router = APIRouter()


@router.get("/", response_model=Dict[str, Any], dependencies=[Depends(require_admin_key)])
async def get_metrics(lead_capture: LeadCapture):
    """Get outcome counters per flow and request statistics per endpoint.

    The newsletter counters separate new subscribers from repeats, which the
    public endpoint does not reveal; access therefore requires ``X-API-Key``.
    """
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "metrics": lead_capture.metrics.get_metrics_summary(),
    }
