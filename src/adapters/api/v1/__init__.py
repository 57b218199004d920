"""API v1 router configuration.
"""

from fastapi import APIRouter

from .contact import router as contact_router
from .health import router as health_router
from .metrics import router as metrics_router
from .newsletter import router as newsletter_router

api_router = APIRouter()

api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(contact_router, prefix="/contact", tags=["contact"])
api_router.include_router(newsletter_router, prefix="/newsletter", tags=["newsletter"])
api_router.include_router(metrics_router, prefix="/metrics", tags=["metrics"])
