"""Application lifecycle management.

This module handles application startup and shutdown events, ensuring proper
initialization and cleanup of application resources.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool

from src.core.config.settings import settings
from src.core.dependencies.context import LeadCaptureContext, build_context
from src.core.logging import logger


def create_lifespan_manager(context: Optional[LeadCaptureContext] = None):
    """Create the application lifespan manager.

    Args:
        context: A prebuilt context. When omitted, one is built from the
            settings at startup.

    Returns:
        AsyncContextManager: The lifespan manager for the FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Builds the lead-capture context on startup and releases it on shutdown.

        Raises:
            RuntimeError: If the database is configured but unavailable during startup
        """
        lead_capture = context or build_context(settings)

        if lead_capture.uses_database:
            from src.infrastructure.database import check_database_health, create_db_and_tables

            try:
                await run_in_threadpool(create_db_and_tables)
            except Exception as exc:
                logger.error("database_unavailable_on_startup", error=str(exc))
                raise RuntimeError("Database unavailable") from exc
            if not await run_in_threadpool(check_database_health):
                logger.error("database_unavailable_on_startup")
                raise RuntimeError("Database unavailable")

        app.state.lead_capture = lead_capture
        logger.info("application_startup", env=settings.APP_ENV, version=settings.VERSION)

        yield

        lead_capture.close()
        logger.info("application_shutdown", env=settings.APP_ENV)

    return lifespan
