from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from approvals.api.health import router as health_router
from approvals.api.router import api_router
from approvals.config import configure_logging, get_settings
from approvals.db import dispose_engine
from approvals.exceptions import setup_exception_handlers
from approvals.middleware import setup_middleware
from approvals.services.notification import drain_notifications

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)

DESCRIPTION = """
Submission and approval of timesheets, expenses and leave requests.

Callers identify themselves with the `X-User-Id` and `X-Role` headers.
Approving a leave request deducts its working days from the owner's yearly balance.
"""

OPENAPI_TAGS = [
    {"name": "timesheets", "description": "Timesheet requests"},
    {"name": "expenses", "description": "Expense requests"},
    {"name": "leaves", "description": "Leave requests, working days and balances"},
    {"name": "approvals", "description": "Manager approval queue actions"},
    {"name": "leave-types", "description": "Active leave types"},
    {"name": "holidays", "description": "Company holiday calendar"},
    {"name": "admin", "description": "Leave types, holidays and balance administration"},
    {"name": "users", "description": "User directory"},
    {"name": "health", "description": "Service health"},
]


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger.info("%s %s starting (%s)", settings.app_name, settings.app_version, settings.environment)
    try:
        yield
    finally:
        await drain_notifications(timeout=5)
        await dispose_engine()
        logger.info("%s stopped", settings.app_name)


def create_app() -> FastAPI:
    """Build the ASGI application from current settings."""
    settings = get_settings()
    configure_logging(settings)
    expose_docs = settings.environment != "production"

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=DESCRIPTION,
        openapi_tags=OPENAPI_TAGS,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if expose_docs else None,
        redoc_url="/redoc" if expose_docs else None,
    )

    setup_middleware(application, settings)
    setup_exception_handlers(application)

    application.include_router(health_router)
    application.include_router(api_router)
    return application


app = create_app()
