"""Daily Grid API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map DailyGridError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup and disposed on shutdown via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Three error handler layers (domain, request validation, catch-all) live in
      api/error_handlers.py
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import dailygrid.infrastructure.database as db_module
from dailygrid.api.error_handlers import register_error_handlers
from dailygrid.api.routes import (
    admin_templates, admin_tools, cells, daily_grid, health,
)
from dailygrid.config import get_settings
from dailygrid.infrastructure.database import init_db
from dailygrid.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if not settings.admin_api_keys:
        logger.warning("ADMIN_API_KEYS is empty: admin routes are unauthenticated")
    logger.info("Daily Grid API started")
    yield
    if db_module.db_manager:
        await db_module.db_manager.dispose()
    logger.info("Daily Grid API shutting down")


app = FastAPI(
    title="Daily Grid API", version="1.0.0", lifespan=lifespan,
)

# CORS origins from settings
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(daily_grid.router)
app.include_router(cells.router)
app.include_router(admin_templates.router)
app.include_router(admin_tools.router)

register_error_handlers(app)
