"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from policycheck.api import wellknown
from policycheck.api.router import api_router
from policycheck.core.config import get_settings
from policycheck.db import close as db_close, connect as db_connect

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown events."""
    db_connect()
    try:
        yield
    finally:
        db_close()


def create_application() -> FastAPI:
    """Create and configure the FastAPI app."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Deterministic risk scoring of seller return, shipping, terms and privacy policies, "
        "with Ed25519-signed assessments.",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.include_router(api_router, prefix="/api")
    app.include_router(wellknown.router)
    return app


app = create_application()
