from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api import router
from logging_config import configure_logging
from services.pipeline import build_default_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    service = build_default_service()
    available = service.settings.available_providers()
    logger.info("Upstream provider availability: %s", available)
    missing = sorted(name for name, configured in available.items() if not configured)
    if missing:
        logger.warning(
            "Missing API keys for %s; falling back to simulated data where needed.",
            ", ".join(missing),
        )
    try:
        yield
    finally:
        build_default_service.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Air Quality Aggregator",
        description="Merges ground-sensor, satellite and weather air quality data with simulated fallbacks.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    return app

app = create_app()
