from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api import router
from logging_config import configure_logging
from services.price_plans import build_default_price_plan_service
from services.readings import build_default_reading_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    price_plans = build_default_price_plan_service()
    build_default_reading_service()
    logger.info("Service ready", extra={"plan_count": len(price_plans.price_plans)})
    try:
        yield
    finally:
        build_default_price_plan_service.cache_clear()
        build_default_reading_service.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Price Plan Comparator",
        description="Compares smart meter consumption costs across electricity price plans.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    return app

app = create_app()
