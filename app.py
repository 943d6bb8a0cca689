"""
app.py: FastAPI application factory and startup lifecycle.

This is the ASGI application object imported by uvicorn.
It wires all services, registers routers, and runs startup initialization.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from taskfit.controllers.assignment_controller import router as assignment_router
from taskfit.repository.data_repository import DataRepository
from taskfit.services.availability_service import AvailabilityService
from taskfit.services.recommendation_service import AssignmentRecommendationService
from taskfit.services.report_service import TeamUtilizationReportService
from taskfit.services.utilization_service import UtilizationService
from taskfit.utils.config import Settings, get_settings
from taskfit.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None, seed: bool = True) -> FastAPI:
    """
    Build and wire the FastAPI application.

    Every service shares one repository and is reachable through app.state.
    """
    settings = settings or get_settings()

    repository = DataRepository(settings)
    recommendation_service = AssignmentRecommendationService(
        repository=repository,
        settings=settings,
    )
    utilization_service = UtilizationService(repository=repository, settings=settings)
    availability_service = AvailabilityService(repository=repository, settings=settings)
    report_service = TeamUtilizationReportService(repository=repository, settings=settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        _startup(app, seed=seed)
        yield

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.include_router(assignment_router)

    app.state.repository = repository
    app.state.recommendation_service = recommendation_service
    app.state.utilization_service = utilization_service
    app.state.availability_service = availability_service
    app.state.report_service = report_service

    return app


def _startup(app: FastAPI, seed: bool = True) -> None:
    """
    Idempotent startup sequence. Safe to re-run on server restarts.

    Schema must exist before seeding; seeding is skipped when data is present.
    """
    repository: DataRepository = app.state.repository

    logger.info("Startup: initializing database schema")
    repository.initialize_database()

    if seed:
        logger.info("Startup: seeding synthetic team and backlog")
        repository.seed_synthetic_data()

    logger.info("Startup complete | database=%s", repository.database_path)


# Module-level app object for uvicorn
app = create_app()
