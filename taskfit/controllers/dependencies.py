"""Shared FastAPI dependency providers for controller layer."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from taskfit.services.availability_service import AvailabilityService
from taskfit.services.recommendation_service import AssignmentRecommendationService
from taskfit.services.report_service import TeamUtilizationReportService
from taskfit.services.utilization_service import UtilizationService


def _require_state(request: Request, attribute: str, label: str):
    service = getattr(request.app.state, attribute, None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{label} is not initialized",
        )
    return service


def get_recommendation_service(request: Request) -> AssignmentRecommendationService:
    return _require_state(request, "recommendation_service", "Recommendation service")


def get_utilization_service(request: Request) -> UtilizationService:
    return _require_state(request, "utilization_service", "Utilization service")


def get_availability_service(request: Request) -> AvailabilityService:
    return _require_state(request, "availability_service", "Availability service")


def get_report_service(request: Request) -> TeamUtilizationReportService:
    return _require_state(request, "report_service", "Report service")
