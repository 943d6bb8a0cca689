"""HTTP controller layer for assignment recommendations and utilization queries."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field, field_validator

from taskfit.controllers.dependencies import (
    get_availability_service,
    get_recommendation_service,
    get_report_service,
    get_utilization_service,
)
from taskfit.domain.models import AssignmentRecommendation
from taskfit.services.availability_service import AvailabilityService
from taskfit.services.recommendation_service import AssignmentRecommendationService
from taskfit.services.report_service import TeamUtilizationReportService
from taskfit.services.snapshot_service import RecommendationValidationError
from taskfit.services.utilization_service import UtilizationService
from taskfit.utils.config import get_settings
from taskfit.utils.logger import get_logger


logger = get_logger(__name__)
settings = get_settings()

router = APIRouter(tags=["assignment"])


class SuggestAssignmentRequest(BaseModel):
    """Input DTO validated before entering service layer."""

    project_id: str = Field(min_length=1)
    candidate_resource_ids: list[str] = Field(min_length=1)

    @field_validator("project_id")
    @classmethod
    def validate_project_id(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("project_id must be non-empty")
        return value.strip()

    @field_validator("candidate_resource_ids")
    @classmethod
    def validate_candidates(cls, value: list[str]) -> list[str]:
        cleaned = [item.strip() for item in value if item.strip()]
        if not cleaned:
            raise ValueError("candidate_resource_ids must contain at least one id")
        return cleaned


class TaskMatchResponse(BaseModel):
    task_id: str
    task_name: str
    skill_match_score: float = Field(ge=0.0, le=1.0)
    complexity_score: int
    reasoning: str


class CapacityAnalysisResponse(BaseModel):
    current_utilization: float = Field(ge=0.0)
    additional_capacity_needed: int = Field(ge=0)
    optimal_task_distribution: str
    timeline_impact: str


class ReasoningResponse(BaseModel):
    task_matches: list[TaskMatchResponse]
    capacity_analysis: CapacityAnalysisResponse
    potential_blockers: list[str]
    success_factors: list[str]
    risk_factors: list[str]


class AlternativeResponse(BaseModel):
    resource_id: str
    resource_name: str
    fit_score: float = Field(ge=0.0, le=1.0)
    reasoning: str
    trade_offs: list[str]


class RecommendationResponse(BaseModel):
    """Output DTO with every score constrained to its documented range."""

    recommendation_id: int | None
    project_id: str
    resource_id: str
    task_capacity_fit_score: float = Field(ge=0.0, le=1.0)
    complexity_handling_fit_score: float = Field(ge=0.0, le=1.0)
    skill_match_score: float = Field(ge=0.0, le=1.0)
    availability_score: float = Field(ge=0.0, le=1.0)
    collaboration_fit_score: float = Field(ge=0.0, le=1.0)
    learning_opportunity_score: float = Field(ge=0.0, le=1.0)
    overall_fit_score: float = Field(ge=0.0, le=1.0)
    task_completion_forecast: float = Field(ge=0.0, le=1.0)
    quality_prediction: float = Field(ge=0.0, le=1.0)
    timeline_confidence: float = Field(ge=0.0, le=1.0)
    success_probability: float = Field(ge=0.0, le=1.0)
    overload_risk_score: int = Field(ge=0, le=10)
    skill_gap_risk_score: int = Field(ge=0, le=10)
    context_switching_impact: float = Field(ge=0.0)
    recommended_task_count: int = Field(ge=0)
    reasoning: ReasoningResponse
    alternative_assignments: list[AlternativeResponse]
    created_at: datetime
    expires_at: datetime

    @classmethod
    def from_record(cls, record: AssignmentRecommendation) -> "RecommendationResponse":
        return cls(
            recommendation_id=record.recommendation_id,
            project_id=record.project_id,
            resource_id=record.resource_id,
            task_capacity_fit_score=record.task_capacity_fit_score,
            complexity_handling_fit_score=record.complexity_handling_fit_score,
            skill_match_score=record.skill_match_score,
            availability_score=record.availability_score,
            collaboration_fit_score=record.collaboration_fit_score,
            learning_opportunity_score=record.learning_opportunity_score,
            overall_fit_score=record.overall_fit_score,
            task_completion_forecast=record.task_completion_forecast,
            quality_prediction=record.quality_prediction,
            timeline_confidence=record.timeline_confidence,
            success_probability=record.success_probability,
            overload_risk_score=record.overload_risk_score,
            skill_gap_risk_score=record.skill_gap_risk_score,
            context_switching_impact=record.context_switching_impact,
            recommended_task_count=record.recommended_task_count,
            reasoning=ReasoningResponse(**record.reasoning.to_dict()),
            alternative_assignments=[
                AlternativeResponse(**item.to_dict()) for item in record.alternative_assignments
            ],
            created_at=record.created_at,
            expires_at=record.expires_at,
        )


class SuggestAssignmentResponse(BaseModel):
    recommendations: list[RecommendationResponse]


class UtilizationResponse(BaseModel):
    resource_id: str
    window: str
    task_count: int = Field(ge=0)
    task_capacity: int = Field(ge=0)
    utilization_percentage: float = Field(ge=0.0)
    weighted_task_load: float = Field(ge=0.0)
    weighted_capacity: float = Field(ge=0.0)
    weighted_utilization: float = Field(ge=0.0)
    simple_tasks: int = Field(ge=0)
    medium_tasks: int = Field(ge=0)
    complex_tasks: int = Field(ge=0)
    status: str
    utilization_trend: float
    optimal_task_range: tuple[int, int]
    predicted_completion_count: int = Field(ge=0)
    bottleneck_risk: int = Field(ge=0, le=10)
    context_switch_penalty: float = Field(ge=0.0, le=1.0)


class AvailabilityResponse(BaseModel):
    resource_id: str
    window: str
    available_task_slots: int = Field(ge=0)
    availability_percentage: float = Field(ge=0.0, le=100.0)
    simple_task_slots_available: int = Field(ge=0)
    medium_task_slots_available: int = Field(ge=0)
    complex_task_slots_available: int = Field(ge=0)
    recommended_new_tasks: int = Field(ge=0)
    context_switch_impact: float = Field(ge=0.0, le=1.0)
    next_period_availability: int = Field(ge=0)
    task_completion_forecast: int = Field(ge=0)


class TeamUtilizationRow(BaseModel):
    resource_id: str
    name: str
    task_count: int
    base_capacity: int
    utilization_percentage: float
    weighted_utilization: float
    status: str
    available_task_slots: int


class TeamUtilizationSummary(BaseModel):
    resource_count: int
    average_utilization: float
    status_counts: dict[str, int]
    overloaded_resource_ids: list[str]


class TeamUtilizationResponse(BaseModel):
    resources: list[TeamUtilizationRow]
    summary: TeamUtilizationSummary


@router.post(
    "/suggest_assignment",
    response_model=SuggestAssignmentResponse,
    status_code=status.HTTP_200_OK,
)
async def suggest_assignment(
    payload: SuggestAssignmentRequest,
    service: AssignmentRecommendationService = Depends(get_recommendation_service),
) -> SuggestAssignmentResponse:
    """Rank candidates for a project; unknown projects yield an empty list."""
    try:
        records = service.suggest_optimal_assignment(
            project_id=payload.project_id,
            candidate_resource_ids=payload.candidate_resource_ids,
        )
        return SuggestAssignmentResponse(
            recommendations=[RecommendationResponse.from_record(item) for item in records]
        )
    except RecommendationValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected recommendation failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate recommendations",
        ) from exc


@router.get(
    "/resources/{resource_id}/utilization",
    response_model=UtilizationResponse,
    status_code=status.HTTP_200_OK,
)
async def resource_utilization(
    resource_id: str,
    window: str = Query(default=settings.default_window),
    service: UtilizationService = Depends(get_utilization_service),
) -> UtilizationResponse:
    try:
        metrics = service.calculate_utilization(resource_id, window)
    except RecommendationValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected utilization failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute utilization",
        ) from exc
    return UtilizationResponse(
        resource_id=metrics.resource_id,
        window=metrics.window,
        task_count=metrics.task_count,
        task_capacity=metrics.task_capacity,
        utilization_percentage=metrics.utilization_percentage,
        weighted_task_load=metrics.weighted_task_load,
        weighted_capacity=metrics.weighted_capacity,
        weighted_utilization=metrics.weighted_utilization,
        simple_tasks=metrics.distribution.simple,
        medium_tasks=metrics.distribution.medium,
        complex_tasks=metrics.distribution.complex,
        status=metrics.status,
        utilization_trend=metrics.utilization_trend,
        optimal_task_range=metrics.optimal_task_range,
        predicted_completion_count=metrics.predicted_completion_count,
        bottleneck_risk=metrics.bottleneck_risk,
        context_switch_penalty=metrics.context_switch_penalty,
    )


@router.get(
    "/resources/{resource_id}/availability",
    response_model=AvailabilityResponse,
    status_code=status.HTTP_200_OK,
)
async def resource_availability(
    resource_id: str,
    window: str = Query(default=settings.default_window),
    service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilityResponse:
    try:
        availability = service.calculate_availability(resource_id, window)
    except RecommendationValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected availability failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute availability",
        ) from exc
    return AvailabilityResponse(**asdict(availability))


@router.get(
    "/recommendations/active",
    response_model=SuggestAssignmentResponse,
    status_code=status.HTTP_200_OK,
)
async def active_recommendations(
    resource_ids: list[str] = Query(default=[]),
    service: AssignmentRecommendationService = Depends(get_recommendation_service),
) -> SuggestAssignmentResponse:
    """Return unexpired recommendations for the given resources, newest first."""
    records = service.list_active_recommendations(resource_ids)
    return SuggestAssignmentResponse(
        recommendations=[RecommendationResponse.from_record(item) for item in records]
    )


@router.get(
    "/team_utilization",
    response_model=TeamUtilizationResponse,
    status_code=status.HTTP_200_OK,
)
async def team_utilization(
    resource_ids: list[str] = Query(...),
    window: str = Query(default=settings.default_window),
    service: TeamUtilizationReportService = Depends(get_report_service),
) -> TeamUtilizationResponse:
    try:
        report = service.build_report(resource_ids, window)
    except RecommendationValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected team utilization failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to build team utilization report",
        ) from exc
    return TeamUtilizationResponse(**report)
