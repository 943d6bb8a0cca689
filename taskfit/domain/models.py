"""Domain models for capacity, utilization, and assignment recommendations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional


# Task vocabularies
PRIORITY_LOW = "Low"
PRIORITY_MEDIUM = "Medium"
PRIORITY_HIGH = "High"
PRIORITY_CRITICAL = "Critical"

INTENSITY_LOW = "Low"
INTENSITY_MEDIUM = "Medium"
INTENSITY_HIGH = "High"

STATUS_PENDING = "Pending"
STATUS_IN_PROGRESS = "In Progress"
STATUS_REVIEW = "Review"
STATUS_ON_HOLD = "On Hold"
STATUS_COMPLETED = "Completed"
STATUS_CANCELLED = "Cancelled"

ACTIVE_TASK_STATUSES = (STATUS_PENDING, STATUS_IN_PROGRESS, STATUS_REVIEW)

REQUIREMENT_PRIMARY = "primary"
REQUIREMENT_SECONDARY = "secondary"
REQUIREMENT_NICE_TO_HAVE = "nice_to_have"
REQUIREMENT_LEARNING = "learning_opportunity"

# Resource vocabularies
WORK_STYLE_COLLABORATIVE = "Collaborative"
WORK_STYLE_DEEP_FOCUS = "DeepFocus"
WORK_STYLE_MIXED = "Mixed"

SWITCHING_SEQUENTIAL = "Sequential"
SWITCHING_PARALLEL = "Parallel"
SWITCHING_BALANCED = "Balanced"

# Utilization bands, highest first
STATUS_SEVERELY_OVERLOADED = "Severely Overloaded"
STATUS_OVERLOADED = "Overloaded"
STATUS_OPTIMALLY_LOADED = "Optimally Loaded"
STATUS_WELL_UTILIZED = "Well Utilized"
STATUS_MODERATELY_UTILIZED = "Moderately Utilized"
STATUS_UNDERUTILIZED = "Underutilized"

WINDOW_DAY = "day"
WINDOW_WEEK = "week"
WINDOW_MONTH = "month"
TIME_WINDOWS = (WINDOW_DAY, WINDOW_WEEK, WINDOW_MONTH)


@dataclass(frozen=True)
class SkillRequirement:
    skill_id: str
    requirement_type: str = REQUIREMENT_PRIMARY
    minimum_proficiency: int = 1
    skill_name: str = ""


@dataclass(frozen=True)
class Task:
    task_id: str
    project_id: str
    name: str = ""
    complexity_score: int = 5
    priority: str = PRIORITY_MEDIUM
    collaboration_intensity: str = INTENSITY_LOW
    dependency_weight: float = 1.0
    context_switching_penalty: int = 5
    status: str = STATUS_PENDING
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    requires_deep_focus: bool = False
    required_skills: tuple[SkillRequirement, ...] = ()
    assigned_resource_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class ResourceProfile:
    resource_id: str
    optimal_task_count_per_day: int = 3
    optimal_task_count_per_week: int = 15
    complexity_handling_score: float = 5.0
    collaboration_effectiveness: float = 0.7
    preferred_work_style: str = WORK_STYLE_MIXED
    task_switching_preference: str = SWITCHING_BALANCED
    task_switching_penalty_score: float = 5.0
    historical_task_velocity: float = 0.8


def default_profile(resource_id: str) -> ResourceProfile:
    """Neutral stand-in used whenever a resource has no persisted profile."""
    return ResourceProfile(resource_id=resource_id)


@dataclass(frozen=True)
class SkillProficiency:
    resource_id: str
    skill_id: str
    proficiency_level: int


@dataclass(frozen=True)
class Resource:
    resource_id: str
    name: str


@dataclass(frozen=True)
class ComplexityCapacity:
    simple: int
    medium: int
    complex: int


@dataclass(frozen=True)
class TaskCapacity:
    window: str
    base_capacity: int
    skill_adjusted_capacity: int
    complexity_capacity: ComplexityCapacity
    collaborative_capacity: int
    has_profile: bool


@dataclass(frozen=True)
class TaskDistribution:
    simple: int
    medium: int
    complex: int


@dataclass(frozen=True)
class UtilizationMetrics:
    resource_id: str
    window: str
    task_count: int
    task_capacity: int
    utilization_percentage: float
    weighted_task_load: float
    weighted_capacity: float
    weighted_utilization: float
    distribution: TaskDistribution
    status: str
    utilization_trend: float
    optimal_task_range: tuple[int, int]
    predicted_completion_count: int
    bottleneck_risk: int
    context_switch_penalty: float


@dataclass(frozen=True)
class TaskAvailability:
    resource_id: str
    window: str
    available_task_slots: int
    availability_percentage: float
    simple_task_slots_available: int
    medium_task_slots_available: int
    complex_task_slots_available: int
    recommended_new_tasks: int
    context_switch_impact: float
    next_period_availability: int
    task_completion_forecast: int


@dataclass(frozen=True)
class FitScores:
    task_capacity_fit: float
    complexity_handling_fit: float
    skill_match: float
    availability: float
    collaboration_fit: float
    learning_opportunity: float

    def as_vector(self) -> tuple[float, ...]:
        return (
            self.task_capacity_fit,
            self.complexity_handling_fit,
            self.skill_match,
            self.availability,
            self.collaboration_fit,
            self.learning_opportunity,
        )


@dataclass(frozen=True)
class PerformancePrediction:
    completion_forecast: float
    quality_prediction: float
    timeline_confidence: float
    success_probability: float


@dataclass(frozen=True)
class RiskAssessment:
    overload_risk: int
    skill_gap_risk: int
    context_switching_impact: float


@dataclass(frozen=True)
class TaskMatch:
    task_id: str
    task_name: str
    skill_match_score: float
    complexity_score: int
    reasoning: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "task_id": self.task_id,
            "task_name": self.task_name,
            "skill_match_score": self.skill_match_score,
            "complexity_score": self.complexity_score,
            "reasoning": self.reasoning,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "TaskMatch":
        return cls(
            task_id=str(payload["task_id"]),
            task_name=str(payload.get("task_name", "")),
            skill_match_score=float(payload["skill_match_score"]),
            complexity_score=int(payload["complexity_score"]),
            reasoning=str(payload.get("reasoning", "")),
        )


@dataclass(frozen=True)
class CapacityAnalysis:
    current_utilization: float
    additional_capacity_needed: int
    optimal_task_distribution: str
    timeline_impact: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_utilization": self.current_utilization,
            "additional_capacity_needed": self.additional_capacity_needed,
            "optimal_task_distribution": self.optimal_task_distribution,
            "timeline_impact": self.timeline_impact,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "CapacityAnalysis":
        return cls(
            current_utilization=float(payload["current_utilization"]),
            additional_capacity_needed=int(payload["additional_capacity_needed"]),
            optimal_task_distribution=str(payload["optimal_task_distribution"]),
            timeline_impact=str(payload["timeline_impact"]),
        )


@dataclass(frozen=True)
class RecommendationReasoning:
    task_matches: list[TaskMatch]
    capacity_analysis: CapacityAnalysis
    potential_blockers: list[str] = field(default_factory=list)
    success_factors: list[str] = field(default_factory=list)
    risk_factors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "task_matches": [match.to_dict() for match in self.task_matches],
            "capacity_analysis": self.capacity_analysis.to_dict(),
            "potential_blockers": list(self.potential_blockers),
            "success_factors": list(self.success_factors),
            "risk_factors": list(self.risk_factors),
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "RecommendationReasoning":
        return cls(
            task_matches=[TaskMatch.from_dict(item) for item in payload.get("task_matches", [])],
            capacity_analysis=CapacityAnalysis.from_dict(payload["capacity_analysis"]),
            potential_blockers=[str(item) for item in payload.get("potential_blockers", [])],
            success_factors=[str(item) for item in payload.get("success_factors", [])],
            risk_factors=[str(item) for item in payload.get("risk_factors", [])],
        )


@dataclass(frozen=True)
class AlternativeAssignment:
    resource_id: str
    resource_name: str
    fit_score: float
    reasoning: str
    trade_offs: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "resource_id": self.resource_id,
            "resource_name": self.resource_name,
            "fit_score": self.fit_score,
            "reasoning": self.reasoning,
            "trade_offs": list(self.trade_offs),
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "AlternativeAssignment":
        return cls(
            resource_id=str(payload["resource_id"]),
            resource_name=str(payload.get("resource_name", "")),
            fit_score=float(payload["fit_score"]),
            reasoning=str(payload.get("reasoning", "")),
            trade_offs=[str(item) for item in payload.get("trade_offs", [])],
        )


@dataclass(frozen=True)
class AssignmentRecommendation:
    project_id: str
    resource_id: str

    task_capacity_fit_score: float
    complexity_handling_fit_score: float
    skill_match_score: float
    availability_score: float
    collaboration_fit_score: float
    learning_opportunity_score: float
    overall_fit_score: float

    task_completion_forecast: float
    quality_prediction: float
    timeline_confidence: float
    success_probability: float

    overload_risk_score: int
    skill_gap_risk_score: int
    context_switching_impact: float

    recommended_task_count: int
    reasoning: RecommendationReasoning
    alternative_assignments: list[AlternativeAssignment]
    created_at: datetime
    expires_at: datetime
    recommendation_id: Optional[int] = None

    @property
    def is_persisted(self) -> bool:
        return self.recommendation_id is not None

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
