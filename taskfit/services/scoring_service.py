"""Six-factor assignment fitness and the weighted overall score."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from taskfit.domain.constraints import (
    DEFAULT_SCORING_CONFIG,
    FitWeights,
    ScoringConfig,
    validate_scoring_config,
)
from taskfit.domain.models import (
    FitScores,
    INTENSITY_HIGH,
    ResourceProfile,
    SkillRequirement,
    Task,
    TaskAvailability,
    UtilizationMetrics,
    WORK_STYLE_COLLABORATIVE,
    WORK_STYLE_DEEP_FOCUS,
    WORK_STYLE_MIXED,
)
from taskfit.services.skill_matching_service import (
    compute_learning_opportunity_score,
    compute_skill_match_score,
    task_requirements,
)
from taskfit.services.snapshot_service import ResourceSnapshot
from taskfit.utils.logger import get_logger


logger = get_logger(__name__)


DEFAULT_AVERAGE_COMPLEXITY = 5.0
COMPLEXITY_COMFORT_MARGIN = 1.2

STYLE_MATCH_FIT = 0.9
MIXED_STYLE_FIT = 0.7
STYLE_MISMATCH_FIT = 0.5


def clamp_unit(value: float) -> float:
    return float(np.clip(value, 0.0, 1.0))


def average_complexity(tasks: Sequence[Task]) -> float:
    if not tasks:
        return DEFAULT_AVERAGE_COMPLEXITY
    average = sum(task.complexity_score for task in tasks) / len(tasks)
    return average if average > 0 else DEFAULT_AVERAGE_COMPLEXITY


def remaining_weekly_capacity(profile: ResourceProfile, utilization_percentage: float) -> float:
    return profile.optimal_task_count_per_week * (1.0 - utilization_percentage / 100.0)


def task_capacity_fit(remaining: float, project_task_count: int) -> float:
    if project_task_count <= 0:
        return 1.0 if remaining > 0 else 0.0
    return clamp_unit(min(remaining / project_task_count, 1.0))


def complexity_handling_fit(profile: ResourceProfile, avg_complexity: float) -> float:
    return clamp_unit(profile.complexity_handling_score / avg_complexity / COMPLEXITY_COMFORT_MARGIN)


def collaboration_fit(profile: ResourceProfile, tasks: Sequence[Task]) -> float:
    high_share = (
        sum(1 for task in tasks if task.collaboration_intensity == INTENSITY_HIGH) / len(tasks)
        if tasks
        else 0.0
    )
    style = profile.preferred_work_style
    if style == WORK_STYLE_COLLABORATIVE and high_share > 0.5:
        return STYLE_MATCH_FIT
    if style == WORK_STYLE_DEEP_FOCUS and high_share < 0.3:
        return STYLE_MATCH_FIT
    if style == WORK_STYLE_MIXED:
        return MIXED_STYLE_FIT
    return STYLE_MISMATCH_FIT


def compute_fit_scores(
    snapshot: ResourceSnapshot,
    utilization: UtilizationMetrics,
    availability: TaskAvailability,
    project_tasks: Sequence[Task],
    requirements: Sequence[SkillRequirement],
) -> FitScores:
    profile = snapshot.effective_profile
    remaining = remaining_weekly_capacity(profile, utilization.utilization_percentage)
    return FitScores(
        task_capacity_fit=task_capacity_fit(remaining, len(project_tasks)),
        complexity_handling_fit=complexity_handling_fit(profile, average_complexity(project_tasks)),
        skill_match=clamp_unit(compute_skill_match_score(snapshot.proficiencies, requirements)),
        availability=clamp_unit(availability.availability_percentage / 100.0),
        collaboration_fit=clamp_unit(collaboration_fit(profile, project_tasks)),
        learning_opportunity=clamp_unit(
            compute_learning_opportunity_score(
                snapshot.proficiencies, task_requirements(project_tasks)
            )
        ),
    )


def compute_overall_fit(scores: FitScores, weights: FitWeights = DEFAULT_SCORING_CONFIG.weights) -> float:
    """Weighted sum of the sub-scores; bounded to [0, 1] when weights sum to 1."""
    total = np.dot(np.asarray(weights.as_vector()), np.asarray(scores.as_vector()))
    return clamp_unit(float(total))


class AssignmentScorer:
    def __init__(self, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> None:
        validate_scoring_config(config)
        self._config = config

    def score(
        self,
        snapshot: ResourceSnapshot,
        utilization: UtilizationMetrics,
        availability: TaskAvailability,
        project_tasks: Sequence[Task],
        requirements: Sequence[SkillRequirement],
    ) -> tuple[FitScores, float]:
        scores = compute_fit_scores(snapshot, utilization, availability, project_tasks, requirements)
        overall = compute_overall_fit(scores, self._config.weights)
        logger.debug(
            "Fit scored | resource_id=%s | capacity=%.3f | skill=%.3f | overall=%.3f",
            snapshot.resource_id,
            scores.task_capacity_fit,
            scores.skill_match,
            overall,
        )
        return scores, overall
