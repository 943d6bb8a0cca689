"""Task-count and complexity-weighted utilization for a resource."""

from __future__ import annotations

import math
from datetime import date
from typing import Optional, Sequence

from taskfit.domain.constraints import DEFAULT_SCORING_CONFIG, ScoringConfig, UtilizationBands
from taskfit.domain.models import (
    INTENSITY_HIGH,
    INTENSITY_MEDIUM,
    PRIORITY_CRITICAL,
    PRIORITY_HIGH,
    STATUS_MODERATELY_UTILIZED,
    STATUS_OPTIMALLY_LOADED,
    STATUS_OVERLOADED,
    STATUS_SEVERELY_OVERLOADED,
    STATUS_UNDERUTILIZED,
    STATUS_WELL_UTILIZED,
    Task,
    TaskDistribution,
    UtilizationMetrics,
)
from taskfit.repository.contracts import ResourceStateRepository
from taskfit.repository.data_repository import DataRepository
from taskfit.services.capacity_service import compute_task_capacity
from taskfit.services.snapshot_service import ResourceSnapshot, ResourceSnapshotService
from taskfit.utils.config import Settings, get_settings
from taskfit.utils.logger import get_logger


logger = get_logger(__name__)


URGENCY_MULTIPLIERS = {PRIORITY_CRITICAL: 1.5, PRIORITY_HIGH: 1.2}
COLLABORATION_MULTIPLIERS = {INTENSITY_HIGH: 1.3, INTENSITY_MEDIUM: 1.1}

# Percentage reported when work exists against zero capacity
SATURATED_UTILIZATION = 200.0

SIMPLE_COMPLEXITY_MAX = 3
MEDIUM_COMPLEXITY_MAX = 6


def classify_utilization_status(
    percentage: float,
    bands: UtilizationBands = DEFAULT_SCORING_CONFIG.bands,
) -> str:
    if percentage > bands.severely_overloaded:
        return STATUS_SEVERELY_OVERLOADED
    if percentage > bands.overloaded:
        return STATUS_OVERLOADED
    if percentage > bands.optimally_loaded:
        return STATUS_OPTIMALLY_LOADED
    if percentage > bands.well_utilized:
        return STATUS_WELL_UTILIZED
    if percentage > bands.moderately_utilized:
        return STATUS_MODERATELY_UTILIZED
    return STATUS_UNDERUTILIZED


def load_percentage(load: float, capacity: float) -> float:
    if capacity <= 0:
        return SATURATED_UTILIZATION if load > 0 else 0.0
    return load / capacity * 100.0


def weighted_task_load(tasks: Sequence[Task]) -> float:
    return sum(
        task.complexity_score
        * URGENCY_MULTIPLIERS.get(task.priority, 1.0)
        * COLLABORATION_MULTIPLIERS.get(task.collaboration_intensity, 1.0)
        for task in tasks
    )


def task_distribution(tasks: Sequence[Task]) -> TaskDistribution:
    simple = sum(1 for task in tasks if task.complexity_score <= SIMPLE_COMPLEXITY_MAX)
    medium = sum(
        1
        for task in tasks
        if SIMPLE_COMPLEXITY_MAX < task.complexity_score <= MEDIUM_COMPLEXITY_MAX
    )
    return TaskDistribution(simple=simple, medium=medium, complex=len(tasks) - simple - medium)


def bottleneck_risk(tasks: Sequence[Task]) -> int:
    heavy_dependencies = sum(1 for task in tasks if task.dependency_weight > 5)
    high_complexity = sum(1 for task in tasks if task.complexity_score > 7)
    return min(10, 3 * heavy_dependencies + 2 * high_complexity)


def context_switch_penalty(tasks: Sequence[Task]) -> float:
    if len(tasks) <= 1:
        return 0.0
    disruptive = sum(1 for task in tasks if task.context_switching_penalty > 7)
    return min(1.0, (len(tasks) - 1) * 0.1 + 0.2 * disruptive)


def utilization_trend(current_count: int, previous_count: int) -> float:
    """Percent change against the preceding window; flat when it had no tasks."""
    if previous_count <= 0:
        return 0.0
    return (current_count - previous_count) / previous_count * 100.0


def compute_utilization_metrics(
    snapshot: ResourceSnapshot,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> UtilizationMetrics:
    capacity = compute_task_capacity(
        snapshot.profile, snapshot.proficiencies, snapshot.window, config
    )
    profile = snapshot.effective_profile
    tasks = snapshot.current_tasks
    base = capacity.base_capacity

    utilization = load_percentage(len(tasks), base)
    load = weighted_task_load(tasks)
    weighted_capacity = (
        profile.optimal_task_count_per_week
        * (profile.complexity_handling_score / 5.0)
        * (1.0 + profile.collaboration_effectiveness)
    )

    return UtilizationMetrics(
        resource_id=snapshot.resource_id,
        window=snapshot.window,
        task_count=len(tasks),
        task_capacity=base,
        utilization_percentage=utilization,
        weighted_task_load=load,
        weighted_capacity=weighted_capacity,
        weighted_utilization=load_percentage(load, weighted_capacity),
        distribution=task_distribution(tasks),
        status=classify_utilization_status(utilization, config.bands),
        utilization_trend=utilization_trend(len(tasks), len(snapshot.previous_tasks)),
        optimal_task_range=(math.floor(base * 0.8), math.floor(base * 1.2)),
        predicted_completion_count=math.floor(len(tasks) * profile.historical_task_velocity),
        bottleneck_risk=bottleneck_risk(tasks),
        context_switch_penalty=context_switch_penalty(tasks),
    )


class UtilizationService:
    """Reports how loaded a resource is over a time window."""

    def __init__(
        self,
        repository: Optional[ResourceStateRepository] = None,
        settings: Optional[Settings] = None,
        config: ScoringConfig = DEFAULT_SCORING_CONFIG,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or DataRepository(self._settings)
        self._snapshots = ResourceSnapshotService(self._repository, self._settings)
        self._config = config

    def calculate_utilization(
        self,
        resource_id: str,
        window: Optional[str] = None,
        reference: Optional[date] = None,
    ) -> UtilizationMetrics:
        snapshot = self._snapshots.load(resource_id, window, reference)
        metrics = compute_utilization_metrics(snapshot, self._config)
        logger.info(
            "Utilization computed | resource_id=%s | window=%s | tasks=%s | utilization=%.2f | status=%s",
            resource_id,
            metrics.window,
            metrics.task_count,
            metrics.utilization_percentage,
            metrics.status,
        )
        return metrics
