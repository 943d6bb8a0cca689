"""Remaining task slots and short-horizon availability forecasts."""

from __future__ import annotations

import math
from datetime import date
from typing import Optional

from taskfit.domain.constraints import DEFAULT_SCORING_CONFIG, ScoringConfig
from taskfit.domain.models import SWITCHING_PARALLEL, SWITCHING_SEQUENTIAL, TaskAvailability
from taskfit.repository.contracts import ResourceStateRepository
from taskfit.repository.data_repository import DataRepository
from taskfit.services.capacity_service import compute_task_capacity
from taskfit.services.snapshot_service import ResourceSnapshot, ResourceSnapshotService
from taskfit.services.utilization_service import task_distribution
from taskfit.utils.config import Settings, get_settings
from taskfit.utils.logger import get_logger


logger = get_logger(__name__)


NEW_TASK_CAPS = {SWITCHING_SEQUENTIAL: 2, SWITCHING_PARALLEL: 5}
DEFAULT_NEW_TASK_CAP = 3


def compute_task_availability(
    snapshot: ResourceSnapshot,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> TaskAvailability:
    capacity = compute_task_capacity(
        snapshot.profile, snapshot.proficiencies, snapshot.window, config
    )
    profile = snapshot.effective_profile
    task_count = len(snapshot.current_tasks)
    base = capacity.base_capacity

    slots = max(0, base - task_count)
    percentage = 0.0 if base <= 0 else max(0.0, (base - task_count) / base * 100.0)

    distribution = task_distribution(snapshot.current_tasks)
    tiers = capacity.complexity_capacity
    forecast = math.floor(task_count * config.completion_ratio_next_period)

    return TaskAvailability(
        resource_id=snapshot.resource_id,
        window=snapshot.window,
        available_task_slots=slots,
        availability_percentage=percentage,
        simple_task_slots_available=max(0, tiers.simple - distribution.simple),
        medium_task_slots_available=max(0, tiers.medium - distribution.medium),
        complex_task_slots_available=max(0, tiers.complex - distribution.complex),
        recommended_new_tasks=min(
            slots, NEW_TASK_CAPS.get(profile.task_switching_preference, DEFAULT_NEW_TASK_CAP)
        ),
        context_switch_impact=min(1.0, task_count * profile.task_switching_penalty_score / 50.0),
        next_period_availability=min(base, slots + forecast),
        task_completion_forecast=forecast,
    )


class AvailabilityService:
    """Reports open task slots for a resource, capped by its switching preference."""

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

    def calculate_availability(
        self,
        resource_id: str,
        window: Optional[str] = None,
        reference: Optional[date] = None,
    ) -> TaskAvailability:
        snapshot = self._snapshots.load(resource_id, window, reference)
        availability = compute_task_availability(snapshot, self._config)
        logger.info(
            "Availability computed | resource_id=%s | window=%s | slots=%s | availability=%.2f",
            resource_id,
            availability.window,
            availability.available_task_slots,
            availability.availability_percentage,
        )
        return availability
