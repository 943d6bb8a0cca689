"""Per-window task capacity from a resource profile and its skill levels."""

from __future__ import annotations

import math
from typing import Optional, Sequence

from taskfit.domain.constraints import DEFAULT_SCORING_CONFIG, ScoringConfig
from taskfit.domain.models import (
    ComplexityCapacity,
    ResourceProfile,
    SkillProficiency,
    TaskCapacity,
    WINDOW_DAY,
    WINDOW_WEEK,
)
from taskfit.repository.contracts import ResourceStateRepository
from taskfit.repository.data_repository import DataRepository
from taskfit.services.snapshot_service import validate_window
from taskfit.utils.config import Settings, get_settings
from taskfit.utils.logger import get_logger


logger = get_logger(__name__)


def default_base_capacity(window: str, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> int:
    window = validate_window(window)
    if window == WINDOW_DAY:
        return config.default_day_capacity
    if window == WINDOW_WEEK:
        return config.default_week_capacity
    return config.default_month_capacity


def profile_base_capacity(profile: ResourceProfile, window: str) -> int:
    window = validate_window(window)
    if window == WINDOW_DAY:
        return profile.optimal_task_count_per_day
    if window == WINDOW_WEEK:
        return profile.optimal_task_count_per_week
    return profile.optimal_task_count_per_week * 4


def average_proficiency(proficiencies: Sequence[SkillProficiency]) -> Optional[float]:
    if not proficiencies:
        return None
    return sum(item.proficiency_level for item in proficiencies) / len(proficiencies)


def compute_task_capacity(
    profile: Optional[ResourceProfile],
    proficiencies: Sequence[SkillProficiency],
    window: str,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> TaskCapacity:
    """Return base, skill-adjusted, and tiered capacity for one window.

    Without a profile the fixed defaults apply and skills are ignored. With a
    profile the base is scaled by average proficiency relative to a level of 5,
    and the complexity tiers derive from that adjusted figure.
    """
    window = validate_window(window)

    if profile is None:
        base = default_base_capacity(window, config)
        return TaskCapacity(
            window=window,
            base_capacity=base,
            skill_adjusted_capacity=base,
            complexity_capacity=ComplexityCapacity(
                simple=round(base * config.default_simple_tier_ratio),
                medium=base,
                complex=round(base * config.default_complex_tier_ratio),
            ),
            collaborative_capacity=round(base * config.default_collaborative_tier_ratio),
            has_profile=False,
        )

    base = profile_base_capacity(profile, window)
    avg_level = average_proficiency(proficiencies)
    if avg_level is None:
        adjusted = base
    else:
        adjusted = math.floor(base * avg_level / config.proficiency_normalizer)

    return TaskCapacity(
        window=window,
        base_capacity=base,
        skill_adjusted_capacity=adjusted,
        complexity_capacity=ComplexityCapacity(
            simple=math.floor(adjusted * config.simple_tier_multiplier),
            medium=adjusted,
            complex=math.floor(adjusted * config.complex_tier_multiplier),
        ),
        collaborative_capacity=math.floor(adjusted * config.collaborative_tier_multiplier),
        has_profile=True,
    )


class CapacityCalculator:
    """Derives a resource's per-window task capacity from its profile and skills."""

    def __init__(
        self,
        repository: Optional[ResourceStateRepository] = None,
        settings: Optional[Settings] = None,
        config: ScoringConfig = DEFAULT_SCORING_CONFIG,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or DataRepository(self._settings)
        self._config = config

    def calculate_task_capacity(self, resource_id: str, window: Optional[str] = None) -> TaskCapacity:
        window = validate_window(window or self._settings.default_window)
        profile = self._repository.get_resource_profile(resource_id)
        proficiencies = self._repository.list_skill_proficiencies(resource_id)
        capacity = compute_task_capacity(profile, proficiencies, window, self._config)
        logger.debug(
            "Capacity computed | resource_id=%s | window=%s | base=%s | adjusted=%s | has_profile=%s",
            resource_id,
            window,
            capacity.base_capacity,
            capacity.skill_adjusted_capacity,
            capacity.has_profile,
        )
        return capacity
