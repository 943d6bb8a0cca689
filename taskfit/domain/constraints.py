"""Scoring weights, utilization bands, and capacity tiers with their validation rules."""

from __future__ import annotations

import math
from dataclasses import dataclass, field


class ScoringConfigError(ValueError):
    """Raised when a scoring configuration cannot produce bounded scores."""


@dataclass(frozen=True)
class FitWeights:
    task_capacity: float = 0.25
    complexity_handling: float = 0.20
    skill_match: float = 0.25
    availability: float = 0.15
    collaboration: float = 0.10
    learning_opportunity: float = 0.05

    def as_vector(self) -> tuple[float, ...]:
        return (
            self.task_capacity,
            self.complexity_handling,
            self.skill_match,
            self.availability,
            self.collaboration,
            self.learning_opportunity,
        )


@dataclass(frozen=True)
class UtilizationBands:
    """Lower bounds (exclusive) of each status band, highest first."""

    severely_overloaded: float = 120.0
    overloaded: float = 100.0
    optimally_loaded: float = 85.0
    well_utilized: float = 60.0
    moderately_utilized: float = 30.0

    def as_vector(self) -> tuple[float, ...]:
        return (
            self.severely_overloaded,
            self.overloaded,
            self.optimally_loaded,
            self.well_utilized,
            self.moderately_utilized,
        )


@dataclass(frozen=True)
class ScoringConfig:
    weights: FitWeights = field(default_factory=FitWeights)
    bands: UtilizationBands = field(default_factory=UtilizationBands)

    # Default capacities when a resource has no profile
    default_day_capacity: int = 3
    default_week_capacity: int = 15
    default_month_capacity: int = 60

    # Profile tier multipliers applied to the skill-adjusted base
    simple_tier_multiplier: float = 1.5
    complex_tier_multiplier: float = 0.5
    collaborative_tier_multiplier: float = 0.7

    # Tier multipliers for the no-profile fallback
    default_simple_tier_ratio: float = 5.0 / 3.0
    default_complex_tier_ratio: float = 1.0 / 3.0
    default_collaborative_tier_ratio: float = 2.0 / 3.0

    proficiency_normalizer: float = 5.0
    completion_ratio_next_period: float = 0.7
    recommended_share_of_week: float = 0.3
    weight_sum_tolerance: float = 1e-6


DEFAULT_SCORING_CONFIG = ScoringConfig()


def validate_scoring_config(config: ScoringConfig) -> None:
    weights = config.weights.as_vector()
    if any(weight < 0.0 for weight in weights):
        raise ScoringConfigError("fit weights must be non-negative")
    if not math.isclose(sum(weights), 1.0, abs_tol=config.weight_sum_tolerance):
        raise ScoringConfigError(f"fit weights must sum to 1.0, got {sum(weights):.6f}")

    bands = config.bands.as_vector()
    if any(upper <= lower for upper, lower in zip(bands, bands[1:])):
        raise ScoringConfigError("utilization bands must be strictly descending")
    if bands[-1] < 0.0:
        raise ScoringConfigError("utilization bands must be non-negative")

    if min(
        config.default_day_capacity,
        config.default_week_capacity,
        config.default_month_capacity,
    ) < 0:
        raise ScoringConfigError("default capacities must be >= 0")
    if config.proficiency_normalizer <= 0.0:
        raise ScoringConfigError("proficiency_normalizer must be > 0")
    if not 0.0 <= config.completion_ratio_next_period <= 1.0:
        raise ScoringConfigError("completion_ratio_next_period must be between 0 and 1")
    if not 0.0 <= config.recommended_share_of_week <= 1.0:
        raise ScoringConfigError("recommended_share_of_week must be between 0 and 1")
