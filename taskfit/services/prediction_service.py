"""Deterministic performance predictions from velocity and complexity handling."""

from __future__ import annotations

from taskfit.domain.models import PerformancePrediction, ResourceProfile


def _unit(value: float) -> float:
    return max(0.0, min(1.0, value))


def predict_performance(profile: ResourceProfile, avg_complexity: float) -> PerformancePrediction:
    velocity = profile.historical_task_velocity
    handling = profile.complexity_handling_score
    return PerformancePrediction(
        completion_forecast=_unit(velocity * handling / avg_complexity) if avg_complexity > 0 else 0.0,
        quality_prediction=_unit(handling / 10.0 * 0.9),
        timeline_confidence=_unit(velocity * 0.9),
        success_probability=_unit((velocity + handling / 10.0) / 2.0),
    )
