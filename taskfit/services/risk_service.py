"""Overload, skill-gap, and context-switching risk for a candidate assignment."""

from __future__ import annotations

import math

from taskfit.domain.models import ResourceProfile, RiskAssessment


def overload_risk(utilization_percentage: float) -> int:
    return max(0, min(10, math.floor(utilization_percentage / 10.0)))


def skill_gap_risk(avg_complexity: float) -> int:
    if avg_complexity > 7:
        return 7
    if avg_complexity > 5:
        return 4
    return 2


def assess_risk(
    profile: ResourceProfile,
    utilization_percentage: float,
    avg_complexity: float,
    current_task_count: int,
) -> RiskAssessment:
    return RiskAssessment(
        overload_risk=overload_risk(utilization_percentage),
        skill_gap_risk=skill_gap_risk(avg_complexity),
        context_switching_impact=(profile.task_switching_penalty_score / 10.0)
        * (current_task_count / 10.0),
    )
