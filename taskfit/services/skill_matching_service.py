"""Weighted skill-requirement matching between a resource and a set of tasks."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from taskfit.domain.models import (
    REQUIREMENT_LEARNING,
    REQUIREMENT_NICE_TO_HAVE,
    REQUIREMENT_PRIMARY,
    REQUIREMENT_SECONDARY,
    SkillProficiency,
    SkillRequirement,
    Task,
)
from taskfit.repository.contracts import SkillProficiencyRepository
from taskfit.repository.data_repository import DataRepository
from taskfit.utils.config import Settings, get_settings
from taskfit.utils.logger import get_logger


logger = get_logger(__name__)


REQUIREMENT_WEIGHTS = {
    REQUIREMENT_PRIMARY: 1.0,
    REQUIREMENT_SECONDARY: 0.7,
    REQUIREMENT_NICE_TO_HAVE: 0.3,
    REQUIREMENT_LEARNING: 0.5,
}
UNKNOWN_REQUIREMENT_WEIGHT = 0.5
NEUTRAL_SKILL_MATCH = 0.5

LEARNING_GAP_SCORE = 0.8
LEARNING_MASTERED_SCORE = 0.2


# Strongest first; unknown types rank below every known type
REQUIREMENT_TYPE_STRENGTH = (
    REQUIREMENT_PRIMARY,
    REQUIREMENT_SECONDARY,
    REQUIREMENT_LEARNING,
    REQUIREMENT_NICE_TO_HAVE,
)


def _type_rank(requirement_type: str) -> int:
    if requirement_type in REQUIREMENT_TYPE_STRENGTH:
        return REQUIREMENT_TYPE_STRENGTH.index(requirement_type)
    return len(REQUIREMENT_TYPE_STRENGTH)


def task_requirements(tasks: Iterable[Task]) -> list[SkillRequirement]:
    """Every requirement of every task, unmerged."""
    return [requirement for task in tasks for requirement in task.required_skills]


def merge_requirements(tasks: Iterable[Task]) -> list[SkillRequirement]:
    """Union of task requirements keyed by skill.

    Each skill keeps the highest minimum and the strongest requirement type
    seen across tasks. First-seen order is preserved.
    """
    merged: dict[str, SkillRequirement] = {}
    for requirement in task_requirements(tasks):
        current = merged.get(requirement.skill_id)
        if current is None:
            merged[requirement.skill_id] = requirement
            continue
        strongest = min(
            (current.requirement_type, requirement.requirement_type), key=_type_rank
        )
        merged[requirement.skill_id] = SkillRequirement(
            skill_id=current.skill_id,
            requirement_type=strongest,
            minimum_proficiency=max(current.minimum_proficiency, requirement.minimum_proficiency),
            skill_name=current.skill_name or requirement.skill_name,
        )
    return list(merged.values())


def _levels(proficiencies: Sequence[SkillProficiency]) -> dict[str, int]:
    return {item.skill_id: item.proficiency_level for item in proficiencies}


def requirement_ratio(level: Optional[int], minimum: int) -> float:
    if minimum <= 0:
        return 1.0
    if level is None:
        return 0.0
    return min(level / minimum, 1.0)


def compute_skill_match_score(
    proficiencies: Sequence[SkillProficiency],
    requirements: Sequence[SkillRequirement],
) -> float:
    if not requirements:
        return NEUTRAL_SKILL_MATCH
    if not proficiencies:
        return 0.0

    levels = _levels(proficiencies)
    total = 0.0
    for requirement in requirements:
        weight = REQUIREMENT_WEIGHTS.get(requirement.requirement_type, UNKNOWN_REQUIREMENT_WEIGHT)
        total += weight * requirement_ratio(
            levels.get(requirement.skill_id), requirement.minimum_proficiency
        )
    return total / len(requirements)


def compute_learning_opportunity_score(
    proficiencies: Sequence[SkillProficiency],
    requirements: Sequence[SkillRequirement],
) -> float:
    learning = [item for item in requirements if item.requirement_type == REQUIREMENT_LEARNING]
    if not learning:
        return 0.0
    levels = _levels(proficiencies)
    scores = [
        LEARNING_GAP_SCORE
        if levels.get(item.skill_id, 0) < item.minimum_proficiency
        else LEARNING_MASTERED_SCORE
        for item in learning
    ]
    return sum(scores) / len(scores)


class SkillMatcher:
    """Scores one resource against merged skill requirements using stored proficiencies."""

    def __init__(
        self,
        repository: Optional[SkillProficiencyRepository] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or DataRepository(self._settings)

    def score_resource(self, resource_id: str, requirements: Sequence[SkillRequirement]) -> float:
        skill_ids = [item.skill_id for item in requirements]
        proficiencies = self._repository.list_skill_proficiencies(resource_id, skill_ids)
        return compute_skill_match_score(proficiencies, requirements)
