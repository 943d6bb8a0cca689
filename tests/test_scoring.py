from __future__ import annotations

from datetime import date

import pytest

from taskfit.domain.constraints import FitWeights
from taskfit.domain.models import FitScores, ResourceProfile, SkillProficiency, SkillRequirement, Task
from taskfit.services.availability_service import compute_task_availability
from taskfit.services.scoring_service import (
    AssignmentScorer,
    average_complexity,
    collaboration_fit,
    compute_overall_fit,
    task_capacity_fit,
)
from taskfit.services.skill_matching_service import merge_requirements
from taskfit.services.snapshot_service import ResourceSnapshot
from taskfit.services.utilization_service import compute_utilization_metrics


def _snapshot(profile=None, current=(), proficiencies=()) -> ResourceSnapshot:
    return ResourceSnapshot(
        resource_id="R1",
        window="week",
        window_start=date(2024, 3, 4),
        window_end=date(2024, 3, 10),
        profile=profile,
        proficiencies=tuple(proficiencies),
        current_tasks=tuple(current),
        previous_tasks=(),
    )


def _score(snapshot, project_tasks):
    utilization = compute_utilization_metrics(snapshot)
    availability = compute_task_availability(snapshot)
    requirements = merge_requirements(project_tasks)
    return AssignmentScorer().score(snapshot, utilization, availability, project_tasks, requirements)


def test_overall_score_uses_documented_weights() -> None:
    scores = FitScores(
        task_capacity_fit=1.0,
        complexity_handling_fit=0.5,
        skill_match=0.4,
        availability=0.8,
        collaboration_fit=0.7,
        learning_opportunity=0.0,
    )
    expected = 0.25 * 1.0 + 0.20 * 0.5 + 0.25 * 0.4 + 0.15 * 0.8 + 0.10 * 0.7
    assert compute_overall_fit(scores) == pytest.approx(expected)


def test_overall_score_is_bounded() -> None:
    ones = FitScores(1.0, 1.0, 1.0, 1.0, 1.0, 1.0)
    zeros = FitScores(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)

    assert compute_overall_fit(ones) == pytest.approx(1.0)
    assert compute_overall_fit(zeros) == 0.0
    assert compute_overall_fit(ones, FitWeights(task_capacity=0.9)) == 1.0


def test_idle_resource_on_empty_project() -> None:
    scores, overall = _score(_snapshot(), [])

    # remaining capacity 15 with no project tasks
    assert scores.task_capacity_fit == 1.0
    # 5 / 5 / 1.2
    assert scores.complexity_handling_fit == pytest.approx(1 / 1.2)
    assert scores.skill_match == 0.5
    assert scores.availability == 1.0
    assert scores.collaboration_fit == 0.7
    assert scores.learning_opportunity == 0.0
    assert 0.0 <= overall <= 1.0


def test_task_capacity_fit_edges() -> None:
    assert task_capacity_fit(0.0, 0) == 0.0
    assert task_capacity_fit(-3.0, 4) == 0.0
    assert task_capacity_fit(2.0, 4) == pytest.approx(0.5)
    assert task_capacity_fit(20.0, 4) == 1.0


def test_overloaded_resource_has_no_capacity_fit() -> None:
    current = [Task(task_id=f"C{index}", project_id="P0") for index in range(18)]
    project = [Task(task_id="P", project_id="P1")]

    scores, _ = _score(_snapshot(current=current), project)

    assert scores.task_capacity_fit == 0.0
    assert scores.availability == 0.0


def test_complexity_fit_is_clamped() -> None:
    profile = ResourceProfile(resource_id="R1", complexity_handling_score=10.0)
    project = [Task(task_id="easy", project_id="P1", complexity_score=2)]

    scores, _ = _score(_snapshot(profile=profile), project)

    assert scores.complexity_handling_fit == 1.0
    assert average_complexity([]) == 5.0


@pytest.mark.parametrize(
    "style,intensities,expected",
    [
        ("Collaborative", ["High", "High", "Low"], 0.9),
        ("Collaborative", ["High", "Low"], 0.5),
        ("DeepFocus", ["Low", "Low", "Low", "High"], 0.9),
        ("DeepFocus", ["High", "Low"], 0.5),
        ("Mixed", ["High"], 0.7),
    ],
)
def test_collaboration_fit_matches_work_style(style, intensities, expected) -> None:
    profile = ResourceProfile(resource_id="R1", preferred_work_style=style)
    tasks = [
        Task(task_id=f"T{index}", project_id="P1", collaboration_intensity=value)
        for index, value in enumerate(intensities)
    ]
    assert collaboration_fit(profile, tasks) == expected


def test_learning_opportunity_feeds_score() -> None:
    project = [
        Task(
            task_id="T1",
            project_id="P1",
            required_skills=(
                SkillRequirement(skill_id="python", minimum_proficiency=4),
                SkillRequirement(skill_id="rust", requirement_type="learning_opportunity", minimum_proficiency=6),
            ),
        )
    ]
    proficiencies = [SkillProficiency(resource_id="R1", skill_id="python", proficiency_level=8)]

    scores, _ = _score(_snapshot(proficiencies=proficiencies), project)

    assert scores.learning_opportunity == pytest.approx(0.8)
    # (1.0 * 1 + 0.5 * 0) / 2
    assert scores.skill_match == pytest.approx(0.5)


def test_learning_opportunity_reads_every_task_requirement() -> None:
    project = [
        Task(
            task_id="T1",
            project_id="P1",
            required_skills=(SkillRequirement(skill_id="rust", minimum_proficiency=8),),
        ),
        Task(
            task_id="T2",
            project_id="P1",
            required_skills=(
                SkillRequirement(skill_id="rust", requirement_type="learning_opportunity", minimum_proficiency=4),
            ),
        ),
    ]
    proficiencies = [SkillProficiency(resource_id="R1", skill_id="python", proficiency_level=8)]

    scores, _ = _score(_snapshot(proficiencies=proficiencies), project)

    assert scores.learning_opportunity == pytest.approx(0.8)
    assert scores.skill_match == 0.0
