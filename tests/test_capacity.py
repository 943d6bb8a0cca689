from __future__ import annotations

from dataclasses import replace

import pytest

from taskfit.domain.models import ResourceProfile, SkillProficiency
from taskfit.repository.data_repository import DataRepository
from taskfit.services.capacity_service import CapacityCalculator, compute_task_capacity
from taskfit.services.snapshot_service import RecommendationValidationError
from taskfit.utils.config import get_settings


def _build_test_settings(tmp_path, filename: str):
    return replace(get_settings(), database_path=tmp_path / filename)


def _skills(*levels: int) -> list[SkillProficiency]:
    return [
        SkillProficiency(resource_id="R1", skill_id=f"skill-{index}", proficiency_level=level)
        for index, level in enumerate(levels)
    ]


@pytest.mark.parametrize(
    "window,expected",
    [
        ("day", (3, 5, 3, 1, 2)),
        ("week", (15, 25, 15, 5, 10)),
        ("month", (60, 100, 60, 20, 40)),
    ],
)
def test_default_capacity_without_profile(window, expected) -> None:
    capacity = compute_task_capacity(None, _skills(9, 9), window)

    tiers = capacity.complexity_capacity
    assert (
        capacity.base_capacity,
        tiers.simple,
        tiers.medium,
        tiers.complex,
        capacity.collaborative_capacity,
    ) == expected
    assert capacity.skill_adjusted_capacity == capacity.base_capacity
    assert capacity.has_profile is False


def test_profile_capacity_scales_with_average_proficiency() -> None:
    profile = ResourceProfile(resource_id="R1", optimal_task_count_per_week=10)

    capacity = compute_task_capacity(profile, _skills(8, 6), "week")

    # floor(10 * 7 / 5) = 14
    assert capacity.base_capacity == 10
    assert capacity.skill_adjusted_capacity == 14
    assert capacity.complexity_capacity.simple == 21
    assert capacity.complexity_capacity.medium == 14
    assert capacity.complexity_capacity.complex == 7
    assert capacity.collaborative_capacity == 9
    assert capacity.has_profile is True


def test_profile_without_skills_keeps_base() -> None:
    profile = ResourceProfile(resource_id="R1", optimal_task_count_per_day=4)

    capacity = compute_task_capacity(profile, [], "day")

    assert capacity.skill_adjusted_capacity == 4
    assert capacity.complexity_capacity.simple == 6
    assert capacity.complexity_capacity.complex == 2
    assert capacity.collaborative_capacity == 2


def test_month_capacity_is_four_weeks() -> None:
    profile = ResourceProfile(resource_id="R1", optimal_task_count_per_week=12)

    capacity = compute_task_capacity(profile, [], "month")

    assert capacity.base_capacity == 48


def test_unknown_window_is_rejected() -> None:
    with pytest.raises(RecommendationValidationError):
        compute_task_capacity(None, [], "fortnight")


def test_calculator_reads_profile_and_skills(tmp_path) -> None:
    settings = _build_test_settings(tmp_path, "capacity.db")
    repository = DataRepository(settings)
    repository.initialize_database()
    repository.create_resource("R1", "Avery")
    repository.create_resource("R2", "Jordan")
    repository.upsert_resource_profile(
        ResourceProfile(resource_id="R1", optimal_task_count_per_week=10)
    )
    repository.set_skill_proficiency("R1", "python", 10)

    calculator = CapacityCalculator(repository=repository, settings=settings)

    profiled = calculator.calculate_task_capacity("R1", "week")
    unprofiled = calculator.calculate_task_capacity("R2", "week")

    assert profiled.skill_adjusted_capacity == 20
    assert unprofiled.base_capacity == 15
    assert unprofiled.has_profile is False
