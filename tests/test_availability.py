from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from taskfit.domain.models import ResourceProfile, Task
from taskfit.repository.data_repository import DataRepository
from taskfit.services.availability_service import AvailabilityService, compute_task_availability
from taskfit.services.snapshot_service import ResourceSnapshot
from taskfit.utils.config import get_settings


def _snapshot(tasks, profile=None) -> ResourceSnapshot:
    return ResourceSnapshot(
        resource_id="R1",
        window="week",
        window_start=date(2024, 3, 4),
        window_end=date(2024, 3, 10),
        profile=profile,
        proficiencies=(),
        current_tasks=tuple(tasks),
        previous_tasks=(),
    )


def _tasks(*complexities: int) -> list[Task]:
    return [
        Task(task_id=f"T{index}", project_id="P1", complexity_score=value)
        for index, value in enumerate(complexities)
    ]


def test_default_availability_for_partial_load() -> None:
    availability = compute_task_availability(_snapshot(_tasks(2, 5, 5, 9)))

    assert availability.available_task_slots == 11
    assert availability.availability_percentage == pytest.approx(11 / 15 * 100)
    assert availability.simple_task_slots_available == 24
    assert availability.medium_task_slots_available == 13
    assert availability.complex_task_slots_available == 4
    assert availability.recommended_new_tasks == 3
    assert availability.context_switch_impact == pytest.approx(0.4)
    assert availability.task_completion_forecast == 2
    assert availability.next_period_availability == 13


def test_overloaded_resource_has_no_slots() -> None:
    availability = compute_task_availability(_snapshot(_tasks(*([5] * 20))))

    assert availability.available_task_slots == 0
    assert availability.availability_percentage == 0.0
    assert availability.recommended_new_tasks == 0
    assert availability.context_switch_impact == 1.0
    assert availability.task_completion_forecast == 14
    assert availability.next_period_availability == 14


@pytest.mark.parametrize(
    "preference,expected",
    [("Sequential", 2), ("Parallel", 5), ("Balanced", 3), ("Unknown", 3)],
)
def test_recommended_new_tasks_follow_switching_preference(preference, expected) -> None:
    profile = ResourceProfile(resource_id="R1", task_switching_preference=preference)
    availability = compute_task_availability(_snapshot([], profile=profile))

    assert availability.recommended_new_tasks == expected


def test_zero_capacity_reports_no_availability() -> None:
    profile = ResourceProfile(resource_id="R1", optimal_task_count_per_week=0)
    availability = compute_task_availability(_snapshot([], profile=profile))

    assert availability.availability_percentage == 0.0
    assert availability.available_task_slots == 0
    assert availability.next_period_availability == 0


def test_service_uses_repository_snapshot(tmp_path) -> None:
    settings = replace(get_settings(), database_path=tmp_path / "availability.db")
    repository = DataRepository(settings)
    repository.initialize_database()
    repository.create_project("P1", "Portal")
    repository.create_resource("R1", "Avery")
    repository.upsert_resource_profile(
        ResourceProfile(resource_id="R1", optimal_task_count_per_day=2)
    )
    repository.create_task(
        Task(
            task_id="T1",
            project_id="P1",
            start_date=date(2024, 3, 6),
            end_date=date(2024, 3, 6),
            assigned_resource_ids=("R1",),
        )
    )

    service = AvailabilityService(repository=repository, settings=settings)
    availability = service.calculate_availability("R1", "day", reference=date(2024, 3, 6))

    assert availability.window == "day"
    assert availability.available_task_slots == 1
    assert availability.availability_percentage == pytest.approx(50.0)
