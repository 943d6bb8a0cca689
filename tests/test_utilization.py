from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from taskfit.domain.models import ResourceProfile, Task
from taskfit.repository.contracts import ResourceStateRepository
from taskfit.repository.data_repository import DataRepository
from taskfit.services.snapshot_service import ResourceSnapshot, previous_window, resolve_window
from taskfit.services.utilization_service import (
    UtilizationService,
    bottleneck_risk,
    classify_utilization_status,
    compute_utilization_metrics,
    context_switch_penalty,
    weighted_task_load,
)
from taskfit.utils.config import get_settings


def _build_test_settings(tmp_path, filename: str):
    return replace(get_settings(), database_path=tmp_path / filename)


def _tasks(count: int, **overrides) -> tuple[Task, ...]:
    return tuple(
        Task(task_id=f"T{index}", project_id="P1", **overrides) for index in range(count)
    )


def _snapshot(tasks, profile=None, previous=()) -> ResourceSnapshot:
    return ResourceSnapshot(
        resource_id="R1",
        window="week",
        window_start=date(2024, 3, 4),
        window_end=date(2024, 3, 10),
        profile=profile,
        proficiencies=(),
        current_tasks=tuple(tasks),
        previous_tasks=tuple(previous),
    )


@pytest.mark.parametrize(
    "count,percentage,status",
    [
        (12, 80.0, "Well Utilized"),
        (18, 120.0, "Overloaded"),
        (19, 126.67, "Severely Overloaded"),
    ],
)
def test_week_utilization_against_default_capacity(count, percentage, status) -> None:
    metrics = compute_utilization_metrics(_snapshot(_tasks(count)))

    assert metrics.task_capacity == 15
    assert metrics.utilization_percentage == pytest.approx(percentage, abs=0.01)
    assert metrics.status == status


@pytest.mark.parametrize(
    "percentage,status",
    [
        (0.0, "Underutilized"),
        (30.0, "Underutilized"),
        (30.01, "Moderately Utilized"),
        (60.0, "Moderately Utilized"),
        (85.0, "Well Utilized"),
        (100.0, "Optimally Loaded"),
        (120.0, "Overloaded"),
        (500.0, "Severely Overloaded"),
    ],
)
def test_status_bands_use_exclusive_lower_bounds(percentage, status) -> None:
    assert classify_utilization_status(percentage) == status


def test_status_is_monotonic_in_utilization() -> None:
    order = [
        "Underutilized",
        "Moderately Utilized",
        "Well Utilized",
        "Optimally Loaded",
        "Overloaded",
        "Severely Overloaded",
    ]
    ranks = [order.index(classify_utilization_status(value / 2)) for value in range(0, 400)]
    assert ranks == sorted(ranks)


def test_zero_capacity_with_tasks_saturates() -> None:
    profile = ResourceProfile(resource_id="R1", optimal_task_count_per_week=0)

    loaded = compute_utilization_metrics(_snapshot(_tasks(2), profile=profile))
    idle = compute_utilization_metrics(_snapshot((), profile=profile))

    assert loaded.utilization_percentage == 200.0
    assert loaded.status == "Severely Overloaded"
    assert loaded.weighted_utilization == 200.0
    assert idle.utilization_percentage == 0.0
    assert idle.weighted_utilization == 0.0


def test_weighted_load_applies_urgency_and_collaboration() -> None:
    tasks = [
        Task(task_id="a", project_id="P1", complexity_score=4, priority="Critical", collaboration_intensity="High"),
        Task(task_id="b", project_id="P1", complexity_score=5, priority="High", collaboration_intensity="Medium"),
        Task(task_id="c", project_id="P1", complexity_score=2, priority="Low"),
    ]
    assert weighted_task_load(tasks) == pytest.approx(4 * 1.5 * 1.3 + 5 * 1.2 * 1.1 + 2)


def test_weighted_capacity_uses_profile() -> None:
    profile = ResourceProfile(
        resource_id="R1",
        optimal_task_count_per_week=10,
        complexity_handling_score=7.5,
        collaboration_effectiveness=0.6,
    )
    metrics = compute_utilization_metrics(_snapshot(_tasks(3), profile=profile))

    assert metrics.weighted_capacity == pytest.approx(10 * 1.5 * 1.6)
    assert metrics.weighted_task_load == pytest.approx(15.0)
    assert metrics.weighted_utilization == pytest.approx(15.0 / 24.0 * 100.0)


def test_distribution_bottleneck_and_switching() -> None:
    tasks = [
        Task(task_id="a", project_id="P1", complexity_score=3),
        Task(task_id="b", project_id="P1", complexity_score=6, context_switching_penalty=9),
        Task(task_id="c", project_id="P1", complexity_score=8, dependency_weight=6.0),
        Task(task_id="d", project_id="P1", complexity_score=9, dependency_weight=7.0),
    ]
    metrics = compute_utilization_metrics(_snapshot(tasks))

    assert (metrics.distribution.simple, metrics.distribution.medium, metrics.distribution.complex) == (1, 1, 2)
    assert metrics.bottleneck_risk == 10
    assert bottleneck_risk(tasks[:3]) == 5
    assert metrics.context_switch_penalty == pytest.approx(0.5)
    assert context_switch_penalty(tasks[:1]) == 0.0


def test_trend_range_and_completion_prediction() -> None:
    profile = ResourceProfile(resource_id="R1", historical_task_velocity=0.75)
    metrics = compute_utilization_metrics(
        _snapshot(_tasks(6), profile=profile, previous=_tasks(4))
    )

    assert metrics.utilization_trend == pytest.approx(50.0)
    assert metrics.optimal_task_range == (12, 18)
    assert metrics.predicted_completion_count == 4


def test_trend_is_flat_without_previous_tasks() -> None:
    metrics = compute_utilization_metrics(_snapshot(_tasks(3)))
    assert metrics.utilization_trend == 0.0


def test_window_resolution() -> None:
    wednesday = date(2024, 2, 14)

    assert resolve_window("day", wednesday) == (wednesday, wednesday)
    assert resolve_window("week", wednesday) == (date(2024, 2, 12), date(2024, 2, 18))
    assert resolve_window("month", wednesday) == (date(2024, 2, 1), date(2024, 2, 29))
    assert previous_window("week", wednesday) == (date(2024, 2, 5), date(2024, 2, 11))
    assert previous_window("month", date(2024, 1, 10)) == (date(2023, 12, 1), date(2023, 12, 31))


def test_service_counts_only_active_tasks_in_window(tmp_path) -> None:
    settings = _build_test_settings(tmp_path, "utilization.db")
    repository = DataRepository(settings)
    repository.initialize_database()
    repository.create_project("P1", "Portal")
    repository.create_resource("R1", "Avery")

    this_week = date(2024, 3, 6)
    fixtures = [
        Task(task_id="open", project_id="P1", start_date=date(2024, 3, 4), end_date=date(2024, 3, 8)),
        Task(task_id="open-ended", project_id="P1"),
        Task(task_id="done", project_id="P1", status="Completed"),
        Task(task_id="held", project_id="P1", status="On Hold"),
        Task(task_id="future", project_id="P1", start_date=date(2024, 4, 1), end_date=date(2024, 4, 5)),
        Task(task_id="last-week", project_id="P1", start_date=date(2024, 2, 26), end_date=date(2024, 3, 1)),
    ]
    for task in fixtures:
        repository.create_task(replace(task, assigned_resource_ids=("R1",)))

    service = UtilizationService(repository=repository, settings=settings)
    metrics = service.calculate_utilization("R1", "week", reference=this_week)

    # previous week holds "open-ended" and "last-week"
    assert metrics.task_count == 2
    assert metrics.utilization_trend == pytest.approx(0.0)
    assert metrics.utilization_percentage == pytest.approx(2 / 15 * 100)


class _InMemoryResourceStore:
    def __init__(self, profile, tasks) -> None:
        self._profile = profile
        self._tasks = list(tasks)

    def list_project_tasks(self, project_id, statuses):
        return [task for task in self._tasks if task.project_id == project_id]

    def list_resource_tasks(self, resource_id, statuses, window_start=None, window_end=None):
        return [
            task
            for task in self._tasks
            if resource_id in task.assigned_resource_ids and task.status in statuses
        ]

    def project_exists(self, project_id):
        return any(task.project_id == project_id for task in self._tasks)

    def get_resource_profile(self, resource_id):
        return self._profile

    def list_skill_proficiencies(self, resource_id, skill_ids=None):
        return []


def test_service_accepts_any_resource_state_store() -> None:
    store = _InMemoryResourceStore(
        ResourceProfile(resource_id="R1", optimal_task_count_per_week=10),
        [
            Task(task_id=f"T{index}", project_id="P1", assigned_resource_ids=("R1",))
            for index in range(3)
        ],
    )
    assert isinstance(store, ResourceStateRepository)

    service = UtilizationService(repository=store)
    metrics = service.calculate_utilization("R1", "week", reference=date(2024, 3, 6))

    assert metrics.task_count == 3
    assert metrics.utilization_percentage == pytest.approx(30.0)
