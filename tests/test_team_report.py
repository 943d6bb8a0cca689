from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from taskfit.domain.models import ResourceProfile, Task
from taskfit.repository.data_repository import DataRepository
from taskfit.services.report_service import REPORT_COLUMNS, TeamUtilizationReportService
from taskfit.utils.config import get_settings


REFERENCE = date(2024, 3, 6)


def _build_service(tmp_path):
    settings = replace(get_settings(), database_path=tmp_path / "report.db")
    repository = DataRepository(settings)
    repository.initialize_database()
    repository.create_project("P1", "Portal")
    repository.create_resource("R1", "Avery")
    repository.create_resource("R2", "Jordan")
    repository.create_resource("R3", "Morgan")
    repository.upsert_resource_profile(
        ResourceProfile(resource_id="R2", optimal_task_count_per_week=5)
    )
    for index in range(3):
        repository.create_task(
            Task(task_id=f"A{index}", project_id="P1", assigned_resource_ids=("R1",))
        )
    for index in range(6):
        repository.create_task(
            Task(task_id=f"B{index}", project_id="P1", assigned_resource_ids=("R2",))
        )
    return TeamUtilizationReportService(repository=repository, settings=settings)


def test_frame_is_sorted_by_utilization(tmp_path) -> None:
    service = _build_service(tmp_path)

    frame = service.build_utilization_frame(["R1", "R2", "R3"], "week", REFERENCE)

    assert list(frame.columns) == REPORT_COLUMNS
    assert frame["resource_id"].tolist() == ["R2", "R1", "R3"]
    assert frame["utilization_percentage"].tolist() == pytest.approx([120.0, 20.0, 0.0])
    assert frame["status"].tolist() == ["Overloaded", "Underutilized", "Underutilized"]
    assert frame.loc[0, "name"] == "Jordan"
    assert frame.loc[0, "available_task_slots"] == 0


def test_summary_counts_statuses_and_overloaded(tmp_path) -> None:
    service = _build_service(tmp_path)
    frame = service.build_utilization_frame(["R1", "R2", "R3"], "week", REFERENCE)

    summary = service.summarize(frame)

    assert summary["resource_count"] == 3
    assert summary["average_utilization"] == pytest.approx(46.67)
    assert summary["status_counts"] == {"Underutilized": 2, "Overloaded": 1}
    assert summary["overloaded_resource_ids"] == ["R2"]


def test_empty_report(tmp_path) -> None:
    service = _build_service(tmp_path)

    report = service.build_report([], "week", REFERENCE)

    assert report["resources"] == []
    assert report["summary"]["resource_count"] == 0
    assert report["summary"]["overloaded_resource_ids"] == []
