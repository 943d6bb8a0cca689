"""Team-level utilization report built on pandas."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

import pandas as pd

from taskfit.domain.constraints import DEFAULT_SCORING_CONFIG, ScoringConfig
from taskfit.domain.models import STATUS_OVERLOADED, STATUS_SEVERELY_OVERLOADED
from taskfit.repository.contracts import TeamRepository
from taskfit.repository.data_repository import DataRepository
from taskfit.services.availability_service import compute_task_availability
from taskfit.services.snapshot_service import ResourceSnapshotService
from taskfit.services.utilization_service import compute_utilization_metrics
from taskfit.utils.config import Settings, get_settings
from taskfit.utils.logger import get_logger


logger = get_logger(__name__)


REPORT_COLUMNS = [
    "resource_id",
    "name",
    "task_count",
    "base_capacity",
    "utilization_percentage",
    "weighted_utilization",
    "status",
    "available_task_slots",
]


class TeamUtilizationReportService:
    def __init__(
        self,
        repository: Optional[TeamRepository] = None,
        settings: Optional[Settings] = None,
        config: ScoringConfig = DEFAULT_SCORING_CONFIG,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or DataRepository(self._settings)
        self._snapshots = ResourceSnapshotService(self._repository, self._settings)
        self._config = config

    def build_utilization_frame(
        self,
        resource_ids: Sequence[str],
        window: Optional[str] = None,
        reference: Optional[date] = None,
    ) -> pd.DataFrame:
        """One row per resource, most utilized first."""
        rows = []
        for resource_id in dict.fromkeys(resource_ids):
            snapshot = self._snapshots.load(resource_id, window, reference)
            metrics = compute_utilization_metrics(snapshot, self._config)
            availability = compute_task_availability(snapshot, self._config)
            resource = self._repository.get_resource(resource_id)
            rows.append(
                {
                    "resource_id": resource_id,
                    "name": resource.name if resource else "",
                    "task_count": metrics.task_count,
                    "base_capacity": metrics.task_capacity,
                    "utilization_percentage": round(metrics.utilization_percentage, 2),
                    "weighted_utilization": round(metrics.weighted_utilization, 2),
                    "status": metrics.status,
                    "available_task_slots": availability.available_task_slots,
                }
            )

        frame = pd.DataFrame(rows, columns=REPORT_COLUMNS)
        if frame.empty:
            return frame
        return frame.sort_values(
            by=["utilization_percentage", "resource_id"],
            ascending=[False, True],
            kind="mergesort",
        ).reset_index(drop=True)

    @staticmethod
    def summarize(frame: pd.DataFrame) -> dict[str, Any]:
        if frame.empty:
            return {
                "resource_count": 0,
                "average_utilization": 0.0,
                "status_counts": {},
                "overloaded_resource_ids": [],
            }
        overloaded = frame[frame["status"].isin([STATUS_OVERLOADED, STATUS_SEVERELY_OVERLOADED])]
        return {
            "resource_count": int(len(frame)),
            "average_utilization": round(float(frame["utilization_percentage"].mean()), 2),
            "status_counts": {
                str(status): int(count) for status, count in frame["status"].value_counts().items()
            },
            "overloaded_resource_ids": [str(item) for item in overloaded["resource_id"].tolist()],
        }

    def build_report(
        self,
        resource_ids: Sequence[str],
        window: Optional[str] = None,
        reference: Optional[date] = None,
    ) -> dict[str, Any]:
        frame = self.build_utilization_frame(resource_ids, window, reference)
        summary = self.summarize(frame)
        logger.info(
            "Team utilization report | resources=%s | average_utilization=%.2f | overloaded=%s",
            summary["resource_count"],
            summary["average_utilization"],
            len(summary["overloaded_resource_ids"]),
        )
        return {
            "resources": frame.to_dict(orient="records"),
            "summary": summary,
        }
