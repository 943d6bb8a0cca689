"""Time-window resolution and the per-resource read snapshot shared by all calculators."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from taskfit.domain.models import (
    ACTIVE_TASK_STATUSES,
    ResourceProfile,
    SkillProficiency,
    Task,
    TIME_WINDOWS,
    WINDOW_DAY,
    WINDOW_MONTH,
    WINDOW_WEEK,
    default_profile,
)
from taskfit.repository.contracts import ResourceStateRepository
from taskfit.repository.data_repository import DataRepository
from taskfit.utils.config import Settings, get_settings
from taskfit.utils.logger import get_logger


logger = get_logger(__name__)


class RecommendationError(Exception):
    """Base exception for recommendation workflow failures."""


class RecommendationValidationError(RecommendationError):
    """Raised when caller input such as a window name is invalid."""


def validate_window(window: str) -> str:
    normalized = (window or "").strip().lower()
    if normalized not in TIME_WINDOWS:
        raise RecommendationValidationError(
            f"window must be one of {', '.join(TIME_WINDOWS)}, got {window!r}"
        )
    return normalized


def resolve_window(window: str, reference: date) -> tuple[date, date]:
    """Return the inclusive [start, end] dates of the window containing `reference`.

    Weeks run Monday through Sunday; months cover the full calendar month.
    """
    window = validate_window(window)
    if window == WINDOW_DAY:
        return reference, reference
    if window == WINDOW_WEEK:
        start = reference - timedelta(days=reference.weekday())
        return start, start + timedelta(days=6)
    last_day = calendar.monthrange(reference.year, reference.month)[1]
    return reference.replace(day=1), reference.replace(day=last_day)


def previous_window(window: str, reference: date) -> tuple[date, date]:
    start, _ = resolve_window(window, reference)
    return resolve_window(window, start - timedelta(days=1))


@dataclass(frozen=True)
class ResourceSnapshot:
    """Everything the calculators need about one resource, read once."""

    resource_id: str
    window: str
    window_start: date
    window_end: date
    profile: Optional[ResourceProfile]
    proficiencies: tuple[SkillProficiency, ...]
    current_tasks: tuple[Task, ...]
    previous_tasks: tuple[Task, ...]

    @property
    def has_profile(self) -> bool:
        return self.profile is not None

    @property
    def effective_profile(self) -> ResourceProfile:
        return self.profile or default_profile(self.resource_id)


class ResourceSnapshotService:
    """Reads a resource's profile, skills, and windowed task load from storage."""

    def __init__(
        self,
        repository: Optional[ResourceStateRepository] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or DataRepository(self._settings)

    def load(
        self,
        resource_id: str,
        window: Optional[str] = None,
        reference: Optional[date] = None,
    ) -> ResourceSnapshot:
        window = validate_window(window or self._settings.default_window)
        reference = reference or date.today()
        start, end = resolve_window(window, reference)
        previous_start, previous_end = previous_window(window, reference)

        profile = self._repository.get_resource_profile(resource_id)
        proficiencies = self._repository.list_skill_proficiencies(resource_id)
        current_tasks = self._repository.list_resource_tasks(
            resource_id, ACTIVE_TASK_STATUSES, start, end
        )
        previous_tasks = self._repository.list_resource_tasks(
            resource_id, ACTIVE_TASK_STATUSES, previous_start, previous_end
        )
        if profile is None:
            logger.debug("No profile stored | resource_id=%s | using defaults", resource_id)

        return ResourceSnapshot(
            resource_id=resource_id,
            window=window,
            window_start=start,
            window_end=end,
            profile=profile,
            proficiencies=tuple(proficiencies),
            current_tasks=tuple(current_tasks),
            previous_tasks=tuple(previous_tasks),
        )
