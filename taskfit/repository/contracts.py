"""Storage contracts consumed and produced by the recommendation engine.

`DataRepository` satisfies all of them; tests and alternative backends may
implement any subset structurally.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence, runtime_checkable

from taskfit.domain.models import (
    AssignmentRecommendation,
    Resource,
    ResourceProfile,
    SkillProficiency,
    Task,
)


@runtime_checkable
class TaskRepository(Protocol):
    def list_project_tasks(
        self,
        project_id: str,
        statuses: Sequence[str],
    ) -> list[Task]:
        ...

    def list_resource_tasks(
        self,
        resource_id: str,
        statuses: Sequence[str],
        window_start: Optional[date] = None,
        window_end: Optional[date] = None,
    ) -> list[Task]:
        ...

    def project_exists(self, project_id: str) -> bool:
        ...


@runtime_checkable
class ResourceProfileRepository(Protocol):
    def get_resource_profile(self, resource_id: str) -> Optional[ResourceProfile]:
        ...


@runtime_checkable
class SkillProficiencyRepository(Protocol):
    def list_skill_proficiencies(
        self,
        resource_id: str,
        skill_ids: Optional[Sequence[str]] = None,
    ) -> list[SkillProficiency]:
        ...


@runtime_checkable
class ResourceDirectory(Protocol):
    def list_candidate_resources(self, limit: int) -> list[Resource]:
        ...

    def get_resource(self, resource_id: str) -> Optional[Resource]:
        ...


@runtime_checkable
class RecommendationSink(Protocol):
    def save_recommendation(self, record: AssignmentRecommendation) -> int:
        ...

    def get_recommendation(self, recommendation_id: int) -> Optional[AssignmentRecommendation]:
        ...

    def list_active_recommendations(
        self,
        resource_ids: Sequence[str],
        now: datetime,
    ) -> list[AssignmentRecommendation]:
        ...


@runtime_checkable
class ResourceStateRepository(
    TaskRepository, ResourceProfileRepository, SkillProficiencyRepository, Protocol
):
    """Everything needed to snapshot one resource's current workload."""


@runtime_checkable
class CandidateRepository(ResourceDirectory, SkillProficiencyRepository, Protocol):
    """Directory lookups plus proficiencies for ranking alternatives."""


@runtime_checkable
class TeamRepository(ResourceStateRepository, ResourceDirectory, Protocol):
    """Resource state plus directory names for team reports."""


@runtime_checkable
class RecommendationRepository(
    ResourceStateRepository, ResourceDirectory, RecommendationSink, Protocol
):
    """The full set of stores the recommendation orchestrator reads and writes."""
