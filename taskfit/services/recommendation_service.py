"""Business logic for composing, ranking, and persisting assignment recommendations."""

from __future__ import annotations

import concurrent.futures
import math
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Sequence

from taskfit.domain.constraints import DEFAULT_SCORING_CONFIG, ScoringConfig
from taskfit.domain.models import (
    ACTIVE_TASK_STATUSES,
    AlternativeAssignment,
    AssignmentRecommendation,
    CapacityAnalysis,
    FitScores,
    RecommendationReasoning,
    ResourceProfile,
    RiskAssessment,
    SWITCHING_SEQUENTIAL,
    SkillProficiency,
    SkillRequirement,
    Task,
    TaskAvailability,
    TaskMatch,
    UtilizationMetrics,
    WINDOW_WEEK,
    WORK_STYLE_COLLABORATIVE,
)
from taskfit.repository.contracts import CandidateRepository, RecommendationRepository
from taskfit.repository.data_repository import DataRepository
from taskfit.services.availability_service import compute_task_availability
from taskfit.services.prediction_service import predict_performance
from taskfit.services.risk_service import assess_risk
from taskfit.services.scoring_service import AssignmentScorer, average_complexity
from taskfit.services.skill_matching_service import compute_skill_match_score, merge_requirements
from taskfit.services.snapshot_service import ResourceSnapshot, ResourceSnapshotService
from taskfit.services.utilization_service import compute_utilization_metrics, load_percentage
from taskfit.utils.config import Settings, get_settings
from taskfit.utils.logger import get_logger, log_elapsed


logger = get_logger(__name__)


BLOCKER_HIGH_COMPLEXITY = "High complexity tasks present"
BLOCKER_SEQUENTIAL = "Prefers sequential work but project has many parallel tasks"
BLOCKER_SKILL_GAP = "Skill gap in required technologies"
BLOCKER_HIGH_UTILIZATION = "High current utilization"

FACTOR_COMPLEXITY = "Strong complexity handling"
FACTOR_COLLABORATION = "Highly effective collaborator"
FACTOR_SKILLS = "Strong skill alignment with project requirements"
FACTOR_VELOCITY = "Consistently delivers at or above planned velocity"

RISK_DEEP_FOCUS = "Deep-focus tasks assigned to a collaboration-oriented resource"
RISK_OVERLOAD = "Resource is close to or beyond capacity"
RISK_CONTEXT_SWITCHING = "Frequent context switching expected"

IMPACT_SIGNIFICANT = "Significant delay risk"
IMPACT_MODERATE = "Moderate impact"
IMPACT_MINIMAL = "Minimal impact"

ALTERNATIVE_TRADE_OFFS = (
    "Capacity and availability not evaluated for this alternative",
    "May need onboarding to project context",
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def build_task_matches(
    proficiencies: Sequence[SkillProficiency],
    profile: ResourceProfile,
    project_tasks: Sequence[Task],
    limit: int,
) -> list[TaskMatch]:
    """Top project tasks by per-task skill match, best first."""
    matches = [
        TaskMatch(
            task_id=task.task_id,
            task_name=task.name,
            skill_match_score=compute_skill_match_score(proficiencies, task.required_skills),
            complexity_score=task.complexity_score,
            reasoning=(
                f"Complexity {task.complexity_score} against handling score "
                f"{profile.complexity_handling_score:g}"
            ),
        )
        for task in project_tasks
    ]
    matches.sort(key=lambda match: -match.skill_match_score)
    return matches[: max(0, limit)]


def recommended_task_count(
    availability: TaskAvailability,
    profile: ResourceProfile,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> int:
    share = math.floor(profile.optimal_task_count_per_week * config.recommended_share_of_week)
    return max(0, min(availability.available_task_slots, share))


def timeline_impact(
    utilization: UtilizationMetrics,
    recommended: int,
) -> str:
    projected = load_percentage(utilization.task_count + recommended, utilization.task_capacity)
    if projected > 100:
        return IMPACT_SIGNIFICANT
    if projected > 85:
        return IMPACT_MODERATE
    return IMPACT_MINIMAL


def build_capacity_analysis(
    profile: ResourceProfile,
    utilization: UtilizationMetrics,
    availability: TaskAvailability,
    project_task_count: int,
    recommended: int,
) -> CapacityAnalysis:
    return CapacityAnalysis(
        current_utilization=utilization.utilization_percentage,
        additional_capacity_needed=max(0, project_task_count - profile.optimal_task_count_per_week),
        optimal_task_distribution=(
            f"{availability.simple_task_slots_available} simple, "
            f"{availability.medium_task_slots_available} medium and "
            f"{availability.complex_task_slots_available} complex task slots open"
        ),
        timeline_impact=timeline_impact(utilization, recommended),
    )


def identify_blockers(
    profile: ResourceProfile,
    project_tasks: Sequence[Task],
    scores: FitScores,
    utilization: UtilizationMetrics,
) -> list[str]:
    blockers = []
    if any(task.complexity_score > 8 for task in project_tasks):
        blockers.append(BLOCKER_HIGH_COMPLEXITY)
    if profile.task_switching_preference == SWITCHING_SEQUENTIAL and len(project_tasks) > 3:
        blockers.append(BLOCKER_SEQUENTIAL)
    if scores.skill_match < 0.6:
        blockers.append(BLOCKER_SKILL_GAP)
    if utilization.utilization_percentage > 90:
        blockers.append(BLOCKER_HIGH_UTILIZATION)
    return blockers


def identify_success_factors(profile: ResourceProfile, scores: FitScores) -> list[str]:
    factors = []
    if profile.complexity_handling_score > 7:
        factors.append(FACTOR_COMPLEXITY)
    if profile.collaboration_effectiveness > 0.8:
        factors.append(FACTOR_COLLABORATION)
    if scores.skill_match >= 0.8:
        factors.append(FACTOR_SKILLS)
    if profile.historical_task_velocity >= 1.0:
        factors.append(FACTOR_VELOCITY)
    return factors


def identify_risk_factors(
    profile: ResourceProfile,
    project_tasks: Sequence[Task],
    risk: RiskAssessment,
) -> list[str]:
    factors = []
    if profile.preferred_work_style == WORK_STYLE_COLLABORATIVE and any(
        task.requires_deep_focus for task in project_tasks
    ):
        factors.append(RISK_DEEP_FOCUS)
    if risk.overload_risk >= 8:
        factors.append(RISK_OVERLOAD)
    if risk.context_switching_impact > 0.5:
        factors.append(RISK_CONTEXT_SWITCHING)
    return factors


def compose_recommendation(
    project_id: str,
    snapshot: ResourceSnapshot,
    project_tasks: Sequence[Task],
    requirements: Sequence[SkillRequirement],
    alternatives: Sequence[AlternativeAssignment],
    created_at: datetime,
    scorer: AssignmentScorer,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
    task_match_limit: int = 5,
    ttl_hours: int = 24,
) -> AssignmentRecommendation:
    """Run every calculator over one snapshot and fold the results into a record."""
    profile = snapshot.effective_profile
    utilization = compute_utilization_metrics(snapshot, config)
    availability = compute_task_availability(snapshot, config)
    scores, overall = scorer.score(snapshot, utilization, availability, project_tasks, requirements)

    avg_complexity = average_complexity(project_tasks)
    prediction = predict_performance(profile, avg_complexity)
    risk = assess_risk(
        profile, utilization.utilization_percentage, avg_complexity, utilization.task_count
    )
    recommended = recommended_task_count(availability, profile, config)

    reasoning = RecommendationReasoning(
        task_matches=build_task_matches(
            snapshot.proficiencies, profile, project_tasks, task_match_limit
        ),
        capacity_analysis=build_capacity_analysis(
            profile, utilization, availability, len(project_tasks), recommended
        ),
        potential_blockers=identify_blockers(profile, project_tasks, scores, utilization),
        success_factors=identify_success_factors(profile, scores),
        risk_factors=identify_risk_factors(profile, project_tasks, risk),
    )

    return AssignmentRecommendation(
        project_id=project_id,
        resource_id=snapshot.resource_id,
        task_capacity_fit_score=scores.task_capacity_fit,
        complexity_handling_fit_score=scores.complexity_handling_fit,
        skill_match_score=scores.skill_match,
        availability_score=scores.availability,
        collaboration_fit_score=scores.collaboration_fit,
        learning_opportunity_score=scores.learning_opportunity,
        overall_fit_score=overall,
        task_completion_forecast=prediction.completion_forecast,
        quality_prediction=prediction.quality_prediction,
        timeline_confidence=prediction.timeline_confidence,
        success_probability=prediction.success_probability,
        overload_risk_score=risk.overload_risk,
        skill_gap_risk_score=risk.skill_gap_risk,
        context_switching_impact=risk.context_switching_impact,
        recommended_task_count=recommended,
        reasoning=reasoning,
        alternative_assignments=list(alternatives),
        created_at=created_at,
        expires_at=created_at + timedelta(hours=ttl_hours),
    )


class AlternativeGenerator:
    """Ranks other directory resources by skill match for the same requirements."""

    def __init__(
        self,
        repository: Optional[CandidateRepository] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or DataRepository(self._settings)

    def generate(
        self,
        resource_id: str,
        requirements: Sequence[SkillRequirement],
    ) -> list[AlternativeAssignment]:
        pool = self._repository.list_candidate_resources(
            self._settings.recommendation_alternative_pool_size
        )
        skill_ids = [item.skill_id for item in requirements]
        alternatives = []
        for resource in pool:
            if resource.resource_id == resource_id:
                continue
            proficiencies = self._repository.list_skill_proficiencies(resource.resource_id, skill_ids)
            score = compute_skill_match_score(proficiencies, requirements)
            alternatives.append(
                AlternativeAssignment(
                    resource_id=resource.resource_id,
                    resource_name=resource.name,
                    fit_score=score,
                    reasoning=(
                        f"Skill match {score:.0%} across {len(requirements)} required skills"
                    ),
                    trade_offs=list(ALTERNATIVE_TRADE_OFFS),
                )
            )
        alternatives.sort(key=lambda item: -item.fit_score)
        return alternatives[: self._settings.recommendation_alternative_limit]


class AssignmentRecommendationService:
    """Fans out one recommendation unit per candidate and returns them ranked."""

    def __init__(
        self,
        repository: Optional[RecommendationRepository] = None,
        settings: Optional[Settings] = None,
        config: ScoringConfig = DEFAULT_SCORING_CONFIG,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or DataRepository(self._settings)
        self._config = config
        self._scorer = AssignmentScorer(config)
        self._snapshots = ResourceSnapshotService(self._repository, self._settings)
        self._alternatives = AlternativeGenerator(self._repository, self._settings)
        self._clock = clock or _utc_now

    def suggest_optimal_assignment(
        self,
        project_id: str,
        candidate_resource_ids: Sequence[str],
    ) -> list[AssignmentRecommendation]:
        project_id = (project_id or "").strip()
        candidates = list(dict.fromkeys(item for item in candidate_resource_ids if item))
        if not project_id or not candidates:
            logger.info("Recommendation skipped | project_id=%s | reason=no candidates", project_id)
            return []
        if not self._repository.project_exists(project_id):
            logger.info("Recommendation skipped | project_id=%s | reason=unknown project", project_id)
            return []

        project_tasks = self._repository.list_project_tasks(project_id, ACTIVE_TASK_STATUSES)
        requirements = merge_requirements(project_tasks)

        results = self._fan_out(project_id, candidates, project_tasks, requirements)
        ordered = sorted(results, key=lambda record: -record.overall_fit_score)

        logger.info(
            "Recommendations ranked | project_id=%s | candidates=%s | produced=%s | top_resource=%s",
            project_id,
            len(candidates),
            len(ordered),
            ordered[0].resource_id if ordered else None,
        )
        return ordered

    def _fan_out(
        self,
        project_id: str,
        candidates: list[str],
        project_tasks: list[Task],
        requirements: list[SkillRequirement],
    ) -> list[AssignmentRecommendation]:
        workers = max(1, min(self._settings.recommendation_max_workers, len(candidates)))
        unit_timeout = self._settings.recommendation_unit_timeout_seconds
        # Budget covers every wave of queued units
        budget = None
        if unit_timeout is not None:
            budget = unit_timeout * math.ceil(len(candidates) / workers)

        completed: dict[int, AssignmentRecommendation] = {}
        executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="taskfit-recommend"
        )
        try:
            futures = {
                executor.submit(
                    self._recommend_for_resource,
                    project_id,
                    resource_id,
                    project_tasks,
                    requirements,
                ): index
                for index, resource_id in enumerate(candidates)
            }
            try:
                for future in concurrent.futures.as_completed(futures, timeout=budget):
                    index = futures[future]
                    try:
                        completed[index] = future.result()
                    except Exception:
                        logger.exception(
                            "Recommendation unit failed | project_id=%s | resource_id=%s",
                            project_id,
                            candidates[index],
                        )
            except concurrent.futures.TimeoutError:
                for future, index in futures.items():
                    if not future.done():
                        future.cancel()
                        logger.warning(
                            "Recommendation unit timed out | project_id=%s | resource_id=%s | budget_seconds=%s",
                            project_id,
                            candidates[index],
                            budget,
                        )
        finally:
            executor.shutdown(wait=budget is None, cancel_futures=True)

        return [completed[index] for index in sorted(completed)]

    def _recommend_for_resource(
        self,
        project_id: str,
        resource_id: str,
        project_tasks: list[Task],
        requirements: list[SkillRequirement],
    ) -> AssignmentRecommendation:
        with log_elapsed(logger, "Recommendation unit | resource_id=%s", resource_id):
            created_at = self._clock()
            snapshot = self._snapshots.load(
                resource_id, WINDOW_WEEK, created_at.date()
            )
            alternatives = self._alternatives.generate(resource_id, requirements)
            record = compose_recommendation(
                project_id=project_id,
                snapshot=snapshot,
                project_tasks=project_tasks,
                requirements=requirements,
                alternatives=alternatives,
                created_at=created_at,
                scorer=self._scorer,
                config=self._config,
                task_match_limit=self._settings.recommendation_task_match_limit,
                ttl_hours=self._settings.recommendation_ttl_hours,
            )
            record = self._persist(record)

        logger.info(
            "Recommendation composed | resource_id=%s | project_id=%s | overall_fit=%.4f | recommended_tasks=%s | persisted=%s",
            resource_id,
            project_id,
            record.overall_fit_score,
            record.recommended_task_count,
            record.is_persisted,
        )
        return record

    def _persist(self, record: AssignmentRecommendation) -> AssignmentRecommendation:
        try:
            recommendation_id = self._repository.save_recommendation(record)
        except Exception:
            logger.exception(
                "Recommendation persistence failed | resource_id=%s | project_id=%s",
                record.resource_id,
                record.project_id,
            )
            return record
        return replace(record, recommendation_id=recommendation_id)

    def get_recommendation(self, recommendation_id: int) -> Optional[AssignmentRecommendation]:
        return self._repository.get_recommendation(recommendation_id)

    def list_active_recommendations(
        self,
        resource_ids: Sequence[str],
    ) -> list[AssignmentRecommendation]:
        return self._repository.list_active_recommendations(resource_ids, self._clock())
