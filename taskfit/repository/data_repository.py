"""Repository layer responsible for all database access."""

from __future__ import annotations

import json
import random
import sqlite3
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable, Optional, Sequence

from taskfit.domain.models import (
    ACTIVE_TASK_STATUSES,
    AlternativeAssignment,
    AssignmentRecommendation,
    INTENSITY_HIGH,
    INTENSITY_LOW,
    INTENSITY_MEDIUM,
    PRIORITY_CRITICAL,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    REQUIREMENT_LEARNING,
    REQUIREMENT_NICE_TO_HAVE,
    REQUIREMENT_PRIMARY,
    REQUIREMENT_SECONDARY,
    RecommendationReasoning,
    Resource,
    ResourceProfile,
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    STATUS_PENDING,
    STATUS_REVIEW,
    SWITCHING_BALANCED,
    SWITCHING_PARALLEL,
    SWITCHING_SEQUENTIAL,
    SkillProficiency,
    SkillRequirement,
    Task,
    WORK_STYLE_COLLABORATIVE,
    WORK_STYLE_DEEP_FOCUS,
    WORK_STYLE_MIXED,
)
from taskfit.utils.config import Settings, get_settings
from taskfit.utils.logger import get_logger


logger = get_logger(__name__)


_SYNTHETIC_SKILLS = (
    ("python", "Python"),
    ("sql", "SQL"),
    ("react", "React"),
    ("devops", "DevOps"),
    ("ux", "UX Design"),
    ("data", "Data Analysis"),
)

_SYNTHETIC_NAMES = (
    "Avery Chen",
    "Jordan Patel",
    "Morgan Diaz",
    "Riley Okafor",
    "Sam Lindqvist",
    "Taylor Novak",
    "Casey Mbeki",
    "Quinn Herrera",
)


def _to_utc_text(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def _parse_date(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    return date.fromisoformat(str(value))


class DataRepository:
    """Encapsulates SQLite access so business logic stays storage-agnostic."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._db_path = Path(self._settings.database_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def database_path(self) -> Path:
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self._db_path)
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON;")
        return connection

    def initialize_database(self) -> None:
        """Create all persistence artifacts before API startup."""
        try:
            with self._connect() as conn:
                cursor = conn.cursor()

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS Projects (
                        id TEXT PRIMARY KEY,
                        name TEXT NOT NULL,
                        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS Resources (
                        id TEXT PRIMARY KEY,
                        name TEXT NOT NULL,
                        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS ResourceProfiles (
                        resource_id TEXT PRIMARY KEY,
                        optimal_task_count_per_day INTEGER NOT NULL CHECK (optimal_task_count_per_day >= 0),
                        optimal_task_count_per_week INTEGER NOT NULL CHECK (optimal_task_count_per_week >= 0),
                        complexity_handling_score REAL NOT NULL,
                        collaboration_effectiveness REAL NOT NULL,
                        preferred_work_style TEXT NOT NULL,
                        task_switching_preference TEXT NOT NULL,
                        task_switching_penalty_score REAL NOT NULL,
                        historical_task_velocity REAL NOT NULL,
                        FOREIGN KEY (resource_id) REFERENCES Resources(id)
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS SkillProficiencies (
                        resource_id TEXT NOT NULL,
                        skill_id TEXT NOT NULL,
                        proficiency_level INTEGER NOT NULL CHECK (proficiency_level BETWEEN 1 AND 10),
                        PRIMARY KEY (resource_id, skill_id),
                        FOREIGN KEY (resource_id) REFERENCES Resources(id)
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS Tasks (
                        id TEXT PRIMARY KEY,
                        project_id TEXT NOT NULL,
                        name TEXT NOT NULL DEFAULT '',
                        complexity_score INTEGER NOT NULL DEFAULT 5,
                        priority TEXT NOT NULL DEFAULT 'Medium',
                        collaboration_intensity TEXT NOT NULL DEFAULT 'Low',
                        dependency_weight REAL NOT NULL DEFAULT 1.0,
                        context_switching_penalty INTEGER NOT NULL DEFAULT 5,
                        status TEXT NOT NULL DEFAULT 'Pending',
                        start_date TEXT,
                        end_date TEXT,
                        requires_deep_focus INTEGER NOT NULL DEFAULT 0 CHECK (requires_deep_focus IN (0,1)),
                        FOREIGN KEY (project_id) REFERENCES Projects(id)
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS TaskSkillRequirements (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        task_id TEXT NOT NULL,
                        skill_id TEXT NOT NULL,
                        skill_name TEXT NOT NULL DEFAULT '',
                        requirement_type TEXT NOT NULL DEFAULT 'primary',
                        minimum_proficiency INTEGER NOT NULL DEFAULT 1,
                        FOREIGN KEY (task_id) REFERENCES Tasks(id)
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS TaskAssignments (
                        task_id TEXT NOT NULL,
                        resource_id TEXT NOT NULL,
                        assigned_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                        PRIMARY KEY (task_id, resource_id),
                        FOREIGN KEY (task_id) REFERENCES Tasks(id),
                        FOREIGN KEY (resource_id) REFERENCES Resources(id)
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS AssignmentRecommendations (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        project_id TEXT NOT NULL,
                        resource_id TEXT NOT NULL,
                        task_capacity_fit_score REAL NOT NULL,
                        complexity_handling_fit_score REAL NOT NULL,
                        skill_match_score REAL NOT NULL,
                        availability_score REAL NOT NULL,
                        collaboration_fit_score REAL NOT NULL,
                        learning_opportunity_score REAL NOT NULL,
                        overall_fit_score REAL NOT NULL,
                        task_completion_forecast REAL NOT NULL,
                        quality_prediction REAL NOT NULL,
                        timeline_confidence REAL NOT NULL,
                        success_probability REAL NOT NULL,
                        overload_risk_score INTEGER NOT NULL,
                        skill_gap_risk_score INTEGER NOT NULL,
                        context_switching_impact REAL NOT NULL,
                        recommended_task_count INTEGER NOT NULL,
                        reasoning_json TEXT NOT NULL,
                        alternatives_json TEXT NOT NULL,
                        created_at TEXT NOT NULL,
                        expires_at TEXT NOT NULL
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE INDEX IF NOT EXISTS idx_tasks_project_status
                    ON Tasks(project_id, status);
                    """
                )
                cursor.execute(
                    """
                    CREATE INDEX IF NOT EXISTS idx_assignments_resource
                    ON TaskAssignments(resource_id);
                    """
                )
                cursor.execute(
                    """
                    CREATE INDEX IF NOT EXISTS idx_recommendations_resource_expiry
                    ON AssignmentRecommendations(resource_id, expires_at);
                    """
                )
                conn.commit()
            logger.info("Database initialized at %s", self._db_path)
        except sqlite3.Error as exc:
            raise RuntimeError(f"Database initialization failed: {exc}") from exc

    def seed_synthetic_data(self) -> None:
        """Seed a deterministic demo team and backlog only when tables are empty."""
        rng = random.Random(self._settings.synthetic_random_seed)
        try:
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT COUNT(*) AS count FROM Resources;")
                if int(cursor.fetchone()["count"]) > 0:
                    logger.info("Synthetic data already present; skipping seed")
                    return
        except sqlite3.Error as exc:
            raise RuntimeError(f"Synthetic data seeding failed: {exc}") from exc

        today = datetime.now(timezone.utc).date()
        projects = [("PRJ-1", "Platform Migration"), ("PRJ-2", "Customer Portal"), ("PRJ-3", "Analytics Revamp")]
        resource_count = min(self._settings.synthetic_resource_count, len(_SYNTHETIC_NAMES))
        resource_ids = [f"RES-{index + 1}" for index in range(resource_count)]

        try:
            for project_id, name in projects:
                self.create_project(project_id, name)

            for index, resource_id in enumerate(resource_ids):
                self.create_resource(resource_id, _SYNTHETIC_NAMES[index])
                for skill_id, _ in rng.sample(_SYNTHETIC_SKILLS, k=3):
                    self.set_skill_proficiency(resource_id, skill_id, rng.randint(3, 9))
                # Last resource has no profile
                if index == resource_count - 1:
                    continue
                self.upsert_resource_profile(
                    ResourceProfile(
                        resource_id=resource_id,
                        optimal_task_count_per_day=rng.randint(2, 4),
                        optimal_task_count_per_week=rng.randint(10, 18),
                        complexity_handling_score=float(rng.randint(4, 9)),
                        collaboration_effectiveness=round(rng.uniform(0.5, 0.95), 2),
                        preferred_work_style=rng.choice(
                            (WORK_STYLE_COLLABORATIVE, WORK_STYLE_DEEP_FOCUS, WORK_STYLE_MIXED)
                        ),
                        task_switching_preference=rng.choice(
                            (SWITCHING_SEQUENTIAL, SWITCHING_PARALLEL, SWITCHING_BALANCED)
                        ),
                        task_switching_penalty_score=float(rng.randint(2, 8)),
                        historical_task_velocity=round(rng.uniform(0.6, 1.1), 2),
                    )
                )

            statuses = (STATUS_PENDING, STATUS_IN_PROGRESS, STATUS_REVIEW, STATUS_COMPLETED)
            for index in range(self._settings.synthetic_task_count):
                start = today - timedelta(days=rng.randint(0, 10))
                skill_picks = rng.sample(_SYNTHETIC_SKILLS, k=rng.randint(1, 2))
                task = Task(
                    task_id=f"TSK-{index + 1}",
                    project_id=projects[index % len(projects)][0],
                    name=f"Task {index + 1}",
                    complexity_score=rng.randint(1, 10),
                    priority=rng.choice((PRIORITY_LOW, PRIORITY_MEDIUM, PRIORITY_HIGH, PRIORITY_CRITICAL)),
                    collaboration_intensity=rng.choice((INTENSITY_LOW, INTENSITY_MEDIUM, INTENSITY_HIGH)),
                    dependency_weight=float(rng.randint(1, 8)),
                    context_switching_penalty=rng.randint(1, 10),
                    status=rng.choice(statuses),
                    start_date=start,
                    end_date=start + timedelta(days=rng.randint(3, 20)),
                    requires_deep_focus=rng.random() < 0.25,
                    required_skills=tuple(
                        SkillRequirement(
                            skill_id=skill_id,
                            skill_name=skill_name,
                            requirement_type=rng.choice(
                                (
                                    REQUIREMENT_PRIMARY,
                                    REQUIREMENT_SECONDARY,
                                    REQUIREMENT_NICE_TO_HAVE,
                                    REQUIREMENT_LEARNING,
                                )
                            ),
                            minimum_proficiency=rng.randint(3, 8),
                        )
                        for skill_id, skill_name in skill_picks
                    ),
                )
                self.create_task(task)
                self.assign_task(task.task_id, rng.choice(resource_ids))
        except sqlite3.Error as exc:
            raise RuntimeError(f"Synthetic data seeding failed: {exc}") from exc

        logger.info(
            "Synthetic seed completed | projects=%s | resources=%s | tasks=%s",
            len(projects),
            resource_count,
            self._settings.synthetic_task_count,
        )

    # Write helpers used by seeding and tests

    def create_project(self, project_id: str, name: str) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO Projects (id, name) VALUES (?, ?);",
                (project_id, name),
            )
            conn.commit()

    def create_resource(self, resource_id: str, name: str) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO Resources (id, name) VALUES (?, ?);",
                (resource_id, name),
            )
            conn.commit()

    def upsert_resource_profile(self, profile: ResourceProfile) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO ResourceProfiles (
                    resource_id,
                    optimal_task_count_per_day,
                    optimal_task_count_per_week,
                    complexity_handling_score,
                    collaboration_effectiveness,
                    preferred_work_style,
                    task_switching_preference,
                    task_switching_penalty_score,
                    historical_task_velocity
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?);
                """,
                (
                    profile.resource_id,
                    profile.optimal_task_count_per_day,
                    profile.optimal_task_count_per_week,
                    profile.complexity_handling_score,
                    profile.collaboration_effectiveness,
                    profile.preferred_work_style,
                    profile.task_switching_preference,
                    profile.task_switching_penalty_score,
                    profile.historical_task_velocity,
                ),
            )
            conn.commit()

    def set_skill_proficiency(self, resource_id: str, skill_id: str, proficiency_level: int) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO SkillProficiencies (resource_id, skill_id, proficiency_level)
                VALUES (?, ?, ?);
                """,
                (resource_id, skill_id, proficiency_level),
            )
            conn.commit()

    def create_task(self, task: Task) -> None:
        """Insert a task with its ordered skill requirements and assignees."""
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO Tasks (
                    id,
                    project_id,
                    name,
                    complexity_score,
                    priority,
                    collaboration_intensity,
                    dependency_weight,
                    context_switching_penalty,
                    status,
                    start_date,
                    end_date,
                    requires_deep_focus
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?);
                """,
                (
                    task.task_id,
                    task.project_id,
                    task.name,
                    task.complexity_score,
                    task.priority,
                    task.collaboration_intensity,
                    task.dependency_weight,
                    task.context_switching_penalty,
                    task.status,
                    task.start_date.isoformat() if task.start_date else None,
                    task.end_date.isoformat() if task.end_date else None,
                    1 if task.requires_deep_focus else 0,
                ),
            )
            cursor.executemany(
                """
                INSERT INTO TaskSkillRequirements (
                    task_id,
                    skill_id,
                    skill_name,
                    requirement_type,
                    minimum_proficiency
                )
                VALUES (?, ?, ?, ?, ?);
                """,
                [
                    (
                        task.task_id,
                        requirement.skill_id,
                        requirement.skill_name,
                        requirement.requirement_type,
                        requirement.minimum_proficiency,
                    )
                    for requirement in task.required_skills
                ],
            )
            cursor.executemany(
                "INSERT OR IGNORE INTO TaskAssignments (task_id, resource_id) VALUES (?, ?);",
                [(task.task_id, resource_id) for resource_id in task.assigned_resource_ids],
            )
            conn.commit()

    def assign_task(self, task_id: str, resource_id: str) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT OR IGNORE INTO TaskAssignments (task_id, resource_id) VALUES (?, ?);",
                (task_id, resource_id),
            )
            conn.commit()

    # Task contract

    def project_exists(self, project_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT 1 FROM Projects WHERE id = ?;", (project_id,))
            return cursor.fetchone() is not None

    def list_project_tasks(
        self,
        project_id: str,
        statuses: Sequence[str] = ACTIVE_TASK_STATUSES,
    ) -> list[Task]:
        """Return the project's tasks in the given statuses; empty statuses means all."""
        clauses = ["t.project_id = ?"]
        params: list[object] = [project_id]
        if statuses:
            clauses.append(f"t.status IN ({','.join('?' for _ in statuses)})")
            params.extend(statuses)
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT t.*
                FROM Tasks AS t
                WHERE {' AND '.join(clauses)}
                ORDER BY t.rowid ASC;
                """,
                tuple(params),
            )
            return self._hydrate_tasks(cursor, cursor.fetchall())

    def list_resource_tasks(
        self,
        resource_id: str,
        statuses: Sequence[str] = ACTIVE_TASK_STATUSES,
        window_start: Optional[date] = None,
        window_end: Optional[date] = None,
    ) -> list[Task]:
        """Return tasks assigned to a resource that intersect [window_start, window_end].

        A task without a start or end date is open-ended on that side.
        """
        clauses = ["a.resource_id = ?"]
        params: list[object] = [resource_id]
        if statuses:
            clauses.append(f"t.status IN ({','.join('?' for _ in statuses)})")
            params.extend(statuses)
        if window_end is not None:
            clauses.append("(t.start_date IS NULL OR t.start_date <= ?)")
            params.append(window_end.isoformat())
        if window_start is not None:
            clauses.append("(t.end_date IS NULL OR t.end_date >= ?)")
            params.append(window_start.isoformat())
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT t.*
                FROM Tasks AS t
                INNER JOIN TaskAssignments AS a ON a.task_id = t.id
                WHERE {' AND '.join(clauses)}
                ORDER BY t.rowid ASC;
                """,
                tuple(params),
            )
            return self._hydrate_tasks(cursor, cursor.fetchall())

    def _hydrate_tasks(self, cursor: sqlite3.Cursor, rows: Iterable[sqlite3.Row]) -> list[Task]:
        task_rows = list(rows)
        if not task_rows:
            return []
        task_ids = [str(row["id"]) for row in task_rows]
        placeholders = ",".join("?" for _ in task_ids)

        cursor.execute(
            f"""
            SELECT task_id, skill_id, skill_name, requirement_type, minimum_proficiency
            FROM TaskSkillRequirements
            WHERE task_id IN ({placeholders})
            ORDER BY id ASC;
            """,
            tuple(task_ids),
        )
        requirements: dict[str, list[SkillRequirement]] = {}
        for row in cursor.fetchall():
            requirements.setdefault(str(row["task_id"]), []).append(
                SkillRequirement(
                    skill_id=str(row["skill_id"]),
                    requirement_type=str(row["requirement_type"]),
                    minimum_proficiency=int(row["minimum_proficiency"]),
                    skill_name=str(row["skill_name"]),
                )
            )

        cursor.execute(
            f"""
            SELECT task_id, resource_id
            FROM TaskAssignments
            WHERE task_id IN ({placeholders})
            ORDER BY resource_id ASC;
            """,
            tuple(task_ids),
        )
        assignees: dict[str, list[str]] = {}
        for row in cursor.fetchall():
            assignees.setdefault(str(row["task_id"]), []).append(str(row["resource_id"]))

        return [
            Task(
                task_id=str(row["id"]),
                project_id=str(row["project_id"]),
                name=str(row["name"]),
                complexity_score=int(row["complexity_score"]),
                priority=str(row["priority"]),
                collaboration_intensity=str(row["collaboration_intensity"]),
                dependency_weight=float(row["dependency_weight"]),
                context_switching_penalty=int(row["context_switching_penalty"]),
                status=str(row["status"]),
                start_date=_parse_date(row["start_date"]),
                end_date=_parse_date(row["end_date"]),
                requires_deep_focus=bool(row["requires_deep_focus"]),
                required_skills=tuple(requirements.get(str(row["id"]), [])),
                assigned_resource_ids=tuple(assignees.get(str(row["id"]), [])),
            )
            for row in task_rows
        ]

    # Resource contracts

    def get_resource_profile(self, resource_id: str) -> Optional[ResourceProfile]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM ResourceProfiles WHERE resource_id = ?;",
                (resource_id,),
            )
            row = cursor.fetchone()
            if row is None:
                return None
            return ResourceProfile(
                resource_id=str(row["resource_id"]),
                optimal_task_count_per_day=int(row["optimal_task_count_per_day"]),
                optimal_task_count_per_week=int(row["optimal_task_count_per_week"]),
                complexity_handling_score=float(row["complexity_handling_score"]),
                collaboration_effectiveness=float(row["collaboration_effectiveness"]),
                preferred_work_style=str(row["preferred_work_style"]),
                task_switching_preference=str(row["task_switching_preference"]),
                task_switching_penalty_score=float(row["task_switching_penalty_score"]),
                historical_task_velocity=float(row["historical_task_velocity"]),
            )

    def list_skill_proficiencies(
        self,
        resource_id: str,
        skill_ids: Optional[Sequence[str]] = None,
    ) -> list[SkillProficiency]:
        """Return a resource's proficiencies, optionally narrowed to `skill_ids`."""
        if skill_ids is not None and not skill_ids:
            return []
        query = "SELECT resource_id, skill_id, proficiency_level FROM SkillProficiencies WHERE resource_id = ?"
        params: list[object] = [resource_id]
        if skill_ids is not None:
            query += f" AND skill_id IN ({','.join('?' for _ in skill_ids)})"
            params.extend(skill_ids)
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(query + " ORDER BY skill_id ASC;", tuple(params))
            return [
                SkillProficiency(
                    resource_id=str(row["resource_id"]),
                    skill_id=str(row["skill_id"]),
                    proficiency_level=int(row["proficiency_level"]),
                )
                for row in cursor.fetchall()
            ]

    def list_candidate_resources(self, limit: int) -> list[Resource]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT id, name FROM Resources ORDER BY id ASC LIMIT ?;",
                (max(0, limit),),
            )
            return [
                Resource(resource_id=str(row["id"]), name=str(row["name"]))
                for row in cursor.fetchall()
            ]

    def get_resource(self, resource_id: str) -> Optional[Resource]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT id, name FROM Resources WHERE id = ?;", (resource_id,))
            row = cursor.fetchone()
            if row is None:
                return None
            return Resource(resource_id=str(row["id"]), name=str(row["name"]))

    # Recommendation sink

    def save_recommendation(self, record: AssignmentRecommendation) -> int:
        """Insert a recommendation and return its id; sqlite errors propagate."""
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO AssignmentRecommendations (
                    project_id,
                    resource_id,
                    task_capacity_fit_score,
                    complexity_handling_fit_score,
                    skill_match_score,
                    availability_score,
                    collaboration_fit_score,
                    learning_opportunity_score,
                    overall_fit_score,
                    task_completion_forecast,
                    quality_prediction,
                    timeline_confidence,
                    success_probability,
                    overload_risk_score,
                    skill_gap_risk_score,
                    context_switching_impact,
                    recommended_task_count,
                    reasoning_json,
                    alternatives_json,
                    created_at,
                    expires_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?);
                """,
                (
                    record.project_id,
                    record.resource_id,
                    record.task_capacity_fit_score,
                    record.complexity_handling_fit_score,
                    record.skill_match_score,
                    record.availability_score,
                    record.collaboration_fit_score,
                    record.learning_opportunity_score,
                    record.overall_fit_score,
                    record.task_completion_forecast,
                    record.quality_prediction,
                    record.timeline_confidence,
                    record.success_probability,
                    record.overload_risk_score,
                    record.skill_gap_risk_score,
                    record.context_switching_impact,
                    record.recommended_task_count,
                    json.dumps(record.reasoning.to_dict()),
                    json.dumps([alternative.to_dict() for alternative in record.alternative_assignments]),
                    _to_utc_text(record.created_at),
                    _to_utc_text(record.expires_at),
                ),
            )
            conn.commit()
            return int(cursor.lastrowid)

    def get_recommendation(self, recommendation_id: int) -> Optional[AssignmentRecommendation]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM AssignmentRecommendations WHERE id = ?;",
                (recommendation_id,),
            )
            row = cursor.fetchone()
            if row is None:
                return None
            return self._row_to_recommendation(row)

    def list_active_recommendations(
        self,
        resource_ids: Sequence[str],
        now: datetime,
    ) -> list[AssignmentRecommendation]:
        """Return unexpired recommendations for the resources, newest first."""
        if not resource_ids:
            return []
        placeholders = ",".join("?" for _ in resource_ids)
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT *
                FROM AssignmentRecommendations
                WHERE resource_id IN ({placeholders})
                  AND expires_at > ?
                ORDER BY created_at DESC, id DESC;
                """,
                (*resource_ids, _to_utc_text(now)),
            )
            return [self._row_to_recommendation(row) for row in cursor.fetchall()]

    def count_recommendations(self) -> int:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) AS count FROM AssignmentRecommendations;")
            return int(cursor.fetchone()["count"])

    @staticmethod
    def _row_to_recommendation(row: sqlite3.Row) -> AssignmentRecommendation:
        return AssignmentRecommendation(
            recommendation_id=int(row["id"]),
            project_id=str(row["project_id"]),
            resource_id=str(row["resource_id"]),
            task_capacity_fit_score=float(row["task_capacity_fit_score"]),
            complexity_handling_fit_score=float(row["complexity_handling_fit_score"]),
            skill_match_score=float(row["skill_match_score"]),
            availability_score=float(row["availability_score"]),
            collaboration_fit_score=float(row["collaboration_fit_score"]),
            learning_opportunity_score=float(row["learning_opportunity_score"]),
            overall_fit_score=float(row["overall_fit_score"]),
            task_completion_forecast=float(row["task_completion_forecast"]),
            quality_prediction=float(row["quality_prediction"]),
            timeline_confidence=float(row["timeline_confidence"]),
            success_probability=float(row["success_probability"]),
            overload_risk_score=int(row["overload_risk_score"]),
            skill_gap_risk_score=int(row["skill_gap_risk_score"]),
            context_switching_impact=float(row["context_switching_impact"]),
            recommended_task_count=int(row["recommended_task_count"]),
            reasoning=RecommendationReasoning.from_dict(json.loads(row["reasoning_json"])),
            alternative_assignments=[
                AlternativeAssignment.from_dict(item)
                for item in json.loads(row["alternatives_json"])
            ],
            created_at=datetime.fromisoformat(str(row["created_at"])),
            expires_at=datetime.fromisoformat(str(row["expires_at"])),
        )
