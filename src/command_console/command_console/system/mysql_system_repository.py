from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Sequence

from ..core.constants import MIGRATION_MARKER
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..hackathons.mysql_hackathon_repository import insert_hackathon
from ..projects.mysql_project_repository import insert_project
from ..tasks.mysql_task_repository import insert_task
from .model import ImportResult, LegacyBatch, RecentActivity, SystemStats
from .repository import EXPORT_TABLES, SystemRepository

_COUNTED_TABLES = ("hackathons", "projects", "tasks", "notes", "calendar_events", "note_links", "applications")


def _count(cur, sql: str, params: tuple = ()) -> int:
    cur.execute(sql, params)
    row = fetchone(cur) or {}
    return int(row.get("n") or 0)


def _group(cur, table: str, column: str) -> dict[str, int]:
    cur.execute(f"SELECT {column} AS k, COUNT(*) AS n FROM {table} GROUP BY {column} ORDER BY {column}")
    return {r["k"]: int(r["n"]) for r in fetchall(cur)}


def _exists(cur, table: str, key: str, value: str) -> bool:
    cur.execute(f"SELECT 1 AS found FROM {table} WHERE {key}=%s", (value,))
    return fetchone(cur) is not None


class MySQLSystemRepository(SystemRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_stats(self, *, since: datetime) -> SystemStats:
        with db_cursor(self._conn_factory) as (_, cur):
            counts = {table: _count(cur, f"SELECT COUNT(*) AS n FROM {table}") for table in _COUNTED_TABLES}
            activity = RecentActivity(
                hackathons_last_week=_count(cur, "SELECT COUNT(*) AS n FROM hackathons WHERE created_at >= %s", (since,)),
                tasks_completed_last_week=_count(
                    cur, "SELECT COUNT(*) AS n FROM tasks WHERE completed_at >= %s", (since,)
                ),
                notes_last_week=_count(cur, "SELECT COUNT(*) AS n FROM notes WHERE created_at >= %s", (since,)),
            )
            return SystemStats(
                **counts,
                hackathons_by_status=_group(cur, "hackathons", "status"),
                tasks_by_state=_group(cur, "tasks", "state"),
                projects_by_stage=_group(cur, "projects", "stage"),
                recent_activity=activity,
            )

    def export_tables(self) -> Mapping[str, Sequence[Mapping[str, Any]]]:
        with db_cursor(self._conn_factory) as (_, cur):
            data: dict[str, list[dict]] = {}
            for table in EXPORT_TABLES:
                cur.execute(f"SELECT * FROM {table}")
                data[table] = fetchall(cur)
            return data

    def import_legacy(self, batch: LegacyBatch) -> ImportResult:
        projects = hackathons = tasks = existing = orphans = 0
        orphan_ids: list[str] = []

        with db_cursor(self._conn_factory) as (_, cur):
            for project in batch.projects:
                if _exists(cur, "projects", "project_id", project.project_id):
                    existing += 1
                    continue
                insert_project(cur, project, project_id=project.project_id, audit_note=MIGRATION_MARKER)
                if project.created_at:
                    cur.execute(
                        "UPDATE projects SET created_at=%s WHERE project_id=%s",
                        (project.created_at, project.project_id),
                    )
                projects += 1

            for hackathon in batch.hackathons:
                if _exists(cur, "hackathons", "hackathon_id", hackathon.hackathon_id):
                    existing += 1
                    continue
                insert_hackathon(cur, hackathon, hackathon_id=hackathon.hackathon_id, audit_note=MIGRATION_MARKER)
                if hackathon.created_at:
                    cur.execute(
                        "UPDATE hackathons SET created_at=%s WHERE hackathon_id=%s",
                        (hackathon.created_at, hackathon.hackathon_id),
                    )
                hackathons += 1

            for legacy in batch.tasks:
                if _exists(cur, "tasks", "task_id", legacy.task_id):
                    existing += 1
                    continue
                new = legacy.task
                parent_missing = (new.project_id and not _exists(cur, "projects", "project_id", new.project_id)) or (
                    new.hackathon_id and not _exists(cur, "hackathons", "hackathon_id", new.hackathon_id)
                )
                if parent_missing:
                    orphans += 1
                    orphan_ids.append(legacy.task_id)
                    continue
                insert_task(cur, new, task_id=legacy.task_id, audit_note=MIGRATION_MARKER)
                tasks += 1

        return ImportResult(
            projects_imported=projects,
            hackathons_imported=hackathons,
            tasks_imported=tasks,
            skipped_existing=existing,
            skipped_orphans=orphans,
            orphan_task_ids=tuple(orphan_ids),
        )
