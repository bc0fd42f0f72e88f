from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..common.audit import AuditEvent, FieldChange
from ..core.enums import EntityKind, ProjectDomain, ProjectStage
from ..database.connection import DatabaseConnection
from ..database.mysql_audit import db_value, insert_audit, insert_created, select_audit
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from ..notes.mysql_note_repository import insert_note, insert_note_link
from ..tasks.model import NewTask
from ..tasks.mysql_task_repository import insert_task
from .model import BatchResult, PendingLink, PendingNote, Project, ProjectBatch, ProjectLink
from .repository import ProjectRepository

_COLUMNS = "project_id, name, description, domain, stage, deadline, origin_hackathon_id, last_activity, created_at"

_UPDATABLE = frozenset({"name", "description", "domain", "stage", "deadline"})


def _to_project(r: dict) -> Project:
    return Project(
        project_id=r["project_id"],
        name=r["name"],
        description=r.get("description"),
        domain=ProjectDomain(r["domain"]),
        stage=ProjectStage(r["stage"]),
        deadline=r.get("deadline"),
        origin_hackathon_id=r.get("origin_hackathon_id"),
        last_activity=r.get("last_activity"),
        created_at=r.get("created_at"),
    )


def insert_project(cur, project: Project, *, project_id: Optional[str] = None, audit_note: str = "Project created") -> str:
    project_id = project_id or new_id()
    cur.execute(
        """
        INSERT INTO projects(project_id, name, description, domain, stage, deadline, origin_hackathon_id)
        VALUES(%s,%s,%s,%s,%s,%s,%s)
        """,
        (
            project_id,
            project.name,
            project.description,
            project.domain.value,
            project.stage.value,
            project.deadline,
            project.origin_hackathon_id,
        ),
    )
    insert_created(cur, "project_events", project_id, audit_note)
    return project_id


def _apply_changes(cur, project_id: str, changes: Mapping[str, Any], events: Sequence[FieldChange]) -> None:
    columns = [c for c in changes if c in _UPDATABLE]
    assignments = ", ".join([f"{c}=%s" for c in columns] + ["last_activity=CURRENT_TIMESTAMP"])
    params = tuple(db_value(changes[c]) for c in columns) + (project_id,)
    cur.execute(f"UPDATE projects SET {assignments} WHERE project_id=%s", params)
    for change in events:
        insert_audit(cur, "project_events", project_id, change)


def _insert_link(cur, project_id: str, link: PendingLink) -> str:
    link_id = new_id()
    cur.execute(
        "INSERT INTO project_links(link_id, project_id, title, url, description) VALUES(%s,%s,%s,%s,%s)",
        (link_id, project_id, link.title, link.url, link.description),
    )
    return link_id


def _touch(cur, project_id: str) -> None:
    cur.execute("UPDATE projects SET last_activity=CURRENT_TIMESTAMP WHERE project_id=%s", (project_id,))


class MySQLProjectRepository(ProjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM projects ORDER BY last_activity DESC, project_id")
            return [_to_project(r) for r in fetchall(cur)]

    def get(self, project_id: str) -> Optional[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM projects WHERE project_id=%s", (project_id,))
            r = fetchone(cur)
            return _to_project(r) if r else None

    def create(self, project: Project) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_project(cur, project)

    def update(self, project_id: str, changes: Mapping[str, Any], events: Sequence[FieldChange]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            _apply_changes(cur, project_id, changes, events)
            return True

    def delete(self, project_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE hackathons SET linked_project_id=NULL WHERE linked_project_id=%s", (project_id,))
            cur.execute("DELETE FROM projects WHERE project_id=%s", (project_id,))
            return cur.rowcount > 0

    def list_links(self, project_id: str) -> Sequence[ProjectLink]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT link_id, project_id, title, url, description, created_at
                FROM project_links
                WHERE project_id=%s
                ORDER BY created_at, link_id
                """,
                (project_id,),
            )
            return [
                ProjectLink(
                    link_id=r["link_id"],
                    project_id=r["project_id"],
                    title=r["title"],
                    url=r["url"],
                    description=r.get("description"),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]

    def add_link(self, project_id: str, link: PendingLink) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            link_id = _insert_link(cur, project_id, link)
            _touch(cur, project_id)
            return link_id

    def add_note(self, project_id: str, note: PendingNote) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            note_id = insert_note(cur, title=note.title, content=note.content)
            insert_note_link(cur, note_id, EntityKind.PROJECT, project_id)
            _touch(cur, project_id)
            return note_id

    def save_batch(self, batch: ProjectBatch, events: Sequence[FieldChange]) -> BatchResult:
        with db_cursor(self._conn_factory) as (_, cur):
            _apply_changes(cur, batch.project_id, batch.changes, events)
            task_ids = tuple(
                insert_task(
                    cur,
                    NewTask(
                        title=t.title,
                        priority=t.priority,
                        description=t.description,
                        due_date=t.due_date,
                        project_id=batch.project_id,
                    ),
                )
                for t in batch.tasks
            )
            link_ids = tuple(_insert_link(cur, batch.project_id, link) for link in batch.links)
            note_ids: list[str] = []
            for note in batch.notes:
                note_id = insert_note(cur, title=note.title, content=note.content)
                insert_note_link(cur, note_id, EntityKind.PROJECT, batch.project_id)
                note_ids.append(note_id)

        return BatchResult(
            project_id=batch.project_id,
            changed_fields=tuple(e.field for e in events if e.field),
            task_ids=task_ids,
            link_ids=link_ids,
            note_ids=tuple(note_ids),
        )

    def history(self, project_id: str) -> Sequence[AuditEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            return select_audit(cur, "project_events", project_id)
