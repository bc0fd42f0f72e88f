from __future__ import annotations

import dataclasses
from typing import Any, Mapping, Optional, Sequence

from ..common.audit import AuditEvent, FieldChange
from ..core.enums import AuditEventType, HackathonMode, HackathonStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_audit import db_value, insert_audit, insert_created, select_audit
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from ..projects.model import Project
from ..projects.mysql_project_repository import insert_project
from ..tasks.model import NewTask
from ..tasks.mysql_task_repository import insert_task
from .model import EDITABLE_FIELDS, Hackathon
from .repository import HackathonRepository

_COLUMNS = """
    hackathon_id, name, organizer, mode, theme, team_size, registration_deadline, submission_deadline,
    event_start_date, event_end_date, project_title, project_description, registration_link,
    submission_portal, discord_slack, status, linked_project_id, created_at, updated_at
"""

_UPDATABLE = frozenset(EDITABLE_FIELDS) | {"status"}


def _to_hackathon(r: dict) -> Hackathon:
    return Hackathon(
        hackathon_id=r["hackathon_id"],
        name=r["name"],
        status=HackathonStatus(r["status"]),
        mode=HackathonMode(r["mode"]),
        organizer=r.get("organizer"),
        theme=r.get("theme"),
        team_size=int(r.get("team_size") or 1),
        registration_deadline=r.get("registration_deadline"),
        submission_deadline=r.get("submission_deadline"),
        event_start_date=r.get("event_start_date"),
        event_end_date=r.get("event_end_date"),
        project_title=r.get("project_title"),
        project_description=r.get("project_description"),
        registration_link=r.get("registration_link"),
        submission_portal=r.get("submission_portal"),
        discord_slack=r.get("discord_slack"),
        linked_project_id=r.get("linked_project_id"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def insert_hackathon(cur, h: Hackathon, *, hackathon_id: Optional[str] = None, audit_note: str = "Hackathon created") -> str:
    hackathon_id = hackathon_id or new_id()
    cur.execute(
        """
        INSERT INTO hackathons(
            hackathon_id, name, organizer, mode, theme, team_size, registration_deadline,
            submission_deadline, event_start_date, event_end_date, project_title, project_description,
            registration_link, submission_portal, discord_slack, status, linked_project_id
        )
        VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
        """,
        (
            hackathon_id,
            h.name,
            h.organizer,
            h.mode.value,
            h.theme,
            h.team_size,
            h.registration_deadline,
            h.submission_deadline,
            h.event_start_date,
            h.event_end_date,
            h.project_title,
            h.project_description,
            h.registration_link,
            h.submission_portal,
            h.discord_slack,
            h.status.value,
            h.linked_project_id,
        ),
    )
    insert_created(cur, "hackathon_events", hackathon_id, audit_note)
    return hackathon_id


class MySQLHackathonRepository(HackathonRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Hackathon]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM hackathons
                ORDER BY submission_deadline IS NULL, submission_deadline, name
                """
            )
            return [_to_hackathon(r) for r in fetchall(cur)]

    def get(self, hackathon_id: str) -> Optional[Hackathon]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM hackathons WHERE hackathon_id=%s", (hackathon_id,))
            r = fetchone(cur)
            return _to_hackathon(r) if r else None

    def create(self, hackathon: Hackathon) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_hackathon(cur, hackathon)

    def update(self, hackathon_id: str, changes: Mapping[str, Any], events: Sequence[FieldChange]) -> bool:
        columns = [c for c in changes if c in _UPDATABLE]
        if not columns:
            return False
        assignments = ", ".join(f"{c}=%s" for c in columns)
        params = tuple(db_value(changes[c]) for c in columns) + (hackathon_id,)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE hackathons SET {assignments} WHERE hackathon_id=%s", params)
            for change in events:
                insert_audit(cur, "hackathon_events", hackathon_id, change)
            return True

    def register(self, hackathon_id: str, *, new_project: Project, default_tasks: Sequence[NewTask]) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT status, linked_project_id FROM hackathons WHERE hackathon_id=%s FOR UPDATE",
                (hackathon_id,),
            )
            row = fetchone(cur)
            old_status = row["status"] if row else None
            project_id = row.get("linked_project_id") if row else None

            if project_id:
                cur.execute("SELECT project_id FROM projects WHERE project_id=%s", (project_id,))
                if not fetchone(cur):
                    project_id = None

            if not project_id:
                project_id = insert_project(cur, new_project, audit_note="Project created from hackathon registration")
                cur.execute(
                    "UPDATE hackathons SET linked_project_id=%s WHERE hackathon_id=%s",
                    (project_id, hackathon_id),
                )

            cur.execute(
                "UPDATE hackathons SET status=%s WHERE hackathon_id=%s",
                (HackathonStatus.REGISTERED.value, hackathon_id),
            )
            if old_status != HackathonStatus.REGISTERED.value:
                insert_audit(
                    cur,
                    "hackathon_events",
                    hackathon_id,
                    FieldChange("status", old_status, HackathonStatus.REGISTERED.value, AuditEventType.STATUS_CHANGE),
                )

            cur.execute("SELECT COUNT(*) AS n FROM tasks WHERE project_id=%s", (project_id,))
            if int((fetchone(cur) or {}).get("n") or 0) == 0:
                for task in default_tasks:
                    insert_task(cur, dataclasses.replace(task, project_id=project_id, hackathon_id=None))
            return project_id

    def delete(self, hackathon_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT linked_project_id FROM hackathons WHERE hackathon_id=%s", (hackathon_id,))
            row = fetchone(cur)
            if not row:
                return False
            cur.execute("UPDATE projects SET origin_hackathon_id=NULL WHERE origin_hackathon_id=%s", (hackathon_id,))
            if row.get("linked_project_id"):
                cur.execute("DELETE FROM projects WHERE project_id=%s", (row["linked_project_id"],))
            cur.execute("DELETE FROM hackathons WHERE hackathon_id=%s", (hackathon_id,))
            return cur.rowcount > 0

    def link_project(self, hackathon_id: str, project_id: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT linked_project_id FROM hackathons WHERE hackathon_id=%s FOR UPDATE", (hackathon_id,))
            row = fetchone(cur) or {}
            previous = row.get("linked_project_id")

            # one project per hackathon and vice versa
            cur.execute(
                "UPDATE hackathons SET linked_project_id=NULL WHERE linked_project_id=%s AND hackathon_id<>%s",
                (project_id, hackathon_id),
            )
            if previous and previous != project_id:
                cur.execute("UPDATE projects SET origin_hackathon_id=NULL WHERE project_id=%s", (previous,))
            cur.execute("UPDATE hackathons SET linked_project_id=%s WHERE hackathon_id=%s", (project_id, hackathon_id))
            cur.execute("UPDATE projects SET origin_hackathon_id=%s WHERE project_id=%s", (hackathon_id, project_id))
            insert_audit(cur, "hackathon_events", hackathon_id, FieldChange("linked_project_id", previous, project_id))

    def unlink_project(self, hackathon_id: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT linked_project_id FROM hackathons WHERE hackathon_id=%s FOR UPDATE", (hackathon_id,))
            row = fetchone(cur) or {}
            previous = row.get("linked_project_id")
            if not previous:
                return
            cur.execute("UPDATE hackathons SET linked_project_id=NULL WHERE hackathon_id=%s", (hackathon_id,))
            cur.execute(
                "UPDATE projects SET origin_hackathon_id=NULL WHERE project_id=%s AND origin_hackathon_id=%s",
                (previous, hackathon_id),
            )
            insert_audit(cur, "hackathon_events", hackathon_id, FieldChange("linked_project_id", previous, None))

    def history(self, hackathon_id: str) -> Sequence[AuditEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            return select_audit(cur, "hackathon_events", hackathon_id)
