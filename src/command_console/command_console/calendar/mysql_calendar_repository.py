from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import EventType, Priority
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from .model import CalendarEvent
from .repository import CalendarRepository

_COLUMNS = """
    event_id, title, event_date, end_date, event_type, priority, description, auto_generated,
    event_kind, project_id, hackathon_id, application_id, created_at
"""


def _to_event(r: dict) -> CalendarEvent:
    return CalendarEvent(
        event_id=r["event_id"],
        title=r["title"],
        event_date=r["event_date"],
        end_date=r.get("end_date"),
        event_type=EventType(r["event_type"]),
        priority=Priority(r.get("priority") or Priority.NORMAL.value),
        description=r.get("description"),
        auto_generated=bool(r.get("auto_generated")),
        event_kind=r.get("event_kind"),
        project_id=r.get("project_id"),
        hackathon_id=r.get("hackathon_id"),
        application_id=r.get("application_id"),
        created_at=r.get("created_at"),
    )


def insert_event(cur, event: CalendarEvent) -> str:
    """Insert on an already open cursor so callers can share a transaction."""
    event_id = new_id()
    cur.execute(
        """
        INSERT INTO calendar_events(
            event_id, title, event_date, end_date, event_type, priority, description,
            auto_generated, event_kind, project_id, hackathon_id, application_id
        )
        VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
        """,
        (
            event_id,
            event.title,
            event.event_date,
            event.end_date,
            event.event_type.value,
            event.priority.value,
            event.description,
            1 if event.auto_generated else 0,
            event.event_kind,
            event.project_id,
            event.hackathon_id,
            event.application_id,
        ),
    )
    return event_id


class MySQLCalendarRepository(CalendarRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_events(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[CalendarEvent]:
        clauses: list[str] = []
        params: list[object] = []
        if start is not None:
            clauses.append("event_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("event_date <= %s")
            params.append(end)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM calendar_events {where} ORDER BY event_date, title", tuple(params))
            return [_to_event(r) for r in fetchall(cur)]

    def get_event(self, event_id: str) -> Optional[CalendarEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM calendar_events WHERE event_id=%s", (event_id,))
            r = fetchone(cur)
            return _to_event(r) if r else None

    def create_event(self, event: CalendarEvent) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_event(cur, event)

    def delete_event(self, event_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM calendar_events WHERE event_id=%s", (event_id,))
            return cur.rowcount > 0

    def list_for_application(self, application_id: str) -> Sequence[CalendarEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM calendar_events WHERE application_id=%s ORDER BY event_date",
                (application_id,),
            )
            return [_to_event(r) for r in fetchall(cur)]
