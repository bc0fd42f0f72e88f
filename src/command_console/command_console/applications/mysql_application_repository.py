from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..calendar.model import CalendarEvent
from ..calendar.mysql_calendar_repository import insert_event
from ..core.enums import ApplicationStatus, ApplicationType, ApplicationUpdateType
from ..database.connection import DatabaseConnection
from ..database.mysql_audit import db_value
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from .model import EDITABLE_FIELDS, Application, ApplicationUpdate
from .repository import ApplicationRepository

_COLUMNS = """
    application_id, company_name, role, app_type, company_link, application_link,
    status, applied_date, created_at, last_updated
"""

_UPDATE_COLUMNS = "update_id, application_id, update_type, content, created_at"


def _to_application(r: dict) -> Application:
    return Application(
        application_id=r["application_id"],
        company_name=r["company_name"],
        role=r["role"],
        app_type=ApplicationType(r["app_type"]),
        status=ApplicationStatus(r["status"]),
        company_link=r.get("company_link"),
        application_link=r.get("application_link"),
        applied_date=r.get("applied_date"),
        created_at=r.get("created_at"),
        last_updated=r.get("last_updated"),
    )


def _to_update(r: dict) -> ApplicationUpdate:
    return ApplicationUpdate(
        update_id=int(r["update_id"]),
        application_id=r["application_id"],
        update_type=ApplicationUpdateType(r["update_type"]),
        content=r["content"],
        created_at=r.get("created_at"),
    )


def _insert_update(cur, application_id: str, update_type: ApplicationUpdateType, content: str) -> int:
    cur.execute(
        "INSERT INTO application_updates(application_id, update_type, content) VALUES(%s,%s,%s)",
        (application_id, update_type.value, content),
    )
    return int(cur.lastrowid)


def _touch(cur, application_id: str) -> None:
    cur.execute(
        "UPDATE applications SET last_updated=CURRENT_TIMESTAMP WHERE application_id=%s",
        (application_id,),
    )


class MySQLApplicationRepository(ApplicationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Application]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM applications ORDER BY last_updated DESC, company_name")
            return [_to_application(r) for r in fetchall(cur)]

    def get(self, application_id: str) -> Optional[Application]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM applications WHERE application_id=%s", (application_id,))
            r = fetchone(cur)
            return _to_application(r) if r else None

    def create(self, application: Application, *, log: str) -> str:
        application_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO applications(
                    application_id, company_name, role, app_type, company_link,
                    application_link, status, applied_date
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    application_id,
                    application.company_name,
                    application.role,
                    application.app_type.value,
                    application.company_link,
                    application.application_link,
                    application.status.value,
                    application.applied_date,
                ),
            )
            _insert_update(cur, application_id, ApplicationUpdateType.STATUS_CHANGE, log)
            return application_id

    def update(self, application_id: str, changes: Mapping[str, Any], *, log: str) -> bool:
        columns = [c for c in changes if c in EDITABLE_FIELDS]
        with db_cursor(self._conn_factory) as (_, cur):
            if columns:
                assignments = ", ".join(f"{c}=%s" for c in columns)
                params = tuple(db_value(changes[c]) for c in columns) + (application_id,)
                cur.execute(f"UPDATE applications SET {assignments} WHERE application_id=%s", params)
            else:
                _touch(cur, application_id)
            _insert_update(cur, application_id, ApplicationUpdateType.NOTE, log)
            return True

    def set_status(
        self,
        application_id: str,
        status: ApplicationStatus,
        *,
        applied_date: Optional[date],
        log: str,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE applications SET status=%s, applied_date=%s WHERE application_id=%s",
                (status.value, applied_date, application_id),
            )
            _insert_update(cur, application_id, ApplicationUpdateType.STATUS_CHANGE, log)

    def add_update(self, application_id: str, update_type: ApplicationUpdateType, content: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            update_id = _insert_update(cur, application_id, update_type, content)
            _touch(cur, application_id)
            return update_id

    def list_updates(self, application_id: str) -> Sequence[ApplicationUpdate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_UPDATE_COLUMNS}
                FROM application_updates
                WHERE application_id=%s
                ORDER BY created_at DESC, update_id DESC
                """,
                (application_id,),
            )
            return [_to_update(r) for r in fetchall(cur)]

    def latest_updates(self) -> Mapping[str, ApplicationUpdate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_UPDATE_COLUMNS}
                FROM application_updates u
                WHERE u.update_id = (
                    SELECT MAX(x.update_id) FROM application_updates x WHERE x.application_id = u.application_id
                )
                """
            )
            return {r["application_id"]: _to_update(r) for r in fetchall(cur)}

    def delete(self, application_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM applications WHERE application_id=%s", (application_id,))
            return cur.rowcount > 0

    def add_interview_event(self, application_id: str, event: CalendarEvent, *, log: str) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            event_id = insert_event(cur, event)
            _insert_update(cur, application_id, ApplicationUpdateType.NOTE, log)
            _touch(cur, application_id)
            return event_id
