from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import ClassStatus, ReasonCode, SubjectType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from .model import ClassInstance, Faculty, NewClassInstance, Subject, TimetableSlot
from .repository import AttendanceRepository

_INSTANCE_COLUMNS = """
    instance_id, subject_id, actual_subject_id, class_date, start_time, end_time, class_type,
    scheduled_faculty_id, actual_faculty_id, status, reason_code, reason_description, notes,
    rescheduled_from_id
"""

_INSERT_INSTANCE = """
    INSERT IGNORE INTO class_instances(
        instance_id, subject_id, class_date, start_time, end_time, class_type,
        scheduled_faculty_id, status, notes, rescheduled_from_id
    )
    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
"""


def _to_instance(r: dict) -> ClassInstance:
    return ClassInstance(
        instance_id=r["instance_id"],
        subject_id=r["subject_id"],
        class_date=r["class_date"],
        start_time=r["start_time"],
        end_time=r["end_time"],
        class_type=SubjectType(r["class_type"]),
        status=ClassStatus(r["status"]),
        scheduled_faculty_id=r.get("scheduled_faculty_id"),
        actual_faculty_id=r.get("actual_faculty_id"),
        actual_subject_id=r.get("actual_subject_id"),
        reason_code=ReasonCode(r["reason_code"]) if r.get("reason_code") else None,
        reason_description=r.get("reason_description"),
        notes=r.get("notes"),
        rescheduled_from_id=r.get("rescheduled_from_id"),
    )


def _to_subject(r: dict) -> Subject:
    return Subject(
        subject_id=r["subject_id"],
        name=r["name"],
        code=r["code"],
        subject_type=SubjectType(r["subject_type"]),
        weight=int(r.get("weight") or 1),
        default_faculty_id=r.get("default_faculty_id"),
    )


def _insert_params(instance_id: str, new: NewClassInstance) -> tuple:
    return (
        instance_id,
        new.subject_id,
        new.class_date,
        new.start_time,
        new.end_time,
        new.class_type.value,
        new.scheduled_faculty_id,
        new.status.value,
        new.notes,
        new.rescheduled_from_id,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_subjects(self) -> Sequence[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT subject_id, name, code, subject_type, weight, default_faculty_id
                FROM subjects
                ORDER BY subject_type, code
                """
            )
            return [_to_subject(r) for r in fetchall(cur)]

    def get_subject(self, subject_id: str) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT subject_id, name, code, subject_type, weight, default_faculty_id
                FROM subjects
                WHERE subject_id=%s
                """,
                (subject_id,),
            )
            r = fetchone(cur)
            return _to_subject(r) if r else None

    def list_faculty(self) -> Sequence[Faculty]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT faculty_id, name, title, department FROM faculty ORDER BY name")
            return [
                Faculty(
                    faculty_id=r["faculty_id"],
                    name=r["name"],
                    title=r.get("title") or "",
                    department=r.get("department") or "",
                )
                for r in fetchall(cur)
            ]

    def list_timetable_slots(self, day_of_week: Optional[str] = None) -> Sequence[TimetableSlot]:
        sql = "SELECT slot_id, subject_id, day_of_week, start_time, end_time, room FROM timetable_slots"
        params: tuple = ()
        if day_of_week:
            sql += " WHERE day_of_week=%s"
            params = (day_of_week.lower(),)
        sql += " ORDER BY FIELD(day_of_week,'monday','tuesday','wednesday','thursday','friday','saturday','sunday'), start_time"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [
                TimetableSlot(
                    slot_id=r["slot_id"],
                    subject_id=r["subject_id"],
                    day_of_week=r["day_of_week"],
                    start_time=r["start_time"],
                    end_time=r["end_time"],
                    room=r.get("room") or "",
                )
                for r in fetchall(cur)
            ]

    def get_instance(self, instance_id: str) -> Optional[ClassInstance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_INSTANCE_COLUMNS} FROM class_instances WHERE instance_id=%s", (instance_id,))
            r = fetchone(cur)
            return _to_instance(r) if r else None

    def find_instance(self, *, subject_id: str, class_date: date, start_time: str) -> Optional[ClassInstance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_INSTANCE_COLUMNS}
                FROM class_instances
                WHERE subject_id=%s AND class_date=%s AND start_time=%s
                """,
                (subject_id, class_date, start_time),
            )
            r = fetchone(cur)
            return _to_instance(r) if r else None

    def list_instances_for_date(self, class_date: date) -> Sequence[ClassInstance]:
        return self.list_instances(start_date=class_date, end_date=class_date)

    def list_instances(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[ClassInstance]:
        clauses: list[str] = []
        params: list[object] = []
        if start_date is not None:
            clauses.append("class_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("class_date <= %s")
            params.append(end_date)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_INSTANCE_COLUMNS} FROM class_instances {where} ORDER BY class_date, start_time",
                tuple(params),
            )
            return [_to_instance(r) for r in fetchall(cur)]

    def insert_instances_ignore(self, instances: Sequence[NewClassInstance]) -> int:
        if not instances:
            return 0
        inserted = 0
        with db_cursor(self._conn_factory) as (_, cur):
            for new in instances:
                cur.execute(_INSERT_INSTANCE, _insert_params(new_id(), new))
                inserted += max(cur.rowcount, 0)
        return inserted

    def update_mark(
        self,
        *,
        instance_id: str,
        status: ClassStatus,
        reason_code: Optional[ReasonCode],
        reason_description: Optional[str],
        notes: Optional[str],
        actual_faculty_id: Optional[str],
        actual_subject_id: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE class_instances
                SET status=%s, reason_code=%s, reason_description=%s, notes=%s,
                    actual_faculty_id=%s, actual_subject_id=%s
                WHERE instance_id=%s
                """,
                (
                    status.value,
                    reason_code.value if reason_code else None,
                    reason_description,
                    notes,
                    actual_faculty_id,
                    actual_subject_id,
                    instance_id,
                ),
            )
            return cur.rowcount > 0

    def reschedule(self, *, instance_id: str, cancel_note: str, replacement: NewClassInstance) -> str:
        replacement_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE class_instances
                SET status=%s, notes=%s, reason_code=NULL, reason_description=NULL
                WHERE instance_id=%s
                """,
                (ClassStatus.CANCELLED.value, cancel_note, instance_id),
            )
            cur.execute(_INSERT_INSTANCE.replace("INSERT IGNORE", "INSERT"), _insert_params(replacement_id, replacement))
        return replacement_id

    def update_faculty_exchange(self, *, instance_id: str, actual_faculty_id: Optional[str], notes: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE class_instances
                SET actual_faculty_id=%s, notes=COALESCE(%s, notes)
                WHERE instance_id=%s
                """,
                (actual_faculty_id, notes, instance_id),
            )
            return cur.rowcount > 0
