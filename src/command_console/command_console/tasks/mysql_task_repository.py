from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional, Sequence

from ..common.audit import AuditEvent, FieldChange
from ..core.enums import TaskPriority, TaskState
from ..database.connection import DatabaseConnection
from ..database.mysql_audit import db_value, insert_audit, insert_created, select_audit
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from .model import NewTask, Task
from .repository import TaskRepository

_COLUMNS = "task_id, title, description, state, priority, due_date, project_id, hackathon_id, created_at, completed_at"

# Whitelist for dynamic UPDATE column names.
_UPDATABLE = frozenset({"title", "description", "state", "priority", "due_date", "completed_at"})


def _to_task(r: dict) -> Task:
    return Task(
        task_id=r["task_id"],
        title=r["title"],
        description=r.get("description"),
        state=TaskState(r["state"]),
        priority=TaskPriority(r["priority"]),
        due_date=r.get("due_date"),
        project_id=r.get("project_id"),
        hackathon_id=r.get("hackathon_id"),
        created_at=r.get("created_at"),
        completed_at=r.get("completed_at"),
    )


def insert_task(cur, new: NewTask, *, task_id: Optional[str] = None, audit_note: str = "Task created") -> str:
    """Insert a task plus its CREATE audit row on an open cursor."""
    task_id = task_id or new_id()
    cur.execute(
        """
        INSERT INTO tasks(task_id, title, description, state, priority, due_date, project_id, hackathon_id, completed_at)
        VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
        """,
        (
            task_id,
            new.title,
            new.description,
            new.state.value,
            new.priority.value,
            new.due_date,
            new.project_id,
            new.hackathon_id,
            datetime.now() if new.state is TaskState.COMPLETED else None,
        ),
    )
    insert_created(cur, "task_events", task_id, audit_note)
    return task_id


class MySQLTaskRepository(TaskRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select(self, where: str = "", params: tuple = ()) -> Sequence[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM tasks {where} ORDER BY created_at, task_id", params)
            return [_to_task(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[Task]:
        return self._select()

    def list_for_project(self, project_id: str) -> Sequence[Task]:
        return self._select("WHERE project_id=%s", (project_id,))

    def list_for_hackathon(self, hackathon_id: str) -> Sequence[Task]:
        return self._select("WHERE hackathon_id=%s", (hackathon_id,))

    def get(self, task_id: str) -> Optional[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM tasks WHERE task_id=%s", (task_id,))
            r = fetchone(cur)
            return _to_task(r) if r else None

    def create(self, new: NewTask) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_task(cur, new)

    def update(self, task_id: str, changes: Mapping[str, Any], events: Sequence[FieldChange]) -> bool:
        columns = [c for c in changes if c in _UPDATABLE]
        if not columns:
            return False
        assignments = ", ".join(f"{c}=%s" for c in columns)
        params = tuple(db_value(changes[c]) for c in columns) + (task_id,)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE tasks SET {assignments} WHERE task_id=%s", params)
            for change in events:
                insert_audit(cur, "task_events", task_id, change)
            return True

    def delete(self, task_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM tasks WHERE task_id=%s", (task_id,))
            return cur.rowcount > 0

    def history(self, task_id: str) -> Sequence[AuditEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            return select_audit(cur, "task_events", task_id)
