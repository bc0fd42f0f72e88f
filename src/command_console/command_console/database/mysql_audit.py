from __future__ import annotations

from typing import Sequence

from ..common.audit import AuditEvent, FieldChange
from ..core.enums import AuditEventType
from .mysql_base import fetchall

# audit table -> entity key column
AUDIT_TABLES = {
    "task_events": "task_id",
    "project_events": "project_id",
    "hackathon_events": "hackathon_id",
}


def _key_column(table: str) -> str:
    try:
        return AUDIT_TABLES[table]
    except KeyError:
        raise ValueError(f"Unknown audit table: {table}")


def insert_audit(cur, table: str, entity_id: str, change: FieldChange) -> None:
    key = _key_column(table)
    cur.execute(
        f"""
        INSERT INTO {table}({key}, event_type, field, old_value, new_value)
        VALUES(%s,%s,%s,%s,%s)
        """,
        (entity_id, change.event_type.value, change.field, change.old_value, change.new_value),
    )


def insert_created(cur, table: str, entity_id: str, note: str) -> None:
    insert_audit(cur, table, entity_id, FieldChange(None, None, note, AuditEventType.CREATE))


def select_audit(cur, table: str, entity_id: str) -> Sequence[AuditEvent]:
    key = _key_column(table)
    cur.execute(
        f"""
        SELECT event_id, {key} AS entity_id, event_type, field, old_value, new_value, created_at
        FROM {table}
        WHERE {key}=%s
        ORDER BY created_at, event_id
        """,
        (entity_id,),
    )
    return [
        AuditEvent(
            event_id=int(r["event_id"]),
            entity_id=r["entity_id"],
            event_type=AuditEventType(r["event_type"]),
            field=r.get("field"),
            old_value=r.get("old_value"),
            new_value=r.get("new_value"),
            created_at=r.get("created_at"),
        )
        for r in fetchall(cur)
    ]


def db_value(value):
    """Enum members are stored by value."""
    return value.value if hasattr(value, "value") else value
