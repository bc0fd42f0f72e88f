from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from ..core.enums import AuditEventType


@dataclass(frozen=True)
class AuditEvent:
    """One row of a task/project/hackathon audit table."""

    event_id: int
    entity_id: str
    event_type: AuditEventType
    field: Optional[str]
    old_value: Optional[str]
    new_value: Optional[str]
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class FieldChange:
    field: Optional[str]
    old_value: Optional[str]
    new_value: Optional[str]
    event_type: AuditEventType = AuditEventType.UPDATE


def audit_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def diff_fields(
    current: Mapping[str, Any],
    changes: Mapping[str, Any],
    fields: Iterable[str],
    *,
    status_fields: Iterable[str] = (),
) -> list[FieldChange]:
    """Field-level diff of ``changes`` against ``current``; untouched keys are skipped."""
    status_fields = set(status_fields)
    result: list[FieldChange] = []
    for name in fields:
        if name not in changes:
            continue
        old, new = audit_text(current.get(name)), audit_text(changes[name])
        if old == new:
            continue
        kind = AuditEventType.STATUS_CHANGE if name in status_fields else AuditEventType.UPDATE
        result.append(FieldChange(field=name, old_value=old, new_value=new, event_type=kind))
    return result
