from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import EntityKind, EventState, EventType, Priority, Urgency


@dataclass(frozen=True)
class CalendarEvent:
    """Stored calendar row (manual, or auto-generated by an application interview)."""

    event_id: str
    title: str
    event_date: date
    event_type: EventType
    priority: Priority = Priority.NORMAL
    end_date: Optional[date] = None
    description: Optional[str] = None
    auto_generated: bool = False
    event_kind: Optional[str] = None
    project_id: Optional[str] = None
    hackathon_id: Optional[str] = None
    application_id: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class SourceRef:
    kind: EntityKind
    source_id: str


@dataclass(frozen=True)
class TaskStats:
    total: int = 0
    pending: int = 0
    overdue: int = 0


@dataclass(frozen=True)
class DeadlineItem:
    """Read model shared by every calendar view.

    ``source_ref`` is None for free-standing events and for events whose
    source entity no longer exists.
    """

    item_id: str
    title: str
    date: date
    event_type: EventType
    priority: Priority
    source_ref: Optional[SourceRef]
    auto_generated: bool
    derived: bool
    days_until: int
    urgency: Urgency
    state: EventState
    task_stats: Optional[TaskStats] = None
    description: Optional[str] = None
