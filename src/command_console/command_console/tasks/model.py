from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import TaskPriority, TaskState

OPEN_STATES = frozenset({TaskState.PENDING, TaskState.IN_PROGRESS, TaskState.BLOCKED})


@dataclass(frozen=True)
class Task:
    task_id: str
    title: str
    state: TaskState = TaskState.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    description: Optional[str] = None
    due_date: Optional[date] = None
    project_id: Optional[str] = None
    hackathon_id: Optional[str] = None
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.state in OPEN_STATES

    def is_overdue(self, today: date) -> bool:
        return self.is_open and self.due_date is not None and self.due_date < today


@dataclass(frozen=True)
class NewTask:
    title: str
    priority: TaskPriority = TaskPriority.MEDIUM
    state: TaskState = TaskState.PENDING
    description: Optional[str] = None
    due_date: Optional[date] = None
    project_id: Optional[str] = None
    hackathon_id: Optional[str] = None


EDITABLE_FIELDS = ("title", "description", "priority", "state", "due_date")
