from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.model import ClassInstance, SubjectAttendanceStats
from ..calendar.model import DeadlineItem
from ..tasks.model import Task


@dataclass(frozen=True)
class Overview:
    """Everything the daily dashboard needs in one read."""

    date: date
    classes_today: tuple[ClassInstance, ...] = ()
    tasks_due: tuple[Task, ...] = ()
    nearest_deadline: Optional[DeadlineItem] = None
    subjects_at_risk: tuple[SubjectAttendanceStats, ...] = ()
