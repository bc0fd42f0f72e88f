from __future__ import annotations

from datetime import date
from typing import Callable, Optional

from ..attendance.service import AttendanceService
from ..calendar.service import CalendarService
from ..common.datetime_utils import today_local
from ..tasks.repository import TaskRepository
from .model import Overview


class OverviewService:
    def __init__(
        self,
        attendance: AttendanceService,
        calendar: CalendarService,
        tasks: TaskRepository,
        *,
        clock: Callable[[], date] = today_local,
    ):
        self._attendance = attendance
        self._calendar = calendar
        self._tasks = tasks
        self._clock = clock

    def get_overview(self, today: Optional[date] = None) -> Overview:
        today = today or self._clock()
        # due today or overdue, still open
        due = sorted(
            (t for t in self._tasks.list_all() if t.is_open and t.due_date is not None and t.due_date <= today),
            key=lambda t: (t.due_date, -t.priority.rank, t.title, t.task_id),
        )
        return Overview(
            date=today,
            classes_today=tuple(self._attendance.get_instances_for_date(today)),
            tasks_due=tuple(due),
            nearest_deadline=self._calendar.get_nearest_deadline(today=today),
            subjects_at_risk=tuple(self._attendance.get_at_risk_subjects()),
        )
