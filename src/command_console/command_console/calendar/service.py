from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Callable, Optional

from ..applications.repository import ApplicationRepository
from ..common.datetime_utils import coerce_date, month_bounds, today_local
from ..common.validators import optional_text, require_enum, require_non_empty
from ..core.constants import DEFAULT_TIGHT_DAYS, DEFAULT_UPCOMING_LIMIT
from ..core.enums import EventType, Priority
from ..core.exceptions import InvariantViolation, NotFoundError, ValidationError
from ..hackathons.repository import HackathonRepository
from ..projects.repository import ProjectRepository
from ..tasks.repository import TaskRepository
from . import aggregator
from .model import CalendarEvent, DeadlineItem
from .repository import CalendarRepository

logger = logging.getLogger(__name__)

# Types a user may create by hand; the rest come from other modules.
MANUAL_EVENT_TYPES = (EventType.ACADEMIC, EventType.PERSONAL)


class CalendarService:
    def __init__(
        self,
        events: CalendarRepository,
        hackathons: HackathonRepository,
        projects: ProjectRepository,
        tasks: TaskRepository,
        applications: ApplicationRepository,
        *,
        tight_days: int = DEFAULT_TIGHT_DAYS,
        upcoming_limit: int = DEFAULT_UPCOMING_LIMIT,
        clock: Callable[[], date] = today_local,
    ):
        self._events = events
        self._hackathons = hackathons
        self._projects = projects
        self._tasks = tasks
        self._applications = applications
        self._tight_days = tight_days
        self._upcoming_limit = upcoming_limit
        self._clock = clock

    def _snapshot(self, *, start: Optional[date] = None, end: Optional[date] = None) -> aggregator.Snapshot:
        return aggregator.Snapshot(
            events=tuple(self._events.list_events(start=start, end=end)),
            hackathons=tuple(self._hackathons.list_all()),
            projects=tuple(self._projects.list_all()),
            tasks=tuple(self._tasks.list_all()),
            application_ids=frozenset(a.application_id for a in self._applications.list_all()),
        )

    def get_month(self, year: int, month: int, today: Optional[date] = None) -> list[DeadlineItem]:
        try:
            start, end = month_bounds(int(year), int(month))
        except (TypeError, ValueError):
            raise ValidationError("year and month must form a valid month")
        return aggregator.aggregate(
            self._snapshot(start=start, end=end),
            today=today or self._clock(),
            tight_days=self._tight_days,
            start=start,
            end=end,
        )

    def get_upcoming(self, limit: Optional[int] = None, today: Optional[date] = None) -> list[DeadlineItem]:
        today = today or self._clock()
        return aggregator.upcoming(
            self._snapshot(start=today),
            today=today,
            limit=self._upcoming_limit if limit is None else limit,
            tight_days=self._tight_days,
        )

    def get_nearest_deadline(self, today: Optional[date] = None) -> Optional[DeadlineItem]:
        items = self.get_upcoming(limit=1, today=today)
        return items[0] if items else None

    def create_manual_event(
        self,
        title: str,
        event_date,
        *,
        event_type=EventType.ACADEMIC,
        priority=Priority.NORMAL,
        description: Optional[str] = None,
        end_date=None,
        project_id: Optional[str] = None,
        hackathon_id: Optional[str] = None,
    ) -> CalendarEvent:
        day = coerce_date(event_date, "date")
        if day is None:
            raise ValidationError("date is required")
        kind = require_enum(event_type or EventType.ACADEMIC, EventType, "type")
        if kind not in MANUAL_EVENT_TYPES:
            raise ValidationError("type must be one of: ACADEMIC, PERSONAL")
        end = coerce_date(end_date, "end_date")
        if end is not None and end < day:
            raise ValidationError("end_date cannot be before date")

        project_id = optional_text(project_id)
        hackathon_id = optional_text(hackathon_id)
        if project_id and not self._projects.get(project_id):
            raise NotFoundError("Project not found")
        if hackathon_id and not self._hackathons.get(hackathon_id):
            raise NotFoundError("Hackathon not found")

        event = CalendarEvent(
            event_id="",
            title=require_non_empty(title, "title"),
            event_date=day,
            end_date=end,
            event_type=kind,
            priority=require_enum(priority or Priority.NORMAL, Priority, "priority"),
            description=optional_text(description),
            project_id=project_id,
            hackathon_id=hackathon_id,
        )
        event_id = self._events.create_event(event)
        logger.info("Calendar event %s created for %s", event_id, day.isoformat())
        return replace(event, event_id=event_id)

    def delete_event(self, event_id: str) -> None:
        event_id = str(event_id or "")
        if aggregator.is_derived_id(event_id):
            raise InvariantViolation("Derived deadlines are edited through their source, not deleted")
        event = self._events.get_event(event_id)
        if not event:
            raise NotFoundError("Event not found")
        if event.auto_generated:
            raise InvariantViolation("Auto-generated events cannot be deleted")
        self._events.delete_event(event.event_id)
