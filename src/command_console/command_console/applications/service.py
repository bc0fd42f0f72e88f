from __future__ import annotations

import logging
from dataclasses import asdict, replace
from datetime import date
from typing import Any, Callable, Mapping, Optional

from ..calendar.model import CalendarEvent
from ..calendar.repository import CalendarRepository
from ..common.datetime_utils import coerce_date, today_local
from ..common.validators import optional_text, require_enum, require_non_empty
from ..core.enums import (
    ApplicationStatus,
    ApplicationType,
    ApplicationUpdateType,
    EntityKind,
    EventType,
    Priority,
)
from ..core.exceptions import NotFoundError, ValidationError
from ..notes.repository import NoteRepository
from .model import EDITABLE_FIELDS, Application, ApplicationDetail, ApplicationSummary, ApplicationUpdate
from .repository import ApplicationRepository

logger = logging.getLogger(__name__)

INTERVIEW_EVENT_KIND = "interview"


def format_status(status) -> str:
    """``interview_scheduled`` -> ``Interview Scheduled``."""
    value = status.value if isinstance(status, ApplicationStatus) else str(status)
    return " ".join(word.capitalize() for word in value.split("_"))


def _normalize_changes(fields: Mapping[str, Any]) -> dict[str, Any]:
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown application field(s): {', '.join(sorted(unknown))}")

    changes: dict[str, Any] = {}
    for name, value in fields.items():
        if name in ("company_name", "role"):
            changes[name] = require_non_empty(value, name)
        elif name == "app_type":
            changes[name] = require_enum(value, ApplicationType, "app_type")
        elif name == "applied_date":
            changes[name] = coerce_date(value, "applied_date")
        else:
            changes[name] = optional_text(value)
    return changes


class ApplicationService:
    def __init__(
        self,
        applications: ApplicationRepository,
        notes: NoteRepository,
        events: CalendarRepository,
        *,
        clock: Callable[[], date] = today_local,
    ):
        self._applications = applications
        self._notes = notes
        self._events = events
        self._clock = clock

    def _require(self, application_id: str) -> Application:
        application = self._applications.get(str(application_id or ""))
        if not application:
            raise NotFoundError("Application not found")
        return application

    def list_all(self) -> list[ApplicationSummary]:
        latest = self._applications.latest_updates()
        return [
            ApplicationSummary(application=a, latest_update=latest.get(a.application_id))
            for a in self._applications.list_all()
        ]

    def get(self, application_id: str) -> ApplicationDetail:
        application = self._require(application_id)
        return ApplicationDetail(
            application=application,
            updates=tuple(self._applications.list_updates(application.application_id)),
            notes=tuple(self._notes.list_for_target(EntityKind.APPLICATION, application.application_id)),
            events=tuple(self._events.list_for_application(application.application_id)),
        )

    def create(
        self,
        company_name: str,
        role: str,
        app_type,
        *,
        company_link: Optional[str] = None,
        application_link: Optional[str] = None,
        status=ApplicationStatus.DISCOVERED,
        applied_date=None,
    ) -> ApplicationDetail:
        application = Application(
            application_id="",
            company_name=require_non_empty(company_name, "company_name"),
            role=require_non_empty(role, "role"),
            app_type=require_enum(app_type, ApplicationType, "app_type"),
            status=require_enum(status or ApplicationStatus.DISCOVERED, ApplicationStatus, "status"),
            company_link=optional_text(company_link),
            application_link=optional_text(application_link),
            applied_date=coerce_date(applied_date, "applied_date"),
        )
        application_id = self._applications.create(
            application,
            log=f"Application created with status: {application.status.value}",
        )
        logger.info("Application %s created for %s", application_id, application.company_name)
        return self.get(application_id)

    def update(self, application_id: str, **fields) -> ApplicationDetail:
        changes = _normalize_changes(fields)
        application = self._require(application_id)
        current = asdict(application)
        changed = {k: v for k, v in changes.items() if current.get(k) != v}
        if changed:
            self._applications.update(application.application_id, changed, log="Application details updated")
        return self.get(application.application_id)

    def update_status(self, application_id: str, status, note: Optional[str] = None) -> ApplicationDetail:
        new_status = require_enum(status, ApplicationStatus, "status")
        note = optional_text(note)
        application = self._require(application_id)
        if new_status is application.status and not note:
            return self.get(application.application_id)

        applied_date = application.applied_date
        if new_status is ApplicationStatus.APPLIED and applied_date is None:
            applied_date = self._clock()

        log = note or f"Status changed: {format_status(application.status)} → {format_status(new_status)}"
        self._applications.set_status(application.application_id, new_status, applied_date=applied_date, log=log)
        return self.get(application.application_id)

    def add_update(self, application_id: str, content: str) -> ApplicationUpdate:
        content = require_non_empty(content, "content")
        application = self._require(application_id)
        update_id = self._applications.add_update(application.application_id, ApplicationUpdateType.NOTE, content)
        return ApplicationUpdate(
            update_id=update_id,
            application_id=application.application_id,
            update_type=ApplicationUpdateType.NOTE,
            content=content,
        )

    def delete(self, application_id: str) -> None:
        application = self._require(application_id)
        self._applications.delete(application.application_id)
        logger.info("Application %s deleted", application.application_id)

    def add_interview_event(self, application_id: str, interview_date, description: Optional[str] = None) -> CalendarEvent:
        day = coerce_date(interview_date, "date")
        if day is None:
            raise ValidationError("date is required")
        application = self._require(application_id)

        event = CalendarEvent(
            event_id="",
            title=f"Interview: {application.company_name} - {application.role}",
            event_date=day,
            event_type=EventType.APPLICATION,
            priority=Priority.HIGH,
            description=optional_text(description),
            auto_generated=True,
            event_kind=INTERVIEW_EVENT_KIND,
            application_id=application.application_id,
        )
        event_id = self._applications.add_interview_event(
            application.application_id,
            event,
            log=f"Interview scheduled for {day.isoformat()}",
        )
        return replace(event, event_id=event_id)
