from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..calendar.model import CalendarEvent
from ..core.enums import ApplicationStatus, ApplicationUpdateType
from .model import Application, ApplicationUpdate


class ApplicationRepository(Protocol):
    def list_all(self) -> Sequence[Application]:
        raise NotImplementedError

    def get(self, application_id: str) -> Optional[Application]:
        raise NotImplementedError

    def create(self, application: Application, *, log: str) -> str:
        raise NotImplementedError

    def update(self, application_id: str, changes: Mapping[str, Any], *, log: str) -> bool:
        raise NotImplementedError

    def set_status(
        self,
        application_id: str,
        status: ApplicationStatus,
        *,
        applied_date: Optional[date],
        log: str,
    ) -> None:
        raise NotImplementedError

    def add_update(self, application_id: str, update_type: ApplicationUpdateType, content: str) -> int:
        """Append a log line and touch ``last_updated``."""

        raise NotImplementedError

    def list_updates(self, application_id: str) -> Sequence[ApplicationUpdate]:
        raise NotImplementedError

    def latest_updates(self) -> Mapping[str, ApplicationUpdate]:
        raise NotImplementedError

    def delete(self, application_id: str) -> bool:
        raise NotImplementedError

    def add_interview_event(self, application_id: str, event: CalendarEvent, *, log: str) -> str:
        """Store the calendar event and its log line together; returns the event id."""

        raise NotImplementedError
