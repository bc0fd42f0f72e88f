from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import CalendarEvent


class CalendarRepository(Protocol):
    def list_events(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[CalendarEvent]:
        raise NotImplementedError

    def get_event(self, event_id: str) -> Optional[CalendarEvent]:
        raise NotImplementedError

    def create_event(self, event: CalendarEvent) -> str:
        """Persist a new row; ``event.event_id`` is ignored and a fresh id returned."""

        raise NotImplementedError

    def delete_event(self, event_id: str) -> bool:
        raise NotImplementedError

    def list_for_application(self, application_id: str) -> Sequence[CalendarEvent]:
        raise NotImplementedError
