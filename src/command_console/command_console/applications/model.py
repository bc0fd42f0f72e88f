from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..calendar.model import CalendarEvent
from ..core.enums import ApplicationStatus, ApplicationType, ApplicationUpdateType
from ..notes.model import Note


@dataclass(frozen=True)
class Application:
    application_id: str
    company_name: str
    role: str
    app_type: ApplicationType
    status: ApplicationStatus = ApplicationStatus.DISCOVERED
    company_link: Optional[str] = None
    application_link: Optional[str] = None
    applied_date: Optional[date] = None
    created_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None


@dataclass(frozen=True)
class ApplicationUpdate:
    """One line of an application's activity log."""

    update_id: int
    application_id: str
    update_type: ApplicationUpdateType
    content: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class ApplicationSummary:
    application: Application
    latest_update: Optional[ApplicationUpdate] = None


@dataclass(frozen=True)
class ApplicationDetail:
    application: Application
    updates: tuple[ApplicationUpdate, ...] = ()
    notes: tuple[Note, ...] = ()
    events: tuple[CalendarEvent, ...] = ()


EDITABLE_FIELDS = ("company_name", "role", "app_type", "company_link", "application_link", "applied_date")
