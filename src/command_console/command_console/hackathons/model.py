from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import DeadlineRisk, HackathonMode, HackathonStatus


@dataclass(frozen=True)
class Hackathon:
    hackathon_id: str
    name: str
    status: HackathonStatus = HackathonStatus.UPCOMING
    mode: HackathonMode = HackathonMode.ONLINE
    organizer: Optional[str] = None
    theme: Optional[str] = None
    team_size: int = 1
    registration_deadline: Optional[date] = None
    submission_deadline: Optional[date] = None
    event_start_date: Optional[date] = None
    event_end_date: Optional[date] = None
    project_title: Optional[str] = None
    project_description: Optional[str] = None
    registration_link: Optional[str] = None
    submission_portal: Optional[str] = None
    discord_slack: Optional[str] = None
    linked_project_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Columns a caller may change through HackathonService.update.
EDITABLE_FIELDS = (
    "name",
    "organizer",
    "mode",
    "theme",
    "team_size",
    "registration_deadline",
    "submission_deadline",
    "event_start_date",
    "event_end_date",
    "project_title",
    "project_description",
    "registration_link",
    "submission_portal",
    "discord_slack",
)

DATE_FIELDS = ("registration_deadline", "submission_deadline", "event_start_date", "event_end_date")


@dataclass(frozen=True)
class HackathonView:
    """Hackathon plus the values derived from it at read time.

    ``suggested_status`` is advisory: it is never written back.
    """

    hackathon: Hackathon
    risk: DeadlineRisk
    days_to_submission: Optional[int]
    suggested_status: Optional[HackathonStatus]
    task_total: int = 0
    task_completed: int = 0
    linked_project_name: Optional[str] = None
