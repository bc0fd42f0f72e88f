from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import date
from typing import Any, Callable, Mapping, Optional, Sequence

from ..calendar.aggregator import infer_missed
from ..common.audit import AuditEvent, FieldChange, diff_fields
from ..common.datetime_utils import coerce_date, days_until, today_local
from ..common.validators import optional_text, require_enum, require_non_empty, require_positive_int
from ..core.constants import DEFAULT_HACKATHON_TASKS, HACKATHON_AT_RISK_DAYS, HACKATHON_CRITICAL_DAYS
from ..core.enums import (
    AuditEventType,
    DeadlineRisk,
    HackathonMode,
    HackathonStatus,
    ProjectDomain,
    ProjectStage,
    TaskPriority,
    TaskState,
)
from ..core.exceptions import NotFoundError, ValidationError
from ..projects.model import Project
from ..projects.repository import ProjectRepository
from ..tasks.model import NewTask, Task
from ..tasks.repository import TaskRepository
from .model import DATE_FIELDS, EDITABLE_FIELDS, Hackathon, HackathonView
from .repository import HackathonRepository

logger = logging.getLogger(__name__)


def hackathon_risk(hackathon: Hackathon, today: date) -> DeadlineRisk:
    if hackathon.status in (HackathonStatus.SUBMITTED, HackathonStatus.COMPLETED):
        return DeadlineRisk.STABLE
    if hackathon.submission_deadline is None:
        return DeadlineRisk.STABLE
    days = days_until(hackathon.submission_deadline, today)
    if days < 0:
        return DeadlineRisk.MISSED
    if days < HACKATHON_CRITICAL_DAYS:
        return DeadlineRisk.CRITICAL
    if days < HACKATHON_AT_RISK_DAYS:
        return DeadlineRisk.AT_RISK
    return DeadlineRisk.STABLE


def default_tasks() -> tuple[NewTask, ...]:
    return tuple(
        NewTask(title=title, priority=TaskPriority(priority), description=description)
        for title, priority, description in DEFAULT_HACKATHON_TASKS
    )


def _normalize_changes(fields: Mapping[str, Any]) -> dict[str, Any]:
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown hackathon field(s): {', '.join(sorted(unknown))}")

    changes: dict[str, Any] = {}
    for name, value in fields.items():
        if name == "name":
            changes[name] = require_non_empty(value, "name")
        elif name == "mode":
            changes[name] = require_enum(value or HackathonMode.ONLINE, HackathonMode, "mode")
        elif name == "team_size":
            changes[name] = require_positive_int(value, "team_size")
        elif name in DATE_FIELDS:
            # explicit None clears the date
            changes[name] = coerce_date(value, name)
        else:
            changes[name] = optional_text(value)
    return changes


def _check_dates(values: Mapping[str, Any]) -> None:
    start, end = values.get("event_start_date"), values.get("event_end_date")
    if start and end and end < start:
        raise ValidationError("event_end_date cannot be before event_start_date")


class HackathonService:
    def __init__(
        self,
        hackathons: HackathonRepository,
        projects: ProjectRepository,
        tasks: TaskRepository,
        *,
        clock: Callable[[], date] = today_local,
    ):
        self._hackathons = hackathons
        self._projects = projects
        self._tasks = tasks
        self._clock = clock

    def _require(self, hackathon_id: str) -> Hackathon:
        hackathon = self._hackathons.get(str(hackathon_id or ""))
        if not hackathon:
            raise NotFoundError("Hackathon not found")
        return hackathon

    def _view(self, hackathon: Hackathon, tasks: Sequence[Task], today: date) -> HackathonView:
        project = self._projects.get(hackathon.linked_project_id) if hackathon.linked_project_id else None
        deadline = hackathon.submission_deadline
        return HackathonView(
            hackathon=hackathon,
            risk=hackathon_risk(hackathon, today),
            days_to_submission=days_until(deadline, today) if deadline else None,
            suggested_status=HackathonStatus.MISSED if infer_missed(hackathon, today) else None,
            task_total=len(tasks),
            task_completed=sum(1 for t in tasks if t.state is TaskState.COMPLETED),
            linked_project_name=project.name if project else None,
        )

    def _tasks_for(self, hackathon: Hackathon, all_tasks: Sequence[Task]) -> list[Task]:
        return [
            t
            for t in all_tasks
            if t.hackathon_id == hackathon.hackathon_id
            or (hackathon.linked_project_id and t.project_id == hackathon.linked_project_id)
        ]

    def list_with_derived(self, *, today: Optional[date] = None) -> list[HackathonView]:
        today = today or self._clock()
        all_tasks = self._tasks.list_all()
        return [self._view(h, self._tasks_for(h, all_tasks), today) for h in self._hackathons.list_all()]

    def get_with_derived(self, hackathon_id: str, *, today: Optional[date] = None) -> HackathonView:
        hackathon = self._require(hackathon_id)
        tasks = list(self._tasks.list_for_hackathon(hackathon.hackathon_id))
        if hackathon.linked_project_id:
            tasks.extend(self._tasks.list_for_project(hackathon.linked_project_id))
        return self._view(hackathon, tasks, today or self._clock())

    def create(self, name: str, **fields) -> HackathonView:
        values = _normalize_changes({"name": name, **fields})
        _check_dates(values)
        hackathon = Hackathon(hackathon_id="", status=HackathonStatus.UPCOMING, **values)
        hackathon_id = self._hackathons.create(hackathon)
        logger.info("Hackathon %s created: %s", hackathon_id, hackathon.name)
        return self.get_with_derived(hackathon_id)

    def update(self, hackathon_id: str, **fields) -> HackathonView:
        changes = _normalize_changes(fields)
        hackathon = self._require(hackathon_id)
        _check_dates({**asdict(hackathon), **changes})
        events = diff_fields(asdict(hackathon), changes, EDITABLE_FIELDS)
        if events:
            self._hackathons.update(hackathon.hackathon_id, {e.field: changes[e.field] for e in events}, events)
        return self.get_with_derived(hackathon.hackathon_id)

    def update_status(self, hackathon_id: str, status) -> HackathonView:
        new_status = require_enum(status, HackathonStatus, "status")
        hackathon = self._require(hackathon_id)
        if hackathon.status is not new_status:
            change = FieldChange("status", hackathon.status.value, new_status.value, AuditEventType.STATUS_CHANGE)
            self._hackathons.update(hackathon.hackathon_id, {"status": new_status}, [change])
        return self.get_with_derived(hackathon.hackathon_id)

    def submit(self, hackathon_id: str) -> HackathonView:
        return self.update_status(hackathon_id, HackathonStatus.SUBMITTED)

    def mark_missed(self, hackathon_id: str) -> HackathonView:
        return self.update_status(hackathon_id, HackathonStatus.MISSED)

    def register(self, hackathon_id: str) -> HackathonView:
        """Register for the hackathon, creating its project and starter tasks on first use."""
        hackathon = self._require(hackathon_id)
        new_project = Project(
            project_id="",
            name=hackathon.project_title or f"{hackathon.name} Project",
            description=hackathon.project_description or hackathon.theme,
            domain=ProjectDomain.HACKATHON,
            stage=ProjectStage.PLANNING,
            deadline=hackathon.submission_deadline,
            origin_hackathon_id=hackathon.hackathon_id,
        )
        project_id = self._hackathons.register(
            hackathon.hackathon_id,
            new_project=new_project,
            default_tasks=default_tasks(),
        )
        logger.info("Registered for hackathon %s (project %s)", hackathon.hackathon_id, project_id)
        return self.get_with_derived(hackathon.hackathon_id)

    def delete(self, hackathon_id: str) -> None:
        hackathon = self._require(hackathon_id)
        self._hackathons.delete(hackathon.hackathon_id)
        logger.info("Hackathon %s deleted", hackathon.hackathon_id)

    def link_project(self, hackathon_id: str, project_id: str) -> HackathonView:
        hackathon = self._require(hackathon_id)
        project = self._projects.get(str(project_id or ""))
        if not project:
            raise NotFoundError("Project not found")
        if hackathon.linked_project_id != project.project_id:
            self._hackathons.link_project(hackathon.hackathon_id, project.project_id)
        return self.get_with_derived(hackathon.hackathon_id)

    def unlink_project(self, hackathon_id: str) -> HackathonView:
        hackathon = self._require(hackathon_id)
        if hackathon.linked_project_id:
            self._hackathons.unlink_project(hackathon.hackathon_id)
        return self.get_with_derived(hackathon.hackathon_id)

    def history(self, hackathon_id: str) -> Sequence[AuditEvent]:
        hackathon = self._require(hackathon_id)
        return self._hackathons.history(hackathon.hackathon_id)
