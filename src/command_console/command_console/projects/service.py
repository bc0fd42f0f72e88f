from __future__ import annotations

from dataclasses import asdict
from datetime import date
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from ..common.audit import AuditEvent, diff_fields
from ..common.datetime_utils import coerce_date, today_local
from ..common.validators import optional_text, require_enum, require_non_empty
from ..core.enums import DeadlineRisk, ProjectDomain, ProjectStage, TaskPriority, TaskState
from ..core.exceptions import NotFoundError, ValidationError
from ..tasks.model import Task
from ..tasks.repository import TaskRepository
from .model import (
    EDITABLE_FIELDS,
    BatchResult,
    PendingLink,
    PendingNote,
    PendingTask,
    Project,
    ProjectBatch,
    ProjectLink,
    ProjectView,
)
from .repository import ProjectRepository


def project_progress(tasks: Sequence[Task]) -> int:
    if not tasks:
        return 0
    done = sum(1 for t in tasks if t.state is TaskState.COMPLETED)
    return (200 * done + len(tasks)) // (2 * len(tasks))


def project_risk(project: Project, tasks: Sequence[Task], today: date) -> DeadlineRisk:
    """critical: deadline passed and unfinished; at_risk: an open task is overdue."""
    if project.stage is ProjectStage.COMPLETED:
        return DeadlineRisk.STABLE
    if project.deadline is not None and project.deadline < today and project_progress(tasks) < 100:
        return DeadlineRisk.CRITICAL
    if any(t.is_overdue(today) for t in tasks):
        return DeadlineRisk.AT_RISK
    return DeadlineRisk.STABLE


def _normalize_changes(fields: Mapping[str, Any]) -> dict[str, Any]:
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown project field(s): {', '.join(sorted(unknown))}")

    changes: dict[str, Any] = {}
    if "name" in fields:
        changes["name"] = require_non_empty(fields["name"], "name")
    if "description" in fields:
        changes["description"] = optional_text(fields["description"])
    if "domain" in fields:
        changes["domain"] = require_enum(fields["domain"], ProjectDomain, "domain")
    if "stage" in fields:
        changes["stage"] = require_enum(fields["stage"], ProjectStage, "stage")
    if "deadline" in fields:
        changes["deadline"] = coerce_date(fields["deadline"], "deadline")
    return changes


def _as_mapping(item, label: str) -> Mapping[str, Any]:
    if not isinstance(item, Mapping):
        raise ValidationError(f"Each {label} must be an object")
    return item


def _pending_tasks(items: Iterable[Mapping[str, Any]]) -> tuple[PendingTask, ...]:
    return tuple(
        PendingTask(
            title=require_non_empty(item.get("title"), "task title"),
            priority=require_enum(item.get("priority") or TaskPriority.MEDIUM, TaskPriority, "task priority"),
            description=optional_text(item.get("description")),
            due_date=coerce_date(item.get("due_date"), "task due_date"),
        )
        for item in (_as_mapping(i, "task") for i in items)
    )


def _pending_link(item: Mapping[str, Any]) -> PendingLink:
    item = _as_mapping(item, "link")
    return PendingLink(
        title=require_non_empty(item.get("title"), "link title"),
        url=require_non_empty(item.get("url"), "link url"),
        description=optional_text(item.get("description")),
    )


def _pending_note(item: Mapping[str, Any]) -> PendingNote:
    item = _as_mapping(item, "note")
    return PendingNote(
        content=require_non_empty(item.get("content"), "note content"),
        title=optional_text(item.get("title")),
    )


class ProjectService:
    def __init__(
        self,
        projects: ProjectRepository,
        tasks: TaskRepository,
        *,
        clock: Callable[[], date] = today_local,
    ):
        self._projects = projects
        self._tasks = tasks
        self._clock = clock

    def _require(self, project_id: str) -> Project:
        project = self._projects.get(str(project_id or ""))
        if not project:
            raise NotFoundError("Project not found")
        return project

    def _view(self, project: Project, tasks: Sequence[Task], today: date, *, with_links: bool = False) -> ProjectView:
        return ProjectView(
            project=project,
            progress=project_progress(tasks),
            risk=project_risk(project, tasks, today),
            task_total=len(tasks),
            task_completed=sum(1 for t in tasks if t.state is TaskState.COMPLETED),
            hackathon_id=project.origin_hackathon_id,
            links=tuple(self._projects.list_links(project.project_id)) if with_links else (),
        )

    def list_all(self, *, today: Optional[date] = None) -> list[ProjectView]:
        today = today or self._clock()
        by_project: dict[str, list[Task]] = {}
        for task in self._tasks.list_all():
            if task.project_id:
                by_project.setdefault(task.project_id, []).append(task)
        return [self._view(p, by_project.get(p.project_id, []), today) for p in self._projects.list_all()]

    def get(self, project_id: str, *, today: Optional[date] = None) -> ProjectView:
        project = self._require(project_id)
        tasks = self._tasks.list_for_project(project.project_id)
        return self._view(project, tasks, today or self._clock(), with_links=True)

    def create(
        self,
        name: str,
        *,
        description: Optional[str] = None,
        domain=ProjectDomain.PERSONAL,
        stage=ProjectStage.PLANNING,
        deadline=None,
    ) -> ProjectView:
        project = Project(
            project_id="",
            name=require_non_empty(name, "name"),
            description=optional_text(description),
            domain=require_enum(domain or ProjectDomain.PERSONAL, ProjectDomain, "domain"),
            stage=require_enum(stage or ProjectStage.PLANNING, ProjectStage, "stage"),
            deadline=coerce_date(deadline, "deadline"),
        )
        return self.get(self._projects.create(project))

    def update(self, project_id: str, **fields) -> ProjectView:
        changes = _normalize_changes(fields)
        project = self._require(project_id)
        events = diff_fields(asdict(project), changes, EDITABLE_FIELDS, status_fields=("stage",))
        if events:
            self._projects.update(project.project_id, {e.field: changes[e.field] for e in events}, events)
        return self.get(project.project_id)

    def delete(self, project_id: str) -> None:
        project = self._require(project_id)
        self._projects.delete(project.project_id)

    def add_link(self, project_id: str, title: str, url: str, description: Optional[str] = None) -> ProjectLink:
        link = _pending_link({"title": title, "url": url, "description": description})
        project = self._require(project_id)
        link_id = self._projects.add_link(project.project_id, link)
        return ProjectLink(
            link_id=link_id,
            project_id=project.project_id,
            title=link.title,
            url=link.url,
            description=link.description,
        )

    def add_note(self, project_id: str, content: str, *, title: Optional[str] = None) -> str:
        note = _pending_note({"content": content, "title": title})
        project = self._require(project_id)
        return self._projects.add_note(project.project_id, note)

    def save_batch(
        self,
        project_id: str,
        *,
        changes: Optional[Mapping[str, Any]] = None,
        tasks: Iterable[Mapping[str, Any]] = (),
        links: Iterable[Mapping[str, Any]] = (),
        notes: Iterable[Mapping[str, Any]] = (),
    ) -> BatchResult:
        """Save edited fields and staged tasks/links/notes as one unit.

        Everything is validated before the first write; the repository then
        commits the whole batch or nothing.
        """
        if changes is not None and not isinstance(changes, Mapping):
            raise ValidationError("changes must be an object")
        normalized = _normalize_changes(changes or {})
        batch_tasks = _pending_tasks(tasks)
        batch_links = tuple(_pending_link(item) for item in links)
        batch_notes = tuple(_pending_note(item) for item in notes)

        project = self._require(project_id)
        events = diff_fields(asdict(project), normalized, EDITABLE_FIELDS, status_fields=("stage",))
        batch = ProjectBatch(
            project_id=project.project_id,
            changes={e.field: normalized[e.field] for e in events},
            tasks=batch_tasks,
            links=batch_links,
            notes=batch_notes,
        )
        return self._projects.save_batch(batch, events)

    def history(self, project_id: str) -> Sequence[AuditEvent]:
        project = self._require(project_id)
        return self._projects.history(project.project_id)
