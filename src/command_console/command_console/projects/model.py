from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import DeadlineRisk, ProjectDomain, ProjectStage, TaskPriority


@dataclass(frozen=True)
class Project:
    project_id: str
    name: str
    description: Optional[str] = None
    domain: ProjectDomain = ProjectDomain.PERSONAL
    stage: ProjectStage = ProjectStage.PLANNING
    deadline: Optional[date] = None
    origin_hackathon_id: Optional[str] = None
    last_activity: Optional[datetime] = None
    created_at: Optional[datetime] = None


EDITABLE_FIELDS = ("name", "description", "domain", "stage", "deadline")


@dataclass(frozen=True)
class ProjectLink:
    link_id: str
    project_id: str
    title: str
    url: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class PendingTask:
    title: str
    priority: TaskPriority = TaskPriority.MEDIUM
    description: Optional[str] = None
    due_date: Optional[date] = None


@dataclass(frozen=True)
class PendingLink:
    title: str
    url: str
    description: Optional[str] = None


@dataclass(frozen=True)
class PendingNote:
    content: str
    title: Optional[str] = None


@dataclass(frozen=True)
class ProjectBatch:
    """Everything a project editor stages before pressing save.

    Applied as a single transaction by ``ProjectRepository.save_batch``.
    """

    project_id: str
    changes: dict = field(default_factory=dict)
    tasks: tuple[PendingTask, ...] = ()
    links: tuple[PendingLink, ...] = ()
    notes: tuple[PendingNote, ...] = ()


@dataclass(frozen=True)
class BatchResult:
    project_id: str
    changed_fields: tuple[str, ...]
    task_ids: tuple[str, ...]
    link_ids: tuple[str, ...]
    note_ids: tuple[str, ...]


@dataclass(frozen=True)
class ProjectView:
    project: Project
    progress: int
    risk: DeadlineRisk
    task_total: int
    task_completed: int
    hackathon_id: Optional[str] = None
    links: tuple[ProjectLink, ...] = ()
