from __future__ import annotations

from dataclasses import dataclass, field

from ..hackathons.model import Hackathon
from ..projects.model import Project
from ..tasks.model import NewTask


@dataclass(frozen=True)
class RecentActivity:
    hackathons_last_week: int = 0
    tasks_completed_last_week: int = 0
    notes_last_week: int = 0


@dataclass(frozen=True)
class SystemStats:
    hackathons: int = 0
    projects: int = 0
    tasks: int = 0
    notes: int = 0
    calendar_events: int = 0
    note_links: int = 0
    applications: int = 0
    hackathons_by_status: dict[str, int] = field(default_factory=dict)
    tasks_by_state: dict[str, int] = field(default_factory=dict)
    projects_by_stage: dict[str, int] = field(default_factory=dict)
    recent_activity: RecentActivity = field(default_factory=RecentActivity)


@dataclass(frozen=True)
class LegacyTask:
    """A legacy task after context resolution; ``task.project_id``/``hackathon_id`` hold the parent."""

    task_id: str
    task: NewTask


@dataclass(frozen=True)
class LegacyBatch:
    projects: tuple[Project, ...] = ()
    hackathons: tuple[Hackathon, ...] = ()
    tasks: tuple[LegacyTask, ...] = ()


@dataclass(frozen=True)
class ImportResult:
    projects_imported: int = 0
    hackathons_imported: int = 0
    tasks_imported: int = 0
    skipped_existing: int = 0
    skipped_orphans: int = 0
    skipped_invalid: int = 0
    orphan_task_ids: tuple[str, ...] = ()
