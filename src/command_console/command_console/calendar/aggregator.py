"""Deadline aggregation.

Pure functions: they take read-only snapshots of stored rows and return
annotated ``DeadlineItem`` lists. Nothing here touches the database.

Derived items (hackathon and project deadlines) are never stored; their ids
have the form ``<kind>:<source id>:<field>``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import days_until
from ..core.constants import DEFAULT_TIGHT_DAYS
from ..core.enums import (
    CLOSED_HACKATHON_STATUSES,
    PRE_SUBMISSION_STATUSES,
    EntityKind,
    EventState,
    EventType,
    HackathonStatus,
    Priority,
    ProjectStage,
    Urgency,
)
from ..hackathons.model import Hackathon
from ..projects.model import Project
from ..tasks.model import Task
from .model import CalendarEvent, DeadlineItem, SourceRef, TaskStats

DERIVED_SEPARATOR = ":"

_DONE_HACKATHON_STATUSES = frozenset(
    {
        HackathonStatus.SUBMITTED,
        HackathonStatus.RESULTS_PENDING,
        HackathonStatus.SELECTED,
        HackathonStatus.NOT_SELECTED,
        HackathonStatus.COMPLETED,
    }
)

# (field, title prefix, priority)
_HACKATHON_DEADLINES = (
    ("registration_deadline", "Register", Priority.HIGH),
    ("submission_deadline", "Submit", Priority.HIGH),
    ("event_start_date", "Start", Priority.NORMAL),
)


@dataclass(frozen=True)
class Snapshot:
    """Rows fetched independently from storage for one aggregation pass."""

    events: Sequence[CalendarEvent] = ()
    hackathons: Sequence[Hackathon] = ()
    projects: Sequence[Project] = ()
    tasks: Sequence[Task] = ()
    application_ids: frozenset = field(default_factory=frozenset)


def derived_id(kind: EntityKind, source_id: str, field_name: str) -> str:
    return DERIVED_SEPARATOR.join((kind.value, source_id, field_name))


def is_derived_id(item_id: str) -> bool:
    kind, sep, _ = str(item_id).partition(DERIVED_SEPARATOR)
    return bool(sep) and kind in {k.value for k in EntityKind}


def urgency_for(days: int, *, tight_days: int = DEFAULT_TIGHT_DAYS) -> Urgency:
    if days <= 0:
        return Urgency.AT_RISK
    if days <= tight_days:
        return Urgency.TIGHT
    return Urgency.ON_TRACK


def infer_missed(hackathon: Hackathon, today: date) -> bool:
    """Submission deadline passed while the status still expects a submission."""
    return (
        hackathon.submission_deadline is not None
        and hackathon.submission_deadline < today
        and hackathon.status in PRE_SUBMISSION_STATUSES
    )


def sort_key(item: DeadlineItem):
    return (item.date, -item.priority.rank, item.title, item.item_id)


def _state_for(day: date, today: date, *, done: bool) -> EventState:
    if done:
        return EventState.COMPLETED
    if day < today:
        return EventState.MISSED
    if day == today:
        return EventState.TODAY
    return EventState.UPCOMING


def task_stats_by_source(tasks: Iterable[Task], today: date) -> dict[SourceRef, TaskStats]:
    buckets: dict[SourceRef, list[Task]] = {}
    for task in tasks:
        if task.project_id:
            buckets.setdefault(SourceRef(EntityKind.PROJECT, task.project_id), []).append(task)
        elif task.hackathon_id:
            buckets.setdefault(SourceRef(EntityKind.HACKATHON, task.hackathon_id), []).append(task)
    return {
        ref: TaskStats(
            total=len(items),
            pending=sum(1 for t in items if t.is_open),
            overdue=sum(1 for t in items if t.is_overdue(today)),
        )
        for ref, items in buckets.items()
    }


def _merge_stats(*stats: Optional[TaskStats]) -> Optional[TaskStats]:
    present = [s for s in stats if s is not None]
    if not present:
        return None
    return TaskStats(
        total=sum(s.total for s in present),
        pending=sum(s.pending for s in present),
        overdue=sum(s.overdue for s in present),
    )


def hackathon_items(
    hackathon: Hackathon,
    *,
    today: date,
    tight_days: int,
    stats: Optional[TaskStats] = None,
) -> list[DeadlineItem]:
    ref = SourceRef(EntityKind.HACKATHON, hackathon.hackathon_id)
    done = hackathon.status in _DONE_HACKATHON_STATUSES
    items: list[DeadlineItem] = []
    for field_name, prefix, priority in _HACKATHON_DEADLINES:
        day = getattr(hackathon, field_name)
        if day is None:
            continue
        days = days_until(day, today)
        items.append(
            DeadlineItem(
                item_id=derived_id(EntityKind.HACKATHON, hackathon.hackathon_id, field_name),
                title=f"{prefix}: {hackathon.name}",
                date=day,
                event_type=EventType.HACKATHON,
                priority=priority,
                source_ref=ref,
                auto_generated=True,
                derived=True,
                days_until=days,
                urgency=urgency_for(days, tight_days=tight_days),
                state=_state_for(day, today, done=done),
                task_stats=stats,
            )
        )
    return items


def project_items(
    project: Project,
    *,
    today: date,
    tight_days: int,
    stats: Optional[TaskStats] = None,
) -> list[DeadlineItem]:
    if project.deadline is None:
        return []
    days = days_until(project.deadline, today)
    return [
        DeadlineItem(
            item_id=derived_id(EntityKind.PROJECT, project.project_id, "deadline"),
            title=f"Deadline: {project.name}",
            date=project.deadline,
            event_type=EventType.PROJECT,
            priority=Priority.NORMAL,
            source_ref=SourceRef(EntityKind.PROJECT, project.project_id),
            auto_generated=True,
            derived=True,
            days_until=days,
            urgency=urgency_for(days, tight_days=tight_days),
            state=_state_for(project.deadline, today, done=project.stage is ProjectStage.COMPLETED),
            task_stats=stats,
        )
    ]


def _resolve_ref(event: CalendarEvent, known: Mapping[EntityKind, set]) -> Optional[SourceRef]:
    # First non-dangling back-reference wins; a dangling one just loses the link.
    for kind, source_id in (
        (EntityKind.PROJECT, event.project_id),
        (EntityKind.HACKATHON, event.hackathon_id),
        (EntityKind.APPLICATION, event.application_id),
    ):
        if source_id and source_id in known.get(kind, ()):
            return SourceRef(kind, source_id)
    return None


def event_item(
    event: CalendarEvent,
    *,
    today: date,
    tight_days: int,
    known: Mapping[EntityKind, set],
    stats_by_source: Mapping[SourceRef, TaskStats],
) -> DeadlineItem:
    ref = _resolve_ref(event, known)
    days = days_until(event.event_date, today)
    state = _state_for(event.event_date, today, done=False)
    if state is EventState.MISSED:
        # A dated event that already happened is history, not a miss.
        state = EventState.COMPLETED
    return DeadlineItem(
        item_id=event.event_id,
        title=event.title,
        date=event.event_date,
        event_type=event.event_type,
        priority=event.priority,
        source_ref=ref,
        auto_generated=event.auto_generated,
        derived=False,
        days_until=days,
        urgency=urgency_for(days, tight_days=tight_days),
        state=state,
        task_stats=stats_by_source.get(ref) if ref else None,
        description=event.description,
    )


def aggregate(
    snapshot: Snapshot,
    *,
    today: date,
    tight_days: int = DEFAULT_TIGHT_DAYS,
    start: Optional[date] = None,
    end: Optional[date] = None,
    include_closed: bool = True,
) -> list[DeadlineItem]:
    """Union of stored events, hackathon deadlines and project deadlines.

    Ordered by date, then priority (high first), title and id, so repeated
    runs over the same snapshot give the same sequence.
    """
    stats = task_stats_by_source(snapshot.tasks, today)
    known: dict[EntityKind, set] = {
        EntityKind.PROJECT: {p.project_id for p in snapshot.projects},
        EntityKind.HACKATHON: {h.hackathon_id for h in snapshot.hackathons},
        EntityKind.APPLICATION: set(snapshot.application_ids),
    }
    closed_hackathons = {h.hackathon_id for h in snapshot.hackathons if h.status in CLOSED_HACKATHON_STATUSES}
    closed_projects = {p.project_id for p in snapshot.projects if p.stage is ProjectStage.COMPLETED}

    items: list[DeadlineItem] = []
    for event in snapshot.events:
        item = event_item(event, today=today, tight_days=tight_days, known=known, stats_by_source=stats)
        if not include_closed and item.source_ref is not None:
            if item.source_ref.source_id in closed_hackathons | closed_projects:
                continue
        items.append(item)

    for hackathon in snapshot.hackathons:
        if not include_closed and hackathon.hackathon_id in closed_hackathons:
            continue
        own = stats.get(SourceRef(EntityKind.HACKATHON, hackathon.hackathon_id))
        linked = (
            stats.get(SourceRef(EntityKind.PROJECT, hackathon.linked_project_id))
            if hackathon.linked_project_id
            else None
        )
        items.extend(
            hackathon_items(hackathon, today=today, tight_days=tight_days, stats=_merge_stats(own, linked))
        )

    for project in snapshot.projects:
        if not include_closed and project.project_id in closed_projects:
            continue
        items.extend(
            project_items(
                project,
                today=today,
                tight_days=tight_days,
                stats=stats.get(SourceRef(EntityKind.PROJECT, project.project_id)),
            )
        )

    if start is not None:
        items = [i for i in items if i.date >= start]
    if end is not None:
        items = [i for i in items if i.date <= end]
    return sorted(items, key=sort_key)


def upcoming(
    snapshot: Snapshot,
    *,
    today: date,
    limit: int,
    tight_days: int = DEFAULT_TIGHT_DAYS,
) -> list[DeadlineItem]:
    """Items dated today or later, closed hackathons/projects excluded, first ``limit``."""
    items = aggregate(snapshot, today=today, tight_days=tight_days, start=today, include_closed=False)
    return items[: max(int(limit), 0)]
