"""In-memory repositories shared by the service tests.

One ``Store`` holds every table so cross-entity effects (hackathon delete
removing its project, note links, ...) behave like the MySQL versions.
"""

from __future__ import annotations

import dataclasses
import itertools
from collections import Counter
from datetime import date, datetime
from typing import Any, Mapping, Optional, Sequence

from src.command_console.command_console.applications.model import Application, ApplicationUpdate
from src.command_console.command_console.applications.service import ApplicationService
from src.command_console.command_console.attendance.service import AttendanceService
from src.command_console.command_console.calendar.service import CalendarService
from src.command_console.command_console.container import Container
from src.command_console.command_console.hackathons.service import HackathonService
from src.command_console.command_console.notes.service import NoteService
from src.command_console.command_console.overview.service import OverviewService
from src.command_console.command_console.projects.service import ProjectService
from src.command_console.command_console.system.service import SystemService
from src.command_console.command_console.tasks.service import TaskService
from src.command_console.command_console.attendance.model import (
    ClassInstance,
    Faculty,
    NewClassInstance,
    Subject,
    TimetableSlot,
)
from src.command_console.command_console.calendar.model import CalendarEvent
from src.command_console.command_console.common.audit import AuditEvent, FieldChange
from src.command_console.command_console.core.enums import (
    ApplicationUpdateType,
    AuditEventType,
    ClassStatus,
    EntityKind,
    HackathonStatus,
    TaskState,
)
from src.command_console.command_console.hackathons.model import Hackathon
from src.command_console.command_console.notes.model import Note, NoteLink
from src.command_console.command_console.projects.model import (
    BatchResult,
    PendingLink,
    PendingNote,
    Project,
    ProjectBatch,
    ProjectLink,
)
from src.command_console.command_console.system.model import ImportResult, LegacyBatch, SystemStats
from src.command_console.command_console.tasks.model import NewTask, Task

FIXED_NOW = datetime(2026, 3, 2, 9, 0, 0)


class Store:
    def __init__(self):
        self._ids = itertools.count(1)
        self.subjects: dict[str, Subject] = {}
        self.faculty: dict[str, Faculty] = {}
        self.slots: list[TimetableSlot] = []
        self.instances: dict[str, ClassInstance] = {}
        self.projects: dict[str, Project] = {}
        self.project_links: dict[str, ProjectLink] = {}
        self.hackathons: dict[str, Hackathon] = {}
        self.tasks: dict[str, Task] = {}
        self.notes: dict[str, Note] = {}
        self.note_links: dict[str, NoteLink] = {}
        self.applications: dict[str, Application] = {}
        self.application_updates: list[ApplicationUpdate] = []
        self.events: dict[str, CalendarEvent] = {}
        self.audit: list[tuple[str, AuditEvent]] = []

    def next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    def write_audit(self, table: str, entity_id: str, change: FieldChange) -> None:
        self.audit.append(
            (
                table,
                AuditEvent(
                    event_id=len(self.audit) + 1,
                    entity_id=entity_id,
                    event_type=change.event_type,
                    field=change.field,
                    old_value=change.old_value,
                    new_value=change.new_value,
                    created_at=FIXED_NOW,
                ),
            )
        )

    def write_created(self, table: str, entity_id: str, note: str) -> None:
        self.write_audit(table, entity_id, FieldChange(None, None, note, AuditEventType.CREATE))

    def audit_for(self, table: str, entity_id: str) -> list[AuditEvent]:
        return [e for t, e in self.audit if t == table and e.entity_id == entity_id]

    # shared insert helpers, mirroring the cursor-level ones
    def insert_task(self, new: NewTask, *, task_id: Optional[str] = None, audit_note: str = "Task created") -> str:
        task_id = task_id or self.next_id("task")
        self.tasks[task_id] = Task(
            task_id=task_id,
            title=new.title,
            state=new.state,
            priority=new.priority,
            description=new.description,
            due_date=new.due_date,
            project_id=new.project_id,
            hackathon_id=new.hackathon_id,
            created_at=FIXED_NOW,
            completed_at=FIXED_NOW if new.state is TaskState.COMPLETED else None,
        )
        self.write_created("task_events", task_id, audit_note)
        return task_id

    def insert_project(self, project: Project, *, project_id: Optional[str] = None, audit_note: str = "Project created") -> str:
        project_id = project_id or self.next_id("project")
        self.projects[project_id] = dataclasses.replace(project, project_id=project_id, created_at=FIXED_NOW)
        self.write_created("project_events", project_id, audit_note)
        return project_id

    def insert_note(self, *, title: Optional[str], content: str) -> str:
        note_id = self.next_id("note")
        self.notes[note_id] = Note(note_id=note_id, content=content, title=title, created_at=FIXED_NOW)
        return note_id

    def insert_note_link(self, note_id: str, kind: EntityKind, target_id: str) -> str:
        link_id = self.next_id("link")
        self.note_links[link_id] = NoteLink(link_id=link_id, note_id=note_id, target_type=kind, target_id=target_id)
        return link_id

    def delete_project(self, project_id: str) -> bool:
        if project_id not in self.projects:
            return False
        del self.projects[project_id]
        for task_id in [t.task_id for t in self.tasks.values() if t.project_id == project_id]:
            del self.tasks[task_id]
        for link_id in [k for k, v in self.note_links.items() if v.target_id == project_id]:
            del self.note_links[link_id]
        for hid, h in self.hackathons.items():
            if h.linked_project_id == project_id:
                self.hackathons[hid] = dataclasses.replace(h, linked_project_id=None)
        return True


class InMemoryAttendance:
    def __init__(self, store: Store):
        self.s = store

    def list_subjects(self) -> Sequence[Subject]:
        return sorted(self.s.subjects.values(), key=lambda x: x.code)

    def get_subject(self, subject_id: str) -> Optional[Subject]:
        return self.s.subjects.get(subject_id)

    def list_faculty(self) -> Sequence[Faculty]:
        return list(self.s.faculty.values())

    def list_timetable_slots(self, day_of_week: Optional[str] = None) -> Sequence[TimetableSlot]:
        return [x for x in self.s.slots if day_of_week is None or x.day_of_week == day_of_week]

    def get_instance(self, instance_id: str) -> Optional[ClassInstance]:
        return self.s.instances.get(instance_id)

    def find_instance(self, *, subject_id: str, class_date: date, start_time: str) -> Optional[ClassInstance]:
        for i in self.s.instances.values():
            if (i.subject_id, i.class_date, i.start_time) == (subject_id, class_date, start_time):
                return i
        return None

    def list_instances_for_date(self, class_date: date) -> Sequence[ClassInstance]:
        return sorted(
            (i for i in self.s.instances.values() if i.class_date == class_date),
            key=lambda i: i.start_time,
        )

    def list_instances(self, *, start_date: Optional[date] = None, end_date: Optional[date] = None):
        return [
            i
            for i in self.s.instances.values()
            if (start_date is None or i.class_date >= start_date) and (end_date is None or i.class_date <= end_date)
        ]

    def _insert(self, new: NewClassInstance) -> str:
        instance_id = self.s.next_id("ci")
        self.s.instances[instance_id] = ClassInstance(instance_id=instance_id, **dataclasses.asdict(new))
        return instance_id

    def insert_instances_ignore(self, instances: Sequence[NewClassInstance]) -> int:
        created = 0
        for new in instances:
            if self.find_instance(subject_id=new.subject_id, class_date=new.class_date, start_time=new.start_time):
                continue
            self._insert(new)
            created += 1
        return created

    def update_mark(self, *, instance_id, status, reason_code, reason_description, notes, actual_faculty_id, actual_subject_id):
        self.s.instances[instance_id] = dataclasses.replace(
            self.s.instances[instance_id],
            status=status,
            reason_code=reason_code,
            reason_description=reason_description,
            notes=notes,
            actual_faculty_id=actual_faculty_id,
            actual_subject_id=actual_subject_id,
        )
        return True

    def reschedule(self, *, instance_id: str, cancel_note: str, replacement: NewClassInstance) -> str:
        self.s.instances[instance_id] = dataclasses.replace(
            self.s.instances[instance_id], status=ClassStatus.CANCELLED, notes=cancel_note
        )
        return self._insert(replacement)

    def update_faculty_exchange(self, *, instance_id, actual_faculty_id, notes):
        self.s.instances[instance_id] = dataclasses.replace(
            self.s.instances[instance_id], actual_faculty_id=actual_faculty_id, notes=notes
        )
        return True


class InMemoryTasks:
    def __init__(self, store: Store):
        self.s = store

    def list_all(self) -> Sequence[Task]:
        return list(self.s.tasks.values())

    def list_for_project(self, project_id: str) -> Sequence[Task]:
        return [t for t in self.s.tasks.values() if t.project_id == project_id]

    def list_for_hackathon(self, hackathon_id: str) -> Sequence[Task]:
        return [t for t in self.s.tasks.values() if t.hackathon_id == hackathon_id]

    def get(self, task_id: str) -> Optional[Task]:
        return self.s.tasks.get(task_id)

    def create(self, new: NewTask) -> str:
        return self.s.insert_task(new)

    def update(self, task_id: str, changes: Mapping[str, Any], events: Sequence[FieldChange]) -> bool:
        self.s.tasks[task_id] = dataclasses.replace(self.s.tasks[task_id], **dict(changes))
        for change in events:
            self.s.write_audit("task_events", task_id, change)
        return True

    def delete(self, task_id: str) -> bool:
        return self.s.tasks.pop(task_id, None) is not None

    def history(self, task_id: str) -> Sequence[AuditEvent]:
        return self.s.audit_for("task_events", task_id)


class InMemoryProjects:
    def __init__(self, store: Store):
        self.s = store
        self.batches: list[ProjectBatch] = []

    def list_all(self) -> Sequence[Project]:
        return list(self.s.projects.values())

    def get(self, project_id: str) -> Optional[Project]:
        return self.s.projects.get(project_id)

    def create(self, project: Project) -> str:
        return self.s.insert_project(project)

    def _apply(self, project_id: str, changes: Mapping[str, Any], events: Sequence[FieldChange]) -> None:
        self.s.projects[project_id] = dataclasses.replace(
            self.s.projects[project_id], last_activity=FIXED_NOW, **dict(changes)
        )
        for change in events:
            self.s.write_audit("project_events", project_id, change)

    def update(self, project_id: str, changes: Mapping[str, Any], events: Sequence[FieldChange]) -> bool:
        self._apply(project_id, changes, events)
        return True

    def delete(self, project_id: str) -> bool:
        return self.s.delete_project(project_id)

    def list_links(self, project_id: str) -> Sequence[ProjectLink]:
        return [l for l in self.s.project_links.values() if l.project_id == project_id]

    def add_link(self, project_id: str, link: PendingLink) -> str:
        link_id = self.s.next_id("plink")
        self.s.project_links[link_id] = ProjectLink(
            link_id=link_id, project_id=project_id, title=link.title, url=link.url, description=link.description
        )
        return link_id

    def add_note(self, project_id: str, note: PendingNote) -> str:
        note_id = self.s.insert_note(title=note.title, content=note.content)
        self.s.insert_note_link(note_id, EntityKind.PROJECT, project_id)
        return note_id

    def save_batch(self, batch: ProjectBatch, events: Sequence[FieldChange]) -> BatchResult:
        self.batches.append(batch)
        if batch.changes:
            self._apply(batch.project_id, batch.changes, events)
        task_ids = tuple(
            self.s.insert_task(
                NewTask(
                    title=t.title,
                    priority=t.priority,
                    description=t.description,
                    due_date=t.due_date,
                    project_id=batch.project_id,
                )
            )
            for t in batch.tasks
        )
        link_ids = tuple(self.add_link(batch.project_id, l) for l in batch.links)
        note_ids = tuple(self.add_note(batch.project_id, n) for n in batch.notes)
        return BatchResult(
            project_id=batch.project_id,
            changed_fields=tuple(batch.changes),
            task_ids=task_ids,
            link_ids=link_ids,
            note_ids=note_ids,
        )

    def history(self, project_id: str) -> Sequence[AuditEvent]:
        return self.s.audit_for("project_events", project_id)


class InMemoryHackathons:
    def __init__(self, store: Store):
        self.s = store

    def list_all(self) -> Sequence[Hackathon]:
        return list(self.s.hackathons.values())

    def get(self, hackathon_id: str) -> Optional[Hackathon]:
        return self.s.hackathons.get(hackathon_id)

    def create(self, hackathon: Hackathon) -> str:
        hackathon_id = self.s.next_id("hack")
        self.s.hackathons[hackathon_id] = dataclasses.replace(hackathon, hackathon_id=hackathon_id)
        self.s.write_created("hackathon_events", hackathon_id, "Hackathon created")
        return hackathon_id

    def update(self, hackathon_id: str, changes: Mapping[str, Any], events: Sequence[FieldChange]) -> bool:
        self.s.hackathons[hackathon_id] = dataclasses.replace(self.s.hackathons[hackathon_id], **dict(changes))
        for change in events:
            self.s.write_audit("hackathon_events", hackathon_id, change)
        return True

    def register(self, hackathon_id: str, *, new_project: Project, default_tasks: Sequence[NewTask]) -> str:
        hackathon = self.s.hackathons[hackathon_id]
        project_id = hackathon.linked_project_id
        if project_id not in self.s.projects:
            project_id = self.s.insert_project(new_project, audit_note="Project created from hackathon registration")
        if hackathon.status is not HackathonStatus.REGISTERED:
            self.s.write_audit(
                "hackathon_events",
                hackathon_id,
                FieldChange("status", hackathon.status.value, "registered", AuditEventType.STATUS_CHANGE),
            )
        self.s.hackathons[hackathon_id] = dataclasses.replace(
            hackathon, linked_project_id=project_id, status=HackathonStatus.REGISTERED
        )
        if not any(t.project_id == project_id for t in self.s.tasks.values()):
            for task in default_tasks:
                self.s.insert_task(dataclasses.replace(task, project_id=project_id, hackathon_id=None))
        return project_id

    def delete(self, hackathon_id: str) -> bool:
        hackathon = self.s.hackathons.pop(hackathon_id, None)
        if hackathon is None:
            return False
        for pid, p in self.s.projects.items():
            if p.origin_hackathon_id == hackathon_id:
                self.s.projects[pid] = dataclasses.replace(p, origin_hackathon_id=None)
        if hackathon.linked_project_id:
            self.s.delete_project(hackathon.linked_project_id)
        for task_id in [t.task_id for t in self.s.tasks.values() if t.hackathon_id == hackathon_id]:
            del self.s.tasks[task_id]
        return True

    def link_project(self, hackathon_id: str, project_id: str) -> None:
        previous = self.s.hackathons[hackathon_id].linked_project_id
        for hid, h in self.s.hackathons.items():
            if h.linked_project_id == project_id and hid != hackathon_id:
                self.s.hackathons[hid] = dataclasses.replace(h, linked_project_id=None)
        if previous and previous != project_id and previous in self.s.projects:
            self.s.projects[previous] = dataclasses.replace(self.s.projects[previous], origin_hackathon_id=None)
        self.s.hackathons[hackathon_id] = dataclasses.replace(self.s.hackathons[hackathon_id], linked_project_id=project_id)
        self.s.projects[project_id] = dataclasses.replace(self.s.projects[project_id], origin_hackathon_id=hackathon_id)

    def unlink_project(self, hackathon_id: str) -> None:
        previous = self.s.hackathons[hackathon_id].linked_project_id
        self.s.hackathons[hackathon_id] = dataclasses.replace(self.s.hackathons[hackathon_id], linked_project_id=None)
        if previous in self.s.projects:
            self.s.projects[previous] = dataclasses.replace(self.s.projects[previous], origin_hackathon_id=None)

    def history(self, hackathon_id: str) -> Sequence[AuditEvent]:
        return self.s.audit_for("hackathon_events", hackathon_id)


class InMemoryNotes:
    def __init__(self, store: Store):
        self.s = store

    def list_all(self) -> Sequence[Note]:
        return list(self.s.notes.values())

    def get(self, note_id: str) -> Optional[Note]:
        return self.s.notes.get(note_id)

    def create(self, *, title, content, link=None) -> str:
        note_id = self.s.insert_note(title=title, content=content)
        if link:
            self.s.insert_note_link(note_id, link[0], link[1])
        return note_id

    def update(self, note_id: str, *, title, content) -> bool:
        self.s.notes[note_id] = dataclasses.replace(self.s.notes[note_id], title=title, content=content)
        return True

    def delete(self, note_id: str) -> bool:
        for link_id in [k for k, v in self.s.note_links.items() if v.note_id == note_id]:
            del self.s.note_links[link_id]
        return self.s.notes.pop(note_id, None) is not None

    def list_links(self, note_id: Optional[str] = None) -> Sequence[NoteLink]:
        return [l for l in self.s.note_links.values() if note_id is None or l.note_id == note_id]

    def list_for_target(self, target_type: EntityKind, target_id: str) -> Sequence[Note]:
        ids = {l.note_id for l in self.s.note_links.values() if (l.target_type, l.target_id) == (target_type, target_id)}
        return [n for n in self.s.notes.values() if n.note_id in ids]

    def find_link(self, note_id, target_type, target_id) -> Optional[NoteLink]:
        for link in self.s.note_links.values():
            if (link.note_id, link.target_type, link.target_id) == (note_id, target_type, target_id):
                return link
        return None

    def get_link(self, link_id: str) -> Optional[NoteLink]:
        return self.s.note_links.get(link_id)

    def create_link(self, note_id, target_type, target_id) -> str:
        return self.s.insert_note_link(note_id, target_type, target_id)

    def delete_link(self, link_id: str) -> bool:
        return self.s.note_links.pop(link_id, None) is not None


class InMemoryCalendar:
    def __init__(self, store: Store):
        self.s = store

    def list_events(self, *, start: Optional[date] = None, end: Optional[date] = None):
        return [
            e
            for e in self.s.events.values()
            if (start is None or e.event_date >= start) and (end is None or e.event_date <= end)
        ]

    def get_event(self, event_id: str) -> Optional[CalendarEvent]:
        return self.s.events.get(event_id)

    def create_event(self, event: CalendarEvent) -> str:
        event_id = self.s.next_id("event")
        self.s.events[event_id] = dataclasses.replace(event, event_id=event_id)
        return event_id

    def delete_event(self, event_id: str) -> bool:
        return self.s.events.pop(event_id, None) is not None

    def list_for_application(self, application_id: str):
        return [e for e in self.s.events.values() if e.application_id == application_id]


class InMemoryApplications:
    def __init__(self, store: Store):
        self.s = store

    def _log(self, application_id: str, update_type: ApplicationUpdateType, content: str) -> int:
        update_id = len(self.s.application_updates) + 1
        self.s.application_updates.append(
            ApplicationUpdate(
                update_id=update_id,
                application_id=application_id,
                update_type=update_type,
                content=content,
                created_at=FIXED_NOW,
            )
        )
        return update_id

    def list_all(self) -> Sequence[Application]:
        return list(self.s.applications.values())

    def get(self, application_id: str) -> Optional[Application]:
        return self.s.applications.get(application_id)

    def create(self, application: Application, *, log: str) -> str:
        application_id = self.s.next_id("app")
        self.s.applications[application_id] = dataclasses.replace(application, application_id=application_id)
        self._log(application_id, ApplicationUpdateType.STATUS_CHANGE, log)
        return application_id

    def update(self, application_id: str, changes: Mapping[str, Any], *, log: str) -> bool:
        self.s.applications[application_id] = dataclasses.replace(self.s.applications[application_id], **dict(changes))
        self._log(application_id, ApplicationUpdateType.NOTE, log)
        return True

    def set_status(self, application_id: str, status, *, applied_date, log: str) -> None:
        self.s.applications[application_id] = dataclasses.replace(
            self.s.applications[application_id], status=status, applied_date=applied_date
        )
        self._log(application_id, ApplicationUpdateType.STATUS_CHANGE, log)

    def add_update(self, application_id: str, update_type, content: str) -> int:
        return self._log(application_id, update_type, content)

    def list_updates(self, application_id: str) -> Sequence[ApplicationUpdate]:
        rows = [u for u in self.s.application_updates if u.application_id == application_id]
        return sorted(rows, key=lambda u: u.update_id, reverse=True)

    def latest_updates(self) -> Mapping[str, ApplicationUpdate]:
        latest: dict[str, ApplicationUpdate] = {}
        for update in self.s.application_updates:
            latest[update.application_id] = update
        return latest

    def delete(self, application_id: str) -> bool:
        for event_id in [k for k, v in self.s.events.items() if v.application_id == application_id]:
            del self.s.events[event_id]
        for link_id in [k for k, v in self.s.note_links.items() if v.target_id == application_id]:
            del self.s.note_links[link_id]
        return self.s.applications.pop(application_id, None) is not None

    def add_interview_event(self, application_id: str, event: CalendarEvent, *, log: str) -> str:
        event_id = self.s.next_id("event")
        self.s.events[event_id] = dataclasses.replace(event, event_id=event_id)
        self._log(application_id, ApplicationUpdateType.NOTE, log)
        return event_id


class InMemorySystem:
    def __init__(self, store: Store):
        self.s = store
        self.batches: list[LegacyBatch] = []
        self.stats_since: Optional[datetime] = None

    def get_stats(self, *, since: datetime) -> SystemStats:
        self.stats_since = since
        return SystemStats(
            hackathons=len(self.s.hackathons),
            projects=len(self.s.projects),
            tasks=len(self.s.tasks),
            notes=len(self.s.notes),
            calendar_events=len(self.s.events),
            note_links=len(self.s.note_links),
            applications=len(self.s.applications),
            tasks_by_state=dict(Counter(t.state.value for t in self.s.tasks.values())),
        )

    def export_tables(self):
        return {
            "projects": [dataclasses.asdict(p) for p in self.s.projects.values()],
            "hackathons": [dataclasses.asdict(h) for h in self.s.hackathons.values()],
            "tasks": [dataclasses.asdict(t) for t in self.s.tasks.values()],
        }

    def import_legacy(self, batch: LegacyBatch) -> ImportResult:
        self.batches.append(batch)
        projects = hackathons = tasks = existing = 0
        orphans: list[str] = []
        for project in batch.projects:
            if project.project_id in self.s.projects:
                existing += 1
                continue
            self.s.insert_project(project, project_id=project.project_id, audit_note="MIGRATION_IMPORT")
            projects += 1
        for hackathon in batch.hackathons:
            if hackathon.hackathon_id in self.s.hackathons:
                existing += 1
                continue
            self.s.hackathons[hackathon.hackathon_id] = hackathon
            self.s.write_created("hackathon_events", hackathon.hackathon_id, "MIGRATION_IMPORT")
            hackathons += 1
        for legacy in batch.tasks:
            if legacy.task_id in self.s.tasks:
                existing += 1
                continue
            new = legacy.task
            if (new.project_id and new.project_id not in self.s.projects) or (
                new.hackathon_id and new.hackathon_id not in self.s.hackathons
            ):
                orphans.append(legacy.task_id)
                continue
            self.s.insert_task(new, task_id=legacy.task_id, audit_note="MIGRATION_IMPORT")
            tasks += 1
        return ImportResult(
            projects_imported=projects,
            hackathons_imported=hackathons,
            tasks_imported=tasks,
            skipped_existing=existing,
            skipped_orphans=len(orphans),
            orphan_task_ids=tuple(orphans),
        )


def build_container(store: Store, *, today: date = FIXED_NOW.date(), dump=None) -> Container:
    """Every service wired to the in-memory store, clocks frozen at ``today``."""
    attendance_repo = InMemoryAttendance(store)
    calendar_repo = InMemoryCalendar(store)
    hackathons_repo = InMemoryHackathons(store)
    projects_repo = InMemoryProjects(store)
    tasks_repo = InMemoryTasks(store)
    notes_repo = InMemoryNotes(store)
    applications_repo = InMemoryApplications(store)
    now = datetime.combine(today, FIXED_NOW.time())

    attendance_service = AttendanceService(attendance_repo)
    calendar_service = CalendarService(
        calendar_repo, hackathons_repo, projects_repo, tasks_repo, applications_repo, clock=lambda: today
    )
    return Container(
        conn=None,
        attendance_service=attendance_service,
        calendar_service=calendar_service,
        hackathon_service=HackathonService(hackathons_repo, projects_repo, tasks_repo, clock=lambda: today),
        project_service=ProjectService(projects_repo, tasks_repo, clock=lambda: today),
        task_service=TaskService(tasks_repo, projects_repo, hackathons_repo, clock=lambda: now),
        note_service=NoteService(notes_repo, projects_repo, hackathons_repo, applications_repo),
        application_service=ApplicationService(applications_repo, notes_repo, calendar_repo, clock=lambda: today),
        system_service=SystemService(InMemorySystem(store), dump=dump, clock=lambda: now),
        overview_service=OverviewService(attendance_service, calendar_service, tasks_repo, clock=lambda: today),
    )
