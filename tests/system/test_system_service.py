from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from src.command_console.command_console.core.enums import AuditEventType, TaskState
from src.command_console.command_console.core.exceptions import StorageError, ValidationError
from src.command_console.command_console.projects.model import Project
from src.command_console.command_console.system.service import SystemService
from src.command_console.command_console.tasks.model import NewTask
from tests.fakes import FIXED_NOW, InMemorySystem, Store


def _service(store: Store, **kwargs) -> tuple[SystemService, InMemorySystem]:
    system = InMemorySystem(store)
    return SystemService(system, clock=lambda: FIXED_NOW, **kwargs), system


LEGACY = {
    "projects": [
        {"id": "p-old", "name": "Already here"},
        {"id": "p-new", "name": "Portfolio", "stage": "building", "createdAt": "2025-11-02T10:00:00Z"},
        {"id": "p-bad"},
    ],
    "hackathons": [
        {"id": "h-1", "name": "Winter Jam", "status": "registered", "submissionDeadline": "2025-12-20"},
    ],
    "tasks": [
        {"id": "t-1", "title": "Deploy", "status": "done", "contextType": "project", "contextId": "p-new"},
        {"id": "t-2", "title": "Slides", "contextType": "hackathon", "contextId": "h-1"},
        {"id": "t-3", "title": "Lost", "contextType": "project", "contextId": "p-gone"},
        {"id": "t-4", "title": "Both", "projectId": "p-new", "hackathonId": "h-1"},
        {"id": "t-5", "title": ""},
        "not an object",
    ],
}


def test_legacy_import_counts():
    store = Store()
    store.projects["p-old"] = Project("p-old", "Already here")
    service, _ = _service(store)

    result = service.import_legacy_data(LEGACY)

    assert result.projects_imported == 1
    assert result.hackathons_imported == 1
    assert result.tasks_imported == 2
    assert result.skipped_existing == 1
    assert result.skipped_orphans == 1
    assert result.orphan_task_ids == ("t-3",)
    # p-bad, t-4 (both parents), t-5 (no title), the string entry
    assert result.skipped_invalid == 4


def test_legacy_import_maps_fields():
    store = Store()
    service, system = _service(store)

    service.import_legacy_data(LEGACY)

    assert store.tasks["t-1"].state is TaskState.COMPLETED
    assert store.tasks["t-1"].project_id == "p-new"
    assert store.tasks["t-2"].hackathon_id == "h-1"
    assert store.tasks["t-2"].project_id is None
    project = system.batches[0].projects[1]
    assert project.created_at == datetime(2025, 11, 2, 10, 0, 0)
    created = store.audit_for("task_events", "t-1")
    assert [(e.event_type, e.new_value) for e in created] == [(AuditEventType.CREATE, "MIGRATION_IMPORT")]


def test_legacy_import_is_repeatable():
    store = Store()
    service, _ = _service(store)
    service.import_legacy_data(LEGACY)

    second = service.import_legacy_data(LEGACY)

    assert second.projects_imported == second.hackathons_imported == second.tasks_imported == 0
    assert second.skipped_existing == 5


def test_legacy_import_rejects_non_list_section():
    service, system = _service(Store())
    with pytest.raises(ValidationError):
        service.import_legacy_data({"projects": {"id": "p"}})
    assert system.batches == []


def test_export_envelope():
    store = Store()
    store.projects["p1"] = Project("p1", "Thesis")
    service, _ = _service(store)

    exported = service.export_all_data()

    assert exported["version"] == "1.0"
    assert exported["exported_at"] == "2026-03-02T09:00:00"
    assert [p["project_id"] for p in exported["data"]["projects"]] == ["p1"]


def test_backup_requires_dump():
    service, _ = _service(Store())
    with pytest.raises(StorageError):
        service.backup()

    service, _ = _service(Store(), dump=lambda: b"-- dump\n")
    assert service.backup() == b"-- dump\n"


def test_stats_count_every_table_and_look_back_one_week():
    store = Store()
    store.insert_task(NewTask(title="Done", state=TaskState.COMPLETED))
    store.insert_task(NewTask(title="Open"))
    store.insert_note(title=None, content="scratch")
    service, system = _service(store)

    stats = service.get_stats()

    assert (stats.tasks, stats.notes, stats.projects) == (2, 1, 0)
    assert stats.tasks_by_state == {"completed": 1, "pending": 1}
    assert system.stats_since == FIXED_NOW - timedelta(days=7)
