from __future__ import annotations

from datetime import date

import pytest

from src.command_console.command_console.core.enums import AuditEventType, TaskPriority, TaskState
from src.command_console.command_console.core.exceptions import InvariantViolation, NotFoundError, ValidationError
from src.command_console.command_console.hackathons.model import Hackathon
from src.command_console.command_console.projects.model import Project
from src.command_console.command_console.tasks.service import TaskService
from tests.fakes import FIXED_NOW, InMemoryHackathons, InMemoryProjects, InMemoryTasks, Store


def _service(store: Store) -> TaskService:
    return TaskService(InMemoryTasks(store), InMemoryProjects(store), InMemoryHackathons(store), clock=lambda: FIXED_NOW)


def _store() -> Store:
    store = Store()
    store.projects["p1"] = Project("p1", "Thesis")
    store.hackathons["h1"] = Hackathon("h1", "Build Week")
    return store


def test_task_with_both_parents_is_rejected_before_any_write():
    store = _store()
    with pytest.raises(InvariantViolation):
        _service(store).create("Ambiguous", project_id="p1", hackathon_id="h1")
    assert store.tasks == {}
    assert store.audit == []


def test_task_with_unknown_parent():
    store = _store()
    with pytest.raises(NotFoundError):
        _service(store).create("Lost", project_id="ghost")
    with pytest.raises(NotFoundError):
        _service(store).create("Lost", hackathon_id="ghost")


def test_create_defaults_and_audit():
    store = _store()
    task = _service(store).create("Write intro", project_id="p1", due_date="2026-03-05")

    assert task.state is TaskState.PENDING
    assert task.priority is TaskPriority.MEDIUM
    assert task.due_date == date(2026, 3, 5)
    assert task.completed_at is None
    assert [e.event_type for e in _service(store).history(task.task_id)] == [AuditEventType.CREATE]


def test_blank_title_is_rejected():
    with pytest.raises(ValidationError):
        _service(_store()).create("   ")


def test_update_without_change_writes_nothing():
    store = _store()
    service = _service(store)
    task = service.create("Write intro", priority="high")

    again = service.update(task.task_id, title="Write intro", priority="high")

    assert again == task
    assert len(service.history(task.task_id)) == 1


def test_completing_sets_and_reopening_clears_completed_at():
    store = _store()
    service = _service(store)
    task = service.create("Write intro")

    done = service.update_state(task.task_id, "completed")
    assert done.completed_at == FIXED_NOW

    reopened = service.update_state(task.task_id, "in_progress")
    assert reopened.completed_at is None

    history = service.history(task.task_id)
    status_changes = [(e.old_value, e.new_value) for e in history if e.event_type is AuditEventType.STATUS_CHANGE]
    assert status_changes == [("pending", "completed"), ("completed", "in_progress")]


def test_field_update_is_audited_per_field():
    store = _store()
    service = _service(store)
    task = service.create("Write intro")

    service.update(task.task_id, title="Write introduction", due_date="2026-03-09", description="")

    updates = [e for e in service.history(task.task_id) if e.event_type is AuditEventType.UPDATE]
    assert {(e.field, e.old_value, e.new_value) for e in updates} == {
        ("title", "Write intro", "Write introduction"),
        ("due_date", None, "2026-03-09"),
    }


def test_unknown_field_is_rejected():
    store = _store()
    service = _service(store)
    task = service.create("Write intro")
    with pytest.raises(ValidationError):
        service.update(task.task_id, project_id="p1")


def test_list_orders_by_priority_then_due_date():
    store = _store()
    service = _service(store)
    service.create("Later", priority="low", due_date="2026-03-01")
    service.create("Undated", priority="high")
    service.create("Soon", priority="high", due_date="2026-03-03")

    assert [t.title for t in service.list_all()] == ["Soon", "Undated", "Later"]


def test_delete():
    store = _store()
    service = _service(store)
    task = service.create("Write intro")
    service.delete(task.task_id)
    with pytest.raises(NotFoundError):
        service.get(task.task_id)
