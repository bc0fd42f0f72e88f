from __future__ import annotations

from datetime import date

import pytest

from src.command_console.command_console.core.enums import (
    AuditEventType,
    DeadlineRisk,
    EntityKind,
    ProjectStage,
    TaskState,
)
from src.command_console.command_console.core.exceptions import NotFoundError, ValidationError
from src.command_console.command_console.projects.model import Project
from src.command_console.command_console.projects.service import ProjectService, project_progress, project_risk
from src.command_console.command_console.tasks.model import Task
from tests.fakes import InMemoryProjects, InMemoryTasks, Store

TODAY = date(2026, 3, 2)


def _service(store: Store, projects: InMemoryProjects | None = None) -> ProjectService:
    return ProjectService(projects or InMemoryProjects(store), InMemoryTasks(store), clock=lambda: TODAY)


def test_progress_rounds_half_up():
    tasks = [Task("a", "a", state=TaskState.COMPLETED), Task("b", "b"), Task("c", "c")]
    assert project_progress(tasks) == 33
    assert project_progress(tasks[:2]) == 50
    assert project_progress([]) == 0


def test_risk():
    late = Project("p", "Late", deadline=date(2026, 3, 1))
    assert project_risk(late, [Task("a", "a")], TODAY) is DeadlineRisk.CRITICAL
    assert project_risk(late, [Task("a", "a", state=TaskState.COMPLETED)], TODAY) is DeadlineRisk.STABLE

    on_time = Project("p", "On time", deadline=date(2026, 3, 20))
    overdue_task = Task("a", "a", due_date=date(2026, 3, 1))
    assert project_risk(on_time, [overdue_task], TODAY) is DeadlineRisk.AT_RISK

    done = Project("p", "Done", stage=ProjectStage.COMPLETED, deadline=date(2026, 3, 1))
    assert project_risk(done, [Task("a", "a")], TODAY) is DeadlineRisk.STABLE


def test_create_and_get_view():
    store = Store()
    service = _service(store)

    view = service.create("Thesis", domain="college", deadline="2026-04-01")

    assert view.project.domain.value == "college"
    assert view.project.stage is ProjectStage.PLANNING
    assert view.progress == 0
    assert view.risk is DeadlineRisk.STABLE


def test_update_diff_only_records_changed_fields():
    store = Store()
    service = _service(store)
    project_id = service.create("Thesis").project.project_id

    service.update(project_id, name="Thesis", stage="building")

    events = [e for e in service.history(project_id) if e.event_type is not AuditEventType.CREATE]
    assert [(e.field, e.event_type) for e in events] == [("stage", AuditEventType.STATUS_CHANGE)]


def test_batch_save_applies_everything_at_once():
    store = Store()
    projects = InMemoryProjects(store)
    service = _service(store, projects)
    project_id = service.create("Thesis").project.project_id

    result = service.save_batch(
        project_id,
        changes={"name": "Thesis v2", "description": None},
        tasks=[{"title": "Collect data", "priority": "high"}, {"title": "Write"}],
        links=[{"title": "Repo", "url": "https://example.org/repo"}],
        notes=[{"content": "Advisor prefers LaTeX"}],
    )

    assert result.changed_fields == ("name",)
    assert len(result.task_ids) == 2
    assert len(result.link_ids) == 1
    assert len(result.note_ids) == 1
    assert len(projects.batches) == 1

    view = service.get(project_id)
    assert view.project.name == "Thesis v2"
    assert view.task_total == 2
    assert [l.title for l in view.links] == ["Repo"]
    assert store.note_links[next(iter(store.note_links))].target_type is EntityKind.PROJECT


def test_batch_with_invalid_item_writes_nothing():
    store = Store()
    projects = InMemoryProjects(store)
    service = _service(store, projects)
    project_id = service.create("Thesis").project.project_id

    with pytest.raises(ValidationError):
        service.save_batch(
            project_id,
            changes={"stage": "building"},
            tasks=[{"title": "Collect data"}],
            notes=[{"content": "   "}],
        )

    assert projects.batches == []
    assert store.tasks == {}
    assert service.get(project_id).project.stage is ProjectStage.PLANNING


def test_batch_rejects_unknown_fields():
    store = Store()
    service = _service(store)
    project_id = service.create("Thesis").project.project_id
    with pytest.raises(ValidationError):
        service.save_batch(project_id, changes={"origin_hackathon_id": "h1"})


def test_batch_for_missing_project():
    with pytest.raises(NotFoundError):
        _service(Store()).save_batch("ghost", tasks=[{"title": "x"}])


def test_delete_cascades_to_tasks():
    store = Store()
    service = _service(store)
    project_id = service.create("Thesis").project.project_id
    service.save_batch(project_id, tasks=[{"title": "Collect data"}])

    service.delete(project_id)

    assert store.tasks == {}
    with pytest.raises(NotFoundError):
        service.get(project_id)
