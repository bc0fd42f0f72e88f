from __future__ import annotations

from datetime import date

import pytest

from src.command_console.command_console.core.enums import (
    AuditEventType,
    DeadlineRisk,
    HackathonStatus,
    ProjectDomain,
    TaskPriority,
)
from src.command_console.command_console.core.exceptions import NotFoundError, ValidationError
from src.command_console.command_console.hackathons.model import Hackathon
from src.command_console.command_console.hackathons.service import HackathonService, hackathon_risk
from src.command_console.command_console.projects.model import Project
from tests.fakes import InMemoryHackathons, InMemoryProjects, InMemoryTasks, Store

TODAY = date(2026, 3, 2)


def _service(store: Store) -> HackathonService:
    return HackathonService(InMemoryHackathons(store), InMemoryProjects(store), InMemoryTasks(store), clock=lambda: TODAY)


@pytest.mark.parametrize(
    "deadline,expected",
    [
        (date(2026, 3, 1), DeadlineRisk.MISSED),
        (date(2026, 3, 2), DeadlineRisk.CRITICAL),
        (date(2026, 3, 3), DeadlineRisk.CRITICAL),
        (date(2026, 3, 4), DeadlineRisk.AT_RISK),
        (date(2026, 3, 8), DeadlineRisk.AT_RISK),
        (date(2026, 3, 9), DeadlineRisk.STABLE),
        (None, DeadlineRisk.STABLE),
    ],
)
def test_risk_windows(deadline, expected):
    hackathon = Hackathon("h", "Jam", status=HackathonStatus.REGISTERED, submission_deadline=deadline)
    assert hackathon_risk(hackathon, TODAY) is expected


def test_submitted_hackathon_is_stable():
    hackathon = Hackathon("h", "Jam", status=HackathonStatus.SUBMITTED, submission_deadline=date(2026, 3, 1))
    assert hackathon_risk(hackathon, TODAY) is DeadlineRisk.STABLE


def test_create_starts_upcoming():
    store = Store()
    view = _service(store).create("Build Week", mode="hybrid", team_size="3", submission_deadline="2026-03-20")

    assert view.hackathon.status is HackathonStatus.UPCOMING
    assert view.hackathon.team_size == 3
    assert view.days_to_submission == 18
    assert view.suggested_status is None


def test_create_rejects_inverted_event_dates():
    with pytest.raises(ValidationError):
        _service(Store()).create("Build Week", event_start_date="2026-03-10", event_end_date="2026-03-09")


def test_register_creates_project_and_default_tasks_once():
    store = Store()
    service = _service(store)
    hackathon_id = service.create("Build Week", submission_deadline="2026-03-20").hackathon.hackathon_id

    view = service.register(hackathon_id)

    assert view.hackathon.status is HackathonStatus.REGISTERED
    project = store.projects[view.hackathon.linked_project_id]
    assert project.name == "Build Week Project"
    assert project.domain is ProjectDomain.HACKATHON
    assert project.deadline == date(2026, 3, 20)
    assert project.origin_hackathon_id == hackathon_id

    tasks = [t for t in store.tasks.values() if t.project_id == project.project_id]
    assert [t.title for t in tasks] == ["Form Team", "Brainstorm Ideas", "Setup MVP"]
    assert [t.priority for t in tasks] == [TaskPriority.HIGH, TaskPriority.HIGH, TaskPriority.MEDIUM]
    assert all(t.hackathon_id is None for t in tasks)
    assert view.task_total == 3

    again = service.register(hackathon_id)
    assert again.hackathon.linked_project_id == project.project_id
    assert len(store.projects) == 1
    assert len(store.tasks) == 3


def test_register_uses_project_title():
    store = Store()
    service = _service(store)
    hackathon_id = service.create("Build Week", project_title="Plant Doctor").hackathon.hackathon_id

    view = service.register(hackathon_id)

    assert view.linked_project_name == "Plant Doctor"


def test_register_status_change_is_audited():
    store = Store()
    service = _service(store)
    hackathon_id = service.create("Build Week").hackathon.hackathon_id
    service.register(hackathon_id)

    changes = [(e.old_value, e.new_value) for e in service.history(hackathon_id) if e.event_type is AuditEventType.STATUS_CHANGE]
    assert changes == [("upcoming", "registered")]


def test_missed_is_suggested_not_applied():
    store = Store()
    service = _service(store)
    hackathon_id = service.create("Build Week", submission_deadline="2026-02-27").hackathon.hackathon_id

    view = service.get_with_derived(hackathon_id)

    assert view.suggested_status is HackathonStatus.MISSED
    assert view.risk is DeadlineRisk.MISSED
    assert store.hackathons[hackathon_id].status is HackathonStatus.UPCOMING

    assert service.mark_missed(hackathon_id).hackathon.status is HackathonStatus.MISSED
    assert service.get_with_derived(hackathon_id).suggested_status is None


def test_update_clears_date_with_none():
    store = Store()
    service = _service(store)
    hackathon_id = service.create("Build Week", submission_deadline="2026-03-20").hackathon.hackathon_id

    view = service.update(hackathon_id, submission_deadline=None)

    assert view.hackathon.submission_deadline is None
    updates = [e for e in service.history(hackathon_id) if e.event_type is AuditEventType.UPDATE]
    assert [(e.field, e.old_value, e.new_value) for e in updates] == [("submission_deadline", "2026-03-20", None)]


def test_update_status_rejects_unknown_value():
    store = Store()
    service = _service(store)
    hackathon_id = service.create("Build Week").hackathon.hackathon_id
    with pytest.raises(ValidationError):
        service.update_status(hackathon_id, "won")


def test_link_and_unlink_project():
    store = Store()
    store.projects["p1"] = Project("p1", "Side project")
    service = _service(store)
    hackathon_id = service.create("Build Week").hackathon.hackathon_id

    linked = service.link_project(hackathon_id, "p1")
    assert linked.hackathon.linked_project_id == "p1"
    assert store.projects["p1"].origin_hackathon_id == hackathon_id

    unlinked = service.unlink_project(hackathon_id)
    assert unlinked.hackathon.linked_project_id is None
    assert store.projects["p1"].origin_hackathon_id is None

    with pytest.raises(NotFoundError):
        service.link_project(hackathon_id, "ghost")


def test_delete_removes_linked_project_and_tasks():
    store = Store()
    service = _service(store)
    hackathon_id = service.create("Build Week").hackathon.hackathon_id
    service.register(hackathon_id)

    service.delete(hackathon_id)

    assert store.hackathons == {}
    assert store.projects == {}
    assert store.tasks == {}
    with pytest.raises(NotFoundError):
        service.get_with_derived(hackathon_id)
