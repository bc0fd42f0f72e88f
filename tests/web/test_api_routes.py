from __future__ import annotations

from datetime import date

import pytest
from flask import Flask

from src.command_console.command_console.applications.controller import register as register_applications
from src.command_console.command_console.calendar.controller import register as register_calendar
from src.command_console.command_console.common.errors import register_error_handlers, status_for
from src.command_console.command_console.core.exceptions import (
    DomainError,
    InvariantViolation,
    NotFoundError,
    StorageError,
    ValidationError,
)
from src.command_console.command_console.hackathons.controller import register as register_hackathons
from src.command_console.command_console.overview.controller import register as register_overview
from src.command_console.command_console.system.controller import register as register_system
from src.command_console.command_console.tasks.controller import register as register_tasks
from tests.fakes import Store, build_container

TODAY = date(2026, 3, 2)


@pytest.fixture()
def client():
    container = build_container(Store(), today=TODAY)
    app = Flask(__name__)
    app.config["TESTING"] = True
    register_error_handlers(app)
    for register in (
        register_overview,
        register_calendar,
        register_hackathons,
        register_tasks,
        register_applications,
        register_system,
    ):
        register(app, container)
    return app.test_client()


def test_status_mapping():
    assert status_for(ValidationError("x")) == 400
    assert status_for(NotFoundError("x")) == 404
    assert status_for(InvariantViolation("x")) == 409
    assert status_for(StorageError("x")) == 500
    assert status_for(DomainError("x")) == 400


def test_validation_error_is_400(client):
    res = client.post("/api/tasks", json={"title": ""})
    assert res.status_code == 400
    assert res.get_json()["type"] == "ValidationError"


def test_missing_entity_is_404(client):
    res = client.get("/api/tasks/ghost")
    assert res.status_code == 404
    assert res.get_json()["error"] == "Task not found"


def test_invariant_violation_is_409(client):
    created = client.post("/api/hackathons", json={"name": "Build Week"}).get_json()
    hackathon_id = created["hackathon"]["hackathon_id"]
    project_id = client.post(f"/api/hackathons/{hackathon_id}/register").get_json()["hackathon"]["linked_project_id"]

    res = client.post("/api/tasks", json={"title": "x", "project_id": project_id, "hackathon_id": hackathon_id})
    assert res.status_code == 409


def test_derived_calendar_item_cannot_be_deleted(client):
    res = client.delete("/api/calendar/events/project:p1:deadline")
    assert res.status_code == 409


def test_unknown_route_is_json_404(client):
    res = client.get("/api/nowhere")
    assert res.status_code == 404
    assert res.get_json() == {"error": "Resource not found"}


def test_backup_without_dump_is_500(client):
    res = client.get("/api/system/backup")
    assert res.status_code == 500
    assert res.get_json()["type"] == "StorageError"


def test_task_roundtrip_serializes_enums_and_dates(client):
    res = client.post("/api/tasks", json={"title": "Read paper", "priority": "high", "due_date": "2026-03-04"})
    assert res.status_code == 201
    body = res.get_json()
    assert body["priority"] == "high"
    assert body["state"] == "pending"
    assert body["due_date"] == "2026-03-04"


def test_overview(client):
    client.post("/api/tasks", json={"title": "Overdue", "due_date": "2026-03-01"})

    res = client.get("/api/overview?date=2026-03-02")

    assert res.status_code == 200
    body = res.get_json()
    assert body["date"] == "2026-03-02"
    assert [t["title"] for t in body["tasks_due"]] == ["Overdue"]
    assert body["nearest_deadline"] is None


def test_application_interview_shows_in_calendar(client):
    created = client.post(
        "/api/applications", json={"company_name": "Acme", "role": "SWE Intern", "app_type": "INTERNSHIP"}
    ).get_json()
    application_id = created["application"]["application_id"]

    res = client.post(f"/api/applications/{application_id}/interviews", json={"date": "2026-03-05"})
    assert res.status_code == 201

    upcoming = client.get("/api/calendar/upcoming").get_json()
    assert [i["title"] for i in upcoming] == ["Interview: Acme - SWE Intern"]
    assert upcoming[0]["source_ref"] == {"kind": "application", "source_id": application_id}


def test_import_endpoint(client):
    res = client.post("/api/system/import", json={"projects": [{"id": "p-1", "name": "Legacy"}]})
    assert res.status_code == 200
    assert res.get_json()["projects_imported"] == 1
