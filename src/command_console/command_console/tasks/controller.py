from __future__ import annotations

from flask import Flask

from ..common.web import json_body, ok
from ..container import Container

_CREATE_FIELDS = ("description", "priority", "state", "due_date", "project_id", "hackathon_id")


def register(app: Flask, container: Container) -> None:
    service = container.task_service

    @app.route("/api/tasks", methods=["GET"], endpoint="tasks_list")
    def tasks_list():
        return ok(service.list_all())

    @app.route("/api/tasks", methods=["POST"], endpoint="tasks_create")
    def tasks_create():
        data = json_body()
        fields = {k: data[k] for k in _CREATE_FIELDS if k in data}
        return ok(service.create(data.get("title"), **fields), 201)

    @app.route("/api/tasks/<task_id>", methods=["GET"], endpoint="tasks_get")
    def tasks_get(task_id: str):
        return ok(service.get(task_id))

    @app.route("/api/tasks/<task_id>", methods=["PATCH"], endpoint="tasks_update")
    def tasks_update(task_id: str):
        return ok(service.update(task_id, **json_body()))

    @app.route("/api/tasks/<task_id>/state", methods=["POST"], endpoint="tasks_update_state")
    def tasks_update_state(task_id: str):
        return ok(service.update_state(task_id, json_body().get("state")))

    @app.route("/api/tasks/<task_id>", methods=["DELETE"], endpoint="tasks_delete")
    def tasks_delete(task_id: str):
        service.delete(task_id)
        return ok({"deleted": task_id})

    @app.route("/api/tasks/<task_id>/history", methods=["GET"], endpoint="tasks_history")
    def tasks_history(task_id: str):
        return ok(service.history(task_id))
