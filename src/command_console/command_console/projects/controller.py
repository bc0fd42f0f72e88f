from __future__ import annotations

from flask import Flask

from ..common.web import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.project_service

    @app.route("/api/projects", methods=["GET"], endpoint="projects_list")
    def projects_list():
        return ok(service.list_all())

    @app.route("/api/projects", methods=["POST"], endpoint="projects_create")
    def projects_create():
        data = json_body()
        view = service.create(
            data.get("name"),
            description=data.get("description"),
            domain=data.get("domain"),
            stage=data.get("stage"),
            deadline=data.get("deadline"),
        )
        return ok(view, 201)

    @app.route("/api/projects/<project_id>", methods=["GET"], endpoint="projects_get")
    def projects_get(project_id: str):
        return ok(service.get(project_id))

    @app.route("/api/projects/<project_id>", methods=["PATCH"], endpoint="projects_update")
    def projects_update(project_id: str):
        return ok(service.update(project_id, **json_body()))

    @app.route("/api/projects/<project_id>", methods=["DELETE"], endpoint="projects_delete")
    def projects_delete(project_id: str):
        service.delete(project_id)
        return ok({"deleted": project_id})

    @app.route("/api/projects/<project_id>/links", methods=["POST"], endpoint="projects_add_link")
    def projects_add_link(project_id: str):
        data = json_body()
        link = service.add_link(project_id, data.get("title"), data.get("url"), data.get("description"))
        return ok(link, 201)

    @app.route("/api/projects/<project_id>/notes", methods=["POST"], endpoint="projects_add_note")
    def projects_add_note(project_id: str):
        data = json_body()
        note_id = service.add_note(project_id, data.get("content"), title=data.get("title"))
        return ok({"note_id": note_id}, 201)

    @app.route("/api/projects/<project_id>/batch", methods=["POST"], endpoint="projects_save_batch")
    def projects_save_batch(project_id: str):
        data = json_body()
        result = service.save_batch(
            project_id,
            changes=data.get("changes") or {},
            tasks=data.get("tasks") or [],
            links=data.get("links") or [],
            notes=data.get("notes") or [],
        )
        return ok(result)

    @app.route("/api/projects/<project_id>/history", methods=["GET"], endpoint="projects_history")
    def projects_history(project_id: str):
        return ok(service.history(project_id))
