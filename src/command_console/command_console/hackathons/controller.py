from __future__ import annotations

from flask import Flask

from ..common.web import json_body, ok
from ..container import Container
from .model import EDITABLE_FIELDS


def register(app: Flask, container: Container) -> None:
    service = container.hackathon_service

    @app.route("/api/hackathons", methods=["GET"], endpoint="hackathons_list")
    def hackathons_list():
        return ok(service.list_with_derived())

    @app.route("/api/hackathons", methods=["POST"], endpoint="hackathons_create")
    def hackathons_create():
        data = json_body()
        fields = {k: data[k] for k in EDITABLE_FIELDS if k in data and k != "name"}
        return ok(service.create(data.get("name"), **fields), 201)

    @app.route("/api/hackathons/<hackathon_id>", methods=["GET"], endpoint="hackathons_get")
    def hackathons_get(hackathon_id: str):
        return ok(service.get_with_derived(hackathon_id))

    @app.route("/api/hackathons/<hackathon_id>", methods=["PATCH"], endpoint="hackathons_update")
    def hackathons_update(hackathon_id: str):
        return ok(service.update(hackathon_id, **json_body()))

    @app.route("/api/hackathons/<hackathon_id>", methods=["DELETE"], endpoint="hackathons_delete")
    def hackathons_delete(hackathon_id: str):
        service.delete(hackathon_id)
        return ok({"deleted": hackathon_id})

    @app.route("/api/hackathons/<hackathon_id>/status", methods=["POST"], endpoint="hackathons_update_status")
    def hackathons_update_status(hackathon_id: str):
        return ok(service.update_status(hackathon_id, json_body().get("status")))

    @app.route("/api/hackathons/<hackathon_id>/submit", methods=["POST"], endpoint="hackathons_submit")
    def hackathons_submit(hackathon_id: str):
        return ok(service.submit(hackathon_id))

    @app.route("/api/hackathons/<hackathon_id>/missed", methods=["POST"], endpoint="hackathons_mark_missed")
    def hackathons_mark_missed(hackathon_id: str):
        return ok(service.mark_missed(hackathon_id))

    @app.route("/api/hackathons/<hackathon_id>/register", methods=["POST"], endpoint="hackathons_register")
    def hackathons_register(hackathon_id: str):
        return ok(service.register(hackathon_id))

    @app.route("/api/hackathons/<hackathon_id>/project", methods=["PUT"], endpoint="hackathons_link_project")
    def hackathons_link_project(hackathon_id: str):
        return ok(service.link_project(hackathon_id, json_body().get("project_id")))

    @app.route("/api/hackathons/<hackathon_id>/project", methods=["DELETE"], endpoint="hackathons_unlink_project")
    def hackathons_unlink_project(hackathon_id: str):
        return ok(service.unlink_project(hackathon_id))

    @app.route("/api/hackathons/<hackathon_id>/history", methods=["GET"], endpoint="hackathons_history")
    def hackathons_history(hackathon_id: str):
        return ok(service.history(hackathon_id))
