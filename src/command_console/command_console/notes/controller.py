from __future__ import annotations

from flask import Flask, request

from ..common.web import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.note_service

    @app.route("/api/notes", methods=["GET"], endpoint="notes_list")
    def notes_list():
        target_type = request.args.get("target_type")
        if target_type:
            return ok(service.list_for_target(target_type, request.args.get("target_id")))
        return ok(service.list_all())

    @app.route("/api/notes", methods=["POST"], endpoint="notes_create")
    def notes_create():
        data = json_body()
        view = service.create(
            data.get("content"),
            title=data.get("title"),
            target_type=data.get("target_type"),
            target_id=data.get("target_id"),
        )
        return ok(view, 201)

    @app.route("/api/notes/<note_id>", methods=["GET"], endpoint="notes_get")
    def notes_get(note_id: str):
        return ok(service.get(note_id))

    @app.route("/api/notes/<note_id>", methods=["PUT"], endpoint="notes_update")
    def notes_update(note_id: str):
        data = json_body()
        return ok(service.update(note_id, content=data.get("content"), title=data.get("title")))

    @app.route("/api/notes/<note_id>", methods=["DELETE"], endpoint="notes_delete")
    def notes_delete(note_id: str):
        service.delete(note_id)
        return ok({"deleted": note_id})

    @app.route("/api/notes/<note_id>/links", methods=["POST"], endpoint="notes_link")
    def notes_link(note_id: str):
        data = json_body()
        return ok(service.link(note_id, data.get("target_type"), data.get("target_id")), 201)

    @app.route("/api/notes/links/<link_id>", methods=["DELETE"], endpoint="notes_unlink")
    def notes_unlink(link_id: str):
        return ok({"removed": service.unlink(link_id)})
