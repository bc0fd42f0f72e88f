from __future__ import annotations

from flask import Flask

from ..common.web import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.application_service

    @app.route("/api/applications", methods=["GET"], endpoint="applications_list")
    def applications_list():
        return ok(service.list_all())

    @app.route("/api/applications", methods=["POST"], endpoint="applications_create")
    def applications_create():
        data = json_body()
        detail = service.create(
            data.get("company_name"),
            data.get("role"),
            data.get("app_type"),
            company_link=data.get("company_link"),
            application_link=data.get("application_link"),
            status=data.get("status"),
            applied_date=data.get("applied_date"),
        )
        return ok(detail, 201)

    @app.route("/api/applications/<application_id>", methods=["GET"], endpoint="applications_get")
    def applications_get(application_id: str):
        return ok(service.get(application_id))

    @app.route("/api/applications/<application_id>", methods=["PATCH"], endpoint="applications_update")
    def applications_update(application_id: str):
        return ok(service.update(application_id, **json_body()))

    @app.route("/api/applications/<application_id>", methods=["DELETE"], endpoint="applications_delete")
    def applications_delete(application_id: str):
        service.delete(application_id)
        return ok({"deleted": application_id})

    @app.route("/api/applications/<application_id>/status", methods=["POST"], endpoint="applications_update_status")
    def applications_update_status(application_id: str):
        data = json_body()
        return ok(service.update_status(application_id, data.get("status"), data.get("note")))

    @app.route("/api/applications/<application_id>/updates", methods=["POST"], endpoint="applications_add_update")
    def applications_add_update(application_id: str):
        return ok(service.add_update(application_id, json_body().get("content")), 201)

    @app.route(
        "/api/applications/<application_id>/interviews",
        methods=["POST"],
        endpoint="applications_add_interview",
    )
    def applications_add_interview(application_id: str):
        data = json_body()
        return ok(service.add_interview_event(application_id, data.get("date"), data.get("description")), 201)
