from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import coerce_date, today_local
from ..common.web import arg_int, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.calendar_service

    @app.route("/api/calendar/month", methods=["GET"], endpoint="calendar_month")
    def calendar_month():
        today = coerce_date(request.args.get("today"), "today") or today_local()
        year = arg_int("year", today.year)
        month = arg_int("month", today.month)
        return ok(service.get_month(year, month, today=today))

    @app.route("/api/calendar/upcoming", methods=["GET"], endpoint="calendar_upcoming")
    def calendar_upcoming():
        limit = request.args.get("limit")
        return ok(service.get_upcoming(limit=arg_int("limit", 0) if limit else None))

    @app.route("/api/calendar/nearest", methods=["GET"], endpoint="calendar_nearest")
    def calendar_nearest():
        return ok(service.get_nearest_deadline())

    @app.route("/api/calendar/events", methods=["POST"], endpoint="calendar_create_event")
    def calendar_create_event():
        data = json_body()
        event = service.create_manual_event(
            data.get("title"),
            data.get("date"),
            event_type=data.get("type"),
            priority=data.get("priority"),
            description=data.get("description"),
            end_date=data.get("end_date"),
            project_id=data.get("project_id"),
            hackathon_id=data.get("hackathon_id"),
        )
        return ok(event, 201)

    @app.route("/api/calendar/events/<path:event_id>", methods=["DELETE"], endpoint="calendar_delete_event")
    def calendar_delete_event(event_id: str):
        service.delete_event(event_id)
        return ok({"deleted": event_id})
