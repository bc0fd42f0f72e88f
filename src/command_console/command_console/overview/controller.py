from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import coerce_date
from ..common.web import ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.overview_service

    @app.route("/api/overview", methods=["GET"], endpoint="overview_get")
    def overview_get():
        return ok(service.get_overview(coerce_date(request.args.get("date"), "date")))
