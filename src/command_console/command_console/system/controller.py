from __future__ import annotations

import io
import json

from flask import Flask, send_file

from ..common.datetime_utils import today_local
from ..common.serialization import to_primitive
from ..common.web import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.system_service

    @app.route("/api/system/stats", methods=["GET"], endpoint="system_stats")
    def system_stats():
        return ok(service.get_stats())

    @app.route("/api/system/export", methods=["GET"], endpoint="system_export")
    def system_export():
        payload = json.dumps(to_primitive(service.export_all_data()), indent=2)
        return send_file(
            io.BytesIO(payload.encode("utf-8")),
            download_name=f"command_console_export_{today_local().isoformat()}.json",
            as_attachment=True,
            mimetype="application/json",
        )

    @app.route("/api/system/backup", methods=["GET"], endpoint="system_backup")
    def system_backup():
        return send_file(
            io.BytesIO(service.backup()),
            download_name=f"command_console_backup_{today_local().isoformat()}.sql",
            as_attachment=True,
            mimetype="application/sql",
        )

    @app.route("/api/system/import", methods=["POST"], endpoint="system_import")
    def system_import():
        return ok(service.import_legacy_data(json_body()))
