from __future__ import annotations

import io

import pandas as pd
from flask import Flask, request, send_file

from ..common.datetime_utils import today_local
from ..common.web import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/subjects", methods=["GET"], endpoint="attendance_subjects")
    def attendance_subjects():
        return ok(service.list_subjects())

    @app.route("/api/attendance/faculty", methods=["GET"], endpoint="attendance_faculty")
    def attendance_faculty():
        return ok(service.list_faculty())

    @app.route("/api/attendance/timetable", methods=["GET"], endpoint="attendance_timetable")
    def attendance_timetable():
        return ok(service.get_timetable(request.args.get("day")))

    @app.route("/api/attendance/instances", methods=["GET"], endpoint="attendance_instances")
    def attendance_instances():
        day = request.args.get("date")
        if day:
            return ok(service.get_instances_for_date(day))
        return ok(service.list_instances(start_date=request.args.get("start"), end_date=request.args.get("end")))

    @app.route("/api/attendance/instances/generate", methods=["POST"], endpoint="attendance_generate")
    def attendance_generate():
        data = json_body()
        if data.get("start_date") or data.get("end_date"):
            created = service.generate_class_instances_for_range(data.get("start_date"), data.get("end_date"))
        else:
            created = service.generate_class_instances(data.get("date") or today_local())
        return ok({"generated": created}, 201 if created else 200)

    @app.route("/api/attendance/instances/<instance_id>/mark", methods=["POST"], endpoint="attendance_mark")
    def attendance_mark(instance_id: str):
        data = json_body()
        instance = service.mark_attendance(
            instance_id,
            data.get("status"),
            reason_code=data.get("reason_code"),
            reason_description=data.get("reason_description"),
            notes=data.get("notes"),
            actual_faculty_id=data.get("actual_faculty_id"),
            actual_subject_id=data.get("actual_subject_id"),
        )
        return ok(instance)

    @app.route("/api/attendance/instances/<instance_id>/reschedule", methods=["POST"], endpoint="attendance_reschedule")
    def attendance_reschedule(instance_id: str):
        data = json_body()
        instance = service.reschedule_class(
            instance_id,
            new_date=data.get("new_date"),
            new_start_time=data.get("new_start_time"),
            new_end_time=data.get("new_end_time"),
        )
        return ok(instance, 201)

    @app.route("/api/attendance/instances/<instance_id>/faculty", methods=["POST"], endpoint="attendance_faculty_exchange")
    def attendance_faculty_exchange(instance_id: str):
        data = json_body()
        return ok(service.update_faculty_exchange(instance_id, data.get("actual_faculty_id"), notes=data.get("notes")))

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    def attendance_stats():
        return ok(service.get_subject_stats())

    @app.route("/api/attendance/overall", methods=["GET"], endpoint="attendance_overall")
    def attendance_overall():
        return ok(service.get_overall_stats())

    @app.route("/api/attendance/recommendations", methods=["GET"], endpoint="attendance_recommendations")
    def attendance_recommendations():
        return ok(service.get_recommendations())

    @app.route("/api/attendance/export", methods=["GET"], endpoint="attendance_export")
    def attendance_export():
        rows = [
            {
                "Code": s.subject_code,
                "Subject": s.subject_name,
                "Type": s.subject_type.value,
                "Faculty": s.faculty_name,
                "Present": s.present,
                "Absent": s.absent,
                "Excused": s.excused,
                "Cancelled": s.cancelled,
                "Percentage": s.attendance_percentage,
                "Risk": s.risk_state.value,
                "Needed for safe": s.classes_needed_for_safe,
                "Can miss": s.classes_can_miss,
            }
            for s in service.get_subject_stats()
        ]
        df = pd.DataFrame(rows)

        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Attendance")
        output.seek(0)

        filename = f"attendance_{today_local().strftime('%Y%m%d')}.xlsx"
        return send_file(
            output,
            download_name=filename,
            as_attachment=True,
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
