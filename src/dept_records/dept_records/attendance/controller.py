from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_department_id, department_required, is_admin, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    attendance = container.attendance_service

    def _scope():
        return None if is_admin() else current_department_id()

    @app.get("/api/departments/<int:department_id>/attendance")
    @department_required
    def department_reports(department_id: int):
        return jsonify([r.to_dict() for r in attendance.list_reports(department_id)])

    @app.post("/api/departments/<int:department_id>/attendance")
    @department_required
    def department_report_create(department_id: int):
        data = json_body()
        report = attendance.create_report(department_id, data.get("month"), data.get("year"), data.get("entries"))
        return jsonify(report.to_dict()), 201

    @app.get("/api/attendance/<int:report_id>")
    @login_required
    def report_get(report_id: int):
        return jsonify(attendance.get_report(report_id, department_id=_scope()).to_dict())

    @app.patch("/api/attendance/<int:report_id>")
    @login_required
    def report_update(report_id: int):
        report = attendance.update_report(report_id, json_body(), department_id=_scope())
        return jsonify(report.to_dict())

    @app.delete("/api/attendance/<int:report_id>")
    @login_required
    def report_delete(report_id: int):
        attendance.delete_report(report_id, department_id=_scope())
        return "", 204

    @app.get("/api/attendance/<int:report_id>/entries")
    @login_required
    def report_entries(report_id: int):
        return jsonify([e.to_dict() for e in attendance.list_entries(report_id, department_id=_scope())])

    @app.post("/api/attendance/<int:report_id>/entries")
    @login_required
    def report_entry_create(report_id: int):
        data = json_body()
        entry = attendance.add_entry(report_id, data.get("employeeId"), data.get("periods"), department_id=_scope())
        return jsonify(entry.to_dict()), 201

    @app.patch("/api/attendance/<int:report_id>/entries/<int:entry_id>")
    @login_required
    def report_entry_update(report_id: int, entry_id: int):
        data = json_body()
        entry = attendance.update_entry(
            report_id,
            entry_id,
            periods=data.get("periods"),
            remarks=data.get("remarks"),
            department_id=_scope(),
        )
        return jsonify(entry.to_dict())

    @app.get("/api/attendance/<int:report_id>/sheet")
    @login_required
    def report_sheet(report_id: int):
        rows = attendance.report_sheet(report_id, department_id=_scope())
        return jsonify([row.to_dict() for row in rows])

    @app.post("/api/attendance/<int:report_id>/upload")
    @login_required
    def report_upload(report_id: int):
        report = attendance.attach_signed_copy(report_id, request.files.get("file"), department_id=_scope())
        return jsonify({"fileUrl": report.file_url, "report": report.to_dict()})
