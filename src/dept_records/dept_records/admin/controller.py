from __future__ import annotations

from flask import Flask, jsonify, request, send_file

from ..common.http import admin_required
from ..common.validators import require_int
from ..container import Container
from ..core.constants import ADMIN_ROWS_PAGE_SIZE
from .filters import FilterState

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def register(app: Flask, container: Container) -> None:
    admin_reports = container.admin_report_service

    @app.get("/api/admin/attendance")
    @admin_required
    def admin_attendance():
        return jsonify([d.to_dict() for d in admin_reports.list_reports()])

    @app.get("/api/admin/attendance/rows")
    @admin_required
    def admin_attendance_rows():
        state = FilterState.from_args(request.args)
        page = require_int(request.args.get("page", 1), "Page", min_value=1)
        page_size = require_int(request.args.get("pageSize", ADMIN_ROWS_PAGE_SIZE), "Page size", min_value=1, max_value=500)
        return jsonify(admin_reports.table(state, page=page, page_size=page_size).to_dict())

    @app.get("/api/admin/attendance/export")
    @admin_required
    def admin_attendance_export():
        output, filename = admin_reports.export(FilterState.from_args(request.args))
        return send_file(output, mimetype=XLSX_MIMETYPE, as_attachment=True, download_name=filename)

    @app.get("/api/admin/attendance/<int:report_id>")
    @admin_required
    def admin_attendance_detail(report_id: int):
        return jsonify(admin_reports.report_detail(report_id).to_dict())
