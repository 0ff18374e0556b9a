from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import admin_required, current_department_id, department_required, is_admin, json_body, login_required
from ..common.validators import require_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    employees = container.employee_service
    departments = container.department_service

    def _scope():
        # admins may touch any employee; departments only their own
        return None if is_admin() else current_department_id()

    @app.get("/api/departments/<int:department_id>/employees")
    @department_required
    def department_employees(department_id: int):
        return jsonify([e.to_dict() for e in employees.list_for_department(department_id)])

    @app.post("/api/departments/<int:department_id>/employees")
    @department_required
    def department_employee_create(department_id: int):
        employee = employees.create(department_id, json_body(), request.files)
        return jsonify(employee.to_dict()), 201

    @app.patch("/api/departments/<int:department_id>/employees/<int:employee_id>")
    @department_required
    def department_employee_update(department_id: int, employee_id: int):
        employee = employees.update(employee_id, json_body(), request.files, department_id=department_id)
        return jsonify(employee.to_dict())

    @app.patch("/api/employees/<int:employee_id>")
    @login_required
    def employee_update(employee_id: int):
        employee = employees.update(employee_id, json_body(), request.files, department_id=_scope())
        return jsonify(employee.to_dict())

    @app.delete("/api/employees/<int:employee_id>")
    @login_required
    def employee_delete(employee_id: int):
        employees.delete(employee_id, department_id=_scope())
        return "", 204

    @app.get("/api/admin/employees")
    @admin_required
    def admin_employees():
        names = {d.department_id: d.name for d in departments.list_departments()}
        rows = []
        for e in employees.list_all():
            item = e.to_dict()
            item["departmentName"] = names.get(e.department_id)
            rows.append(item)
        return jsonify(rows)

    @app.post("/api/admin/employees")
    @admin_required
    def admin_employee_create():
        data = json_body()
        department_id = require_int(data.get("departmentId"), "Department", min_value=1)
        employee = employees.create(department_id, data, request.files)
        return jsonify(employee.to_dict()), 201
