from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.http import admin_required, current_department_id, is_admin, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service
    departments = container.department_service

    @app.post("/api/auth/register")
    def auth_register():
        data = json_body()
        result = auth.register(
            name=data.get("name"),
            hod_title=data.get("hodTitle"),
            hod_name=data.get("hodName"),
            email=data.get("email"),
            password=data.get("password"),
        )
        return jsonify(result.department.to_dict()), 201 if result.created else 200

    @app.post("/api/auth/login")
    def auth_login():
        data = json_body()
        department = auth.login(data.get("email"), data.get("password"))

        session.clear()
        session.permanent = True
        session["department_id"] = department.department_id
        session["department_name"] = department.name
        return jsonify(department.to_dict())

    @app.post("/api/auth/admin/login")
    def auth_admin_login():
        data = json_body()
        admin = auth.admin_login(data.get("email"), data.get("password"))

        session.clear()
        session.permanent = True
        session["admin_type"] = admin.admin_type.value
        session["admin_email"] = admin.email
        payload = admin.to_dict()
        payload["message"] = "Admin logged in successfully"
        return jsonify(payload)

    @app.post("/api/auth/logout")
    def auth_logout():
        session.clear()
        return jsonify({"message": "Logged out"})

    @app.get("/api/auth/me")
    def auth_me():
        if is_admin():
            return jsonify({"role": "admin", "adminType": session.get("admin_type"), "email": session.get("admin_email")})
        if current_department_id() is not None:
            department = departments.get(current_department_id())
            payload = department.to_dict()
            payload["role"] = "department"
            return jsonify(payload)
        return jsonify({"message": "Not logged in"}), 401

    @app.get("/api/departments")
    def departments_list():
        if request.args.get("showRegistered") == "true":
            return jsonify([dict(d.to_dict(), isRegistered=True) for d in departments.list_departments()])
        return jsonify(departments.directory())

    @app.get("/api/admin/users")
    @admin_required
    def admin_users():
        return jsonify(departments.list_users())

    @app.post("/api/admin/users")
    @admin_required
    def admin_user_create():
        return jsonify(departments.create_user(json_body())), 201

    @app.put("/api/admin/users/<int:user_id>")
    @admin_required
    def admin_user_update(user_id: int):
        return jsonify(departments.update_user(user_id, json_body()))

    @app.delete("/api/admin/users/<int:user_id>")
    @admin_required
    def admin_user_delete(user_id: int):
        department = departments.delete_user(user_id)
        return jsonify(
            {
                "message": "User deleted successfully",
                "userId": user_id,
                "departmentId": department.department_id,
                "departmentName": department.name,
            }
        )
