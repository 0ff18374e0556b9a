from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_department_id, is_admin, json_body, login_required
from ..common.validators import require_int
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    documents = container.document_service

    def _department_for_request() -> int:
        if not is_admin():
            return int(current_department_id())
        raw = request.args.get("departmentId") or request.form.get("departmentId")
        if not raw:
            raise ValidationError("departmentId is required")
        return require_int(raw, "Department", min_value=1)

    @app.get("/api/documents")
    @login_required
    def documents_list():
        page = documents.search_args(_department_for_request(), request.args)
        return jsonify(
            {
                "documents": [d.to_dict() for d in page.items],
                "page": page.page,
                "pageSize": page.page_size,
                "total": page.total,
                "pages": page.pages,
            }
        )

    @app.post("/api/documents")
    @login_required
    def documents_create():
        document = documents.create(_department_for_request(), json_body(), request.files.get("documentImage"))
        return jsonify(document.to_dict()), 201

    @app.delete("/api/documents/<int:document_id>")
    @login_required
    def documents_delete(document_id: int):
        documents.delete(document_id, department_id=None if is_admin() else current_department_id())
        return "", 204
