from __future__ import annotations

from flask import Flask, abort, jsonify, request, send_from_directory, session

from ..common.http import is_admin, json_body, login_required
from ..container import Container
from ..core.constants import SESSION_UPLOADS_LIMIT
from ..core.exceptions import AuthorizationError, ValidationError


def register(app: Flask, container: Container) -> None:
    uploads = container.uploads

    @app.post("/api/upload")
    @login_required
    def upload_file():
        file_url = uploads.save(request.files.get("file"))
        # files not yet attached to a record can be withdrawn by whoever uploaded them
        owned = session.get("uploads", [])
        session["uploads"] = (owned + [file_url])[-SESSION_UPLOADS_LIMIT:]
        return jsonify({"fileUrl": file_url})

    @app.delete("/api/upload")
    @login_required
    def upload_delete():
        file_url = json_body().get("fileUrl")
        if not file_url:
            raise ValidationError("No file URL provided")
        owned = session.get("uploads", [])
        if not is_admin() and file_url not in owned:
            raise AuthorizationError("You can only delete files you uploaded")
        if file_url in owned:
            session["uploads"] = [url for url in owned if url != file_url]
        if uploads.delete(file_url):
            return jsonify({"message": "File deleted successfully"})
        return jsonify({"message": "File already removed or does not exist"})

    @app.get("/uploads/<path:name>")
    def uploaded_file(name: str):
        path = uploads.resolve(name)
        if not path.is_file():
            abort(404)
        mimetype = "application/pdf" if path.suffix.lower() == ".pdf" else None
        return send_from_directory(uploads.folder, path.name, mimetype=mimetype)

    @app.get("/api/health")
    def health():
        return jsonify({"status": "ok", "storage": container.storage_backend})
