from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
)


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _handle_domain_error(err: DomainError):
        return jsonify({"message": str(err)}), status_for(err)

    @app.errorhandler(HTTPException)
    def _handle_http_error(err: HTTPException):
        return jsonify({"message": err.description or err.name}), err.code

    @app.errorhandler(Exception)
    def _handle_unexpected(err: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"message": "Internal server error"}), 500


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        # multipart/form-data requests carry the same fields as form values
        return request.form.to_dict()
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def current_department_id():
    return session.get("department_id")


def is_admin() -> bool:
    return bool(session.get("admin_type"))


def department_required(view):
    """Require a department session; a `department_id` path arg must match it."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_department_id() is None:
            raise AuthenticationError("Please log in to continue")
        path_dept = kwargs.get("department_id")
        if path_dept is not None and int(path_dept) != int(current_department_id()):
            raise AuthorizationError("You do not have access to this department")
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not is_admin():
            if current_department_id() is not None:
                raise AuthorizationError("Admin access required")
            raise AuthenticationError("Please log in to continue")
        return view(*args, **kwargs)

    return wrapper


def login_required(view):
    """Either a department or an admin session."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_department_id() is None and not is_admin():
            raise AuthenticationError("Please log in to continue")
        return view(*args, **kwargs)

    return wrapper
