"""Shared Flask helpers: role guards, JSON body access and error mapping."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable, Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    DuplicateAttendanceError,
    NotFoundError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def error_response(code: str, message: str, status: int):
    return jsonify({"success": False, "error": code, "message": message}), status


def status_for(error: DomainError) -> int:
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, DuplicateAttendanceError):
        return 409
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, AuthorizationError):
        return 403
    return 500


def current_role() -> Optional[Role]:
    try:
        return Role(session.get("role"))
    except ValueError:
        return None


def roles_required(*roles: Role) -> Callable:
    """Allow the view only for a signed-in user whose session role is in ``roles``.

    The session is populated by the identity provider in front of this API.
    No roles given means any signed-in user.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return error_response("Unauthorized", "Please sign in to continue", 401)

            role = current_role()
            if role is None or (roles and role not in roles):
                raise AuthorizationError("You do not have permission")

            return view(*args, **kwargs)

        return wrapper

    return decorator


login_required = roles_required()
admin_required = roles_required(Role.ADMIN)
staff_required = roles_required(Role.ADMIN, Role.TEACHER)


def json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = status_for(e)
        if isinstance(e, StorageError):
            # Details are already logged at the storage boundary.
            return error_response(e.code, "Internal server error", status)
        return error_response(e.code, str(e), status)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return error_response(e.name.replace(" ", ""), e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.error("Unhandled error on %s %s: %s", request.method, request.path, e, exc_info=True)
        return error_response("InternalError", "Internal server error", 500)
