"""Flask helpers shared by the JSON controllers.

Every endpoint answers ``{"success": bool, ...}``. Domain errors carry their own
HTTP status; anything else is logged with traceback and reported as a 500.
"""

from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import current_app, jsonify, request, session

from ..core.enums import UserType
from ..core.exceptions import DomainError


def current_user() -> Optional[dict]:
    if "user_id" not in session:
        return None
    return {
        "id": session["user_id"],
        "user_type": session.get("user_type"),
        "name": session.get("name"),
        "level_id": session.get("level_id"),
        "specialization_id": session.get("specialization_id"),
        "group_id": session.get("group_id"),
    }


def current_user_type() -> Optional[UserType]:
    value = session.get("user_type")
    try:
        return UserType(value) if value else None
    except ValueError:
        return None


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def error_response(exc: DomainError):
    return fail(str(exc), exc.status_code)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Unauthorized", 401)
        return view(*args, **kwargs)

    return wrapper


def roles_required(*user_types: UserType):
    allowed = {t.value for t in user_types}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return fail("Unauthorized", 401)
            if session.get("user_type") not in allowed:
                return fail("Forbidden", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


admin_required = roles_required(UserType.ADMIN, UserType.TECH_ADMIN)


def handles_errors(failure_message: str):
    """Turn DomainError into its status and log anything unexpected as a 500."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except DomainError as e:
                return error_response(e)
            except Exception:
                current_app.logger.exception("%s (%s %s)", failure_message, request.method, request.path)
                return fail(failure_message, 500)

        return wrapper

    return decorator
