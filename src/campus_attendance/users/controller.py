from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request, session

from ..common.web import (
    admin_required,
    current_user,
    current_user_type,
    handles_errors,
    json_body,
    login_required,
)
from ..common.serialization import to_json
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from .model import User


def _public_user(user: User) -> dict:
    data = to_json(user)
    data.pop("password_hash", None)
    return data


def register(app: Flask, container: Container) -> None:
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

    @app.route("/api/auth/login", methods=["POST"], endpoint="api_login")
    @handles_errors("Authentication failed")
    def login():
        data = json_body()
        s_user = container.auth_service.login(
            data.get("id"),
            data.get("password"),
            data.get("user_type") or data.get("userType"),
        )

        session.clear()
        session.permanent = True
        session.update(s_user.to_session())

        return jsonify({"success": True, "user": current_user()}), 200

    @app.route("/api/auth/logout", methods=["POST"], endpoint="api_logout")
    @handles_errors("Logout failed")
    def logout():
        container.auth_service.logout(session.get("session_id"))
        session.clear()
        return jsonify({"success": True}), 200

    @app.route("/api/auth/me", methods=["GET"], endpoint="api_me")
    @login_required
    def me():
        return jsonify({"success": True, "user": current_user()}), 200

    @app.route("/api/admin/users", methods=["GET"], endpoint="api_admin_users")
    @admin_required
    @handles_errors("Failed to fetch users")
    def list_users():
        users = container.user_service.list_users(request.args.get("user_type"))
        return jsonify({"success": True, "users": [_public_user(u) for u in users]}), 200

    @app.route("/api/admin/users", methods=["POST"], endpoint="api_admin_users_create")
    @admin_required
    @handles_errors("Failed to create user")
    def create_user():
        data = json_body()
        user_id = container.user_service.create_user(
            user_id=data.get("id") or data.get("user_id"),
            name=data.get("name"),
            password=data.get("password"),
            user_type=data.get("user_type"),
            email=data.get("email"),
            level_id=data.get("level_id"),
            specialization_id=data.get("specialization_id"),
            group_id=data.get("group_id"),
        )
        return jsonify({"success": True, "message": "User created", "id": user_id}), 201

    @app.route("/api/admin/users/<user_id>", methods=["PUT"], endpoint="api_admin_users_update")
    @admin_required
    @handles_errors("Failed to update user")
    def update_user(user_id: str):
        container.user_service.update_user(user_id, json_body())
        return jsonify({"success": True, "message": "User updated"}), 200

    @app.route("/api/admin/users/<user_id>", methods=["DELETE"], endpoint="api_admin_users_delete")
    @admin_required
    @handles_errors("Failed to delete user")
    def delete_user(user_id: str):
        container.user_service.delete_user(current_type=current_user_type(), user_id=user_id)
        return jsonify({"success": True, "message": "User deleted"}), 200
