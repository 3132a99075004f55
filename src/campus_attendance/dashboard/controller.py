from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_user, handles_errors, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/dashboard", methods=["GET"], endpoint="api_dashboard")
    @login_required
    @handles_errors("Failed to load dashboard")
    def dashboard():
        user = current_user()
        return jsonify({"success": True, "user": user, "dashboard": container.dashboard_service.summary(user)}), 200
