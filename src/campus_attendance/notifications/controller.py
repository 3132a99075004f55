from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.serialization import to_json
from ..common.web import current_user_type, handles_errors, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/notifications", methods=["GET"], endpoint="api_notifications")
    @login_required
    @handles_errors("Failed to fetch notifications")
    def list_notifications():
        notifications = container.notification_service.list_for_user(
            user_type=session.get("user_type"),
            level_id=session.get("level_id"),
            specialization_id=session.get("specialization_id"),
        )
        return jsonify({"success": True, "notifications": to_json(list(notifications))}), 200

    # Admin-only routes below: NotificationService raises AuthorizationError (403).

    @app.route("/api/notifications", methods=["POST"], endpoint="api_notifications_create")
    @login_required
    @handles_errors("Failed to create notification")
    def create_notification():
        notification_id = container.notification_service.create(
            current_type=current_user_type(),
            created_by=session["user_id"],
            data=json_body(),
        )
        return jsonify({"success": True, "id": notification_id}), 201

    @app.route("/api/admin/notifications", methods=["GET"], endpoint="api_admin_notifications")
    @login_required
    @handles_errors("Failed to fetch notifications")
    def all_notifications():
        notifications = container.notification_service.list_all(current_type=current_user_type())
        return jsonify({"success": True, "notifications": to_json(list(notifications))}), 200

    @app.route("/api/notifications/<int:notification_id>", methods=["PUT"], endpoint="api_notifications_update")
    @login_required
    @handles_errors("Failed to update notification")
    def update_notification(notification_id: int):
        container.notification_service.update(
            current_type=current_user_type(), notification_id=notification_id, data=json_body()
        )
        return jsonify({"success": True, "message": "Notification updated"}), 200

    @app.route("/api/notifications/<int:notification_id>", methods=["DELETE"], endpoint="api_notifications_delete")
    @login_required
    @handles_errors("Failed to delete notification")
    def delete_notification(notification_id: int):
        container.notification_service.delete(current_type=current_user_type(), notification_id=notification_id)
        return jsonify({"success": True, "message": "Notification deleted"}), 200
