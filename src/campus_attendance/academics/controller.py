from __future__ import annotations

from typing import Callable

from flask import Flask, jsonify, request

from ..common.validators import optional_int
from ..common.serialization import to_json
from ..common.web import admin_required, handles_errors, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.academic_service

    def crud(resource: str, *, listing: Callable, create: Callable, update: Callable, delete: Callable) -> None:
        """Register list/create/update/delete JSON routes for one admin resource."""
        base = f"/api/admin/{resource}"

        @handles_errors(f"Failed to fetch {resource}")
        def list_view():
            return jsonify({"success": True, resource: to_json(list(listing()))}), 200

        @handles_errors(f"Failed to create {resource}")
        def create_view():
            new_id = create(json_body())
            return jsonify({"success": True, "message": "Created", "id": new_id}), 201

        @handles_errors(f"Failed to update {resource}")
        def update_view(item_id: int):
            update(item_id, json_body())
            return jsonify({"success": True, "message": "Updated"}), 200

        @handles_errors(f"Failed to delete {resource}")
        def delete_view(item_id: int):
            delete(item_id)
            return jsonify({"success": True, "message": "Deleted"}), 200

        app.add_url_rule(base, f"api_{resource}", login_required(list_view), methods=["GET"])
        app.add_url_rule(base, f"api_{resource}_create", admin_required(create_view), methods=["POST"])
        app.add_url_rule(
            f"{base}/<int:item_id>", f"api_{resource}_update", admin_required(update_view), methods=["PUT"]
        )
        app.add_url_rule(
            f"{base}/<int:item_id>", f"api_{resource}_delete", admin_required(delete_view), methods=["DELETE"]
        )

    crud(
        "levels",
        listing=service.list_levels,
        create=service.create_level,
        update=service.update_level,
        delete=service.delete_level,
    )
    crud(
        "specializations",
        listing=lambda: service.list_specializations(optional_int(request.args.get("level_id"))),
        create=service.create_specialization,
        update=service.update_specialization,
        delete=service.delete_specialization,
    )
    crud(
        "modules",
        listing=lambda: service.list_modules(
            specialization_id=optional_int(request.args.get("specialization_id")),
            semester_id=optional_int(request.args.get("semester_id")),
        ),
        create=service.create_module,
        update=service.update_module,
        delete=service.delete_module,
    )
    crud(
        "groups",
        listing=lambda: service.list_groups(optional_int(request.args.get("specialization_id"))),
        create=service.create_group,
        update=service.update_group,
        delete=service.delete_group,
    )
