from __future__ import annotations

from flask import Flask

from ..api import json_body, ok
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    catalog = container.catalog_service

    @app.route("/api/catalog", methods=["GET"], endpoint="catalog_list")
    def catalog_list():
        state = container.load_state()
        return ok(
            {
                "activities": [{"id": a.activity_id, "name": a.name} for a in state.activities],
                "specialists": [{"id": s.specialist_id, "name": s.name, "phone": s.phone} for s in state.specialists],
                "spaces": [{"id": s.space_id, "name": s.name, "capacity": s.capacity} for s in state.spaces],
            }
        )

    @app.route("/api/catalog/activities", methods=["POST"], endpoint="catalog_activity_add")
    def catalog_activity_add():
        data = json_body()
        _, activity = catalog.add_activity(container.load_state(), name=data.get("name", ""))
        return ok({"id": activity.activity_id, "name": activity.name}, 201)

    @app.route("/api/catalog/activities/<activity_id>", methods=["DELETE"], endpoint="catalog_activity_delete")
    def catalog_activity_delete(activity_id: str):
        catalog.delete_activity(container.load_state(), activity_id)
        return ok()

    @app.route("/api/catalog/specialists", methods=["POST"], endpoint="catalog_specialist_add")
    def catalog_specialist_add():
        data = json_body()
        _, specialist = catalog.add_specialist(
            container.load_state(), name=data.get("name", ""), phone=data.get("phone", "")
        )
        return ok({"id": specialist.specialist_id, "name": specialist.name, "phone": specialist.phone}, 201)

    @app.route("/api/catalog/specialists/<specialist_id>", methods=["DELETE"], endpoint="catalog_specialist_delete")
    def catalog_specialist_delete(specialist_id: str):
        catalog.delete_specialist(container.load_state(), specialist_id)
        return ok()

    @app.route("/api/catalog/spaces", methods=["POST"], endpoint="catalog_space_add")
    def catalog_space_add():
        data = json_body()
        try:
            capacity = int(data.get("capacity", 0))
        except (TypeError, ValueError):
            raise ValidationError("Capacity must be an integer")
        _, space = catalog.add_space(container.load_state(), name=data.get("name", ""), capacity=capacity)
        return ok({"id": space.space_id, "name": space.name, "capacity": space.capacity}, 201)

    @app.route("/api/catalog/spaces/<space_id>", methods=["DELETE"], endpoint="catalog_space_delete")
    def catalog_space_delete(space_id: str):
        catalog.delete_space(container.load_state(), space_id)
        return ok()
