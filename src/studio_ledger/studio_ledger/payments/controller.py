from __future__ import annotations

from flask import Flask, request

from ..api import json_body, ok, overdue_to_dict, payment_to_dict, person_to_dict, reminder_to_dict, status_to_dict
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    payments = container.payment_service

    @app.route("/api/people/<person_id>/payments", methods=["GET"], endpoint="payments_history")
    def payments_history(person_id: str):
        state = container.load_state()
        container.people_service.get_person(state, person_id)
        return ok([payment_to_dict(p) for p in state.payments_for(person_id)])

    @app.route("/api/people/<person_id>/payments", methods=["POST"], endpoint="payments_record")
    def payments_record(person_id: str):
        data = json_body()
        if data.get("amount") is None:
            raise ValidationError("Amount is required")
        state = payments.record_payment(container.load_state(), person_id, data["amount"])
        return ok(
            {
                "payment": payment_to_dict(state.payments_for(person_id)[0]),
                "person": person_to_dict(state.person(person_id)),
            },
            201,
        )

    @app.route("/api/people/<person_id>/payments/last", methods=["DELETE"], endpoint="payments_undo")
    def payments_undo(person_id: str):
        state = payments.undo_last_payment(container.load_state(), person_id)
        return ok(person_to_dict(state.person(person_id)))

    @app.route("/api/people/<person_id>/payment-status", methods=["GET"], endpoint="payments_status")
    def payments_status(person_id: str):
        return ok(status_to_dict(payments.status_for(container.load_state(), person_id)))

    @app.route("/api/payments/reminders", methods=["GET"], endpoint="payments_reminders")
    def payments_reminders():
        days = request.args.get("days")
        try:
            look_ahead = int(days) if days else None
        except ValueError:
            raise ValidationError("days must be an integer")
        return ok([reminder_to_dict(r) for r in payments.reminders(container.load_state(), look_ahead_days=look_ahead)])

    @app.route("/api/payments/overdue", methods=["GET"], endpoint="payments_overdue")
    def payments_overdue():
        return ok([overdue_to_dict(e) for e in payments.overdue(container.load_state())])
