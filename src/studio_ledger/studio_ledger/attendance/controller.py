from __future__ import annotations

from flask import Flask, request

from ..api import date_arg, json_body, ok, person_to_dict, record_to_dict
from ..container import Container
from .churn import detect_churn_risk


def register(app: Flask, container: Container) -> None:
    ledger = container.attendance_ledger
    schedule = container.schedule_service

    @app.route("/api/sessions/<session_id>/attendance", methods=["GET"], endpoint="attendance_get")
    def attendance_get(session_id: str):
        state = container.load_state()
        session = schedule.get_session(state, session_id)
        on = date_arg(request.args.get("date"))

        payload = record_to_dict(ledger.occurrence(state, session, on))
        payload["expected_ids"] = ledger.expected_attendees(state, session, on)
        return ok(payload)

    @app.route("/api/sessions/<session_id>/attendance", methods=["POST"], endpoint="attendance_record")
    def attendance_record(session_id: str):
        data = json_body()
        state = container.load_state()
        session = schedule.get_session(state, session_id)
        on = date_arg(data.get("date"))

        state = ledger.record_attendance(
            state,
            session,
            on,
            present_ids=data.get("present_ids") or [],
            absent_ids=data.get("absent_ids") or [],
            justified_ids=data.get("justified_ids") or [],
        )
        return ok(record_to_dict(state.attendance_for(session_id, on)))

    @app.route("/api/sessions/<session_id>/cancel", methods=["POST"], endpoint="attendance_cancel")
    def attendance_cancel(session_id: str):
        data = json_body()
        state = container.load_state()
        session = schedule.get_session(state, session_id)
        on = date_arg(data.get("date"))

        state = ledger.cancel_occurrence(state, session, on, grant_credits=bool(data.get("grant_credits", False)))
        return ok(record_to_dict(state.attendance_for(session_id, on)))

    @app.route(
        "/api/sessions/<session_id>/justified-absences",
        methods=["POST"],
        endpoint="attendance_justify",
    )
    def attendance_justify(session_id: str):
        data = json_body()
        state = container.load_state()
        session = schedule.get_session(state, session_id)
        on = date_arg(data.get("date"))

        state = ledger.add_justified_absence(state, session, str(data.get("person_id", "")), on)
        return ok(record_to_dict(state.attendance_for(session_id, on)))

    @app.route(
        "/api/sessions/<session_id>/one-time-attendees",
        methods=["POST"],
        endpoint="attendance_one_time",
    )
    def attendance_one_time(session_id: str):
        data = json_body()
        state = container.load_state()
        session = schedule.get_session(state, session_id)
        on = date_arg(data.get("date"))

        state = ledger.add_one_time_attendee(state, session, str(data.get("person_id", "")), on)
        return ok(record_to_dict(state.attendance_for(session_id, on)))

    @app.route("/api/sessions/<session_id>/recoveries", methods=["POST"], endpoint="attendance_recover")
    def attendance_recover(session_id: str):
        data = json_body()
        state = container.load_state()
        session = schedule.get_session(state, session_id)
        on = date_arg(data.get("date"))
        person_id = str(data.get("person_id", ""))

        state = ledger.redeem_recovery_credit(state, person_id, session, on)
        return ok(
            {
                "attendance": record_to_dict(state.attendance_for(session_id, on)),
                "person": person_to_dict(state.person(person_id)),
            }
        )

    @app.route("/api/people/churn-risk", methods=["GET"], endpoint="attendance_churn_risk")
    def attendance_churn_risk():
        state = container.load_state()
        at_risk = detect_churn_risk(
            state.people,
            state.attendance,
            state.sessions,
            window=container.settings.churn_window,
            threshold=container.settings.churn_threshold,
        )
        return ok([{"id": p.person_id, "name": p.name, "phone": p.phone} for p in at_risk])
