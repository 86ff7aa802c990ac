from __future__ import annotations

from datetime import date, timedelta

from flask import Flask, request

from ..api import date_arg, json_body, ok, session_to_dict
from ..container import Container
from .service import occurrence_dates


def register(app: Flask, container: Container) -> None:
    schedule = container.schedule_service

    @app.route("/api/sessions", methods=["GET"], endpoint="sessions_list")
    def sessions_list():
        state = container.load_state()
        return ok([session_to_dict(state, s) for s in state.sessions])

    @app.route("/api/sessions", methods=["POST"], endpoint="sessions_create")
    def sessions_create():
        data = json_body()
        state, session = schedule.add_session(
            container.load_state(),
            activity_id=data.get("activity_id", ""),
            instructor_id=data.get("instructor_id", ""),
            space_id=data.get("space_id", ""),
            day_of_week=data.get("day_of_week", ""),
            time=data.get("time", ""),
            level_id=data.get("level_id"),
        )
        return ok(session_to_dict(state, session), 201)

    @app.route("/api/sessions/<session_id>", methods=["PUT"], endpoint="sessions_update")
    def sessions_update(session_id: str):
        data = json_body()
        allowed = {"activity_id", "instructor_id", "space_id", "day_of_week", "time", "level_id"}
        state = schedule.update_session(
            container.load_state(), session_id, **{k: v for k, v in data.items() if k in allowed}
        )
        return ok(session_to_dict(state, state.session(session_id)))

    @app.route("/api/sessions/<session_id>", methods=["DELETE"], endpoint="sessions_delete")
    def sessions_delete(session_id: str):
        schedule.delete_session(container.load_state(), session_id)
        return ok()

    @app.route("/api/sessions/<session_id>/roster", methods=["PUT"], endpoint="sessions_roster")
    def sessions_roster(session_id: str):
        data = json_body()
        state = schedule.set_roster(container.load_state(), session_id, data.get("person_ids") or [])
        return ok(session_to_dict(state, state.session(session_id)))

    @app.route("/api/sessions/<session_id>/waitlist", methods=["POST"], endpoint="sessions_waitlist_add")
    def sessions_waitlist_add(session_id: str):
        data = json_body()
        state = schedule.add_to_waitlist(container.load_state(), session_id, str(data.get("person_id", "")))
        return ok(session_to_dict(state, state.session(session_id)))

    @app.route(
        "/api/sessions/<session_id>/waitlist/<person_id>/enroll",
        methods=["POST"],
        endpoint="sessions_waitlist_enroll",
    )
    def sessions_waitlist_enroll(session_id: str, person_id: str):
        state = schedule.enroll_from_waitlist(container.load_state(), session_id, person_id)
        return ok(session_to_dict(state, state.session(session_id)))

    @app.route("/api/sessions/<session_id>/occurrences", methods=["GET"], endpoint="sessions_occurrences")
    def sessions_occurrences(session_id: str):
        state = container.load_state()
        session = schedule.get_session(state, session_id)
        start = date_arg(request.args.get("start"), default=date.today())
        end = date_arg(request.args.get("end"), default=start + timedelta(days=28))
        return ok([d.isoformat() for d in occurrence_dates(session, start, end)])
