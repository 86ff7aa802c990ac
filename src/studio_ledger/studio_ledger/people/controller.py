from __future__ import annotations

import csv
import io
from datetime import datetime

from flask import Flask, request

from ..api import date_arg, json_body, ok, person_to_dict, session_to_dict
from ..container import Container


def register(app: Flask, container: Container) -> None:
    people = container.people_service
    payments = container.payment_service

    def _write_people_csv(rows, *, filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(
            out,
            fieldnames=[
                "id",
                "name",
                "phone",
                "membership",
                "join_date",
                "last_payment_date",
                "payment_status",
                "classes",
                "recovery_credits",
            ],
        )
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/people", methods=["GET"], endpoint="people_list")
    def people_list():
        state = container.load_state()
        now = datetime.now()
        return ok(
            [
                person_to_dict(p, status=payments.status_for(state, p.person_id, now=now))
                for p in sorted(state.people, key=lambda p: p.name.lower())
            ]
        )

    @app.route("/api/people", methods=["POST"], endpoint="people_create")
    def people_create():
        data = json_body()
        join = data.get("join_date")
        state, person = people.add_person(
            container.load_state(),
            name=data.get("name", ""),
            phone=data.get("phone", ""),
            membership=data.get("membership", "MONTHLY"),
            tariff_id=data.get("tariff_id"),
            notes=data.get("notes"),
            join_date=date_arg(join) if join else None,
        )
        return ok(person_to_dict(person), 201)

    @app.route("/api/people/export.csv", methods=["GET"], endpoint="people_export")
    def people_export():
        state = container.load_state()
        now = datetime.now()
        rows = []
        for p in sorted(state.people, key=lambda p: p.name.lower()):
            rows.append(
                {
                    "id": p.person_id,
                    "name": p.name,
                    "phone": p.phone,
                    "membership": p.membership.value,
                    "join_date": p.join_date.isoformat() if p.join_date else "",
                    "last_payment_date": p.last_payment_date.date().isoformat() if p.last_payment_date else "",
                    "payment_status": payments.status_for(state, p.person_id, now=now).status.value,
                    "classes": "; ".join(state.session_label(s) for s in state.sessions_for_person(p.person_id)),
                    "recovery_credits": len(p.recovery_credits),
                }
            )
        return _write_people_csv(rows, filename=f"people_{now:%Y%m%d}.csv")

    @app.route("/api/people/<person_id>", methods=["GET"], endpoint="people_get")
    def people_get(person_id: str):
        state = container.load_state()
        person = people.get_person(state, person_id)
        payload = person_to_dict(person, status=payments.status_for(state, person_id))
        payload["sessions"] = [session_to_dict(state, s) for s in state.sessions_for_person(person_id)]
        return ok(payload)

    @app.route("/api/people/<person_id>", methods=["PUT"], endpoint="people_update")
    def people_update(person_id: str):
        data = json_body()
        allowed = {"name", "phone", "membership", "tariff_id", "notes"}
        state = people.update_person(
            container.load_state(), person_id, **{k: v for k, v in data.items() if k in allowed}
        )
        return ok(person_to_dict(state.person(person_id)))

    @app.route("/api/people/<person_id>", methods=["DELETE"], endpoint="people_delete")
    def people_delete(person_id: str):
        people.delete_person(container.load_state(), person_id)
        return ok()

    @app.route("/api/people/<person_id>/sessions", methods=["PUT"], endpoint="people_sessions")
    def people_sessions(person_id: str):
        data = json_body()
        state = container.schedule_service.enroll_person_in_sessions(
            container.load_state(), person_id, data.get("session_ids") or []
        )
        return ok([session_to_dict(state, s) for s in state.sessions_for_person(person_id)])

    @app.route("/api/people/<person_id>/vacations", methods=["POST"], endpoint="people_vacation_add")
    def people_vacation_add(person_id: str):
        data = json_body()
        state = people.add_vacation(
            container.load_state(),
            person_id,
            date_arg(data.get("start_date")),
            date_arg(data.get("end_date")),
        )
        return ok(person_to_dict(state.person(person_id)), 201)

    @app.route(
        "/api/people/<person_id>/vacations/<vacation_id>",
        methods=["DELETE"],
        endpoint="people_vacation_remove",
    )
    def people_vacation_remove(person_id: str, vacation_id: str):
        state = people.remove_vacation(container.load_state(), person_id, vacation_id)
        return ok(person_to_dict(state.person(person_id)))

    @app.route("/api/people/<person_id>/on-vacation", methods=["GET"], endpoint="people_on_vacation")
    def people_on_vacation(person_id: str):
        state = container.load_state()
        person = people.get_person(state, person_id)
        on = date_arg(request.args.get("date"), default=datetime.now().date())
        return ok({"person_id": person_id, "date": on.isoformat(), "on_vacation": people.is_on_vacation(person, on)})
