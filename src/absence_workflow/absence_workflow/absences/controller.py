from __future__ import annotations

from functools import wraps

from flask import Flask, jsonify, request, session

from ..container import Container
from ..core.enums import Role
from ..users.actor import require_role
from .schemas import DecideAbsenceRequest, SubmitAbsenceRequest


def register(app: Flask, container: Container) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            kwargs["actor"] = container.actor_resolver.resolve(session)
            return view(*args, **kwargs)

        return wrapper

    def approver_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            actor = container.actor_resolver.resolve(session)
            kwargs["actor"] = require_role(actor, Role.APPROVER)
            return view(*args, **kwargs)

        return wrapper

    @app.route("/absences", methods=["POST"], endpoint="create_absence")
    @login_required
    def create_absence(actor):
        body = SubmitAbsenceRequest.from_json(request.get_json(silent=True))
        outcome = container.absence_service.create_absence(
            actor=actor,
            group_id=body.group_id,
            session_id=body.session_id,
            reason=body.reason,
        )
        return jsonify(outcome.absence.to_dict()), 201

    @app.route("/absences/<absence_id>/approve", methods=["PATCH"], endpoint="approve_absence")
    @approver_required
    def approve_absence(absence_id: str, actor):
        body = DecideAbsenceRequest.from_json(request.get_json(silent=True))
        container.absence_service.decide_absence(
            actor=actor,
            absence_id=absence_id,
            approve=body.approve,
            note=body.note,
        )
        return jsonify({"message": "success"})

    @app.route("/absences", methods=["GET"], endpoint="list_absences")
    @login_required
    def list_absences(actor):
        rows = container.absence_service.list_absences(limit=request.args.get("limit"))
        return jsonify([a.to_dict() for a in rows])

    @app.route("/absences/group/<group_id>", methods=["GET"], endpoint="list_absences_by_group")
    @login_required
    def list_absences_by_group(group_id: str, actor):
        rows = container.absence_service.list_absences_by_group(
            group_id=group_id,
            limit=request.args.get("limit"),
        )
        return jsonify([a.to_dict() for a in rows])

    @app.route("/absences/<absence_id>", methods=["GET"], endpoint="get_absence")
    @login_required
    def get_absence(absence_id: str, actor):
        absence = container.absence_service.get_absence(absence_id=absence_id)
        return jsonify(absence.to_dict())
