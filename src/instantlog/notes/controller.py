from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.web import error
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    def _payload(notes: dict[str, str], month_prefix: str):
        stats = container.notes_service.stats(month_prefix)
        return {
            "notes": notes,
            "stats": {"total": stats.total, "thisMonth": stats.this_month},
        }

    @app.route("/calendar/notes", methods=["GET"], endpoint="notes")
    def notes():
        month_prefix = request.args.get("month") or now_local().strftime("%Y-%m")
        return jsonify(_payload(container.notes_service.load(), month_prefix))

    @app.route("/calendar/notes", methods=["POST"], endpoint="notes_save")
    def notes_save():
        body = request.get_json(silent=True) or {}
        try:
            saved = container.notes_service.save_note(str(body.get("date") or ""), str(body.get("text") or ""))
        except ValidationError as e:
            return error(str(e), 400)
        return jsonify(_payload(saved, str(body["date"])[:7]))

    @app.route("/calendar/notes/<day>", methods=["GET"], endpoint="notes_day")
    def notes_day(day: str):
        return jsonify({"date": day, "text": container.notes_service.get(day)})

    @app.route("/calendar/notes/<day>", methods=["DELETE"], endpoint="notes_delete")
    def notes_delete(day: str):
        remaining = container.notes_service.delete_note(day)
        return jsonify(_payload(remaining, day[:7]))
