from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import err_response, error, login_required
from ..container import Container
from ..core.exceptions import ValidationError
from ..core.result import Err


def register(app: Flask, container: Container) -> None:
    @app.route("/leave", methods=["POST"], endpoint="leave_apply")
    @login_required
    def leave_apply():
        body = request.get_json(silent=True) or {}
        try:
            result = container.leave_service.apply(
                session["user_id"],
                str(body.get("reason") or ""),
                from_date=body.get("from_date") or None,
                to_date=body.get("to_date") or None,
            )
        except ValidationError as e:
            return error(str(e), 400)

        if isinstance(result, Err):
            return err_response(result)
        data = result.data if isinstance(result.data, dict) else {}
        return jsonify({"success": True, "msg": data.get("msg") or "Leave applied successfully!"})
