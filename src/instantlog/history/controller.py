from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..api.client import format_location
from ..common.datetime_utils import now_local
from ..common.web import err_response, error, int_arg, login_required
from ..container import Container
from ..core.result import Err
from . import aggregator


def register(app: Flask, container: Container) -> None:
    @app.route("/history", methods=["GET"], endpoint="history")
    @login_required
    def history():
        today = now_local().date()
        year = int_arg(request.args.get("year"), today.year)
        month = int_arg(request.args.get("month"), today.month)
        week = int_arg(request.args.get("week"), 0)
        if not 1 <= month <= 12 or not 1 <= year <= 9999:
            return error("Invalid month", 400)

        timeline = container.history_views.timeline(session["user_id"])
        dashboard = container.history_service.dashboard(timeline, year=year, month=month, today=today, week=week)
        return jsonify(dashboard.to_dict())

    @app.route("/history/today", methods=["GET"], endpoint="history_today")
    @login_required
    def history_today():
        today = now_local().date()
        timeline = container.history_views.timeline(session["user_id"])
        record = aggregator.find_by_date(timeline, today.isoformat())
        if record is None:
            return jsonify({"date": today.isoformat(), "status": "Not Checked In"})

        status = "On Leave" if record.is_leave else ("Active" if record.time_in else "Not Checked In")
        return jsonify(
            {
                **record.to_dict(),
                "status": status,
                "checkIn": aggregator.format_time(record.time_in),
                "checkOut": aggregator.format_time(record.time_out),
                "duration": aggregator.format_duration(record.time_in, record.time_out),
            }
        )

    @app.route("/punch", methods=["POST"], endpoint="punch")
    def punch():
        body = request.get_json(silent=True) or {}
        result = container.api_client.punch(
            str(body.get("pin") or ""),
            str(body.get("type") or ""),
            body.get("location") if isinstance(body.get("location"), dict) else None,
        )
        if isinstance(result, Err):
            return err_response(result)

        data = dict(result.data) if isinstance(result.data, dict) else {"success": True}
        location = format_location(data.get("location"))
        if location is not None:
            data["location_detail"] = {
                "address": location.address,
                "latitude": location.latitude,
                "longitude": location.longitude,
                "mapsUrl": location.maps_url,
            }
        return jsonify(data)

    @app.route("/ping", methods=["GET"], endpoint="ping")
    def ping():
        result = container.api_client.ping()
        if isinstance(result, Err):
            return jsonify({"pong": False, "msg": result.msg}), 502
        return jsonify({"pong": True, "backend": result.data})
