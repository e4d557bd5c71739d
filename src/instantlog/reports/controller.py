from __future__ import annotations

from flask import Flask, jsonify, request, send_file, session

from ..common.datetime_utils import now_local
from ..common.web import error, int_arg, login_required
from ..container import Container
from ..core.enums import ReportKind
from .service import EXCEL_MIMETYPE


def register(app: Flask, container: Container) -> None:
    def _build():
        today = now_local().date()
        try:
            kind = ReportKind(request.args.get("type") or ReportKind.MONTHLY.value)
        except ValueError:
            return None, error("Unknown report type", 400)

        year = int_arg(request.args.get("year"), today.year)
        month = int_arg(request.args.get("month"), today.month)
        if not 1 <= month <= 12 or not 1 <= year <= 9999:
            return None, error("Invalid month", 400)

        timeline = container.history_views.timeline(session["user_id"])
        report = container.report_service.build(
            timeline,
            kind=kind,
            employee_name=session.get("name"),
            today=today,
            year=year,
            month=month,
        )
        return report, None

    @app.route("/report", methods=["GET"], endpoint="report")
    @login_required
    def report():
        data, failure = _build()
        if failure is not None:
            return failure
        return jsonify(data.to_dict())

    @app.route("/report/export", methods=["GET"], endpoint="report_export")
    @login_required
    def report_export():
        data, failure = _build()
        if failure is not None:
            return failure
        output = container.report_service.to_excel(data)
        return send_file(
            output,
            download_name=f"{data.filename}.xlsx",
            as_attachment=True,
            mimetype=EXCEL_MIMETYPE,
        )
