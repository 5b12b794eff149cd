from __future__ import annotations

import asyncio

from flask import Flask, jsonify, request

from ..common.datetime_utils import utc_now
from ..common.validators import require_date_range, require_iso_date, require_non_empty
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports/daily-work-time", methods=["GET"], endpoint="daily_work_time")
    def daily_work_time():
        try:
            employee_id = require_non_empty(request.args.get("employee_id"), "employee_id")
            start = require_iso_date(request.args.get("start_date"), "start_date")
            end = require_iso_date(request.args.get("end_date"), "end_date")
            require_date_range(start, end)
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400

        rows = asyncio.run(container.attendance_service.compute_range(employee_id, start, end))
        return jsonify({"success": True, "data": [r.to_dict() for r in rows]})

    @app.route("/api/reports/daily-work-time/batch", methods=["GET"], endpoint="daily_work_time_batch")
    def daily_work_time_batch():
        try:
            work_date = require_iso_date(request.args.get("date"), "date")
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400

        outcome = asyncio.run(container.batch_service.run_batch(work_date))
        return jsonify(
            {
                "success": True,
                "date": work_date.isoformat(),
                "cached": outcome.cached,
                "calculated": outcome.calculated,
                "data": [r.to_dict() for r in outcome.rows],
            }
        )

    @app.route("/api/reports/daily-work-time/month", methods=["GET"], endpoint="daily_work_time_month")
    def daily_work_time_month():
        try:
            start = require_iso_date(request.args.get("start"), "start")
            end = require_iso_date(request.args.get("end"), "end")
            require_date_range(start, end)
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400

        today = container.engine_settings.tz.local_date(utc_now())
        report = asyncio.run(container.batch_service.read_cached_range(start, end, today=today))
        return jsonify(
            {
                "success": True,
                "data": [r.to_dict() for r in report.rows],
                "missing_dates": [d.isoformat() for d in report.missing_dates],
            }
        )
