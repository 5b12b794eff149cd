from __future__ import annotations

import asyncio

from flask import Flask, jsonify, request

from ..common.validators import require_date_range, require_iso_date
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports/payroll", methods=["GET"], endpoint="payroll_summary")
    def payroll_summary():
        try:
            start = require_iso_date(request.args.get("start_date"), "start_date")
            end = require_iso_date(request.args.get("end_date"), "end_date")
            require_date_range(start, end)
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400

        employee_id = (request.args.get("employee_id") or "").strip() or None
        rows = asyncio.run(container.payroll_service.build_summary(start=start, end=end, employee_id=employee_id))
        return jsonify({"success": True, "data": [r.to_dict() for r in rows]})
