from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict

from flask import Flask, abort, jsonify, request
from reactpy.backend.flask import Options, configure

import planning
from pages import App
from planning import ValidationError
from theme import APP_TITLE, DRAG_SCROLL_JS
from tracker_config import load_dotenv, load_settings, resolve_log_level
from tracker_store import (
    TABLES,
    StoreError,
    delete_row,
    fetch_allocations,
    fetch_resources,
    fetch_rows,
    get_store,
    insert_row,
    update_row,
)

load_dotenv()
SETTINGS = load_settings()

logging.basicConfig(
    level=resolve_log_level(SETTINGS.log_level),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = Flask(__name__)

CLEANERS = {
    "resources": planning.clean_resource,
    "projects": planning.clean_project,
    "allocations": planning.clean_allocation,
}


def table_or_404(table: str) -> str:
    if table not in TABLES:
        abort(404)
    return table


def json_payload() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Expected a JSON object body")
    return payload


@app.errorhandler(ValidationError)
def handle_validation_error(exc: ValidationError):
    return jsonify({"error": str(exc)}), 400


@app.errorhandler(StoreError)
def handle_store_error(exc: StoreError):
    app.logger.warning("Data service error on %s %s: %s", request.method, request.path, exc)
    return jsonify({"error": str(exc)}), 502


@app.route("/api/db-health")
def api_db_health():
    try:
        ok = get_store().ping()
    except StoreError:
        app.logger.exception("Data service health check failed")
        ok = False
    return jsonify({"ok": ok})


@app.route("/api/<table>", methods=["GET", "POST"])
def api_table_collection(table: str):
    table_or_404(table)
    if request.method == "GET":
        return jsonify(fetch_rows(table))
    values = CLEANERS[table](json_payload())
    rows = insert_row(table, values)
    return jsonify(rows), 201


@app.route("/api/<table>/<item_id>", methods=["PUT", "DELETE"])
def api_table_item(table: str, item_id: str):
    table_or_404(table)
    if request.method == "DELETE":
        delete_row(table, item_id)
        return jsonify({"ok": True})
    values = CLEANERS[table](json_payload())
    rows = update_row(table, item_id, values)
    if not rows:
        abort(404)
    return jsonify(rows)


def int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValidationError(f"Query parameter '{name}' must be an integer") from exc


@app.route("/api/calendar")
def api_calendar():
    today = date.today()
    year = int_arg("year", today.year)
    month = int_arg("month", today.month)
    if not 1 <= month <= 12:
        raise ValidationError("Query parameter 'month' must be between 1 and 12")
    grid = planning.build_calendar(
        fetch_resources(),
        fetch_allocations(),
        year,
        month,
        selected_resources=request.args.getlist("resource"),
        selected_projects=request.args.getlist("project"),
    )
    return jsonify(grid)


@app.route("/api/report")
def api_report():
    sort_key = request.args.get("sort", "resource")
    if sort_key not in planning.REPORT_SORT_KEYS:
        raise ValidationError(f"Unknown sort key: {sort_key}")
    availability = request.args.get("availability", "")
    if availability not in ("", planning.AVAILABLE, planning.NOT_AVAILABLE):
        raise ValidationError(f"Unknown availability filter: {availability}")
    rows = planning.build_report(fetch_resources(), fetch_allocations())
    visible = planning.filter_report(
        rows,
        search=request.args.get("search", ""),
        project=request.args.get("project", ""),
        availability=availability,
    )
    ascending = request.args.get("direction", "asc") != "desc"
    return jsonify(planning.sort_rows(visible, planning.REPORT_SORT_KEYS, sort_key, ascending))


configure(
    app,
    App,
    Options(
        head=(
            {"tagName": "title", "children": [APP_TITLE]},
            {
                "tagName": "meta",
                "attributes": {"name": "viewport", "content": "width=device-width, initial-scale=1"},
            },
            {"tagName": "script", "children": [DRAG_SCROLL_JS]},
        )
    ),
)


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=SETTINGS.port, debug=SETTINGS.debug)
