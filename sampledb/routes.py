"""HTTP routes for SampleDB."""

from __future__ import annotations

import logging
import sqlite3

from flask import Blueprint, Response, current_app, jsonify

from .engine import list_tables

logger = logging.getLogger(__name__)


def build_blueprint() -> Blueprint:
    """Create and return the application's route blueprint."""

    bp = Blueprint("sampledb", __name__)

    @bp.get("/")
    def status() -> Response:
        provisioner = current_app.extensions["sampledb"]["provisioner"]
        working_dir = provisioner.working_dir
        return jsonify(
            {
                "count": provisioner.count,
                "generation": provisioner.generation,
                "working_dir": str(working_dir) if working_dir else None,
                "descriptor": provisioner.resolve_descriptor(),
            }
        )

    @bp.get("/datasource")
    def datasource() -> Response:
        return jsonify(current_app.extensions["sampledb"]["datasource"].as_dict())

    @bp.get("/tables")
    def tables() -> Response:
        ext = current_app.extensions["sampledb"]
        if ext["released"]:
            return jsonify({"ok": False, "error": "SampleDB has been released"}), 409

        engine = ext["engine"]
        try:
            conn = engine.connect(ext["provisioner"].resolve_descriptor())
        except sqlite3.Error as exc:
            logger.error(f"Cannot open SampleDB: {exc}")
            return jsonify({"ok": False, "error": str(exc)}), 503
        try:
            return jsonify({"ok": True, "tables": list_tables(conn)})
        finally:
            engine.close(conn)

    return bp
