"""
Session routes: start/stop logging and status telemetry.
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from packet_logger import LogSession
from plogapp.utils import utcnow_iso

bp = Blueprint("session", __name__, url_prefix="/session")


@bp.route("/start", methods=["POST"])
def start_session():
    """
    Open a new packet log. A second start while active is reported, not applied.
    Sink failures propagate to the SinkError handler (500).
    """
    mgr: LogSession = current_app.extensions["log_session"]

    ok, msg = mgr.start()
    status = 200 if ok else 409
    current_app.logger.info("Start session: %s", msg)
    return jsonify({"success": ok, "message": msg, "log_file": mgr.status().log_path}), status


@bp.route("/stop", methods=["POST"])
def stop_session():
    """Write the trailer, close the log, and return the final count."""
    mgr: LogSession = current_app.extensions["log_session"]
    ended = mgr.finish()
    snap = mgr.status()
    return jsonify({
        "success": True,
        "message": "Logging stopped" if ended else "Not currently logging",
        "count": ended[0] if ended else 0,
        "log_file": snap.log_path,
    })


@bp.route("/status")
def session_status():
    mgr: LogSession = current_app.extensions["log_session"]
    return jsonify({"timestamp": utcnow_iso(), **mgr.status().to_dict()})
