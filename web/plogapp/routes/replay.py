"""
Replay route: upload a recording and feed it into the live session.
"""

from __future__ import annotations
from datetime import datetime
from pathlib import Path

from flask import Blueprint, current_app, jsonify, request
from werkzeug.utils import secure_filename

from packet_logger import LogSession, replay_recording
from plogapp.utils import allowed_file

bp = Blueprint("replay", __name__, url_prefix="/replay")


@bp.route("", methods=["POST"])
def replay_upload():
    """
    Multipart upload (field "file") of a .jsonl, .jsonl.gz or .jsonl.zst recording.

    Requires an active session; RecordingError maps to 400.
    The saved upload is deleted once replayed, whether or not replay succeeded.
    """
    if "file" not in request.files:
        return jsonify({"success": False, "error": "No file part"}), 400

    file = request.files["file"]
    if not file or file.filename == "":
        return jsonify({"success": False, "error": "No selected file"}), 400

    if not allowed_file(file.filename, current_app.config["ALLOWED_EXTENSIONS"]):
        return jsonify({"success": False, "error": "Invalid file type"}), 400

    mgr: LogSession = current_app.extensions["log_session"]
    if not mgr.status().enabled:
        return jsonify({"success": False, "error": "Logging is not active"}), 409

    upload_dir = Path(current_app.config["UPLOAD_FOLDER"])
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    filename = f"{ts}_{secure_filename(file.filename)}"
    dest = upload_dir / filename
    file.save(dest)

    try:
        metrics = replay_recording(dest, mgr)
    finally:
        dest.unlink(missing_ok=True)
    current_app.logger.info(
        "Replayed %s: %d/%d messages logged", filename, metrics["messages_logged"], metrics["messages_read"]
    )
    return jsonify({"success": True, "filename": filename, "metrics": metrics})
