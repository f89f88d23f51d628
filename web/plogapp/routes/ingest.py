"""
Ingest route: push messages into the live session over HTTP.
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify
from werkzeug.exceptions import BadRequest

from packet_logger import LogSession
from packet_logger.intake.coerce import message_from_mapping
from plogapp.utils import json_body

bp = Blueprint("ingest", __name__, url_prefix="/ingest")


@bp.route("", methods=["POST"])
def ingest():
    """
    Offer one or more messages to the logging session.

    Body (JSON), either:
      { "id": 40, "data": "00 01 ...", "data_modified": "..." }
      { "messages": [ {...}, {...} ] }

    The batch is validated before anything is logged; one malformed
    message rejects the request with 400.
    """
    data = json_body()
    raw = data["messages"] if "messages" in data else [data]
    if not isinstance(raw, list):
        raise BadRequest("'messages' must be a list")

    messages = []
    for i, obj in enumerate(raw):
        try:
            messages.append(message_from_mapping(obj))
        except ValueError as e:
            raise BadRequest(f"Invalid message at index {i}: {e}") from e

    mgr: LogSession = current_app.extensions["log_session"]
    logged = sum(1 for m in messages if mgr.on_message(m.type_id, m.payload))
    return jsonify({
        "success": True,
        "received": len(messages),
        "logged": logged,
        "enabled": mgr.status().enabled,
    })
