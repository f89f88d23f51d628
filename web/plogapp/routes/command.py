"""
Command route: the chat-command surface ("/plog start", "/plog filter 0x00D", ...).
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify
from werkzeug.exceptions import BadRequest

from plogapp.managers.host_bridge import HostEventBridge
from plogapp.utils import json_body

bp = Blueprint("command", __name__, url_prefix="/command")


@bp.route("", methods=["POST"])
def run_command():
    """
    Body (JSON):
      { "command": "/plog status" }

    "blocked" is False when the text is not a packet logger command.
    """
    text = json_body().get("command")
    if not isinstance(text, str):
        raise BadRequest("'command' must be a string")

    bridge: HostEventBridge = current_app.extensions["host_bridge"]
    result = bridge.on_command(text)
    return jsonify({"success": True, "blocked": result.blocked, "messages": result.messages})
