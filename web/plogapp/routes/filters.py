"""
Filter routes: read and edit the live exclusion set.

Identifiers are accepted as ints or strings ("0x028", "40", "0x028_0x1844").
A malformed identifier rejects the whole request (400) and leaves the set unchanged.
"""

from __future__ import annotations

from typing import Any, Dict, List

from flask import Blueprint, current_app, jsonify

from packet_logger import CATALOG, ExclusionStore
from packet_logger.pipeline.rules import sort_key
from plogapp.utils import id_list, json_body

bp = Blueprint("filters", __name__, url_prefix="/filters")


def _store() -> ExclusionStore:
    return current_app.extensions["exclusions"]


def _snapshot() -> Dict[str, Any]:
    """Catalog checkboxes plus any exclusions outside the catalog."""
    store = _store()
    current = store.get_exclusions()
    catalog: List[Dict[str, Any]] = [
        {
            "id": entry.rule.identifier,
            "label": entry.label,
            "group": entry.group,
            "excluded": entry.rule in current,
        }
        for entry in CATALOG
    ]
    known = {entry.rule for entry in CATALOG}
    other = [r.identifier for r in sorted(current - known, key=sort_key)]
    return {"success": True, "catalog": catalog, "other": other, "excluded": store.summary()}


@bp.route("", methods=["GET"])
def list_filters():
    return jsonify(_snapshot())


@bp.route("", methods=["PUT"])
def replace_filters():
    """
    Replace the exclusion set.

    Body (JSON):
      { "excluded": ["0x00D", "0x028_0x1844"] }
    """
    values = id_list(json_body(), "excluded")
    _store().set_exclusions(values)
    current_app.logger.info("Exclusions replaced: %s", _store().summary())
    return jsonify(_snapshot())


@bp.route("/add", methods=["POST"])
def add_filters():
    values = id_list(json_body(), "ids")
    _store().add(*values)
    current_app.logger.info("Exclusions added: %s", values)
    return jsonify(_snapshot())


@bp.route("/remove", methods=["POST"])
def remove_filters():
    values = id_list(json_body(), "ids")
    _store().remove(*values)
    current_app.logger.info("Exclusions removed: %s", values)
    return jsonify(_snapshot())


@bp.route("/clear", methods=["POST"])
def clear_filters():
    _store().clear()
    current_app.logger.info("Exclusions cleared")
    return jsonify(_snapshot())


@bp.route("/toggle/<identifier>", methods=["POST"])
def toggle_filter(identifier: str):
    """Flip one checkbox; the response carries its new state."""
    excluded = _store().toggle(identifier)
    payload = _snapshot()
    payload["toggled"] = {"id": identifier, "excluded": excluded}
    return jsonify(payload)
