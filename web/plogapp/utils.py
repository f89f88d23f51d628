"""
Utility helpers: directory setup, logging config, request parsing, and time utils.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from datetime import datetime, timezone
from typing import Any, List

from flask import Flask, request
from werkzeug.exceptions import BadRequest


def ensure_dirs(*paths: Path) -> None:
    """Ensure each directory exists."""
    for p in paths:
        p.mkdir(parents=True, exist_ok=True)


def init_logging(app: Flask) -> logging.Logger:
    """Configure a console logger + rotating file handler."""
    log_level = getattr(logging, app.config["LOG_LEVEL"].upper(), logging.INFO)
    logger = logging.getLogger("plogapp")
    logger.setLevel(log_level)
    logger.propagate = False  # avoid duplicate logs if root has handlers

    # Repeated create_app() calls (tests) must not stack handlers
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    # Console
    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
    logger.addHandler(ch)

    # File (rotating)
    log_file = Path(app.config["LOG_FILE"])
    ensure_dirs(log_file.parent)
    fh = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=5)
    fh.setLevel(log_level)
    fh.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
    logger.addHandler(fh)

    return logger


def allowed_file(filename: str, allowed: set[str]) -> bool:
    """Return True if the filename has an allowed extension."""
    return "." in filename and filename.rsplit(".", 1)[1].lower() in allowed


def json_body() -> dict:
    """Return the request's JSON object or raise 400."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest("Expected a JSON object body")
    return data


def id_list(data: dict, key: str) -> List[Any]:
    """Return data[key] as a list of identifiers or raise 400."""
    values = data.get(key)
    if not isinstance(values, list):
        raise BadRequest(f"'{key}' must be a list of message ids")
    return values


def utcnow_iso() -> str:
    """Return current UTC timestamp in RFC3339-ish ISO format."""
    return datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z"
