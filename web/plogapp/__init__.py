"""
Flask app factory: registers config, logging, the logging session, blueprints, and error handlers.
"""

from __future__ import annotations

import atexit
import os
from pathlib import Path
from typing import Type

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from packet_logger import (
    ConfigurationError,
    ExclusionStore,
    FileSinkFactory,
    LoggerConfig,
    LogSession,
    RecordingError,
    SinkError,
)
from plogapp.config import Config, DevelopmentConfig, ProductionConfig
from plogapp.utils import ensure_dirs, init_logging
from plogapp.managers.host_bridge import HostEventBridge
from plogapp.routes import command as command_bp
from plogapp.routes import filters as filters_bp
from plogapp.routes import ingest as ingest_bp
from plogapp.routes import replay as replay_bp
from plogapp.routes import session as session_bp


def create_app(config_class: Type[Config] | None = None) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)

    # Config selection
    cfg: Type[Config]
    env = os.getenv("FLASK_ENV", "production").lower()
    if config_class is not None:
        cfg = config_class
    elif env.startswith("dev"):
        cfg = DevelopmentConfig
    else:
        cfg = ProductionConfig
    app.config.from_object(cfg)

    # Ensure folders (packet logs are created lazily by the sink factory)
    upload_dir = Path(app.config["UPLOAD_FOLDER"])
    log_dir = Path(app.config["LOG_FOLDER"])
    ensure_dirs(upload_dir, log_dir)

    # Logging
    logger = init_logging(app)
    app.logger = logger  # align Flask's logger with ours

    # Core settings; invalid DEFAULT_EXCLUSIONS fail here, at startup
    logger_cfg = LoggerConfig(
        log_dir=Path(app.config["PACKET_LOG_FOLDER"]),
        default_exclusions=app.config["DEFAULT_EXCLUSIONS"],
        seed_exclusions_from_catalog=app.config["SEED_EXCLUSIONS_FROM_CATALOG"],
    )

    # Thread-safe session + exclusions stored in extensions registry
    exclusions = ExclusionStore(logger_cfg.initial_exclusions())
    log_session = LogSession(
        sink_factory=FileSinkFactory.from_config(logger_cfg),
        exclusions=exclusions,
        logger=logger.getChild("session"),
    )
    bridge = HostEventBridge(
        session=log_session,
        exclusions=exclusions,
        logger=logger.getChild("host"),
    )
    app.extensions["log_session"] = log_session
    app.extensions["exclusions"] = exclusions
    app.extensions["host_bridge"] = bridge

    bridge.on_load()
    # Interpreter shutdown closes any open log with its trailer
    atexit.register(bridge.on_unload)

    # Security-ish headers
    @app.after_request
    def set_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'"
        resp.headers["Cache-Control"] = "no-store"
        return resp

    # Error handlers
    @app.errorhandler(RequestEntityTooLarge)
    def handle_file_too_large(_e):
        return jsonify({"success": False, "error": "File too large"}), 413

    @app.errorhandler(ConfigurationError)
    def handle_configuration_error(e: ConfigurationError):
        app.logger.warning("Rejected filter configuration: %s", e)
        return jsonify({"success": False, "error": str(e)}), 400

    @app.errorhandler(RecordingError)
    def handle_recording_error(e: RecordingError):
        app.logger.warning("Rejected recording: %s", e)
        return jsonify({"success": False, "error": str(e)}), 400

    @app.errorhandler(SinkError)
    def handle_sink_error(e: SinkError):
        app.logger.error("Log sink failure: %s", e)
        return jsonify({"success": False, "error": str(e)}), 500

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        return jsonify({"success": False, "error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_exception(e: Exception):
        app.logger.exception("Unhandled error")
        return jsonify({"success": False, "error": "Internal server error"}), 500

    # Blueprints
    app.register_blueprint(session_bp.bp)
    app.register_blueprint(filters_bp.bp)
    app.register_blueprint(ingest_bp.bp)
    app.register_blueprint(replay_bp.bp)
    app.register_blueprint(command_bp.bp)

    # Health
    @app.route("/healthz")
    def healthz():
        return jsonify({"status": "ok"}), 200

    return app
