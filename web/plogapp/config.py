"""
Configuration objects for the Flask application.

Override via environment variables or a .env file (when using python-dotenv).
"""

from __future__ import annotations
import os


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    """Base configuration (safe defaults)."""

    # Storage
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "uploads")
    LOG_FOLDER = os.getenv("LOG_FOLDER", "logs")
    PACKET_LOG_FOLDER = os.getenv("PACKET_LOG_FOLDER", "logs/packets")

    # Requests / uploads
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", str(16 * 1024 * 1024)))  # 16 MiB

    # Recording types accepted by /replay (last suffix)
    ALLOWED_EXTENSIONS = set(
        (os.getenv("ALLOWED_EXTENSIONS", "jsonl,gz,zst")).split(",")
    )

    # Logging
    LOG_FILE = os.getenv("APP_LOG_FILE", "logs/app.log")
    LOG_LEVEL = os.getenv("APP_LOG_LEVEL", "INFO")

    # Filtering
    DEFAULT_EXCLUSIONS = os.getenv("DEFAULT_EXCLUSIONS", "")  # e.g. "0x00D,0x028_0x1844"
    SEED_EXCLUSIONS_FROM_CATALOG = _env_flag("SEED_EXCLUSIONS_FROM_CATALOG")


class ProductionConfig(Config):
    """Production overrides."""
    LOG_LEVEL = os.getenv("APP_LOG_LEVEL", "INFO")


class DevelopmentConfig(Config):
    """Development overrides."""
    LOG_LEVEL = os.getenv("APP_LOG_LEVEL", "DEBUG")
