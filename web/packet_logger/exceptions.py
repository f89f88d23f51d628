"""
Exceptions raised by the packet logger core.

Two boundaries matter:
- Sink failures (SinkError) surface from LogSession.start() and are logged,
  never raised, on the message path.
- Configuration failures (ConfigurationError) are raised where exclusion
  identifiers enter the system and never reach the filter engine.
"""

from __future__ import annotations

__all__ = [
    "ConfigurationError",
    "PacketLoggerError",
    "RecordingError",
    "SinkError",
]


class PacketLoggerError(Exception):
    """Base class for packet logger errors."""


class SinkError(PacketLoggerError, OSError):
    """The output sink could not be opened, written, flushed or closed."""


class ConfigurationError(PacketLoggerError, ValueError):
    """A filter rule identifier or setting is malformed."""


class RecordingError(PacketLoggerError, ValueError):
    """A replay recording is missing, corrupt or uses an unknown compression."""
