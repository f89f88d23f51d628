"""
Thread-safe logging session: sink lifecycle, admission and hex-dump output.

A LogSession is created once per process (idle, disabled) and provides:
- start()/stop() to open and close one text log per session,
- on_message() as the single entry point for the inbound message feed,
- status() for a read-only snapshot.

Every public method holds one lock for its whole duration, so `enabled`,
`sink` and `count` always change together. Sink failures never escape
on_message(); they are logged to the diagnostic logger and kept in status.
"""

from __future__ import annotations

import logging
import textwrap
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional, Tuple

from .dto import MessageTypeId, SessionStatus
from .exceptions import SinkError
from .pipeline.filtering import should_log
from .pipeline.hexdump import render
from .pipeline.rules import format_exclusions
from .ports import ExclusionSourcePort, SinkFactoryPort, SinkPort

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
TIME_FORMAT = "%H:%M:%S"
DUMP_INDENT = "  "


# ---------------------------- Log file format ----------------------------

def format_header(now: datetime, excluded: str) -> str:
    return (
        "=== Session Started ===\n"
        f"Date: {now.strftime(DATE_FORMAT)}\n"
        f"Excluded: {excluded}\n"
        "\n"
    )


def format_entry(now: datetime, type_id: MessageTypeId, payload: bytes) -> str:
    """Header line, indented hex dump and a blank separator line."""
    head = f"[{now.strftime(TIME_FORMAT)}] Message 0x{type_id:03X} (Size: {len(payload)} bytes)\n"
    return head + textwrap.indent(render(payload), DUMP_INDENT) + "\n"


def format_trailer(now: datetime, count: int, excluded: str) -> str:
    return (
        "=== Session Ended ===\n"
        f"Date: {now.strftime(DATE_FORMAT)}\n"
        f"Total Messages Logged: {count}\n"
        f"Excluded: {excluded}\n"
    )


# -------------------------------- Session --------------------------------

@dataclass
class LogSession:
    """
    Coordinates filtering, rendering and persistence of incoming messages.

    Attributes:
        sink_factory: Opens a fresh sink on every start().
        exclusions: Live exclusion source, re-read for every message.
        logger: Diagnostic channel for lifecycle events and sink failures.
        clock: Time source for headers and elapsed time.

    State (protected by _lock):
        enabled: True while a sink is open.
        sink: The open sink, or None when disabled.
        count: Messages written to the current (or last) sink.
        started_at: Start time of the current (or last) session.
        log_path: Destination of the current (or last) sink.
        write_errors: Failed message writes in the current session.
        last_error: Last sink error message, if any.
    """
    sink_factory: SinkFactoryPort
    exclusions: ExclusionSourcePort
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("packet_logger"))
    clock: Callable[[], datetime] = datetime.now

    enabled: bool = field(default=False, init=False)
    sink: Optional[SinkPort] = field(default=None, init=False, repr=False)
    count: int = field(default=0, init=False)
    started_at: Optional[datetime] = field(default=None, init=False)
    log_path: Optional[str] = field(default=None, init=False)
    write_errors: int = field(default=0, init=False)
    last_error: Optional[str] = field(default=None, init=False)

    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    # ---------------------------- Control plane ----------------------------

    def start(self) -> Tuple[bool, str]:
        """
        Open a new sink and write the session header.

        Returns:
            (True, message) when logging started, or (False, message) when a
            session is already active. The active session is left untouched.

        Raises:
            SinkError: If the sink cannot be opened or the header written.
                The session stays disabled.
        """
        with self._lock:
            if self.enabled:
                return False, f"Already logging to: {self.log_path}"

            try:
                sink = self.sink_factory.open()
            except SinkError as e:
                self.last_error = str(e)
                self.logger.error("Failed to create log file: %s", e)
                raise

            now = self.clock()
            try:
                sink.write(format_header(now, format_exclusions(self.exclusions.get_exclusions())))
                sink.flush()
            except SinkError as e:
                self.last_error = str(e)
                self.logger.error("Failed to write session header: %s", e)
                self._close_sink(sink)
                raise

            self.sink = sink
            self.enabled = True
            self.count = 0
            self.write_errors = 0
            self.started_at = now
            self.log_path = sink.path
            self.last_error = None

            self.logger.info("Logging started: %s", self.log_path)
            return True, f"Logging started: {self.log_path}"

    def stop(self) -> int:
        """
        Write the trailer and close the sink.

        Safe to call at any time, including during shutdown; a no-op when
        disabled. The sink is closed even if the trailer cannot be written.

        Returns:
            Number of messages logged in the session that just ended
            (0 if nothing was active).
        """
        ended = self.finish()
        return ended[0] if ended else 0

    def finish(self) -> Optional[Tuple[int, float]]:
        """
        Same as stop(), but tells an idle session apart from an empty one.

        Returns:
            (count, elapsed_seconds) of the session that just ended, or None
            if nothing was active.
        """
        with self._lock:
            if not self.enabled or self.sink is None:
                return None

            sink, self.sink = self.sink, None
            self.enabled = False
            now = self.clock()

            try:
                sink.write(format_trailer(now, self.count, format_exclusions(self.exclusions.get_exclusions())))
                sink.flush()
            except SinkError as e:
                self.last_error = str(e)
                self.logger.error("Failed to write session trailer: %s", e)
            finally:
                self._close_sink(sink)

            elapsed = (now - self.started_at).total_seconds() if self.started_at else 0.0
            self.logger.info(
                "Logging stopped. %d messages logged in %d seconds", self.count, int(elapsed)
            )
            return self.count, elapsed

    # ------------------------------ Data plane -----------------------------

    def on_message(self, type_id: MessageTypeId, payload: bytes) -> bool:
        """
        Filter one message and append it to the log if admitted.

        Never raises for sink failures: the error is logged, counted and the
        session stays enabled.

        Returns:
            True if the message was written, False otherwise.
        """
        with self._lock:
            if not self.enabled or self.sink is None:
                return False

            if not should_log(type_id, payload, self.exclusions.get_exclusions()):
                return False

            entry = format_entry(self.clock(), type_id, payload)
            try:
                self.sink.write(entry)
                self.sink.flush()
            except SinkError as e:
                self.write_errors += 1
                self.last_error = str(e)
                self.logger.error("Failed to log message 0x%03X: %s", type_id, e)
                return False

            self.count += 1
            return True

    # ------------------------------ Telemetry ------------------------------

    def status(self) -> SessionStatus:
        """Return a read-only snapshot of the session."""
        with self._lock:
            elapsed = 0.0
            if self.enabled and self.started_at is not None:
                elapsed = max(0.0, (self.clock() - self.started_at).total_seconds())
            return SessionStatus(
                enabled=self.enabled,
                count=self.count,
                elapsed_seconds=elapsed,
                exclusion_summary=format_exclusions(self.exclusions.get_exclusions()),
                log_path=self.log_path,
                started_at=self.started_at,
                write_errors=self.write_errors,
                last_error=self.last_error,
            )

    # ------------------------------- Helpers -------------------------------

    def _close_sink(self, sink: SinkPort) -> None:
        """Close `sink` once; a failure is recorded, not raised (lock held)."""
        try:
            sink.close()
        except SinkError as e:
            self.last_error = str(e)
            self.logger.error("Failed to close log file: %s", e)
