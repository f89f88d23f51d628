"""
File-backed output sink.

Each session gets its own text file:
  <log_dir>/<prefix>_<YYYYmmdd_HHMMSS>.txt

Files are created with exclusive mode, so a restart within the same second
gets a numbered sibling ("..._1.txt") instead of reusing a closed log.
All OS-level failures are re-raised as SinkError.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, TextIO

from ..config import LoggerConfig
from ..exceptions import SinkError

# Upper bound on numbered siblings tried for one timestamp
_MAX_NAME_ATTEMPTS = 100


class FileSink:
    """Append-only text file opened by FileSinkFactory."""

    def __init__(self, path: Path, handle: TextIO) -> None:
        self.path: Optional[str] = str(path)
        self._handle: Optional[TextIO] = handle

    def write(self, text: str) -> None:
        handle = self._require_open()
        try:
            handle.write(text)
        except (OSError, ValueError) as e:
            raise SinkError(f"Failed to write to '{self.path}': {e}") from e

    def flush(self) -> None:
        handle = self._require_open()
        try:
            handle.flush()
        except OSError as e:
            raise SinkError(f"Failed to flush '{self.path}': {e}") from e

    def close(self) -> None:
        handle, self._handle = self._handle, None
        if handle is None:
            return
        try:
            handle.close()
        except OSError as e:
            raise SinkError(f"Failed to close '{self.path}': {e}") from e

    @property
    def closed(self) -> bool:
        return self._handle is None

    def _require_open(self) -> TextIO:
        if self._handle is None:
            raise SinkError(f"Sink already closed: {self.path}")
        return self._handle


class FileSinkFactory:
    """
    Opens a fresh FileSink per session.

    Parameters
    ----------
    log_dir : Path
        Target directory; created on demand.
    prefix : str
        File name prefix.
    timestamp_format : str
        strftime format for the name's timestamp part.
    encoding : str
        Text encoding of the file.
    clock : Callable[[], datetime]
        Time source for file names (injectable for tests).
    """

    def __init__(
        self,
        log_dir: Path,
        *,
        prefix: str = "packetlog",
        timestamp_format: str = "%Y%m%d_%H%M%S",
        encoding: str = "ascii",
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.log_dir = Path(log_dir)
        self.prefix = prefix
        self.timestamp_format = timestamp_format
        self.encoding = encoding
        self._clock = clock

    @classmethod
    def from_config(cls, cfg: LoggerConfig, **kwargs) -> "FileSinkFactory":
        return cls(
            cfg.log_dir,
            prefix=cfg.file_prefix,
            timestamp_format=cfg.timestamp_format,
            encoding=cfg.encoding,
            **kwargs,
        )

    def open(self) -> FileSink:
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SinkError(f"Cannot create log directory '{self.log_dir}': {e}") from e

        stem = f"{self.prefix}_{self._clock().strftime(self.timestamp_format)}"
        for attempt in range(_MAX_NAME_ATTEMPTS):
            name = f"{stem}.txt" if attempt == 0 else f"{stem}_{attempt}.txt"
            path = self.log_dir / name
            try:
                handle = path.open("x", encoding=self.encoding, newline="\n")
            except FileExistsError:
                continue
            except OSError as e:
                raise SinkError(f"Failed to create log file '{path}': {e}") from e
            return FileSink(path, handle)

        raise SinkError(f"No free log file name for '{stem}' in {self.log_dir}")
