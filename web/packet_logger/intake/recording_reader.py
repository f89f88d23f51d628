"""
Recording reader: yields Message objects from a JSON-lines text stream.

- One message per line: {"id": 40, "data": "0A 0B ..."} ("ts" is ignored).
- Blank lines are ignored; malformed lines are skipped and counted.
- No protocol parsing: the payload is replayed exactly as recorded.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import IO, Iterator, Optional

import zstandard  # type: ignore

from ..dto import Message
from ..exceptions import RecordingError
from .coerce import message_from_mapping


@dataclass
class ReadStats:
    """Counters updated while a recording is consumed."""
    lines_read: int = 0
    messages_read: int = 0
    lines_skipped: int = 0


def iter_messages(stream: IO[str], stats: Optional[ReadStats] = None) -> Iterator[Message]:
    """
    Iterate Message objects from an open recording text stream.

    Parameters
    ----------
    stream : IO[str]
        Text stream over the (decompressed) recording.
    stats : ReadStats, optional
        Counters to update in place.

    Raises
    ------
    RecordingError
        If the underlying stream is corrupt (e.g. truncated gzip/zstd data).
    """
    stats = stats if stats is not None else ReadStats()
    try:
        for line in stream:
            if not line.strip():
                continue
            stats.lines_read += 1
            msg = parse_line(line)
            if msg is None:
                stats.lines_skipped += 1
                continue
            stats.messages_read += 1
            yield msg
    except (OSError, EOFError, zstandard.ZstdError) as e:
        raise RecordingError(f"Corrupt recording stream: {e}") from e


def parse_line(line: str) -> Optional[Message]:
    """Parse one JSON line into a Message. Returns None if malformed."""
    try:
        obj = json.loads(line)
        return message_from_mapping(obj)
    except ValueError:
        # json.JSONDecodeError and coercion failures are both ValueErrors
        return None
