"""
Hex-dump rendering of message payloads.

Layout (one line per 16 bytes, last line may be shorter, never padded):

    0000: 00 01 02 03 04 05 06 07 08 09 0A 0B 0C 0D 0E 0F
    0010: 10 11

Offsets are zero-based, 4 uppercase hex digits (wider only past 0xFFFF).
Output is pure ASCII and independent of locale.
"""

from __future__ import annotations

from typing import Iterator, Tuple

BYTES_PER_LINE = 16


def render(payload: bytes) -> str:
    """
    Render payload bytes as a hex dump body.

    Every line ends with a newline; an empty payload yields "".
    """
    return "".join(f"{offset:04X}: {chunk.hex(' ').upper()}\n" for offset, chunk in iter_lines(payload))


def iter_lines(payload: bytes) -> Iterator[Tuple[int, bytes]]:
    """Yield (offset, chunk) pairs of at most BYTES_PER_LINE bytes."""
    data = bytes(payload)
    for offset in range(0, len(data), BYTES_PER_LINE):
        yield offset, data[offset : offset + BYTES_PER_LINE]
