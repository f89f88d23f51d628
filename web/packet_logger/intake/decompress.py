"""
Compressed recording opener.

Provides `open_recording_stream(rec)` that returns a text stream over a
recording's JSON lines, regardless of whether the file is uncompressed,
gzip-compressed, or zstd-compressed, and `recording_handle(path)` that
infers the compressor from the file name.

This module does not parse lines; it only handles decompression.
"""

from __future__ import annotations

import gzip
import io
import os
from contextlib import contextmanager
from typing import IO, Generator, Tuple

import zstandard  # type: ignore

from ..dto import Compressor, RecordingHandle
from ..exceptions import RecordingError

# Accepted filename suffixes
COMP_SUFFIXES: Tuple[Tuple[str, Compressor], ...] = (
    (".zst", "zstd"),
    (".zstd", "zstd"),
    (".gz", "gzip"),
)


def infer_compressor(name: str) -> Compressor:
    lower = name.lower()
    for suffix, comp in COMP_SUFFIXES:
        if lower.endswith(suffix):
            return comp
    return "none"


def recording_handle(path: str | os.PathLike) -> RecordingHandle:
    """Build a RecordingHandle for `path`, compressor inferred from its suffix."""
    p = os.fspath(path)
    return RecordingHandle(path=p, compressor=infer_compressor(os.path.basename(p)))


@contextmanager
def open_recording_stream(rec: RecordingHandle, *, encoding: str = "utf-8") -> Generator[IO[str], None, None]:
    """
    Context manager yielding a readable text stream for the given recording.

    - rec.compressor == "none": open() in 'rb'
    - rec.compressor == "gzip": gzip.open(..., 'rb')
    - rec.compressor == "zstd": zstd stream reader over the file

    Undecodable bytes are replaced so one bad line cannot abort a replay.
    """
    try:
        raw = open(rec.path, "rb")
    except OSError as e:
        raise RecordingError(f"Cannot open recording '{rec.path}': {e}") from e

    try:
        if rec.compressor == "none":
            binary: IO[bytes] = raw
        elif rec.compressor == "gzip":
            binary = gzip.GzipFile(fileobj=raw, mode="rb")
        elif rec.compressor == "zstd":
            binary = zstandard.ZstdDecompressor().stream_reader(raw, closefd=False)
        else:
            raise RecordingError(f"Unknown compressor '{rec.compressor}' for {rec.path}")

        text = io.TextIOWrapper(binary, encoding=encoding, errors="replace", newline=None)
        try:
            yield text
        finally:
            text.close()
    finally:
        raw.close()
