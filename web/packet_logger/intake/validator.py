"""
Basic recording validation.

Goal: fast, side-effect-free checks that a recording *looks* like what its
file name claims before we start replaying it: gzip and zstd magic bytes
for compressed files, a JSON object start for plain JSON lines.

We DO NOT parse lines here; the reader skips malformed lines later.
"""

from __future__ import annotations

import os
from typing import Final

from ..dto import RecordingHandle

# --- Magic numbers (byte order as they appear on disk) ---
MAGIC_GZIP: Final[bytes] = bytes.fromhex("1f 8b")
MAGIC_ZSTD: Final[bytes] = bytes.fromhex("28 b5 2f fd")

_UTF8_BOM: Final[bytes] = b"\xef\xbb\xbf"


def _read_head(path: str, n: int) -> bytes:
    with open(path, "rb") as f:
        return f.read(n)


def _looks_like_gzip(head: bytes) -> bool:
    return len(head) >= 2 and head[:2] == MAGIC_GZIP


def _looks_like_zstd(head: bytes) -> bool:
    return len(head) >= 4 and head[:4] == MAGIC_ZSTD


def _looks_like_jsonl(head: bytes) -> bool:
    if head.startswith(_UTF8_BOM):
        head = head[len(_UTF8_BOM):]
    stripped = head.lstrip()
    # An empty recording is valid: it simply replays nothing
    return not stripped or stripped[:1] == b"{"


def validate_recording(rec: RecordingHandle) -> bool:
    """
    Quick validation of a RecordingHandle path.

    Checks:
    - File exists and is a regular file.
    - If compressor == none: first non-blank byte opens a JSON object.
    - If compressor == gzip/zstd: magic bytes match the compressor.

    Returns True if basic checks pass, False otherwise.
    """
    try:
        st = os.stat(rec.path)
    except OSError:
        return False

    if not os.path.isfile(rec.path):
        return False

    if rec.compressor == "none":
        if st.st_size == 0:
            return True
        return _looks_like_jsonl(_read_head(rec.path, 64))

    head = _read_head(rec.path, 16)

    if rec.compressor == "gzip":
        return _looks_like_gzip(head)

    if rec.compressor == "zstd":
        return _looks_like_zstd(head)

    # Unknown compressor label (shouldn't happen)
    return False
