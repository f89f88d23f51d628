"""
Replay recorded message streams through the logging pipeline.

A recording is a JSON-lines file ({"id": ..., "data": "<hex>"} per line),
optionally gzip (.gz) or zstd (.zst) compressed. Each admitted message is
written to the session's log exactly as if it had arrived live.

Usage examples:
  plog-replay capture.jsonl
  plog-replay capture.jsonl.zst --exclude 0x00D --exclude 0x028_0x1844
  plog-replay day1.jsonl.gz day2.jsonl.gz --log-dir logs/replay --seed-catalog
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional

from tqdm import tqdm

from .config import LoggerConfig
from .exceptions import ConfigurationError, RecordingError, SinkError
from .exclusions import ExclusionStore
from .intake.decompress import open_recording_stream, recording_handle
from .intake.recording_reader import ReadStats, iter_messages
from .intake.validator import validate_recording
from .session import LogSession
from .sinks.file_sink import FileSinkFactory


def replay_recording(path: str | os.PathLike, session: LogSession, *, pbar: Optional[tqdm] = None) -> Dict[str, int]:
    """
    Feed every message of one recording into `session`.

    The session must already be started; messages offered to a disabled
    session are read but not logged.

    Returns:
        {"lines_read", "messages_read", "lines_skipped", "messages_logged"}

    Raises:
        RecordingError: If the file is missing, fails validation or is corrupt.
    """
    rec = recording_handle(path)
    if not validate_recording(rec):
        raise RecordingError(f"Not a valid {rec.compressor} recording: {rec.path}")

    stats = ReadStats()
    logged = 0
    with open_recording_stream(rec) as stream:
        for msg in iter_messages(stream, stats):
            if session.on_message(msg.type_id, msg.payload):
                logged += 1
            if pbar is not None:
                pbar.update()

    return {
        "lines_read": stats.lines_read,
        "messages_read": stats.messages_read,
        "lines_skipped": stats.lines_skipped,
        "messages_logged": logged,
    }


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="plog-replay",
        description="Replay recorded protocol messages into a hex-dump packet log",
    )
    p.add_argument("recordings", nargs="+", help="Recording files (.jsonl, .jsonl.gz, .jsonl.zst)")
    p.add_argument("--log-dir", default="logs/packets", help="Output directory (default: logs/packets)")
    p.add_argument("--prefix", default="packetlog", help="Log file name prefix (default: packetlog)")
    p.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="ID",
        help="Exclude a message id or id_subcategory (repeatable), e.g. 0x00D or 0x028_0x1844",
    )
    p.add_argument(
        "--seed-catalog",
        action="store_true",
        help="Start with every catalogued message type excluded (ignored if --exclude is given)",
    )
    p.add_argument("--log-level", default="WARNING", help="Diagnostic log level (default: WARNING)")
    p.add_argument("--no-progress", action="store_true", help="Disable the progress bar")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    logger = logging.getLogger("packet_logger.replay")

    try:
        cfg = LoggerConfig(
            log_dir=Path(args.log_dir),
            file_prefix=args.prefix,
            default_exclusions=tuple(args.exclude),
            seed_exclusions_from_catalog=args.seed_catalog,
        )
    except (ConfigurationError, ValueError) as e:
        sys.stderr.write(f"Invalid configuration: {e}\n")
        return 2

    session = LogSession(
        sink_factory=FileSinkFactory.from_config(cfg),
        exclusions=ExclusionStore(cfg.initial_exclusions()),
        logger=logger,
    )

    try:
        _, message = session.start()
    except SinkError as e:
        sys.stderr.write(f"Failed to create log file: {e}\n")
        return 1

    failures = 0
    pbar = tqdm(unit="msg", disable=args.no_progress)
    try:
        for path in args.recordings:
            pbar.set_description(f"Replaying: {Path(path).name}")
            try:
                result = replay_recording(path, session, pbar=pbar)
            except RecordingError as e:
                failures += 1
                pbar.write(f"[WARN] {path}: {e}")
                continue
            if result["lines_skipped"]:
                pbar.write(f"[WARN] {path}: skipped {result['lines_skipped']} malformed line(s)")
    finally:
        pbar.close()
        total = session.stop()

    status = session.status()
    print(message)
    print(f"Logging stopped. {total} messages logged to {status.log_path}")
    if status.write_errors:
        print(f"{status.write_errors} message(s) could not be written: {status.last_error}")
        failures += 1

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
