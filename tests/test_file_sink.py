"""Tests for the file-backed sink and its factory."""

from datetime import datetime
from pathlib import Path

import pytest

from packet_logger import FileSinkFactory, LoggerConfig, LogSession, SinkError, ExclusionStore


def fixed_clock():
    return datetime(2024, 3, 1, 12, 30, 5)


class TestFileSinkFactory:
    def test_creates_directory_and_named_file(self, tmp_path):
        log_dir = tmp_path / "nested" / "packets"
        sink = FileSinkFactory(log_dir, clock=fixed_clock).open()
        sink.close()
        assert Path(sink.path) == log_dir / "packetlog_20240301_123005.txt"
        assert Path(sink.path).exists()

    def test_never_reuses_existing_file(self, tmp_path):
        factory = FileSinkFactory(tmp_path, clock=fixed_clock)
        first = factory.open()
        second = factory.open()
        third = factory.open()
        for s in (first, second, third):
            s.close()
        assert Path(first.path).name == "packetlog_20240301_123005.txt"
        assert Path(second.path).name == "packetlog_20240301_123005_1.txt"
        assert Path(third.path).name == "packetlog_20240301_123005_2.txt"

    def test_from_config(self, tmp_path):
        cfg = LoggerConfig(log_dir=tmp_path, file_prefix="cap", timestamp_format="%H%M")
        sink = FileSinkFactory.from_config(cfg, clock=fixed_clock).open()
        sink.close()
        assert Path(sink.path).name == "cap_1230.txt"

    def test_unwritable_directory_raises_sink_error(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        with pytest.raises(SinkError):
            FileSinkFactory(blocker / "logs").open()


class TestFileSink:
    def test_write_flush_close(self, tmp_path):
        sink = FileSinkFactory(tmp_path, clock=fixed_clock).open()
        sink.write("hello\n")
        sink.flush()
        sink.close()
        assert sink.closed
        assert Path(sink.path).read_text(encoding="ascii") == "hello\n"

    def test_close_is_idempotent(self, tmp_path):
        sink = FileSinkFactory(tmp_path, clock=fixed_clock).open()
        sink.close()
        sink.close()

    def test_write_after_close_raises(self, tmp_path):
        sink = FileSinkFactory(tmp_path, clock=fixed_clock).open()
        sink.close()
        with pytest.raises(SinkError):
            sink.write("late\n")

    def test_non_ascii_text_is_a_sink_error(self, tmp_path):
        sink = FileSinkFactory(tmp_path, clock=fixed_clock).open()
        try:
            with pytest.raises(SinkError):
                sink.write("café\n")
        finally:
            sink.close()


class TestSessionToDisk:
    def test_full_session_file(self, tmp_path):
        factory = FileSinkFactory(tmp_path, clock=fixed_clock)
        session = LogSession(
            sink_factory=factory,
            exclusions=ExclusionStore.from_identifiers(["0x00D"]),
            clock=fixed_clock,
        )
        session.start()
        session.on_message(0x028, bytes(range(16)))
        session.on_message(0x00D, b"\x00")
        session.stop()

        text = Path(session.status().log_path).read_text(encoding="ascii")
        assert text == (
            "=== Session Started ===\n"
            "Date: 2024-03-01 12:30:05\n"
            "Excluded: 0x00D\n"
            "\n"
            "[12:30:05] Message 0x028 (Size: 16 bytes)\n"
            "  0000: 00 01 02 03 04 05 06 07 08 09 0A 0B 0C 0D 0E 0F\n"
            "\n"
            "=== Session Ended ===\n"
            "Date: 2024-03-01 12:30:05\n"
            "Total Messages Logged: 1\n"
            "Excluded: 0x00D\n"
        )

    def test_entry_is_on_disk_before_stop(self, tmp_path):
        session = LogSession(
            sink_factory=FileSinkFactory(tmp_path, clock=fixed_clock),
            exclusions=ExclusionStore(),
            clock=fixed_clock,
        )
        session.start()
        try:
            session.on_message(0x00A, b"\x01\x02")
            on_disk = Path(session.status().log_path).read_text(encoding="ascii")
            assert on_disk.endswith("[12:30:05] Message 0x00A (Size: 2 bytes)\n  0000: 01 02\n\n")
        finally:
            session.stop()
