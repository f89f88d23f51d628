"""Tests for host event forwarding and /plog chat commands."""

import logging

import pytest

from packet_logger import BareRule, CompositeRule
from plogapp.managers.host_bridge import CommandResult, HostEventBridge


@pytest.fixture
def bridge(session, store):
    return HostEventBridge(session=session, exclusions=store, logger=logging.getLogger("test.host"))


class TestEvents:
    def test_packet_in_forwards_modified_data(self, bridge, session, sink_factory):
        session.start()
        assert bridge.on_packet_in({"id": 0x29, "data": b"\x00", "data_modified": b"\x01\x02"})
        assert "Message 0x029 (Size: 2 bytes)\n  0000: 01 02\n" in sink_factory.last.text

    def test_packet_in_falls_back_to_data(self, bridge, session, sink_factory):
        session.start()
        assert bridge.on_packet_in({"id": 0x29, "data": "0a"})
        assert "0000: 0A" in sink_factory.last.text

    @pytest.mark.parametrize("event", [{}, {"id": "x"}, {"id": 1, "data": "zz"}, None, 42])
    def test_packet_in_never_raises(self, bridge, session, event):
        session.start()
        assert bridge.on_packet_in(event) is False

    def test_unload_stops_session(self, bridge, session):
        session.start()
        session.on_message(0x29, b"")
        assert bridge.on_unload() == 1
        assert not session.status().enabled


class TestCommands:
    def test_foreign_command_not_blocked(self, bridge):
        assert bridge.on_command("/echo hi") == CommandResult(blocked=False)
        assert bridge.on_command("") == CommandResult(blocked=False)

    @pytest.mark.parametrize("text", ["/plog", "/PacketLogger"])
    def test_bare_prefix_prints_help(self, bridge, text):
        result = bridge.on_command(text)
        assert result.blocked
        assert result.messages[0] == "PacketLogger - Commands:"

    def test_unknown_subcommand(self, bridge):
        result = bridge.on_command("/plog dance")
        assert result.blocked
        assert result.messages == ["Unknown command: dance"]

    def test_start_and_stop(self, bridge, session, clock):
        assert bridge.on_command("/plog start").messages == ["Logging started: memory://log0"]
        assert bridge.on_command("/plog start").messages == ["Already logging to: memory://log0"]
        session.on_message(0x29, b"")
        clock.advance(12)
        assert bridge.on_command("/plog stop").messages == ["Logging stopped. 1 messages logged in 12 seconds"]
        assert bridge.on_command("/plog stop").messages == ["Not currently logging"]

    def test_stop_after_session_ended_elsewhere(self, bridge, session, monkeypatch):
        session.start()
        stale = session.status()
        session.stop()
        # status() still reports the session as live, as a concurrent reader might see it
        monkeypatch.setattr(session, "status", lambda: stale)
        assert bridge.on_command("/plog stop").messages == ["Not currently logging"]

    def test_stop_of_empty_session(self, bridge, session):
        session.start()
        assert bridge.on_command("/plog stop").messages == ["Logging stopped. 0 messages logged in 0 seconds"]

    def test_start_failure_is_reported(self, store, clock):
        from conftest import MemorySinkFactory
        from packet_logger import LogSession

        session = LogSession(sink_factory=MemorySinkFactory(fail_open=True), exclusions=store, clock=clock)
        bridge = HostEventBridge(session=session, exclusions=store, logger=logging.getLogger("test.host"))
        assert bridge.on_command("/plog start").messages == ["Failed to create log file: permission denied"]

    def test_filter_replaces_and_reports_invalid(self, bridge, store):
        store.set_exclusions(["0x119"])
        result = bridge.on_command("/plog filter 0x00D bogus 0x028_0x1844")
        assert store.get_exclusions() == frozenset({BareRule(0x00D), CompositeRule(0x028, 0x1844)})
        assert len(result.messages) == 2
        assert "bogus" in result.messages[0]
        assert result.messages[1] == "Excluded: 0x00D, 0x028_0x1844"

    def test_filter_without_ids_shows_usage(self, bridge, store):
        store.set_exclusions(["0x119"])
        assert bridge.on_command("/plog filter").messages[0].startswith("Usage:")
        assert store.get_exclusions() == frozenset({BareRule(0x119)})

    def test_unfilter(self, bridge, store):
        store.set_exclusions(["0x00D", "0x00E"])
        assert bridge.on_command("/plog unfilter 0x00D").messages == ["Excluded: 0x00E"]

    def test_clearfilter(self, bridge, store):
        store.set_exclusions(["0x00D"])
        assert bridge.on_command("/plog clearfilter").messages == ["Exclusions cleared. Logging all messages."]
        assert store.get_exclusions() == frozenset()

    def test_list_marks_excluded_entries(self, bridge, store):
        store.set_exclusions(["0x00D", "0x3FF"])
        lines = bridge.on_command("/plog list").messages
        assert "[x] 0x00D - NPC Update" in lines
        assert "[ ] 0x00E - Entity Update" in lines
        assert lines[-1] == "Other exclusions: 0x3FF"

    def test_status(self, bridge, session, store, clock):
        store.set_exclusions(["0x00D"])
        assert bridge.on_command("/plog status").messages == [
            "=== PacketLogger Status ===",
            "Logging: disabled",
            "Excluded: 0x00D",
        ]
        session.start()
        clock.advance(3)
        lines = bridge.on_command("/plog status").messages
        assert "Logging: enabled" in lines
        assert "Log file: memory://log0" in lines
        assert "Elapsed time: 3 seconds" in lines
