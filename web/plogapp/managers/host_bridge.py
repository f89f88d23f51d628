"""
Host event bridge: load/unload hooks, inbound packet events and chat commands.

The host delivers three kinds of callbacks; each becomes a plain method
call that forwards to the LogSession or the ExclusionStore:
- on_load()/on_unload() for the plugin lifecycle,
- on_packet_in(event) for every inbound message,
- on_command(text) for "/plog ..." and "/packetlogger ..." chat commands.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Sequence
import logging

from packet_logger import ExclusionStore, LogSession, SinkError
from packet_logger.intake.coerce import message_from_mapping
from packet_logger.pipeline.registry import CATALOG
from packet_logger.pipeline.rules import format_exclusions, parse_rules_lenient, sort_key

COMMAND_PREFIXES = ("/plog", "/packetlogger")

HELP_LINES = (
    "PacketLogger - Commands:",
    "/plog start - Start logging messages",
    "/plog stop - Stop logging messages",
    "/plog filter [id1] [id2] ... - Replace exclusions (e.g., 0x00D 0x028_0x1844)",
    "/plog unfilter [id1] [id2] ... - Stop excluding the given ids",
    "/plog clearfilter - Remove all exclusions (log everything)",
    "/plog list - Show known message types and exclusion state",
    "/plog status - Show logging status",
)


@dataclass(frozen=True)
class CommandResult:
    """
    Outcome of a chat command.

    blocked: True if the command was ours and must not reach the host.
    messages: Lines to print back to the user.
    """
    blocked: bool
    messages: List[str] = field(default_factory=list)


@dataclass
class HostEventBridge:
    session: LogSession
    exclusions: ExclusionStore
    logger: logging.Logger

    # ------------------------------ Lifecycle ------------------------------

    def on_load(self) -> None:
        self.logger.info("PacketLogger loaded. Use /plog start to begin logging.")

    def on_unload(self) -> int:
        """Close any open log; returns the final message count."""
        return self.session.stop()

    # ------------------------------ Data plane -----------------------------

    def on_packet_in(self, event: Mapping[str, Any]) -> bool:
        """
        Forward one host packet event to the session.

        Never raises: a malformed event is logged and dropped.
        Returns True if the message was written to the log.
        """
        try:
            msg = message_from_mapping(dict(event))
        except (TypeError, ValueError) as e:
            self.logger.warning("Dropping malformed packet event: %s", e)
            return False
        return self.session.on_message(msg.type_id, msg.payload)

    # ------------------------------- Commands ------------------------------

    def on_command(self, text: str) -> CommandResult:
        args = (text or "").split()
        if not args or args[0].lower() not in COMMAND_PREFIXES:
            return CommandResult(blocked=False)

        if len(args) == 1:
            return CommandResult(True, list(HELP_LINES))

        cmd, rest = args[1].lower(), args[2:]
        handler = getattr(self, f"_cmd_{cmd}", None)
        if handler is None:
            return CommandResult(True, [f"Unknown command: {args[1]}"])
        return CommandResult(True, handler(rest))

    def _cmd_start(self, _args: Sequence[str]) -> List[str]:
        try:
            _, msg = self.session.start()
        except SinkError as e:
            return [f"Failed to create log file: {e}"]
        return [msg]

    def _cmd_stop(self, _args: Sequence[str]) -> List[str]:
        ended = self.session.finish()
        if ended is None:
            return ["Not currently logging"]
        count, elapsed = ended
        return [f"Logging stopped. {count} messages logged in {int(elapsed)} seconds"]

    def _cmd_filter(self, args: Sequence[str]) -> List[str]:
        if not args:
            return ["Usage: /plog filter [id1] [id2] ... (e.g., /plog filter 0x00D 0x028_0x1844)"]
        rules, errors = parse_rules_lenient(args)
        self.exclusions.set_exclusions(rules)
        self._log_rejected(errors)
        return errors + [f"Excluded: {format_exclusions(rules)}"]

    def _cmd_unfilter(self, args: Sequence[str]) -> List[str]:
        if not args:
            return ["Usage: /plog unfilter [id1] [id2] ..."]
        rules, errors = parse_rules_lenient(args)
        remaining = self.exclusions.remove(*rules)
        self._log_rejected(errors)
        return errors + [f"Excluded: {format_exclusions(remaining)}"]

    def _cmd_clearfilter(self, _args: Sequence[str]) -> List[str]:
        self.exclusions.clear()
        return ["Exclusions cleared. Logging all messages."]

    def _cmd_list(self, _args: Sequence[str]) -> List[str]:
        current = self.exclusions.get_exclusions()
        lines = ["=== Known Message Types ([x] = excluded) ==="]
        for entry in CATALOG:
            mark = "x" if entry.rule in current else " "
            lines.append(f"[{mark}] {entry.label}")
        extra = sorted((r for r in current if r not in {e.rule for e in CATALOG}), key=sort_key)
        if extra:
            lines.append("Other exclusions: " + ", ".join(r.identifier for r in extra))
        return lines

    def _cmd_status(self, _args: Sequence[str]) -> List[str]:
        st = self.session.status()
        lines = ["=== PacketLogger Status ===", f"Logging: {'enabled' if st.enabled else 'disabled'}"]
        if st.enabled:
            lines += [
                f"Log file: {st.log_path}",
                f"Messages logged: {st.count}",
                f"Elapsed time: {int(st.elapsed_seconds)} seconds",
            ]
        if st.write_errors:
            lines.append(f"Write errors: {st.write_errors} (last: {st.last_error})")
        lines.append(f"Excluded: {st.exclusion_summary}")
        return lines

    def _log_rejected(self, errors: Sequence[str]) -> None:
        for err in errors:
            self.logger.warning("Rejected filter identifier: %s", err)
