"""
packet_logger: filtered hex-dump logging of protocol messages.

Public API (stable):
- LoggerConfig             (configuration)
- LogSession               (session lifecycle + message entry point)
- ExclusionStore           (live exclusion set, ExclusionSourcePort)
- FileSinkFactory          (file-backed SinkFactoryPort)
- render, should_log       (pure formatter and filter engine)
- parse_rule, parse_rules, format_exclusions
- CATALOG, catalog_rules, label_for, extract_sub_category
- replay_recording         (feed a JSON-lines recording into a session)
- Ports: SinkPort, SinkFactoryPort, ExclusionSourcePort
- DTOs: Message, BareRule, CompositeRule, CatalogEntry, SessionStatus

Adapters (HTTP, host events, CLI) depend only on this surface.
"""

from __future__ import annotations

# Configuration
from .config import LoggerConfig

# Core
from .session import LogSession
from .exclusions import ExclusionStore
from .pipeline.filtering import should_log
from .pipeline.hexdump import render
from .pipeline.registry import CATALOG, catalog_rules, extract_sub_category, label_for
from .pipeline.rules import format_exclusions, parse_rule, parse_rules

# Adapters
from .sinks.file_sink import FileSink, FileSinkFactory
from .replay import replay_recording

# Ports
from .ports import ExclusionSourcePort, SinkFactoryPort, SinkPort

# DTOs
from .dto import (
    BareRule,
    CatalogEntry,
    CompositeRule,
    ExclusionSet,
    FilterRule,
    Message,
    SessionStatus,
)

# Errors
from .exceptions import ConfigurationError, PacketLoggerError, RecordingError, SinkError

__all__ = [
    "LoggerConfig",
    "LogSession",
    "ExclusionStore",
    "should_log",
    "render",
    "CATALOG",
    "catalog_rules",
    "extract_sub_category",
    "label_for",
    "format_exclusions",
    "parse_rule",
    "parse_rules",
    "FileSink",
    "FileSinkFactory",
    "replay_recording",
    "ExclusionSourcePort",
    "SinkFactoryPort",
    "SinkPort",
    "BareRule",
    "CatalogEntry",
    "CompositeRule",
    "ExclusionSet",
    "FilterRule",
    "Message",
    "SessionStatus",
    "ConfigurationError",
    "PacketLoggerError",
    "RecordingError",
    "SinkError",
]
