"""
Hexagonal interfaces (Ports) for the packet logger.

These define the boundary between the filtering/encoding core and its
collaborators: the output sink and the exclusion configuration surface.
Keep them small so they're easy to fake in tests.
"""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

from .dto import ExclusionSet, FilterRule


class SinkPort(Protocol):
    """
    An open, append-only text destination.

    Implementations raise SinkError (an OSError) when the destination fails.
    `path` identifies the destination for status output; it may be None
    for non-file sinks.
    """

    path: Optional[str]

    def write(self, text: str) -> None:
        """Append text."""
        ...

    def flush(self) -> None:
        """Push buffered text to durable storage."""
        ...

    def close(self) -> None:
        """Release the destination. Called exactly once per opened sink."""
        ...


class SinkFactoryPort(Protocol):
    """Creates a fresh sink for every logging session; never reuses one."""

    def open(self) -> SinkPort:
        """
        Open a new sink. Raises SinkError if the destination is unavailable.
        """
        ...


class ExclusionSourcePort(Protocol):
    """
    Owner of the live ExclusionSet.

    The session re-reads it on every message, so writers may change it at
    any time between messages.
    """

    def get_exclusions(self) -> ExclusionSet:
        """Return an immutable snapshot of the current exclusions."""
        ...

    def set_exclusions(self, rules: Iterable[FilterRule]) -> None:
        """Replace the exclusion set."""
        ...
