"""
Thread-safe owner of the live exclusion set.

The configuration surface (HTTP routes, chat commands, replay CLI) is the
only writer; the logging session reads an immutable snapshot per message.
Every write path parses identifiers first, so malformed input raises
ConfigurationError before the set is touched.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Iterable

from .dto import ExclusionSet, FilterRule
from .pipeline.rules import RuleLike, format_exclusions, parse_rule, parse_rules


@dataclass
class ExclusionStore:
    """
    Holds the ExclusionSet and implements ExclusionSourcePort.

    Writers replace the whole frozenset under the lock, so readers never
    observe a partially applied update.
    """
    _rules: ExclusionSet = frozenset()
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @classmethod
    def from_identifiers(cls, values: Iterable[RuleLike]) -> "ExclusionStore":
        return cls(parse_rules(values))

    # ---------------------------- Port methods ----------------------------

    def get_exclusions(self) -> ExclusionSet:
        with self._lock:
            return self._rules

    def set_exclusions(self, rules: Iterable[RuleLike]) -> None:
        parsed = parse_rules(rules)
        with self._lock:
            self._rules = parsed

    # ------------------------------ Editing -------------------------------

    def add(self, *values: RuleLike) -> ExclusionSet:
        """Exclude more rules; returns the new set."""
        parsed = parse_rules(values)
        with self._lock:
            self._rules = self._rules | parsed
            return self._rules

    def remove(self, *values: RuleLike) -> ExclusionSet:
        """Stop excluding rules; unknown ones are ignored. Returns the new set."""
        parsed = parse_rules(values)
        with self._lock:
            self._rules = self._rules - parsed
            return self._rules

    def toggle(self, value: RuleLike) -> bool:
        """Flip one rule (checkbox semantics). Returns True if it is now excluded."""
        rule = parse_rule(value)
        with self._lock:
            if rule in self._rules:
                self._rules = self._rules - {rule}
                return False
            self._rules = self._rules | {rule}
            return True

    def clear(self) -> None:
        with self._lock:
            self._rules = frozenset()

    # ------------------------------ Queries -------------------------------

    def is_excluded(self, rule: FilterRule) -> bool:
        with self._lock:
            return rule in self._rules

    def summary(self) -> str:
        """Comma-joined identifiers or "NONE"."""
        return format_exclusions(self.get_exclusions())
