"""
Parsing and formatting of filter rule identifiers.

Accepted identifier forms (configuration boundary):
- int                   -> BareRule (e.g. 40)
- "0x028" / "40"        -> BareRule (hex with 0x prefix, otherwise decimal)
- "0x028_0x1844"        -> CompositeRule(type id, sub-category)

Canonical output form is the rule's `identifier` ("0x028", "0x028_0x1844").
Anything malformed raises ConfigurationError here, so the filter engine
only ever sees well-formed rules.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Tuple, Union

from ..dto import BareRule, CompositeRule, ExclusionSet, FilterRule
from ..exceptions import ConfigurationError
from .registry import supports_sub_category

RuleLike = Union[FilterRule, int, str]

_SUBCATEGORY_MAX = 0xFFFF
NO_EXCLUSIONS = "NONE"

# ASCII only: no digit separators, signs or non-ASCII digits
_HEX_TOKEN = re.compile(r"0[xX][0-9a-fA-F]+")
_DEC_TOKEN = re.compile(r"[0-9]+")


def parse_rule(value: RuleLike) -> FilterRule:
    """Convert one identifier into a FilterRule or raise ConfigurationError."""
    if isinstance(value, (BareRule, CompositeRule)):
        return _checked(value)

    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid message ID: {value!r}")

    if isinstance(value, int):
        return _checked(BareRule(value))

    if not isinstance(value, str):
        raise ConfigurationError(f"Invalid message ID: {value!r}")

    text = value.strip()
    if not text:
        raise ConfigurationError("Invalid message ID: empty identifier")

    if "_" in text:
        parts = text.split("_")
        if len(parts) != 2:
            raise ConfigurationError(f"Invalid message ID: {value!r}")
        return _checked(CompositeRule(_parse_int(parts[0], value), _parse_int(parts[1], value)))

    return _checked(BareRule(_parse_int(text, value)))


def parse_rules(values: Iterable[RuleLike]) -> ExclusionSet:
    """Parse every identifier; the first malformed one raises ConfigurationError."""
    return frozenset(parse_rule(v) for v in values)


def parse_rules_lenient(values: Iterable[RuleLike]) -> Tuple[ExclusionSet, List[str]]:
    """
    Parse what can be parsed.

    Returns (rules, errors) where errors holds one message per rejected
    identifier. Used by command surfaces that report and skip bad input.
    """
    rules = set()
    errors: List[str] = []
    for v in values:
        try:
            rules.add(parse_rule(v))
        except ConfigurationError as e:
            errors.append(str(e))
    return frozenset(rules), errors


def sort_key(rule: FilterRule) -> Tuple[int, int, int]:
    """Order by type id, bare before composite, then sub-category."""
    if isinstance(rule, CompositeRule):
        return (rule.type_id, 1, rule.sub_category)
    return (rule.type_id, 0, 0)


def format_exclusions(rules: Iterable[FilterRule]) -> str:
    """Comma-joined canonical identifiers, or "NONE" for an empty set."""
    ordered = sorted(rules, key=sort_key)
    if not ordered:
        return NO_EXCLUSIONS
    return ", ".join(r.identifier for r in ordered)


def parse_number(token: str) -> int:
    """
    Parse "0x1F" (hex) or "31" (decimal). Surrounding whitespace is ignored.
    Raises ValueError for anything else, including "4_0" and "-1".
    """
    t = token.strip()
    if _HEX_TOKEN.fullmatch(t):
        return int(t[2:], 16)
    if _DEC_TOKEN.fullmatch(t):
        return int(t, 10)
    raise ValueError(f"not a hex or decimal number: {token!r}")


# === helpers ===


def _parse_int(token: str, raw: object) -> int:
    try:
        return parse_number(token)
    except ValueError:
        raise ConfigurationError(f"Invalid message ID: {raw!r}") from None


def _checked(rule: FilterRule) -> FilterRule:
    if rule.type_id < 0:
        raise ConfigurationError(f"Message ID must be non-negative: {rule.type_id}")
    if isinstance(rule, CompositeRule):
        if not 0 <= rule.sub_category <= _SUBCATEGORY_MAX:
            raise ConfigurationError(
                f"Sub-category must fit in 16 bits: 0x{rule.sub_category:X}"
                if rule.sub_category >= 0
                else f"Sub-category must be non-negative: {rule.sub_category}"
            )
        if not supports_sub_category(rule.type_id):
            raise ConfigurationError(
                f"Message 0x{rule.type_id:03X} has no sub-category field"
            )
    return rule
