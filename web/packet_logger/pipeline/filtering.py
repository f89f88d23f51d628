"""
Admission decision for incoming messages (denylist semantics).

A message is logged unless an exclusion matches it:
- BareRule matches on type id alone.
- CompositeRule matches on type id AND the payload sub-category.
  A payload too short to carry the sub-category never matches; there is
  no fallback to a bare rule for the same id.

Unknown type ids are therefore logged by default. The function is total:
short or odd payloads degrade to "not matched", never to an error.
"""

from __future__ import annotations

from typing import Iterable

from ..dto import BareRule, CompositeRule, FilterRule, MessageTypeId
from .registry import extract_sub_category


def should_log(type_id: MessageTypeId, payload: bytes, exclusions: Iterable[FilterRule]) -> bool:
    """Return False if any exclusion matches the message, True otherwise."""
    sub_category = None
    sub_category_read = False

    for rule in exclusions:
        if rule.type_id != type_id:
            continue

        if isinstance(rule, BareRule):
            return False

        if isinstance(rule, CompositeRule):
            # Extract lazily, at most once per message
            if not sub_category_read:
                sub_category = extract_sub_category(type_id, payload)
                sub_category_read = True
            if sub_category is not None and sub_category == rule.sub_category:
                return False

    return True
