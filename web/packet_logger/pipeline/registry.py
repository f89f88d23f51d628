"""
Static catalog of known message types and sub-category fields.

Responsibilities (data, plus one extraction rule):
- CATALOG: rules a configuration UI offers as checkboxes, with labels.
- SUBCATEGORY_FIELDS: per type id, where the sub-category lives in the payload.
- extract_sub_category(): read that field if the payload is long enough.

Adding a catalog entry or a new sub-category family is a data-only change.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from ..dto import BareRule, CatalogEntry, CompositeRule, FilterRule, MessageTypeId, SubCategoryField

# ---- Sub-category fields (type id -> little-endian u16 location) ----

SUBCATEGORY_FIELDS: Dict[MessageTypeId, SubCategoryField] = {
    0x028: SubCategoryField(offset=10),  # Action: category word
}


def extract_sub_category(type_id: MessageTypeId, payload: bytes) -> Optional[int]:
    """
    Return the sub-category of `payload` for its type family, or None.

    None means "no sub-category match possible": the family has no field
    definition, or the payload is too short to contain it.
    """
    field = SUBCATEGORY_FIELDS.get(type_id)
    if field is None or len(payload) < field.min_length:
        return None
    return payload[field.offset] + payload[field.offset + 1] * 256


def supports_sub_category(type_id: MessageTypeId) -> bool:
    """True if composite rules can be evaluated for this type id."""
    return type_id in SUBCATEGORY_FIELDS


# ---- Catalog ----

CATALOG: Tuple[CatalogEntry, ...] = (
    # High-frequency position/movement updates
    CatalogEntry(BareRule(0x00D), "0x00D - NPC Update", "movement"),
    CatalogEntry(BareRule(0x00E), "0x00E - Entity Update", "movement"),
    CatalogEntry(BareRule(0x00F), "0x00F - Entity Movement Complete", "movement"),
    CatalogEntry(BareRule(0x015), "0x015 - Data Download", "movement"),
    # Combat/action updates
    CatalogEntry(BareRule(0x028), "0x028 - Action", "combat"),
    CatalogEntry(CompositeRule(0x028, 0x1844), "0x028 (0x1844) - Autoattack", "combat"),
    CatalogEntry(CompositeRule(0x028, 0x58E0), "0x028 (0x58E0) - Healing/Regen", "combat"),
    CatalogEntry(BareRule(0x029), "0x029 - Message", "combat"),
    CatalogEntry(BareRule(0x076), "0x076 - Party Effects Update", "combat"),
    # Inventory/equipment
    CatalogEntry(BareRule(0x01E), "0x01E - Modify Inventory", "inventory"),
    CatalogEntry(BareRule(0x01F), "0x01F - Item Update", "inventory"),
    CatalogEntry(BareRule(0x020), "0x020 - Inventory Finish", "inventory"),
    CatalogEntry(BareRule(0x050), "0x050 - Equipment Update", "inventory"),
    # UI/menu updates
    CatalogEntry(BareRule(0x034), "0x034 - Char Appearance", "ui"),
    CatalogEntry(BareRule(0x037), "0x037 - Character Update", "ui"),
    CatalogEntry(BareRule(0x061), "0x061 - Server Message", "ui"),
    CatalogEntry(BareRule(0x063), "0x063 - Party Status Icons", "ui"),
    # Zone/loading
    CatalogEntry(BareRule(0x00A), "0x00A - Zone In", "zone"),
    CatalogEntry(BareRule(0x00B), "0x00B - Zone Out", "zone"),
    CatalogEntry(BareRule(0x01D), "0x01D - Server IP", "zone"),
    # Chat/communication
    CatalogEntry(BareRule(0x017), "0x017 - Chat Message", "chat"),
    CatalogEntry(BareRule(0x01B), "0x01B - Server Message", "chat"),
    # Additional common messages
    CatalogEntry(BareRule(0x067), "0x067 - Examine", "other"),
    CatalogEntry(BareRule(0x0DF), "0x0DF - Character Stats", "other"),
    CatalogEntry(BareRule(0x119), "0x119 - Chat Channel", "other"),
)

_BY_RULE: Dict[FilterRule, CatalogEntry] = {entry.rule: entry for entry in CATALOG}


def catalog_rules() -> Tuple[FilterRule, ...]:
    """All catalog rules in display order."""
    return tuple(entry.rule for entry in CATALOG)


def label_for(rule: FilterRule) -> str:
    """Catalog label for `rule`, or its canonical identifier if not catalogued."""
    entry = _BY_RULE.get(rule)
    return entry.label if entry is not None else rule.identifier


def is_catalogued(rule: FilterRule) -> bool:
    return rule in _BY_RULE
