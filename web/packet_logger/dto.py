"""
Data Transfer Objects (DTOs) shared by the logging pipeline.

These are small, immutable and independent of any I/O. Filter rules are
frozen dataclasses so an exclusion set can be a plain frozenset.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import FrozenSet, Literal, Optional, Union

MessageTypeId = int
Compressor = Literal["none", "gzip", "zstd"]


# === Inbound ===
@dataclass(frozen=True)
class Message:
    """One protocol message as delivered by the host feed."""
    type_id: MessageTypeId
    payload: bytes


@dataclass(frozen=True)
class RecordingHandle:
    """A JSON-lines message recording on disk, possibly compressed."""
    path: str
    compressor: Compressor


# === Filter rules ===
@dataclass(frozen=True)
class BareRule:
    """Matches every message with this type id."""
    type_id: MessageTypeId

    @property
    def identifier(self) -> str:
        return f"0x{self.type_id:03X}"


@dataclass(frozen=True)
class CompositeRule:
    """Matches messages of one type id whose payload sub-category equals `sub_category`."""
    type_id: MessageTypeId
    sub_category: int

    @property
    def identifier(self) -> str:
        return f"0x{self.type_id:03X}_0x{self.sub_category:04X}"


FilterRule = Union[BareRule, CompositeRule]
ExclusionSet = FrozenSet[FilterRule]


# === Registry ===
@dataclass(frozen=True)
class CatalogEntry:
    """A known rule plus the label shown by configuration UIs."""
    rule: FilterRule
    label: str
    group: str = "other"


@dataclass(frozen=True)
class SubCategoryField:
    """Little-endian u16 located at `offset` inside the payload."""
    offset: int

    @property
    def min_length(self) -> int:
        return self.offset + 2


# === Session snapshot ===
@dataclass(frozen=True)
class SessionStatus:
    enabled: bool
    count: int
    elapsed_seconds: float
    exclusion_summary: str
    log_path: Optional[str] = None
    started_at: Optional[datetime] = None
    write_errors: int = 0
    last_error: Optional[str] = None

    def to_dict(self) -> dict:
        """JSON-friendly view for the HTTP surface."""
        return {
            "enabled": self.enabled,
            "count": self.count,
            "elapsed_seconds": round(self.elapsed_seconds, 1),
            "excluded": self.exclusion_summary,
            "log_file": self.log_path,
            "started_at": self.started_at.isoformat(timespec="seconds") if self.started_at else None,
            "write_errors": self.write_errors,
            "error": self.last_error,
        }
