"""
Configuration schema for the packet logger core.

Keep this lean: where log files go, how they are named, and which
exclusions a fresh process starts with.
"""

from __future__ import annotations

from pathlib import Path
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .dto import ExclusionSet
from .pipeline.registry import catalog_rules
from .pipeline.rules import parse_rule, parse_rules


class LoggerConfig(BaseModel):
    """
    Centralized, validated settings for one logger process.
    """

    model_config = ConfigDict(frozen=True)  # safe to share across threads

    # === Output ===
    log_dir: Path = Field(
        default=Path("logs/packets"),
        description="Directory that receives one text log per session.",
    )
    file_prefix: str = Field(
        default="packetlog",
        min_length=1,
        description="Log file name prefix; files are '<prefix>_<timestamp>.txt'.",
    )
    timestamp_format: str = Field(
        default="%Y%m%d_%H%M%S",
        description="strftime format used in log file names.",
    )
    encoding: str = Field(
        default="ascii",
        description="Text encoding of the log file; the format itself is pure ASCII.",
    )

    # === Filtering ===
    default_exclusions: Tuple[str, ...] = Field(
        default=(),
        description="Identifiers excluded at startup, e.g. ('0x00D', '0x028_0x1844').",
    )
    seed_exclusions_from_catalog: bool = Field(
        default=False,
        description="Start with every catalog entry excluded when no defaults are given.",
    )

    @field_validator("default_exclusions", mode="before")
    @classmethod
    def _split_exclusions(cls, v):
        # Accept "0x00D,0x028_0x1844" from environment-style strings
        if isinstance(v, str):
            return tuple(t.strip() for t in v.split(",") if t.strip())
        return tuple(str(t) for t in v)

    @field_validator("default_exclusions")
    @classmethod
    def _canonical_exclusions(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        # ConfigurationError is a ValueError, so pydantic reports it as a validation error
        return tuple(parse_rule(t).identifier for t in v)

    def initial_exclusions(self) -> ExclusionSet:
        """Exclusion set a fresh ExclusionStore starts with."""
        if self.default_exclusions:
            return parse_rules(self.default_exclusions)
        if self.seed_exclusions_from_catalog:
            return frozenset(catalog_rules())
        return frozenset()
