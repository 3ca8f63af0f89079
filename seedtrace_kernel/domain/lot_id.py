"""
Seed lot identifiers.

Format: ``SL-<LEVEL>-<YEAR>-<SEQ>``, e.g. ``SL-G1-2024-001``.  The sequence
is zero-padded to three digits and grows past 999 without truncation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from seedtrace_kernel.domain.seed_level import SeedLevel
from seedtrace_kernel.exceptions import InvalidLotIdError

LOT_ID_PREFIX = "SL"
SEQUENCE_WIDTH = 3

_LOT_ID_RE = re.compile(r"^SL-(GO|G[1-4]|R[12])-(\d{4})-(\d{3,})$")


@dataclass(frozen=True)
class LotIdParts:
    level: SeedLevel
    year: int
    sequence: int


def format_lot_id(level: str | SeedLevel, year: int, sequence: int) -> str:
    level = SeedLevel.parse(level)
    if sequence < 1:
        raise InvalidLotIdError(f"{LOT_ID_PREFIX}-{level.value}-{year}-{sequence}")
    return f"{LOT_ID_PREFIX}-{level.value}-{year:04d}-{sequence:0{SEQUENCE_WIDTH}d}"


def lot_id_prefix(level: str | SeedLevel, year: int) -> str:
    """Prefix shared by every lot of a level and year: ``SL-G1-2024-``."""
    return f"{LOT_ID_PREFIX}-{SeedLevel.parse(level).value}-{year:04d}-"


def parse_lot_id(lot_id: str) -> LotIdParts | None:
    match = _LOT_ID_RE.match(lot_id)
    if match is None:
        return None
    level, year, sequence = match.groups()
    return LotIdParts(level=SeedLevel(level), year=int(year), sequence=int(sequence))


def require_lot_id(lot_id: str) -> LotIdParts:
    parts = parse_lot_id(lot_id)
    if parts is None:
        raise InvalidLotIdError(lot_id)
    return parts


def display_lot_id(lot_id: str) -> str:
    """SL-G1-2024-001 -> G1-2024-001"""
    return lot_id.removeprefix(f"{LOT_ID_PREFIX}-")
