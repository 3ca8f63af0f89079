"""
SeedLevel - ordered generation levels of seed multiplication.

    GO (foundation) -> G1 -> G2 -> G3 -> G4 -> R1 -> R2 (commercial)

A parent lot must sit strictly earlier in this order than its children.
A child exactly one step ahead is the normal case; a larger jump is legal
but reported as a warning by the consistency checks.
"""

from __future__ import annotations

from enum import Enum

from seedtrace_kernel.exceptions import InvalidSeedLevelError

# Legacy spelling with a zero still found in imported data.
_LEVEL_ALIASES = {"G0": "GO"}


class SeedLevel(str, Enum):
    """Generation level of a seed lot, in multiplication order."""

    GO = "GO"
    G1 = "G1"
    G2 = "G2"
    G3 = "G3"
    G4 = "G4"
    R1 = "R1"
    R2 = "R2"

    @classmethod
    def parse(cls, value: str | SeedLevel) -> SeedLevel:
        """Parse a level string, accepting the G0 alias for GO."""
        if isinstance(value, SeedLevel):
            return value
        normalized = str(value).strip().upper()
        normalized = _LEVEL_ALIASES.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError:
            raise InvalidSeedLevelError(str(value)) from None

    @property
    def position(self) -> int:
        return LEVEL_ORDER.index(self)

    def next_level(self) -> SeedLevel | None:
        """The level a direct child is expected to have; None for R2."""
        position = self.position + 1
        return LEVEL_ORDER[position] if position < len(LEVEL_ORDER) else None

    @property
    def can_have_children(self) -> bool:
        return self.next_level() is not None


LEVEL_ORDER: tuple[SeedLevel, ...] = tuple(SeedLevel)


def level_index(level: str | SeedLevel) -> int:
    return SeedLevel.parse(level).position


def is_valid_parent_level(parent: str | SeedLevel, child: str | SeedLevel) -> bool:
    """True when the parent level comes strictly before the child level."""
    return level_index(parent) < level_index(child)


def is_direct_transition(parent: str | SeedLevel, child: str | SeedLevel) -> bool:
    """True when the child is exactly one generation after the parent."""
    return level_index(child) - level_index(parent) == 1


def level_gap(parent: str | SeedLevel, child: str | SeedLevel) -> int:
    return level_index(child) - level_index(parent)
