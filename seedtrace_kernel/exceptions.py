"""
Typed Exception Hierarchy for the SeedTrace Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers (HTTP controllers, CLI tools, batch jobs) translate kernel failures
into responses.  Matching on message text is fragile, so:
  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (lot ids, levels, quantities)

Example:
    try:
        genealogy.create_relation(parent_id, child_id)
    except InvalidHierarchyError as e:
        api_response(code=e.code, parent=e.parent_level, child=e.child_level)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    SeedTraceError (base)
    |
    +-- LotError
    |   +-- LotNotFoundError
    |   +-- InvalidLotIdError
    |   +-- InvalidLotPatchError
    |   +-- InvalidQuantityError
    |   +-- InsufficientQuantityError
    |   +-- HasActiveChildLotsError
    |
    +-- GenealogyError
    |   +-- LotAlreadyHasParentError
    |   +-- InvalidHierarchyError
    |   +-- GenealogyCycleError
    |   +-- NoParentRelationError
    |
    +-- ExportError
    |   +-- UnsupportedExportFormatError
    |
    +-- ReferenceDataError
    |   +-- VarietyNotFoundError
    |   +-- MultiplierNotFoundError
    |   +-- InvalidSeedLevelError
    |   +-- InvalidLotStatusError
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category     | Code                    | When Raised
-------------|-------------------------|-------------------------------------------
Lot          | LOT_NOT_FOUND           | Lot id does not resolve
             | INVALID_LOT_ID          | Id does not match SL-<LEVEL>-<YEAR>-<SEQ>
             | INVALID_LOT_PATCH       | Store update with an unknown field
             | INVALID_QUANTITY        | Quantity <= 0 where a positive one is required
             | INSUFFICIENT_QUANTITY   | Source lot holds less than requested
             | HAS_ACTIVE_CHILD_LOTS   | Deactivating a lot with active children
-------------|-------------------------|-------------------------------------------
Genealogy    | ALREADY_HAS_PARENT      | Attaching a second parent to a lot
             | INVALID_HIERARCHY       | Parent level not strictly before child level
             | CYCLE_DETECTED          | Relation would close a loop
             | NO_PARENT_RELATION      | Removing a relation that does not exist
-------------|-------------------------|-------------------------------------------
Export       | UNSUPPORTED_FORMAT      | Export format not json/csv/dot
-------------|-------------------------|-------------------------------------------
Reference    | VARIETY_NOT_FOUND       | Variety id does not resolve
             | MULTIPLIER_NOT_FOUND    | Multiplier id does not resolve
             | INVALID_SEED_LEVEL      | Level string outside GO..R2
             | INVALID_LOT_STATUS      | Status string outside the known set
-------------|-------------------------|-------------------------------------------
Config       | CONFIGURATION_ERROR     | Invalid configuration file or value

Read-only traversal problems (cycles met while walking, depth limits) are
NOT raised; they are logged and the affected branch is truncated.
"""

from __future__ import annotations

from decimal import Decimal


class SeedTraceError(Exception):
    """
    Base exception for all seedtrace kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "SEEDTRACE_ERROR"


# Lot-related exceptions


class LotError(SeedTraceError):
    """Base exception for seed lot errors."""

    code: str = "LOT_ERROR"


class LotNotFoundError(LotError):
    """Seed lot with given id was not found."""

    code: str = "LOT_NOT_FOUND"

    def __init__(self, lot_id: str):
        self.lot_id = lot_id
        super().__init__(f"Lot not found: {lot_id}")


class InvalidLotIdError(LotError):
    """Lot id does not follow the SL-<LEVEL>-<YEAR>-<SEQ> format."""

    code: str = "INVALID_LOT_ID"

    def __init__(self, lot_id: str):
        self.lot_id = lot_id
        super().__init__(f"Invalid lot id: {lot_id!r}")


class InvalidLotPatchError(LotError):
    """Store update requested for fields that cannot be patched."""

    code: str = "INVALID_LOT_PATCH"

    def __init__(self, lot_id: str, fields: list[str]):
        self.lot_id = lot_id
        self.fields = fields
        super().__init__(
            f"Cannot patch lot {lot_id}: unknown field(s) {', '.join(fields)}"
        )


class InvalidQuantityError(LotError):
    """Quantity is not a number, or not strictly positive where required."""

    code: str = "INVALID_QUANTITY"

    def __init__(self, quantity: Decimal | str):
        self.quantity = str(quantity)
        super().__init__(f"Quantity must be a positive number, got {quantity}")


class InsufficientQuantityError(LotError):
    """Lot does not hold enough seed for the requested draw."""

    code: str = "INSUFFICIENT_QUANTITY"

    def __init__(self, lot_id: str, available: Decimal | str, requested: Decimal | str):
        self.lot_id = lot_id
        self.available = str(available)
        self.requested = str(requested)
        super().__init__(
            f"Insufficient quantity in lot {lot_id}: "
            f"available {available}, requested {requested}"
        )


class HasActiveChildLotsError(LotError):
    """Lot cannot be deactivated while it has active child lots."""

    code: str = "HAS_ACTIVE_CHILD_LOTS"

    def __init__(self, lot_id: str, child_count: int):
        self.lot_id = lot_id
        self.child_count = child_count
        super().__init__(
            f"Cannot deactivate lot {lot_id}: {child_count} active child lot(s)"
        )


# Genealogy-related exceptions


class GenealogyError(SeedTraceError):
    """Base exception for parent/child relation errors."""

    code: str = "GENEALOGY_ERROR"


class LotAlreadyHasParentError(GenealogyError):
    """A lot can have at most one parent."""

    code: str = "ALREADY_HAS_PARENT"

    def __init__(self, child_id: str, parent_id: str):
        self.child_id = child_id
        self.parent_id = parent_id
        super().__init__(f"Child lot {child_id} already has a parent: {parent_id}")


class InvalidHierarchyError(GenealogyError):
    """Parent level must come strictly before the child level."""

    code: str = "INVALID_HIERARCHY"

    def __init__(
        self,
        parent_id: str,
        parent_level: str,
        child_id: str,
        child_level: str,
    ):
        self.parent_id = parent_id
        self.parent_level = parent_level
        self.child_id = child_id
        self.child_level = child_level
        super().__init__(
            f"Invalid hierarchy: {parent_level} ({parent_id}) "
            f"cannot be parent of {child_level} ({child_id})"
        )


class GenealogyCycleError(GenealogyError):
    """
    Creating this relation would introduce a cycle in the lot genealogy.

    `path` is the parent's ancestor chain (root first) that already
    contains the child.
    """

    code: str = "CYCLE_DETECTED"

    def __init__(self, parent_id: str, child_id: str, path: list[str]):
        self.parent_id = parent_id
        self.child_id = child_id
        self.path = path
        path_str = " -> ".join([*path, child_id])
        super().__init__(
            f"Relation {parent_id} -> {child_id} would create a cycle: {path_str}"
        )


class NoParentRelationError(GenealogyError):
    """Lot has no parent relation to remove."""

    code: str = "NO_PARENT_RELATION"

    def __init__(self, child_id: str):
        self.child_id = child_id
        super().__init__(f"Lot {child_id} has no parent relation")


# Export-related exceptions


class ExportError(SeedTraceError):
    """Base exception for genealogy export errors."""

    code: str = "EXPORT_ERROR"


class UnsupportedExportFormatError(ExportError):
    """Requested export format is not one of json, csv, dot."""

    code: str = "UNSUPPORTED_FORMAT"

    def __init__(self, export_format: str, supported: list[str] | None = None):
        self.export_format = export_format
        self.supported = supported or []
        suffix = f" (supported: {', '.join(self.supported)})" if self.supported else ""
        super().__init__(f"Unsupported format: {export_format}{suffix}")


# Reference data exceptions


class ReferenceDataError(SeedTraceError):
    """Base exception for varieties, multipliers and enumerations."""

    code: str = "REFERENCE_DATA_ERROR"


class VarietyNotFoundError(ReferenceDataError):
    """Variety with given id was not found."""

    code: str = "VARIETY_NOT_FOUND"

    def __init__(self, variety_id: int | str):
        self.variety_id = variety_id
        super().__init__(f"Variety not found: {variety_id}")


class MultiplierNotFoundError(ReferenceDataError):
    """Multiplier with given id was not found."""

    code: str = "MULTIPLIER_NOT_FOUND"

    def __init__(self, multiplier_id: int | str):
        self.multiplier_id = multiplier_id
        super().__init__(f"Multiplier not found: {multiplier_id}")


class InvalidSeedLevelError(ReferenceDataError):
    """Seed level string is not a known generation level."""

    code: str = "INVALID_SEED_LEVEL"

    def __init__(self, level: str):
        self.level = level
        super().__init__(f"Invalid seed level: {level!r}")


class InvalidLotStatusError(ReferenceDataError):
    """Lot status string is not a known status."""

    code: str = "INVALID_LOT_STATUS"

    def __init__(self, status: str):
        self.status = status
        super().__init__(f"Invalid lot status: {status!r}")


# Configuration exceptions


class ConfigurationError(SeedTraceError):
    """Configuration file or value is invalid."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid configuration for '{key}': {reason}")
