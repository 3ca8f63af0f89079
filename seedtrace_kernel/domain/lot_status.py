"""
LotStatus - storage form and display form of a seed lot's status.

The database stores upper-case names (``IN_STOCK``); dashboards and exports
use the lower-case, hyphenated display form (``in-stock``).
"""

from __future__ import annotations

from enum import Enum

from seedtrace_kernel.exceptions import InvalidLotStatusError


class LotStatus(str, Enum):
    PENDING = "PENDING"
    CERTIFIED = "CERTIFIED"
    REJECTED = "REJECTED"
    IN_STOCK = "IN_STOCK"
    SOLD = "SOLD"
    ACTIVE = "ACTIVE"
    DISTRIBUTED = "DISTRIBUTED"

    @property
    def ui_value(self) -> str:
        return self.value.lower().replace("_", "-")

    @classmethod
    def from_ui(cls, value: str | LotStatus) -> LotStatus:
        """
        Parse either form ("in-stock", "IN_STOCK", "in_stock").

        Raises:
            InvalidLotStatusError: If the value is not a known status.
        """
        if isinstance(value, LotStatus):
            return value
        normalized = str(value).strip().upper().replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            raise InvalidLotStatusError(str(value)) from None
