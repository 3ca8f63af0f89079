"""Read-only selectors (query side)."""

from seedtrace_kernel.selectors.base import BaseSelector
from seedtrace_kernel.selectors.lot_selector import LotSelector

__all__ = ["BaseSelector", "LotSelector"]
