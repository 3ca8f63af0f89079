"""SQLAlchemy ORM models for the seedtrace kernel."""

from seedtrace_kernel.models.multiplier import MultiplierModel
from seedtrace_kernel.models.seed_lot import SeedLotModel
from seedtrace_kernel.models.variety import VarietyModel

__all__ = [
    "MultiplierModel",
    "SeedLotModel",
    "VarietyModel",
]
