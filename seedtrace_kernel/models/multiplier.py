"""
Module: seedtrace_kernel.models.multiplier
Responsibility: ORM persistence for seed multipliers (growers producing lots).
Architecture position: Kernel > Models.  May import from db/base.py only.
"""

from __future__ import annotations

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from seedtrace_kernel.db.base import TrackedBase


class MultiplierModel(TrackedBase):
    __tablename__ = "multipliers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(120), nullable=False)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="ACTIVE")

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<Multiplier {self.id}: {self.name}>"
