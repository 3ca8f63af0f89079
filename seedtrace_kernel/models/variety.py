"""
Module: seedtrace_kernel.models.variety
Responsibility: ORM persistence for crop varieties referenced by seed lots.
Architecture position: Kernel > Models.  May import from db/base.py only.
"""

from __future__ import annotations

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from seedtrace_kernel.db.base import TrackedBase


class VarietyModel(TrackedBase):
    """A registered crop variety (e.g. code "SAHEL108", crop "RICE")."""

    __tablename__ = "varieties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    code: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    crop_type: Mapped[str] = mapped_column(String(20), nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<Variety {self.id}: {self.code} ({self.crop_type})>"
