"""Columns and behaviour shared by the two role profile tables."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from app.config import settings


class ProfileMixin:
    """Owner link, location tail, verification flags and timestamps.

    Subclasses list the attributes that must be filled for the profile to
    count as complete in `REQUIRED_FIELDS`, and the parts of their postal
    address in `ADDRESS_FIELDS`.
    """

    REQUIRED_FIELDS: tuple[str, ...] = ()
    ADDRESS_FIELDS: tuple[str, ...] = ()

    @declared_attr
    def user_id(cls) -> Mapped[str]:
        return mapped_column(
            String(36),
            ForeignKey("users.id", ondelete="CASCADE"),
            unique=True,
            nullable=False,
        )

    district: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    state: Mapped[str] = mapped_column(
        String(100), nullable=False, default=lambda: settings.default_state
    )
    pincode: Mapped[str] = mapped_column(String(6), nullable=False)

    # Set only by the external verification process (see app.cli)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    verified_at: Mapped[datetime | None] = mapped_column(DateTime)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def missing_fields(self) -> list[str]:
        # None, "", 0 and empty collections all count as missing
        return [name for name in self.REQUIRED_FIELDS if not getattr(self, name, None)]

    def is_complete(self) -> bool:
        return not self.missing_fields()

    @property
    def full_address(self) -> str:
        parts = (getattr(self, name, None) for name in self.ADDRESS_FIELDS)
        return ", ".join(str(p) for p in parts if p)
