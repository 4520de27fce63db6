"""User account with a primary role and a switchable active role.

A user owns at most one FarmerProfile and at most one OwnerProfile.
`primary_role` is fixed at registration; `active_role` may move between
the roles the user holds a profile record for.
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Union

from sqlalchemy import Boolean, DateTime, Enum as SAEnum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from app.database import Base

if TYPE_CHECKING:
    from app.models.farmer_profile import FarmerProfile
    from app.models.owner_profile import OwnerProfile


class UserRole(str, enum.Enum):
    FARMER = "farmer"
    OWNER = "owner"


def _role_enum(name: str) -> SAEnum:
    return SAEnum(
        UserRole,
        name=name,
        values_callable=lambda roles: [r.value for r in roles],
    )


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    phone: Mapped[str] = mapped_column(
        String(15), unique=True, nullable=False, index=True
    )
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Role selected during registration, never reassigned
    primary_role: Mapped[UserRole] = mapped_column(
        _role_enum("primary_role"), nullable=False, index=True
    )
    # Role currently in effect for authorization
    active_role: Mapped[UserRole] = mapped_column(
        _role_enum("active_role"), nullable=False, index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    farmer_profile: Mapped[FarmerProfile | None] = relationship(
        back_populates="user",
        uselist=False,
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    owner_profile: Mapped[OwnerProfile | None] = relationship(
        back_populates="user",
        uselist=False,
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @validates("primary_role")
    def _freeze_primary_role(self, key: str, value: UserRole) -> UserRole:
        current = self.__dict__.get("primary_role")
        if current is not None and UserRole(current) != UserRole(value):
            raise ValueError("primary_role cannot change after registration")
        return value

    # ── Role / profile state ────────────────────────────────

    @property
    def has_farmer_profile(self) -> bool:
        return self.farmer_profile is not None

    @property
    def has_owner_profile(self) -> bool:
        return self.owner_profile is not None

    def profile_for(self, role: UserRole) -> Union[FarmerProfile, OwnerProfile, None]:
        """Return the profile record backing `role`, or None."""
        if role == UserRole.FARMER:
            return self.farmer_profile
        if role == UserRole.OWNER:
            return self.owner_profile
        raise ValueError(f"Unknown role: {role!r}")

    def get_active_profile(self) -> Union[FarmerProfile, OwnerProfile, None]:
        return self.profile_for(self.active_role)

    def can_switch_to(self, role: UserRole) -> bool:
        """A role is reachable iff a profile record exists for it.

        Completeness is not considered here; it only gates feature access.
        """
        return self.profile_for(role) is not None
