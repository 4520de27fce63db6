"""Farmer profile: the renting side of an account."""

from __future__ import annotations

import enum
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Enum as SAEnum, Integer, JSON, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.mixins import ProfileMixin

if TYPE_CHECKING:
    from app.models.user import User


class FarmType(str, enum.Enum):
    CROP = "crop"
    LIVESTOCK = "livestock"
    MIXED = "mixed"
    ORGANIC = "organic"
    OTHER = "other"


class FarmerProfile(ProfileMixin, Base):
    __tablename__ = "farmer_profiles"

    REQUIRED_FIELDS = (
        "farm_location",
        "farm_size",
        "farm_type",
        "years_of_experience",
        "village",
        "taluk",
        "district",
        "pincode",
    )
    ADDRESS_FIELDS = ("village", "taluk", "district", "state", "pincode")

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    farm_name: Mapped[str | None] = mapped_column(String(255))
    farm_location: Mapped[str] = mapped_column(String(255), nullable=False)
    # Acres
    farm_size: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    farm_type: Mapped[FarmType] = mapped_column(
        SAEnum(FarmType, name="farm_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    years_of_experience: Mapped[int] = mapped_column(Integer, nullable=False)

    # JSON arrays of names: ["rice", "banana"]
    crop_types: Mapped[list | None] = mapped_column(JSON)
    livestock_types: Mapped[list | None] = mapped_column(JSON)

    village: Mapped[str] = mapped_column(String(100), nullable=False)
    taluk: Mapped[str] = mapped_column(String(100), nullable=False)

    additional_notes: Mapped[str | None] = mapped_column(Text)

    user: Mapped[User] = relationship(back_populates="farmer_profile")
