"""Owner profile: the equipment-listing side of an account.

Bank account number and IFSC code are stored here but no output schema
declares them; see app.schemas.profiles.OwnerProfileOut.
"""

from __future__ import annotations

import enum
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Enum as SAEnum, Integer, JSON, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.mixins import ProfileMixin

if TYPE_CHECKING:
    from app.models.user import User


class BusinessType(str, enum.Enum):
    INDIVIDUAL = "individual"
    COMPANY = "company"
    PARTNERSHIP = "partnership"


class OwnerProfile(ProfileMixin, Base):
    __tablename__ = "owner_profiles"

    REQUIRED_FIELDS = (
        "business_type",
        "years_in_business",
        "service_districts",
        "max_delivery_distance",
        "address_line_1",
        "city",
        "district",
        "pincode",
    )
    ADDRESS_FIELDS = (
        "address_line_1",
        "address_line_2",
        "city",
        "district",
        "state",
        "pincode",
    )
    BANK_FIELDS = ("bank_name", "account_holder_name", "account_number", "ifsc_code")

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )

    # Business identity
    business_name: Mapped[str | None] = mapped_column(String(255))
    business_type: Mapped[BusinessType] = mapped_column(
        SAEnum(BusinessType, name="business_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        index=True,
    )
    gst_number: Mapped[str | None] = mapped_column(String(15))
    years_in_business: Mapped[int] = mapped_column(Integer, nullable=False)

    # Maintained by the equipment listings
    total_equipment_count: Mapped[int] = mapped_column(Integer, default=0)
    equipment_types: Mapped[list | None] = mapped_column(JSON)

    # Service area
    service_districts: Mapped[list] = mapped_column(JSON, nullable=False)
    # Kilometres
    max_delivery_distance: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False)

    # Address
    address_line_1: Mapped[str] = mapped_column(String(255), nullable=False)
    address_line_2: Mapped[str | None] = mapped_column(String(255))
    city: Mapped[str] = mapped_column(String(100), nullable=False)

    # Payout
    bank_name: Mapped[str | None] = mapped_column(String(255))
    account_holder_name: Mapped[str | None] = mapped_column(String(255))
    account_number: Mapped[str | None] = mapped_column(String(34))
    ifsc_code: Mapped[str | None] = mapped_column(String(11))

    # Service terms
    provides_operator: Mapped[bool] = mapped_column(Boolean, default=False)
    provides_delivery: Mapped[bool] = mapped_column(Boolean, default=True)
    terms_and_conditions: Mapped[str | None] = mapped_column(Text)

    user: Mapped[User] = relationship(back_populates="owner_profile")

    @property
    def has_bank_details(self) -> bool:
        return all(getattr(self, name) for name in self.BANK_FIELDS)
