"""Pydantic schemas for farmer and owner profiles.

Input field groups (`FarmerFields`, `OwnerFields`) are shared by
registration and by the profile create/update endpoints. Every field is
optional at this level; which ones are mandatory depends on the flow
(see `missing_required`).

Output schemas list exactly what may leave the API. OwnerProfileOut has
no account_number or ifsc_code field, so they can never be serialized.
"""

from datetime import datetime
from decimal import Decimal
from typing import Union

from pydantic import BaseModel, Field, field_validator

from app.models.farmer_profile import FarmerProfile, FarmType
from app.models.owner_profile import BusinessType, OwnerProfile
from app.models.user import UserRole
from app.schemas.validators import (
    DistrictSet,
    GSTNumber,
    IFSCCode,
    NameSet,
    Pincode,
    blank_to_none,
)

FARMER_REQUIRED_INPUT = (
    "farm_location",
    "farm_size",
    "farm_type",
    "years_of_experience",
    "village",
    "taluk",
)
OWNER_REQUIRED_INPUT = (
    "business_type",
    "years_in_business",
    "service_districts",
    "max_delivery_distance",
    "address_line_1",
    "city",
)
LOCATION_REQUIRED_INPUT = ("district", "pincode")

FIELD_LABELS = {
    "farm_location": "farm location",
    "farm_size": "farm size",
    "farm_type": "farm type",
    "years_of_experience": "years of experience",
    "business_type": "business type",
    "years_in_business": "years in business",
    "service_districts": "service districts",
    "max_delivery_distance": "maximum delivery distance",
    "address_line_1": "address line 1",
}


def missing_required(data: BaseModel, fields: tuple[str, ...], reason: str = "") -> dict[str, list[str]]:
    """Field error map for every name in `fields` left unset or blank."""
    errors: dict[str, list[str]] = {}
    for name in fields:
        value = getattr(data, name, None)
        if value is None or (isinstance(value, (str, list)) and not value):
            label = FIELD_LABELS.get(name, name.replace("_", " "))
            errors[name] = [f"The {label} field is required{reason}."]
    return errors


# ── Input field groups ──────────────────────────────────────

class LocationFields(BaseModel):
    district: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    pincode: Pincode | None = None

    @field_validator("state", mode="before")
    @classmethod
    def _blank_state(cls, value):
        return blank_to_none(value)


class FarmerFields(BaseModel):
    farm_name: str | None = Field(None, max_length=255)
    farm_location: str | None = Field(None, max_length=255)
    farm_size: Decimal | None = Field(None, ge=Decimal("0.1"), le=Decimal("10000"))
    farm_type: FarmType | None = None
    years_of_experience: int | None = Field(None, ge=0, le=100)
    village: str | None = Field(None, max_length=100)
    taluk: str | None = Field(None, max_length=100)
    crop_types: NameSet | None = None
    livestock_types: NameSet | None = None
    additional_notes: str | None = Field(None, max_length=1000)


class OwnerFields(BaseModel):
    business_name: str | None = Field(None, max_length=255)
    business_type: BusinessType | None = None
    gst_number: GSTNumber = None
    years_in_business: int | None = Field(None, ge=0, le=100)
    equipment_types: NameSet | None = None
    service_districts: DistrictSet | None = None
    max_delivery_distance: Decimal | None = Field(None, ge=Decimal("1"), le=Decimal("1000"))
    address_line_1: str | None = Field(None, max_length=255)
    address_line_2: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    provides_operator: bool | None = None
    provides_delivery: bool | None = None
    terms_and_conditions: str | None = Field(None, max_length=2000)

    @field_validator("service_districts")
    @classmethod
    def _at_least_one_district(cls, value: list[str] | None) -> list[str] | None:
        if value is not None and not value:
            raise ValueError("Please select at least one service district.")
        return value


# ── Create / update requests ────────────────────────────────

class FarmerProfileCreate(LocationFields, FarmerFields):
    """Add a farmer profile to an existing account."""

    def missing_fields(self) -> dict[str, list[str]]:
        return missing_required(self, FARMER_REQUIRED_INPUT + LOCATION_REQUIRED_INPUT)


class FarmerProfileUpdate(LocationFields, FarmerFields):
    """Partial update: only fields present in the body are written."""


class OwnerProfileCreate(LocationFields, OwnerFields):
    """Add an owner profile to an existing account."""

    def missing_fields(self) -> dict[str, list[str]]:
        return missing_required(self, OWNER_REQUIRED_INPUT + LOCATION_REQUIRED_INPUT)


class OwnerProfileUpdate(LocationFields, OwnerFields):
    """Partial update: only fields present in the body are written."""


class BankDetailsUpdate(BaseModel):
    bank_name: str = Field(..., min_length=2, max_length=255)
    account_holder_name: str = Field(..., min_length=2, max_length=255)
    account_number: str = Field(..., pattern=r"^[0-9]{9,18}$")
    ifsc_code: IFSCCode = Field(...)


# ── Output ──────────────────────────────────────────────────

class FarmerProfileOut(BaseModel):
    id: str
    user_id: str
    farm_name: str | None
    farm_location: str
    farm_size: Decimal
    farm_type: FarmType
    years_of_experience: int
    crop_types: list[str] | None
    livestock_types: list[str] | None
    village: str
    taluk: str
    district: str
    state: str
    pincode: str
    full_address: str
    is_verified: bool
    verified_at: datetime | None
    additional_notes: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class OwnerProfileOut(BaseModel):
    id: str
    user_id: str
    business_name: str | None
    business_type: BusinessType
    gst_number: str | None
    years_in_business: int
    total_equipment_count: int
    equipment_types: list[str] | None
    service_districts: list[str]
    max_delivery_distance: Decimal
    address_line_1: str
    address_line_2: str | None
    city: str
    district: str
    state: str
    pincode: str
    full_address: str
    bank_name: str | None
    account_holder_name: str | None
    has_bank_details: bool
    is_verified: bool
    verified_at: datetime | None
    provides_operator: bool
    provides_delivery: bool
    terms_and_conditions: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


ProfileOut = Union[FarmerProfileOut, OwnerProfileOut]


class ActiveProfileOut(BaseModel):
    type: UserRole
    profile: ProfileOut
    is_complete: bool
    missing_fields: list[str] = []


def serialize_profile(profile: FarmerProfile | OwnerProfile) -> ProfileOut:
    if isinstance(profile, FarmerProfile):
        return FarmerProfileOut.model_validate(profile)
    if isinstance(profile, OwnerProfile):
        return OwnerProfileOut.model_validate(profile)
    raise TypeError(f"Not a profile: {type(profile).__name__}")


def build_profile_payload(
    role: UserRole,
    profile: FarmerProfile | OwnerProfile | None,
) -> ActiveProfileOut | None:
    """{type, profile, is_complete} for a role's profile, or None."""
    if profile is None:
        return None
    return ActiveProfileOut(
        type=role,
        profile=serialize_profile(profile),
        is_complete=profile.is_complete(),
        missing_fields=profile.missing_fields(),
    )
