from datetime import datetime

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from app.models.user import UserRole
from app.schemas.profiles import (
    FARMER_REQUIRED_INPUT,
    OWNER_REQUIRED_INPUT,
    ActiveProfileOut,
    FarmerFields,
    LocationFields,
    OwnerFields,
    missing_required,
)
from app.schemas.validators import Phone, Pincode


# ── Registration ────────────────────────────────────────────

class RegisterRequest(LocationFields, FarmerFields, OwnerFields):
    """Account + first profile in one payload.

    Farmer fields are only required when primary_role is farmer and owner
    fields only when it is owner; the other role's fields are ignored.
    That conditional check runs after the phone uniqueness check, via
    `missing_role_fields()`.
    """
    phone: Phone
    name: str = Field(..., min_length=2, max_length=100)
    password: str = Field(..., min_length=6, max_length=128)
    password_confirmation: str
    primary_role: UserRole

    district: str = Field(..., min_length=1, max_length=100)
    pincode: Pincode

    @field_validator("password_confirmation")
    @classmethod
    def _passwords_match(cls, value: str, info: ValidationInfo) -> str:
        password = info.data.get("password")
        if password is not None and value != password:
            raise ValueError("Password confirmation does not match.")
        return value

    def missing_role_fields(self) -> dict[str, list[str]]:
        if self.primary_role == UserRole.FARMER:
            return missing_required(self, FARMER_REQUIRED_INPUT, " when primary role is farmer")
        return missing_required(self, OWNER_REQUIRED_INPUT, " when primary role is owner")


class CheckPhoneRequest(BaseModel):
    phone: Phone


class PhoneAvailability(BaseModel):
    available: bool


# ── Login ────────────────────────────────────────────────────

class LoginRequest(BaseModel):
    phone: Phone
    password: str = Field(..., min_length=6)


# ── Users ────────────────────────────────────────────────────

class UserOut(BaseModel):
    id: str
    phone: str
    name: str
    primary_role: UserRole
    active_role: UserRole
    has_farmer_profile: bool
    has_owner_profile: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CurrentUserOut(UserOut):
    active_profile: ActiveProfileOut | None = None


class AuthPayload(BaseModel):
    user: UserOut
    active_profile: ActiveProfileOut | None
    token: str
    token_type: str = "bearer"


class AuthUserSummary(BaseModel):
    id: str
    phone: str
    name: str
    active_role: UserRole

    model_config = {"from_attributes": True}


class CheckAuthResponse(BaseModel):
    success: bool = True
    authenticated: bool
    user: AuthUserSummary | None = None


# ── Role switching ───────────────────────────────────────────

class SwitchRoleRequest(BaseModel):
    role: UserRole


class SwitchRolePayload(BaseModel):
    active_role: UserRole
    active_profile: ActiveProfileOut | None


class RoleStatus(BaseModel):
    # Always true: any user may set up the other role's profile
    available: bool = True
    has_profile: bool
    is_complete: bool


class AvailableRoles(BaseModel):
    farmer: RoleStatus
    owner: RoleStatus


class RoleAvailabilityOut(BaseModel):
    current_role: UserRole
    primary_role: UserRole
    available_roles: AvailableRoles
