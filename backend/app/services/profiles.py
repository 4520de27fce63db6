"""Profile construction and maintenance.

Used by registration (first profile) and by the profile endpoints
(second profile, partial updates, owner bank details).
"""

import logging

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.middleware.exceptions import (
    ProfileAlreadyExists,
    ResourceNotFoundError,
    ValidationFailed,
)
from app.models.farmer_profile import FarmerProfile
from app.models.owner_profile import OwnerProfile
from app.models.user import User, UserRole
from app.schemas.profiles import (
    BankDetailsUpdate,
    FarmerFields,
    FarmerProfileCreate,
    LocationFields,
    OwnerFields,
    OwnerProfileCreate,
)

logger = logging.getLogger("agrirent.profiles")

PROFILE_MODELS: dict[UserRole, type[FarmerProfile] | type[OwnerProfile]] = {
    UserRole.FARMER: FarmerProfile,
    UserRole.OWNER: OwnerProfile,
}
ROLE_FIELDS: dict[UserRole, type[BaseModel]] = {
    UserRole.FARMER: FarmerFields,
    UserRole.OWNER: OwnerFields,
}
PROFILE_LABELS = {UserRole.FARMER: "Farmer profile", UserRole.OWNER: "Owner profile"}
# NOT NULL columns that are optional in request bodies
NON_NULL_FLAGS = {"provides_operator", "provides_delivery"}


def build_profile(role: UserRole, data: BaseModel) -> FarmerProfile | OwnerProfile:
    """Build an unsaved profile for `role` from validated input.

    Only the role's own fields and the shared location fields are read,
    so a registration payload carrying the other role's fields is safe.
    """
    names = set(ROLE_FIELDS[role].model_fields) | set(LocationFields.model_fields)
    values = {name: getattr(data, name, None) for name in names}
    values = {name: value for name, value in values.items() if value is not None}
    values.setdefault("state", settings.default_state)
    values["is_verified"] = False
    values["verified_at"] = None
    if role == UserRole.OWNER:
        values["total_equipment_count"] = 0
        values.setdefault("provides_operator", False)
        values.setdefault("provides_delivery", True)
    return PROFILE_MODELS[role](**values)


def attach_profile(user: User, role: UserRole, profile: FarmerProfile | OwnerProfile) -> None:
    if role == UserRole.FARMER:
        user.farmer_profile = profile
    else:
        user.owner_profile = profile


async def create_profile(
    db: AsyncSession,
    user: User,
    role: UserRole,
    body: FarmerProfileCreate | OwnerProfileCreate,
) -> FarmerProfile | OwnerProfile:
    """Add the profile for `role` to an account that lacks it.

    The active role is left unchanged; the user switches explicitly.
    """
    if user.profile_for(role) is not None:
        raise ProfileAlreadyExists(role.value)

    errors = body.missing_fields()
    if errors:
        raise ValidationFailed(errors)

    profile = build_profile(role, body)
    attach_profile(user, role, profile)
    await db.flush()
    logger.info(f"User {user.id} created {role.value} profile")
    return profile


async def update_profile(
    db: AsyncSession,
    user: User,
    role: UserRole,
    body: BaseModel,
) -> FarmerProfile | OwnerProfile:
    """Write the fields present in `body` onto the user's `role` profile.

    Required fields and the service flags may be changed but not cleared.
    A blank state falls back to the default, as at registration.
    """
    profile = user.profile_for(role)
    if profile is None:
        raise ResourceNotFoundError(PROFILE_LABELS[role], user.id)

    data = body.model_dump(exclude_unset=True)
    if "state" in data and data["state"] is None:
        data["state"] = settings.default_state

    not_nullable = set(profile.REQUIRED_FIELDS) | NON_NULL_FLAGS
    errors = {
        name: ["This field cannot be empty."]
        for name, value in data.items()
        if name in not_nullable and value in (None, [], "")
    }
    if errors:
        raise ValidationFailed(errors)

    for name, value in data.items():
        setattr(profile, name, value)
    await db.flush()
    return profile


async def update_bank_details(
    db: AsyncSession,
    user: User,
    body: BankDetailsUpdate,
) -> OwnerProfile:
    profile = user.owner_profile
    if profile is None:
        raise ResourceNotFoundError(PROFILE_LABELS[UserRole.OWNER], user.id)

    profile.bank_name = body.bank_name
    profile.account_holder_name = body.account_holder_name
    profile.account_number = body.account_number
    profile.ifsc_code = body.ifsc_code
    await db.flush()
    logger.info(f"User {user.id} updated bank details")
    return profile
