"""Profile routes for both roles.

Endpoints:
    GET  /api/profile/farmer                Show own farmer profile
    PUT  /api/profile/farmer                Partially update it
    POST /api/profile/farmer/create         Add a farmer profile to the account
    GET  /api/profile/owner                 Show own owner profile
    PUT  /api/profile/owner                 Partially update it
    POST /api/profile/owner/create          Add an owner profile to the account
    PUT  /api/profile/owner/bank-details    Set payout bank details

Every response carries the {type, profile, is_complete} payload so a
client can tell straight away whether the role gate will let it through.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.deps import get_current_user
from app.database import get_db
from app.middleware.exceptions import ResourceNotFoundError
from app.models.user import User, UserRole
from app.schemas.common import ApiResponse
from app.schemas.profiles import (
    ActiveProfileOut,
    BankDetailsUpdate,
    FarmerProfileCreate,
    FarmerProfileUpdate,
    OwnerProfileCreate,
    OwnerProfileUpdate,
    build_profile_payload,
)
from app.services.profiles import (
    PROFILE_LABELS,
    create_profile,
    update_bank_details,
    update_profile,
)

router = APIRouter()


def _show(user: User, role: UserRole) -> ApiResponse[ActiveProfileOut]:
    profile = user.profile_for(role)
    if profile is None:
        raise ResourceNotFoundError(PROFILE_LABELS[role], user.id)
    return ApiResponse(data=build_profile_payload(role, profile))


# ── Farmer ───────────────────────────────────────────────────

@router.get("/farmer", response_model=ApiResponse[ActiveProfileOut])
async def show_farmer_profile(user: User = Depends(get_current_user)):
    return _show(user, UserRole.FARMER)


@router.put("/farmer", response_model=ApiResponse[ActiveProfileOut])
async def update_farmer_profile(
    body: FarmerProfileUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    profile = await update_profile(db, user, UserRole.FARMER, body)
    return ApiResponse(
        message="Farmer profile updated",
        data=build_profile_payload(UserRole.FARMER, profile),
    )


@router.post(
    "/farmer/create",
    response_model=ApiResponse[ActiveProfileOut],
    status_code=status.HTTP_201_CREATED,
)
async def create_farmer_profile(
    body: FarmerProfileCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    profile = await create_profile(db, user, UserRole.FARMER, body)
    return ApiResponse(
        message="Farmer profile created",
        data=build_profile_payload(UserRole.FARMER, profile),
    )


# ── Owner ────────────────────────────────────────────────────

@router.get("/owner", response_model=ApiResponse[ActiveProfileOut])
async def show_owner_profile(user: User = Depends(get_current_user)):
    return _show(user, UserRole.OWNER)


@router.put("/owner", response_model=ApiResponse[ActiveProfileOut])
async def update_owner_profile(
    body: OwnerProfileUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    profile = await update_profile(db, user, UserRole.OWNER, body)
    return ApiResponse(
        message="Owner profile updated",
        data=build_profile_payload(UserRole.OWNER, profile),
    )


@router.post(
    "/owner/create",
    response_model=ApiResponse[ActiveProfileOut],
    status_code=status.HTTP_201_CREATED,
)
async def create_owner_profile(
    body: OwnerProfileCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    profile = await create_profile(db, user, UserRole.OWNER, body)
    return ApiResponse(
        message="Owner profile created",
        data=build_profile_payload(UserRole.OWNER, profile),
    )


@router.put("/owner/bank-details", response_model=ApiResponse[ActiveProfileOut])
async def set_owner_bank_details(
    body: BankDetailsUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    profile = await update_bank_details(db, user, body)
    return ApiResponse(
        message="Bank details updated",
        data=build_profile_payload(UserRole.OWNER, profile),
    )
