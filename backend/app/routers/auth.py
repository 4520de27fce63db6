"""Auth routes: registration, login, session and role switching.

Route overview:
  POST /register               create account + first profile, returns token
  GET  /registration-config    enums and lookup lists for the sign-up form
  POST /check-phone            is a phone number still free?
  POST /login                  phone + password login
  GET  /check                  is the presented token (if any) live?
  POST /logout                 revoke the presented token only
  GET  /user                   current user + active profile
  POST /switch-role            change the active role
  GET  /role-availability      per-role profile presence and completeness
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.deps import (
    BearerToken,
    get_current_token,
    get_current_user,
    get_optional_user,
)
from app.auth.jwt import create_access_token
from app.auth.password import verify_password
from app.auth.revocation import TokenRevocation
from app.database import get_db
from app.middleware.exceptions import (
    AccountDeactivated,
    InvalidCredentials,
    RevocationUnavailable,
)
from app.models.user import User
from app.reference import registration_config
from app.schemas.auth import (
    AuthPayload,
    AuthUserSummary,
    CheckAuthResponse,
    CheckPhoneRequest,
    CurrentUserOut,
    LoginRequest,
    PhoneAvailability,
    RegisterRequest,
    RoleAvailabilityOut,
    SwitchRolePayload,
    SwitchRoleRequest,
    UserOut,
)
from app.schemas.common import ApiResponse, MessageResponse
from app.services.identity import active_profile_payload, role_availability, switch_role
from app.services.registration import phone_exists, register_user

logger = logging.getLogger("agrirent.auth")

router = APIRouter()


# ── Helpers ──────────────────────────────────────────────────

def _build_auth_payload(user: User) -> AuthPayload:
    return AuthPayload(
        user=UserOut.model_validate(user),
        active_profile=active_profile_payload(user),
        token=create_access_token(user_id=user.id),
    )


# ── POST /register ──────────────────────────────────────────

@router.post(
    "/register",
    response_model=ApiResponse[AuthPayload],
    status_code=status.HTTP_201_CREATED,
)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Create a user with its primary-role profile and log them in."""
    user = await register_user(db, body)
    return ApiResponse(message="Registration successful", data=_build_auth_payload(user))


# ── GET /registration-config ────────────────────────────────

@router.get("/registration-config", response_model=ApiResponse[dict])
async def get_registration_config():
    return ApiResponse(data=registration_config())


# ── POST /check-phone ───────────────────────────────────────

@router.post("/check-phone", response_model=ApiResponse[PhoneAvailability])
async def check_phone(body: CheckPhoneRequest, db: AsyncSession = Depends(get_db)):
    exists = await phone_exists(db, body.phone)
    return ApiResponse(
        message="Phone number already registered" if exists else "Phone number is available",
        data=PhoneAvailability(available=not exists),
    )


# ── POST /login ──────────────────────────────────────────────

@router.post("/login", response_model=ApiResponse[AuthPayload])
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Phone + password login.

    An unknown phone and a wrong password produce the same 401 so the
    endpoint cannot be used to probe for registered numbers.
    """
    result = await db.execute(select(User).where(User.phone == body.phone))
    user = result.scalar_one_or_none()

    if not user or not verify_password(body.password, user.hashed_password):
        logger.info("Failed login attempt")
        raise InvalidCredentials()
    if not user.is_active:
        raise AccountDeactivated()

    logger.info(f"User {user.id} logged in")
    return ApiResponse(message="Login successful", data=_build_auth_payload(user))


# ── GET /check ───────────────────────────────────────────────

@router.get("/check", response_model=CheckAuthResponse)
async def check_auth(user: User | None = Depends(get_optional_user)):
    if user is None:
        return CheckAuthResponse(authenticated=False)
    return CheckAuthResponse(
        authenticated=True,
        user=AuthUserSummary.model_validate(user),
    )


# ── POST /logout ─────────────────────────────────────────────

@router.post("/logout", response_model=MessageResponse)
async def logout(bearer: BearerToken = Depends(get_current_token)):
    """Revoke the token used for this request; other sessions stay valid."""
    if not await TokenRevocation.revoke_token(bearer.jti, bearer.expires_at):
        raise RevocationUnavailable()
    logger.info(f"User {bearer.claims['sub']} logged out")
    return MessageResponse(message="Logged out successfully")


# ── GET /user ────────────────────────────────────────────────

@router.get("/user", response_model=ApiResponse[CurrentUserOut])
async def current_user(user: User = Depends(get_current_user)):
    out = CurrentUserOut.model_validate(user)
    out.active_profile = active_profile_payload(user)
    return ApiResponse(data=out)


# ── POST /switch-role ───────────────────────────────────────

@router.post("/switch-role", response_model=ApiResponse[SwitchRolePayload])
async def switch_active_role(
    body: SwitchRoleRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    active_profile = await switch_role(db, user, body.role)
    return ApiResponse(
        message=f"Successfully switched to {body.role.value} role",
        data=SwitchRolePayload(active_role=user.active_role, active_profile=active_profile),
    )


# ── GET /role-availability ──────────────────────────────────

@router.get("/role-availability", response_model=ApiResponse[RoleAvailabilityOut])
async def check_role_availability(user: User = Depends(get_current_user)):
    return ApiResponse(data=role_availability(user))
