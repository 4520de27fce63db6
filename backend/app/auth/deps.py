"""FastAPI dependencies for authentication and authorization.

Dependencies:
  get_current_token      → raw bearer token + decoded claims (or raise)
  get_current_user       → decode JWT, check revocation, load user from DB
  get_optional_user      → same, but None instead of raising
  require_active_role(r) → role gate: active role must be r and its profile complete
"""

from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.jwt import decode_token
from app.auth.revocation import TokenRevocation
from app.database import get_db
from app.middleware.exceptions import (
    AuthenticationRequired,
    ProfileIncomplete,
    RoleMismatch,
)
from app.models.user import User, UserRole

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


@dataclass
class BearerToken:
    raw: str
    claims: dict

    @property
    def jti(self) -> str | None:
        return self.claims.get("jti")

    @property
    def expires_at(self) -> float:
        return float(self.claims.get("exp", 0))


async def _resolve_token(token: str | None) -> BearerToken | None:
    if not token:
        return None
    payload = decode_token(token)
    if not payload.get("sub") or not payload.get("jti") or payload.get("type") != "access":
        return None
    if await TokenRevocation.is_revoked(payload["jti"]):
        return None
    return BearerToken(raw=token, claims=payload)


async def _load_active_user(db: AsyncSession, user_id: str) -> User | None:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user or not user.is_active:
        return None
    return user


# ── Core user dependencies ──────────────────────────────────

async def get_current_token(token: str | None = Depends(oauth2_scheme)) -> BearerToken:
    """Return the presented, unrevoked access token."""
    bearer = await _resolve_token(token)
    if bearer is None:
        raise AuthenticationRequired()
    return bearer


async def get_current_user(
    bearer: BearerToken = Depends(get_current_token),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Load the token's user from the DB, with both profiles eagerly loaded."""
    user = await _load_active_user(db, bearer.claims["sub"])
    if user is None:
        raise AuthenticationRequired("User not found or inactive.")
    return user


async def get_optional_user(
    token: str | None = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """Resolve the caller if a valid token is presented; never raises for auth."""
    bearer = await _resolve_token(token)
    if bearer is None:
        return None
    return await _load_active_user(db, bearer.claims["sub"])


# ── Role gate ───────────────────────────────────────────────

def check_role_access(user: User | None, role: UserRole) -> User:
    """Apply the role gate to an already-resolved user.

    Order matters and the first failing check wins:
      1. no user                         → AuthenticationRequired
      2. active role differs from `role` → RoleMismatch (with can_switch hint)
      3. active profile incomplete       → ProfileIncomplete
    Handlers behind the gate may therefore assume a complete profile.
    """
    if user is None:
        raise AuthenticationRequired()

    if user.active_role != role:
        raise RoleMismatch(
            required_role=role.value,
            current_role=user.active_role.value,
            can_switch=user.can_switch_to(role),
        )

    profile = user.get_active_profile()
    if profile is not None and not profile.is_complete():
        raise ProfileIncomplete(role.value)

    return user


def require_active_role(role: UserRole):
    """Dependency factory: restrict a route to users acting in `role`.

    Usage:
        @router.post("/equipment")
        async def list_equipment(user: User = Depends(require_active_role(UserRole.OWNER))):
            ...
    """
    async def _check(user: User | None = Depends(get_optional_user)) -> User:
        return check_role_access(user, role)

    return _check
