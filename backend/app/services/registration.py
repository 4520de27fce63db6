"""Account registration: one user plus exactly one profile, atomically.

Checks run in a fixed order:
  1. structural validation   (pydantic, before this module is reached)
  2. phone uniqueness        → DuplicatePhone
  3. role-conditional fields → ValidationFailed

The user and profile rows are flushed in the caller's session
transaction. Any failure while writing them rolls the transaction back,
so an account never exists without the profile for its primary role.
A concurrent registration of the same phone trips the unique index on
users.phone and is reported as DuplicatePhone as well.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.password import hash_password
from app.middleware.exceptions import DuplicatePhone, ValidationFailed
from app.models.user import User
from app.schemas.auth import RegisterRequest
from app.services.profiles import attach_profile, build_profile

logger = logging.getLogger("agrirent.registration")


async def phone_exists(db: AsyncSession, phone: str) -> bool:
    result = await db.execute(select(User.id).where(User.phone == phone))
    return result.scalar_one_or_none() is not None


async def register_user(db: AsyncSession, body: RegisterRequest) -> User:
    if await phone_exists(db, body.phone):
        raise DuplicatePhone()

    errors = body.missing_role_fields()
    if errors:
        raise ValidationFailed(errors)

    role = body.primary_role
    user = User(
        phone=body.phone,
        name=body.name,
        hashed_password=hash_password(body.password),
        primary_role=role,
        active_role=role,
        is_active=True,
        farmer_profile=None,
        owner_profile=None,
    )

    try:
        db.add(user)
        await db.flush()
    except IntegrityError:
        # Another registration took the phone after phone_exists() ran
        await db.rollback()
        logger.info("Registration lost a race for an already registered phone")
        raise DuplicatePhone()

    try:
        attach_profile(user, role, build_profile(role, body))
        await db.flush()
    except Exception:
        await db.rollback()
        logger.exception(f"Registration rolled back ({role.value})")
        raise

    logger.info(f"Registered user {user.id} as {role.value}")
    return user
