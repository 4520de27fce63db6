"""Role switching and role/profile reporting for a loaded user.

The user must come from the request's own session (get_current_user) so
that a role switch is flushed with the request transaction.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.middleware.exceptions import ProfileMissing
from app.models.user import User, UserRole
from app.schemas.auth import AvailableRoles, RoleAvailabilityOut, RoleStatus
from app.schemas.profiles import ActiveProfileOut, build_profile_payload

logger = logging.getLogger("agrirent.identity")


def active_profile_payload(user: User) -> ActiveProfileOut | None:
    return build_profile_payload(user.active_role, user.get_active_profile())


async def switch_role(db: AsyncSession, user: User, role: UserRole) -> ActiveProfileOut | None:
    """Make `role` the user's active role.

    Only the existence of a profile record is checked; an incomplete
    profile can still be switched to and is caught later by the role gate.

    Raises:
        ProfileMissing: the user has no profile for `role`
    """
    if not user.can_switch_to(role):
        raise ProfileMissing(role.value)

    if user.active_role != role:
        previous = user.active_role
        user.active_role = role
        await db.flush()
        logger.info(f"User {user.id} switched role {previous.value} -> {role.value}")

    return active_profile_payload(user)


def _role_status(user: User, role: UserRole) -> RoleStatus:
    profile = user.profile_for(role)
    return RoleStatus(
        available=True,
        has_profile=profile is not None,
        is_complete=profile.is_complete() if profile is not None else False,
    )


def role_availability(user: User) -> RoleAvailabilityOut:
    return RoleAvailabilityOut(
        current_role=user.active_role,
        primary_role=user.primary_role,
        available_roles=AvailableRoles(
            farmer=_role_status(user, UserRole.FARMER),
            owner=_role_status(user, UserRole.OWNER),
        ),
    )
