"""Management CLI for account administration and profile verification.

Usage:
    python -m app.cli verify-farmer <phone>   # mark the farmer profile verified
    python -m app.cli verify-owner <phone>    # mark the owner profile verified
    python -m app.cli deactivate <phone>      # block logins for the account
    python -m app.cli activate <phone>        # re-enable logins

Verification is done offline by staff; this is the only writer of
`is_verified` / `verified_at`.
"""

import sys
from datetime import datetime

from sqlalchemy import Engine, create_engine, select
from sqlalchemy.orm import Session

from app.config import settings
from app.models import User, UserRole


class CommandError(Exception):
    pass


def get_engine() -> Engine:
    return create_engine(settings.database_url_sync)


def _get_user(session: Session, phone: str) -> User:
    user = session.execute(select(User).where(User.phone == phone)).scalar_one_or_none()
    if user is None:
        raise CommandError(f"No user with phone {phone}")
    return user


def verify_profile(phone: str, role: UserRole, engine: Engine | None = None) -> datetime:
    """Mark the user's `role` profile verified. Returns the verification time."""
    with Session(engine or get_engine()) as session, session.begin():
        user = _get_user(session, phone)
        profile = user.profile_for(role)
        if profile is None:
            raise CommandError(f"{phone} has no {role.value} profile")
        profile.is_verified = True
        profile.verified_at = datetime.utcnow()
        return profile.verified_at


def set_active(phone: str, active: bool, engine: Engine | None = None) -> None:
    with Session(engine or get_engine()) as session, session.begin():
        _get_user(session, phone).is_active = active


COMMANDS = {
    "verify-farmer": lambda phone: verify_profile(phone, UserRole.FARMER),
    "verify-owner": lambda phone: verify_profile(phone, UserRole.OWNER),
    "deactivate": lambda phone: set_active(phone, False),
    "activate": lambda phone: set_active(phone, True),
}


def main(argv: list[str]) -> int:
    if len(argv) != 2 or argv[0] not in COMMANDS:
        print(f"Usage: python -m app.cli [{'|'.join(COMMANDS)}] <phone>")
        return 2

    cmd, phone = argv
    try:
        COMMANDS[cmd](phone)
    except CommandError as e:
        print(f"  FAILED: {e}")
        return 1
    print("  OK")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
