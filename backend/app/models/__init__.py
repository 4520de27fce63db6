"""Aggregate model imports for Alembic auto-detection."""

from app.models.user import User, UserRole  # noqa: F401
from app.models.farmer_profile import FarmerProfile, FarmType  # noqa: F401
from app.models.owner_profile import BusinessType, OwnerProfile  # noqa: F401

__all__ = [
    "BusinessType",
    "FarmType",
    "FarmerProfile",
    "OwnerProfile",
    "User",
    "UserRole",
]
