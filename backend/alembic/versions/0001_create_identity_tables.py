"""Create users, farmer_profiles and owner_profiles.

Revision ID: 0001
Revises:
Create Date: 2026-10-17
"""

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

from alembic import op
import sqlalchemy as sa

ROLE_VALUES = ("farmer", "owner")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def _profile_tail() -> list[sa.Column]:
    """user link, location and verification columns shared by both profiles"""
    return [
        sa.Column(
            "user_id",
            sa.String(36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("district", sa.String(100), nullable=False),
        sa.Column("state", sa.String(100), nullable=False, server_default="Tamil Nadu"),
        sa.Column("pincode", sa.String(6), nullable=False),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("verified_at", sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("phone", sa.String(15), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("primary_role", sa.Enum(*ROLE_VALUES, name="primary_role"), nullable=False),
        sa.Column("active_role", sa.Enum(*ROLE_VALUES, name="active_role"), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_users_phone", "users", ["phone"], unique=True)
    op.create_index("ix_users_primary_role", "users", ["primary_role"])
    op.create_index("ix_users_active_role", "users", ["active_role"])
    op.create_index("ix_users_is_active", "users", ["is_active"])

    op.create_table(
        "farmer_profiles",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("farm_name", sa.String(255), nullable=True),
        sa.Column("farm_location", sa.String(255), nullable=False),
        sa.Column("farm_size", sa.Numeric(10, 2), nullable=False),
        sa.Column(
            "farm_type",
            sa.Enum("crop", "livestock", "mixed", "organic", "other", name="farm_type"),
            nullable=False,
        ),
        sa.Column("years_of_experience", sa.Integer(), nullable=False),
        sa.Column("crop_types", sa.JSON(), nullable=True),
        sa.Column("livestock_types", sa.JSON(), nullable=True),
        sa.Column("village", sa.String(100), nullable=False),
        sa.Column("taluk", sa.String(100), nullable=False),
        sa.Column("additional_notes", sa.Text(), nullable=True),
        *_profile_tail(),
        *_timestamps(),
    )
    op.create_index("ix_farmer_profiles_district", "farmer_profiles", ["district"])
    op.create_index("ix_farmer_profiles_is_verified", "farmer_profiles", ["is_verified"])

    op.create_table(
        "owner_profiles",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("business_name", sa.String(255), nullable=True),
        sa.Column(
            "business_type",
            sa.Enum("individual", "company", "partnership", name="business_type"),
            nullable=False,
        ),
        sa.Column("gst_number", sa.String(15), nullable=True),
        sa.Column("years_in_business", sa.Integer(), nullable=False),
        sa.Column("total_equipment_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("equipment_types", sa.JSON(), nullable=True),
        sa.Column("service_districts", sa.JSON(), nullable=False),
        sa.Column("max_delivery_distance", sa.Numeric(6, 2), nullable=False),
        sa.Column("address_line_1", sa.String(255), nullable=False),
        sa.Column("address_line_2", sa.String(255), nullable=True),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("bank_name", sa.String(255), nullable=True),
        sa.Column("account_holder_name", sa.String(255), nullable=True),
        sa.Column("account_number", sa.String(34), nullable=True),
        sa.Column("ifsc_code", sa.String(11), nullable=True),
        sa.Column("provides_operator", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("provides_delivery", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("terms_and_conditions", sa.Text(), nullable=True),
        *_profile_tail(),
        *_timestamps(),
    )
    op.create_index("ix_owner_profiles_business_type", "owner_profiles", ["business_type"])
    op.create_index("ix_owner_profiles_district", "owner_profiles", ["district"])
    op.create_index("ix_owner_profiles_is_verified", "owner_profiles", ["is_verified"])


def downgrade() -> None:
    op.drop_table("owner_profiles")
    op.drop_table("farmer_profiles")
    op.drop_table("users")
    bind = op.get_bind()
    for enum_name in ("business_type", "farm_type", "active_role", "primary_role"):
        sa.Enum(name=enum_name).drop(bind, checkfirst=True)
