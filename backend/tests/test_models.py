"""Unit tests for the identity model: dispatch, completeness, bank details."""

from datetime import datetime

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import BusinessType, FarmerProfile, OwnerProfile, User, UserRole
from app.schemas.profiles import OwnerProfileOut
from conftest import _farmer_profile, _owner_profile, create_user


def _user(**kwargs) -> User:
    values = dict(
        phone="9000000001",
        name="Test",
        hashed_password="x",
        primary_role=UserRole.FARMER,
        active_role=UserRole.FARMER,
        farmer_profile=None,
        owner_profile=None,
    )
    values.update(kwargs)
    return User(**values)


@pytest.mark.unit
class TestUserRoles:
    def test_active_profile_dispatch(self):
        farmer = _farmer_profile()
        owner = _owner_profile()
        user = _user(farmer_profile=farmer, owner_profile=owner)

        assert user.get_active_profile() is farmer
        user.active_role = UserRole.OWNER
        assert user.get_active_profile() is owner

    def test_can_switch_to_requires_profile_record(self):
        user = _user(farmer_profile=_farmer_profile())

        assert user.can_switch_to(UserRole.FARMER) is True
        assert user.can_switch_to(UserRole.OWNER) is False
        assert user.has_farmer_profile is True
        assert user.has_owner_profile is False

    def test_can_switch_ignores_completeness(self):
        user = _user(owner_profile=_owner_profile(city=None))

        assert user.can_switch_to(UserRole.OWNER) is True

    def test_profile_for_unknown_role(self):
        with pytest.raises(ValueError):
            _user().profile_for("admin")

    def test_primary_role_cannot_change(self):
        user = _user()

        with pytest.raises(ValueError):
            user.primary_role = UserRole.OWNER

    def test_role_is_a_string_enum(self):
        assert UserRole("owner") is UserRole.OWNER
        assert UserRole.FARMER == "farmer"


@pytest.mark.unit
@pytest.mark.asyncio
class TestPersistedUser:
    async def test_primary_role_frozen_after_load(self, db_session: AsyncSession, farmer_user: User):
        loaded = (
            await db_session.execute(select(User).where(User.id == farmer_user.id))
        ).scalar_one()

        assert loaded.primary_role == UserRole.FARMER
        with pytest.raises(ValueError):
            loaded.primary_role = UserRole.OWNER

    async def test_profiles_eagerly_loaded(self, db_session: AsyncSession, dual_user: User):
        loaded = (
            await db_session.execute(select(User).where(User.id == dual_user.id))
        ).scalar_one()

        assert isinstance(loaded.farmer_profile, FarmerProfile)
        assert isinstance(loaded.owner_profile, OwnerProfile)
        assert loaded.owner_profile.service_districts == ["Salem"]

    async def test_one_profile_per_role(self, db_session: AsyncSession, farmer_user: User):
        db_session.add(_farmer_profile(user_id=farmer_user.id))

        with pytest.raises(IntegrityError) as exc_info:
            await db_session.commit()
        assert "unique" in str(exc_info.value).lower()


@pytest.mark.unit
class TestCompleteness:
    def test_complete_farmer(self):
        assert _farmer_profile().is_complete() is True

    def test_adding_taluk_completes(self):
        profile = _farmer_profile(taluk=None)
        assert profile.is_complete() is False
        assert profile.missing_fields() == ["taluk"]

        profile.taluk = "Melur"
        assert profile.is_complete() is True

    def test_adding_fields_never_regresses(self):
        profile = FarmerProfile(district="Madurai", pincode="625001")
        was_complete = profile.is_complete()

        for name, value in [
            ("farm_location", "East field"),
            ("farm_size", 1),
            ("farm_type", "crop"),
            ("years_of_experience", 2),
            ("village", "Melur"),
            ("taluk", "Melur"),
            ("farm_name", "Green Acres"),
        ]:
            setattr(profile, name, value)
            now_complete = profile.is_complete()
            assert now_complete or not was_complete
            was_complete = now_complete

        assert was_complete is True

    @pytest.mark.parametrize("value", [None, "", 0])
    def test_empty_or_zero_counts_as_missing(self, value):
        assert _farmer_profile(years_of_experience=value).is_complete() is False

    def test_owner_requires_service_districts(self):
        assert _owner_profile().is_complete() is True
        assert _owner_profile(service_districts=[]).is_complete() is False

    def test_full_address_skips_blank_parts(self):
        profile = _owner_profile(address_line_2=None, state="Tamil Nadu")

        assert profile.full_address == "3 Temple Street, Salem, Salem, Tamil Nadu, 636001"


@pytest.mark.unit
class TestBankDetails:
    def test_all_four_fields_required(self):
        profile = _owner_profile(
            bank_name="Indian Bank",
            account_holder_name="S. Selvi",
            account_number="123456789",
        )
        assert profile.has_bank_details is False

        profile.ifsc_code = "IDIB0000123"
        assert profile.has_bank_details is True

    def test_output_schema_hides_account_fields(self):
        assert "account_number" not in OwnerProfileOut.model_fields
        assert "ifsc_code" not in OwnerProfileOut.model_fields

    def test_serialized_profile_hides_account_fields(self):
        profile = _owner_profile(
            id="p1",
            user_id="u1",
            business_type=BusinessType.COMPANY,
            state="Tamil Nadu",
            total_equipment_count=0,
            provides_operator=False,
            provides_delivery=True,
            is_verified=False,
            bank_name="Indian Bank",
            account_holder_name="S. Selvi",
            account_number="123456789",
            ifsc_code="IDIB0000123",
            created_at=datetime(2026, 1, 1),
            updated_at=datetime(2026, 1, 1),
        )

        dumped = OwnerProfileOut.model_validate(profile).model_dump()

        assert dumped["has_bank_details"] is True
        assert "123456789" not in str(dumped)
        assert "IDIB0000123" not in str(dumped)


@pytest.mark.unit
@pytest.mark.asyncio
class TestCreateUserHelper:
    async def test_registration_defaults(self, db_session: AsyncSession):
        user = await create_user(db_session, phone="9000000020", role=UserRole.OWNER, owner=_owner_profile())

        assert user.owner_profile.is_verified is False
        assert user.owner_profile.verified_at is None
        assert user.owner_profile.total_equipment_count == 0
        assert user.owner_profile.state == "Tamil Nadu"
