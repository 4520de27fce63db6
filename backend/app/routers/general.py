"""Lookup lists for authenticated screens (district pickers, type chips)."""

from fastapi import APIRouter, Depends

from app.auth.deps import get_current_user
from app.models.user import User
from app.reference import (
    COMMON_CROP_TYPES,
    COMMON_EQUIPMENT_TYPES,
    COMMON_LIVESTOCK_TYPES,
    TAMIL_NADU_DISTRICTS,
)
from app.schemas.common import ApiResponse

router = APIRouter()


@router.get("/districts", response_model=ApiResponse[list[str]])
async def get_districts(_user: User = Depends(get_current_user)):
    return ApiResponse(data=TAMIL_NADU_DISTRICTS)


@router.get("/equipment-types", response_model=ApiResponse[list[str]])
async def get_equipment_types(_user: User = Depends(get_current_user)):
    return ApiResponse(data=COMMON_EQUIPMENT_TYPES)


@router.get("/crop-types", response_model=ApiResponse[list[str]])
async def get_crop_types(_user: User = Depends(get_current_user)):
    return ApiResponse(data=COMMON_CROP_TYPES)


@router.get("/livestock-types", response_model=ApiResponse[list[str]])
async def get_livestock_types(_user: User = Depends(get_current_user)):
    return ApiResponse(data=COMMON_LIVESTOCK_TYPES)
