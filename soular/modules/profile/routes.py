from fastapi import APIRouter, Depends, UploadFile, File
from soular.database.supabase_client import get_supabase
from soular.modules.profile.schemas import ProfileResponse, ProfileUpdate, AvatarUploadResponse
from soular.modules.profile.service import ProfileService
from soular.core.dependencies import get_current_user
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/profile", tags=["profile"])


def get_profile_service(supabase: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.get("", response_model=ProfileResponse)
async def get_profile(
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Get the caller's profile, with the email from auth"""
    return service.get_profile(user_data)


@router.patch("", response_model=ProfileResponse)
async def update_profile(
    profile_data: ProfileUpdate,
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    return service.update_profile(user_data, profile_data)


@router.post("/avatar", response_model=AvatarUploadResponse)
async def upload_avatar(
    file: UploadFile = File(...),
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Upload a new avatar (JPEG, PNG, WebP or GIF, max 5MB) and point the profile at it"""
    return await service.upload_avatar(user_data["id"], file)


@router.delete("/avatar")
async def delete_avatar(
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    service.delete_avatar(user_data["id"])
    return {"success": True}
