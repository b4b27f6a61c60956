from fastapi import APIRouter, Depends
from soular.database.supabase_client import get_supabase
from soular.modules.settings.schemas import SettingsUpdate, SettingsResponse, SettingsUpdateResult
from soular.modules.settings.service import SettingsService
from soular.core.dependencies import get_current_user
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/settings", tags=["settings"])


def get_settings_service(supabase: Client = Depends(get_supabase)) -> SettingsService:
    return SettingsService(supabase)


@router.get("", response_model=SettingsResponse)
async def get_settings(
    user_data: Dict = Depends(get_current_user),
    service: SettingsService = Depends(get_settings_service)
):
    """Get the caller's settings, creating defaults on first access"""
    return service.get_settings(user_data["id"])


@router.patch("", response_model=SettingsUpdateResult)
async def update_settings(
    settings_data: SettingsUpdate,
    user_data: Dict = Depends(get_current_user),
    service: SettingsService = Depends(get_settings_service)
):
    return service.update_settings(user_data["id"], settings_data)
