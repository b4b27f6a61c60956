from fastapi import APIRouter, Depends, Query
from soular.database.supabase_client import get_supabase
from soular.modules.admin.schemas import (
    AdminMeResponse, AdminUserListResponse, BanRequest, RoleUpdateRequest,
    ModerationLogResponse, ModerationStatsResponse
)
from soular.modules.admin.service import ModerationService
from soular.core.dependencies import (
    require_permission, get_optional_user, get_user_profile, get_access_cache, is_ban_active
)
from soular.config.roles_config import is_moderator_role
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(prefix="/admin", tags=["admin"])


def get_moderation_service(supabase: Client = Depends(get_supabase)) -> ModerationService:
    return ModerationService(supabase)


@router.get("/me", response_model=AdminMeResponse)
async def get_my_role(
    user_data: Optional[Dict] = Depends(get_optional_user),
    supabase: Client = Depends(get_supabase),
    cache: Dict = Depends(get_access_cache)
):
    """Current caller's role flags; guests get role "guest"."""
    if user_data is None:
        return AdminMeResponse(role="guest", is_admin=False, is_moderator=False)
    profile = get_user_profile(user_data["id"], supabase, cache)
    if not profile:
        return AdminMeResponse(role="user", is_admin=False, is_moderator=False)
    role = profile.get("role") or "user"
    return AdminMeResponse(
        role=role,
        is_admin=role == "admin",
        is_moderator=is_moderator_role(role),
        is_banned=is_ban_active(profile),
    )


@router.get("/users", response_model=AdminUserListResponse)
async def list_users(
    search: Optional[str] = None,
    role: Optional[str] = None,
    banned: Optional[str] = None,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    user_data: Dict = Depends(require_permission("moderation:read")),
    service: ModerationService = Depends(get_moderation_service)
):
    return service.list_users(search=search, role=role, banned=banned, limit=limit, offset=offset)


@router.post("/users/{user_id}/ban")
async def ban_user(
    user_id: str,
    ban_request: BanRequest,
    user_data: Dict = Depends(require_permission("moderation:ban")),
    service: ModerationService = Depends(get_moderation_service)
):
    """Ban a user, permanently or for duration_days"""
    ban_expires_at = service.ban_user(user_id, user_data["id"], ban_request.reason, ban_request.duration_days)
    return {"success": True, "message": "User banned successfully", "ban_expires_at": ban_expires_at}


@router.delete("/users/{user_id}/ban")
async def unban_user(
    user_id: str,
    user_data: Dict = Depends(require_permission("moderation:ban")),
    service: ModerationService = Depends(get_moderation_service)
):
    service.unban_user(user_id, user_data["id"])
    return {"success": True, "message": "User unbanned successfully"}


@router.patch("/users/{user_id}/role")
async def update_user_role(
    user_id: str,
    role_request: RoleUpdateRequest,
    user_data: Dict = Depends(require_permission("users:assign_role")),
    service: ModerationService = Depends(get_moderation_service)
):
    """Change a member's role (admins only)"""
    result = service.change_role(user_id, user_data["id"], role_request.role)
    return {"success": True, "message": "User role updated successfully", "data": result}


@router.post("/discussions/{discussion_id}/lock")
async def toggle_discussion_lock(
    discussion_id: str,
    user_data: Dict = Depends(require_permission("moderation:lock")),
    service: ModerationService = Depends(get_moderation_service)
):
    return service.toggle_lock(discussion_id, user_data["id"])


@router.post("/discussions/{discussion_id}/pin")
async def toggle_discussion_pin(
    discussion_id: str,
    user_data: Dict = Depends(require_permission("moderation:pin")),
    service: ModerationService = Depends(get_moderation_service)
):
    return service.toggle_pin(discussion_id, user_data["id"])


@router.get("/moderation-logs", response_model=List[ModerationLogResponse])
async def list_moderation_logs(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    user_data: Dict = Depends(require_permission("moderation:read")),
    service: ModerationService = Depends(get_moderation_service)
):
    return service.list_logs(limit=limit, offset=offset)


@router.get("/stats", response_model=ModerationStatsResponse)
async def moderation_stats(
    user_data: Dict = Depends(require_permission("moderation:read")),
    service: ModerationService = Depends(get_moderation_service)
):
    return service.get_stats()
