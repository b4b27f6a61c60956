from fastapi import APIRouter, Depends
from soular.database.supabase_client import get_supabase
from soular.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse, MeResponse
)
from soular.modules.auth.service import AuthService
from soular.core.dependencies import (
    get_session_auth_service, get_bearer_token, get_current_user, get_user_profile, get_access_cache, is_ban_active
)
from soular.config.roles_config import ROLE_PERMISSIONS
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_session_auth_service)
):
    """Register a new user"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_session_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_bearer_token),
    service: AuthService = Depends(get_session_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=MeResponse)
async def get_me(
    current_user: Dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
    cache: Dict = Depends(get_access_cache),
):
    """Get current authenticated user, their role and permissions (for frontend UI)."""
    profile = get_user_profile(current_user["id"], supabase, cache) or {}
    role = profile.get("role") or "user"
    return MeResponse(
        id=current_user["id"],
        email=current_user.get("email"),
        role=role,
        is_premium=bool(profile.get("is_premium")),
        is_banned=is_ban_active(profile),
        permissions=sorted(ROLE_PERMISSIONS.get(role, set())),
    )
