"""
Core dependencies for route protection and role checking
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from soular.config.roles_config import role_has_permission, is_moderator_role
from soular.core.utils import row_or_none, utc_now
from soular.database.supabase_client import get_supabase, get_auth_client
from soular.modules.auth.service import AuthService
from supabase import Client
from datetime import datetime
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

# auto_error is off so a missing header yields 401 rather than FastAPI's default
security = HTTPBearer(auto_error=False)

PROFILE_ACCESS_COLUMNS = "id, role, is_banned, ban_expires_at, is_premium"


def _get_request_cache(request: Request) -> Dict[str, Any]:
    """Return request-scoped cache for the caller's profile row."""
    if not hasattr(request.state, "access_cache"):
        request.state.access_cache = {}
    return request.state.access_cache


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_session_auth_service(auth_client: Client = Depends(get_auth_client)) -> AuthService:
    """AuthService for calls that start or end a session."""
    return AuthService(auth_client)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> str:
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_bearer_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    return auth_service.get_current_user(token)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[dict]:
    """Current user when a valid token is present, otherwise None (public endpoints)."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return auth_service.get_current_user(credentials.credentials)
    except HTTPException:
        return None


def get_user_profile(user_id: str, supabase: Client, cache: Optional[Dict[str, Any]] = None) -> Optional[dict]:
    """Return the caller's access columns from profiles. Uses request-scoped cache when provided."""
    if cache is not None and "profile" in cache:
        return cache["profile"]
    try:
        result = supabase.table("profiles")\
            .select(PROFILE_ACCESS_COLUMNS)\
            .eq("id", user_id)\
            .limit(1)\
            .execute()
        profile = row_or_none(result)
    except Exception as e:
        logger.error(f"Error getting user profile: {e}")
        profile = None
    if cache is not None:
        cache["profile"] = profile
    return profile


def get_user_role(user_id: str, supabase: Client, cache: Optional[Dict[str, Any]] = None) -> Optional[str]:
    profile = get_user_profile(user_id, supabase, cache)
    return profile.get("role") if profile else None


def _parse_timestamp(value: str) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return None


def is_ban_active(profile: Optional[dict]) -> bool:
    """A ban is active when is_banned is set and ban_expires_at is empty or still in the future."""
    if not profile or not profile.get("is_banned"):
        return False
    expires_at = profile.get("ban_expires_at")
    if not expires_at:
        return True
    expiry = _parse_timestamp(expires_at)
    if expiry is None:
        return True
    if expiry.tzinfo is None:
        return expiry > utc_now().replace(tzinfo=None)
    return expiry > utc_now()


def is_moderator(user_data: dict, supabase: Client, cache: Optional[Dict[str, Any]] = None) -> bool:
    return is_moderator_role(get_user_role(user_data["id"], supabase, cache))


def require_permission(required_permission: str):
    """Factory function to create permission check dependency"""
    def check_permission(
        request: Request,
        user_data: dict = Depends(get_current_user),
        supabase: Client = Depends(get_supabase)
    ) -> dict:
        """Dependency to check if the caller's role grants the required permission"""
        cache = _get_request_cache(request)
        role = get_user_role(user_data["id"], supabase, cache)
        if role is None or not role_has_permission(role, required_permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required: {required_permission}"
            )
        return {**user_data, "role": role}
    return check_permission


def require_active_member(
    request: Request,
    user_data: dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase)
) -> dict:
    """Signed-in caller whose account is not currently banned (content creation)."""
    cache = _get_request_cache(request)
    profile = get_user_profile(user_data["id"], supabase, cache)
    if is_ban_active(profile):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Your account is banned from posting"
        )
    return {**user_data, "role": (profile or {}).get("role") or "user"}


def get_access_cache(request: Request) -> Dict[str, Any]:
    """Dependency that returns request-scoped access cache (populated by the role checks when used)."""
    return _get_request_cache(request)


def check_owner_or_permission(
    owner_id: Optional[str],
    user_data: dict,
    permission: str,
    supabase: Client,
    detail: str,
    cache: Optional[Dict[str, Any]] = None
) -> bool:
    """Allow the row owner, or a caller whose role grants permission. Returns True when access came from the role."""
    if owner_id and owner_id == user_data["id"]:
        return False
    role = get_user_role(user_data["id"], supabase, cache)
    if role is not None and role_has_permission(role, permission):
        return True
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
