from pydantic import BaseModel
from typing import Optional, List, Dict, Any
from datetime import datetime


class AdminMeResponse(BaseModel):
    role: str
    is_admin: bool
    is_moderator: bool
    is_banned: bool = False


class AdminUserResponse(BaseModel):
    id: str
    username: Optional[str] = None
    email: Optional[str] = None
    role: str = "user"
    is_banned: bool = False
    ban_reason: Optional[str] = None
    ban_expires_at: Optional[datetime] = None
    avatar: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AdminUserListResponse(BaseModel):
    users: List[AdminUserResponse]
    total: int
    limit: int
    offset: int


class BanRequest(BaseModel):
    reason: str
    duration_days: Optional[int] = None


class RoleUpdateRequest(BaseModel):
    role: str


class RoleChangeResult(BaseModel):
    user_id: str
    old_role: Optional[str] = None
    new_role: str


class ModerationLogResponse(BaseModel):
    id: str
    moderator_id: Optional[str] = None
    action_type: str
    target_type: str
    target_id: Optional[str] = None
    reason: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    created_at: datetime
    profiles: Optional[Dict[str, Any]] = None

    class Config:
        from_attributes = True


class ModerationStatsResponse(BaseModel):
    total_pin_actions: int = 0
    total_lock_actions: int = 0
    total_discussion_deletions: int = 0
    total_post_deletions: int = 0
    total_ban_actions: int = 0
    active_moderators: int = 0
    actions_last_24h: int = 0
    actions_last_7d: int = 0
