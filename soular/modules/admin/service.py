from supabase import Client
from soular.modules.admin.schemas import (
    AdminUserResponse, AdminUserListResponse, ModerationLogResponse, ModerationStatsResponse, RoleChangeResult
)
from soular.config.roles_config import VALID_ROLES
from soular.core.utils import row_or_none, rows, result_count, clean_search, ilike_any, is_uuid, utc_now, utc_now_iso
from typing import List, Optional, Dict, Any
from fastapi import HTTPException
from datetime import timedelta
import logging

logger = logging.getLogger(__name__)


def _require_user_id(user_id: str):
    if not is_uuid(user_id):
        raise HTTPException(status_code=404, detail="User not found")


class ModerationService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def log_action(
        self,
        moderator_id: str,
        action_type: str,
        target_type: str,
        target_id: str,
        reason: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> bool:
        """Write a moderation log row via RPC. Never fails the calling request."""
        try:
            self.supabase.rpc("log_moderation_action", {
                "p_moderator_id": moderator_id,
                "p_action_type": action_type,
                "p_target_type": target_type,
                "p_target_id": target_id,
                "p_reason": reason,
                "p_metadata": metadata or {},
            }).execute()
            return True
        except Exception as e:
            logger.warning(f"Error logging moderation action {action_type} on {target_type} {target_id}: {e}")
            return False

    def list_users(
        self,
        search: Optional[str] = None,
        role: Optional[str] = None,
        banned: Optional[str] = None,
        limit: int = 50,
        offset: int = 0
    ) -> AdminUserListResponse:
        try:
            query = self.supabase.table("profiles")\
                .select(
                    "id, username, email, role, is_banned, ban_reason, ban_expires_at, created_at, updated_at, avatar",
                    count="exact"
                )
            term = clean_search(search)
            if term:
                query = query.or_(ilike_any(["username", "email"], term))
            if role and role in VALID_ROLES:
                query = query.eq("role", role)
            if banned == "true":
                query = query.eq("is_banned", True)
            elif banned == "false":
                query = query.eq("is_banned", False)
            result = query.order("created_at", desc=True)\
                .range(offset, offset + limit - 1)\
                .execute()
            return AdminUserListResponse(
                users=[AdminUserResponse(**u) for u in rows(result)],
                total=result_count(result),
                limit=limit,
                offset=offset
            )
        except Exception as e:
            logger.error(f"Error fetching users: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch users")

    def ban_user(self, user_id: str, moderator_id: str, reason: str, duration_days: Optional[int] = None) -> Optional[str]:
        """Ban user_id. Returns the expiry timestamp, or None for a permanent ban."""
        _require_user_id(user_id)
        if not reason or not reason.strip():
            raise HTTPException(status_code=400, detail="Ban reason is required")
        if user_id == moderator_id:
            raise HTTPException(status_code=400, detail="Cannot ban yourself")
        ban_expires_at = None
        if duration_days and duration_days > 0:
            ban_expires_at = (utc_now() + timedelta(days=duration_days)).isoformat()
        try:
            result = self.supabase.table("profiles")\
                .update({
                    "is_banned": True,
                    "ban_reason": reason.strip(),
                    "ban_expires_at": ban_expires_at,
                    "updated_at": utc_now_iso(),
                })\
                .eq("id", user_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error banning user {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to ban user")
        if not rows(result):
            raise HTTPException(status_code=404, detail="User not found")

        self.log_action(
            moderator_id, "user_banned", "user", user_id,
            reason=reason.strip(),
            metadata={"duration_days": duration_days, "ban_expires_at": ban_expires_at}
        )
        return ban_expires_at

    def unban_user(self, user_id: str, moderator_id: str) -> bool:
        _require_user_id(user_id)
        try:
            result = self.supabase.table("profiles")\
                .update({
                    "is_banned": False,
                    "ban_reason": None,
                    "ban_expires_at": None,
                    "updated_at": utc_now_iso(),
                })\
                .eq("id", user_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error unbanning user {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to unban user")
        if not rows(result):
            raise HTTPException(status_code=404, detail="User not found")

        self.log_action(moderator_id, "user_unbanned", "user", user_id, reason="User unbanned by moderator")
        return True

    def change_role(self, user_id: str, admin_id: str, role: str) -> RoleChangeResult:
        _require_user_id(user_id)
        if not role or role not in VALID_ROLES:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid role. Must be one of: {', '.join(VALID_ROLES)}"
            )
        if user_id == admin_id:
            raise HTTPException(status_code=400, detail="Cannot change your own role")
        try:
            target = row_or_none(
                self.supabase.table("profiles")
                .select("role, username")
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
            if not target:
                raise HTTPException(status_code=404, detail="User not found")
            old_role = target.get("role")

            self.supabase.table("profiles")\
                .update({"role": role, "updated_at": utc_now_iso()})\
                .eq("id", user_id)\
                .execute()
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating role for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update user role")

        self.log_action(
            admin_id, "role_changed", "user", user_id,
            reason=f"Role changed from {old_role} to {role}",
            metadata={"old_role": old_role, "new_role": role, "username": target.get("username")}
        )
        return RoleChangeResult(user_id=user_id, old_role=old_role, new_role=role)

    def _toggle_discussion_flag(self, discussion_id: str, moderator_id: str, column: str, on_action: str, off_action: str) -> dict:
        if not is_uuid(discussion_id):
            raise HTTPException(status_code=404, detail="Discussion not found")
        try:
            discussion = row_or_none(
                self.supabase.table("forum_discussions")
                .select(f"{column}, title")
                .eq("id", discussion_id)
                .limit(1)
                .execute()
            )
            if not discussion:
                raise HTTPException(status_code=404, detail="Discussion not found")
            new_state = not discussion.get(column)

            updated = row_or_none(
                self.supabase.table("forum_discussions")
                .update({column: new_state})
                .eq("id", discussion_id)
                .execute()
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error toggling {column} on discussion {discussion_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update discussion")

        self.log_action(
            moderator_id, on_action if new_state else off_action, "discussion", discussion_id,
            metadata={"title": discussion.get("title")}
        )
        return {"success": True, column: new_state, "discussion": updated}

    def toggle_lock(self, discussion_id: str, moderator_id: str) -> dict:
        return self._toggle_discussion_flag(discussion_id, moderator_id, "is_locked", "lock", "unlock")

    def toggle_pin(self, discussion_id: str, moderator_id: str) -> dict:
        return self._toggle_discussion_flag(discussion_id, moderator_id, "is_pinned", "pin", "unpin")

    def list_logs(self, limit: int = 50, offset: int = 0) -> List[ModerationLogResponse]:
        try:
            result = self.supabase.table("moderation_logs")\
                .select(
                    "id, moderator_id, action_type, target_type, target_id, reason, metadata, created_at, "
                    "profiles:moderator_id (id, name, avatar)"
                )\
                .order("created_at", desc=True)\
                .range(offset, offset + limit - 1)\
                .execute()
            return [ModerationLogResponse(**log) for log in rows(result)]
        except Exception as e:
            logger.error(f"Error fetching moderation logs: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch moderation logs")

    def get_stats(self) -> ModerationStatsResponse:
        """Single row of the moderation_stats view; zeros when the view is unavailable."""
        try:
            stats = row_or_none(
                self.supabase.table("moderation_stats").select("*").limit(1).execute()
            )
        except Exception as e:
            logger.warning(f"Error fetching moderation stats: {e}")
            stats = None
        if not stats:
            return ModerationStatsResponse()
        return ModerationStatsResponse(**{k: v or 0 for k, v in stats.items() if k in ModerationStatsResponse.model_fields})
