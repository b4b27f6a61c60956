from supabase import Client
from soular.modules.notifications.schemas import NotificationResponse, NotificationListResponse
from soular.core.utils import rows, row_or_none, result_count, is_uuid
from typing import Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def notify(
        self,
        user_id: str,
        type: str,
        title: str,
        message: Optional[str] = None,
        link_url: Optional[str] = None,
        actor_id: Optional[str] = None
    ) -> bool:
        """Insert a notification for user_id. Failures are logged and reported as False, never raised."""
        try:
            self.supabase.table("notifications").insert({
                "user_id": user_id,
                "actor_id": actor_id,
                "type": type,
                "title": title,
                "message": message,
                "link_url": link_url,
                "is_read": False,
            }).execute()
            return True
        except Exception as e:
            logger.warning(f"Failed to create {type} notification for {user_id}: {e}")
            return False

    def list_notifications(
        self,
        user_id: str,
        limit: int = 20,
        offset: int = 0,
        unread_only: bool = False
    ) -> NotificationListResponse:
        try:
            query = self.supabase.table("notifications")\
                .select("*, actor:actor_id(id, username, avatar)", count="exact")\
                .eq("user_id", user_id)
            if unread_only:
                query = query.eq("is_read", False)
            result = query.order("created_at", desc=True)\
                .range(offset, offset + limit - 1)\
                .execute()
            return NotificationListResponse(
                notifications=[NotificationResponse(**n) for n in rows(result)],
                total=result_count(result),
                limit=limit,
                offset=offset
            )
        except Exception as e:
            logger.error(f"Error fetching notifications: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch notifications")

    def unread_count(self, user_id: str) -> int:
        try:
            result = self.supabase.table("notifications")\
                .select("id", count="exact", head=True)\
                .eq("user_id", user_id)\
                .eq("is_read", False)\
                .execute()
            return result_count(result)
        except Exception as e:
            logger.error(f"Error getting unread count: {e}")
            raise HTTPException(status_code=500, detail="Failed to get unread count")

    def mark_all_read(self, user_id: str) -> bool:
        try:
            self.supabase.table("notifications")\
                .update({"is_read": True})\
                .eq("user_id", user_id)\
                .eq("is_read", False)\
                .execute()
            return True
        except Exception as e:
            logger.error(f"Error marking all notifications as read: {e}")
            raise HTTPException(status_code=500, detail="Failed to mark all notifications as read")

    def mark_read(self, notification_id: str, user_id: str) -> NotificationResponse:
        if not is_uuid(notification_id):
            raise HTTPException(status_code=404, detail="Notification not found")
        try:
            result = self.supabase.table("notifications")\
                .update({"is_read": True})\
                .eq("id", notification_id)\
                .eq("user_id", user_id)\
                .execute()
            notification = row_or_none(result)
            if not notification:
                raise HTTPException(status_code=404, detail="Notification not found")
            return NotificationResponse(**notification)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error marking notification as read: {e}")
            raise HTTPException(status_code=500, detail="Failed to mark notification as read")

    def delete_notification(self, notification_id: str, user_id: str) -> bool:
        if not is_uuid(notification_id):
            raise HTTPException(status_code=404, detail="Notification not found")
        try:
            result = self.supabase.table("notifications")\
                .delete()\
                .eq("id", notification_id)\
                .eq("user_id", user_id)\
                .execute()
            if not rows(result):
                raise HTTPException(status_code=404, detail="Notification not found")
            return True
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting notification: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete notification")
