from fastapi import APIRouter, Depends, Query
from soular.database.supabase_client import get_supabase
from soular.modules.notifications.schemas import (
    NotificationResponse, NotificationListResponse, UnreadCountResponse
)
from soular.modules.notifications.service import NotificationService
from soular.core.dependencies import get_current_user
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/notifications", tags=["notifications"])


def get_notification_service(supabase: Client = Depends(get_supabase)) -> NotificationService:
    return NotificationService(supabase)


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    unread_only: bool = False,
    user_data: Dict = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    """List the caller's notifications, newest first"""
    return service.list_notifications(user_data["id"], limit=limit, offset=offset, unread_only=unread_only)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    user_data: Dict = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    return UnreadCountResponse(count=service.unread_count(user_data["id"]))


@router.post("/mark-all-read")
async def mark_all_read(
    user_data: Dict = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    service.mark_all_read(user_data["id"])
    return {"success": True}


@router.patch("/{notification_id}", response_model=NotificationResponse)
async def mark_read(
    notification_id: str,
    user_data: Dict = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    """Mark one of the caller's notifications as read"""
    return service.mark_read(notification_id, user_data["id"])


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: str,
    user_data: Dict = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    service.delete_notification(notification_id, user_data["id"])
    return {"success": True}
