from pydantic import BaseModel
from typing import Optional, List, Dict, Any
from datetime import datetime


class NotificationResponse(BaseModel):
    id: str
    user_id: str
    actor_id: Optional[str] = None
    type: str
    title: str
    message: Optional[str] = None
    link_url: Optional[str] = None
    is_read: bool = False
    created_at: datetime
    actor: Optional[Dict[str, Any]] = None

    class Config:
        from_attributes = True


class NotificationListResponse(BaseModel):
    notifications: List[NotificationResponse]
    total: int
    limit: int
    offset: int


class UnreadCountResponse(BaseModel):
    count: int
