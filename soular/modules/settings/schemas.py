from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class SettingsUpdate(BaseModel):
    """Writable settings; id, user_id and timestamps are not accepted from clients"""
    email_notifications: Optional[bool] = None
    email_on_reply: Optional[bool] = None
    email_on_mention: Optional[bool] = None
    email_on_like: Optional[bool] = None
    email_on_event: Optional[bool] = None
    email_on_moderation: Optional[bool] = None

    push_notifications: Optional[bool] = None
    push_on_reply: Optional[bool] = None
    push_on_mention: Optional[bool] = None
    push_on_like: Optional[bool] = None
    push_on_event: Optional[bool] = None
    push_on_moderation: Optional[bool] = None

    show_email: Optional[bool] = None
    show_activity: Optional[bool] = None
    allow_mentions: Optional[bool] = None
    allow_direct_messages: Optional[bool] = None

    theme: Optional[str] = None
    language: Optional[str] = None
    posts_per_page: Optional[int] = None

    email_digest: Optional[str] = None
    digest_day: Optional[int] = None


class SettingsResponse(SettingsUpdate):
    id: Optional[str] = None
    user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SettingsUpdateResult(BaseModel):
    success: bool
    settings: SettingsResponse
