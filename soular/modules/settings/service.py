from supabase import Client
from soular.config.content_config import (
    SETTINGS_THEMES, SETTINGS_LANGUAGES, SETTINGS_EMAIL_DIGESTS, POSTS_PER_PAGE_RANGE, DIGEST_DAY_RANGE
)
from soular.core.utils import row_or_none, is_unique_violation
from soular.modules.settings.schemas import SettingsUpdate, SettingsResponse, SettingsUpdateResult
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def validate_settings(settings_data: SettingsUpdate) -> dict:
    """Fields the client actually sent, checked against the allowed values"""
    updates = settings_data.model_dump(exclude_unset=True)
    if updates.get("theme") is not None and updates["theme"] not in SETTINGS_THEMES:
        raise HTTPException(status_code=400, detail="Invalid theme value")
    if updates.get("language") is not None and updates["language"] not in SETTINGS_LANGUAGES:
        raise HTTPException(status_code=400, detail="Invalid language value")
    if updates.get("email_digest") is not None and updates["email_digest"] not in SETTINGS_EMAIL_DIGESTS:
        raise HTTPException(status_code=400, detail="Invalid email digest value")
    if updates.get("posts_per_page") is not None:
        low, high = POSTS_PER_PAGE_RANGE
        if not low <= updates["posts_per_page"] <= high:
            raise HTTPException(status_code=400, detail=f"Posts per page must be between {low} and {high}")
    if "digest_day" in updates:
        low, high = DIGEST_DAY_RANGE
        if updates["digest_day"] is None or not low <= updates["digest_day"] <= high:
            raise HTTPException(status_code=400, detail="Digest day must be between 0 (Sunday) and 6 (Saturday)")
    # null for a non-nullable column means "leave unchanged"
    return {k: v for k, v in updates.items() if v is not None}


class SettingsService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _find(self, user_id: str):
        return row_or_none(
            self.supabase.table("user_settings").select("*").eq("user_id", user_id).limit(1).execute()
        )

    def get_settings(self, user_id: str) -> SettingsResponse:
        """The caller's settings row, created with column defaults on first access"""
        try:
            settings = self._find(user_id)
            if settings:
                return SettingsResponse(**settings)
            created = row_or_none(
                self.supabase.table("user_settings").insert({"user_id": user_id}).execute()
            )
        except Exception as e:
            if is_unique_violation(e):
                # created by a concurrent request
                settings = self._find(user_id)
                if settings:
                    return SettingsResponse(**settings)
            logger.error(f"Error fetching settings for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch settings")
        if not created:
            raise HTTPException(status_code=500, detail="Failed to create settings")
        logger.info(f"Created default settings for {user_id}")
        return SettingsResponse(**created)

    def update_settings(self, user_id: str, settings_data: SettingsUpdate) -> SettingsUpdateResult:
        updates = validate_settings(settings_data)
        if not updates:
            raise HTTPException(status_code=400, detail="No valid fields to update")
        try:
            settings = row_or_none(
                self.supabase.table("user_settings")
                .update(updates)
                .eq("user_id", user_id)
                .execute()
            )
            if not settings:
                settings = row_or_none(
                    self.supabase.table("user_settings").insert({"user_id": user_id, **updates}).execute()
                )
        except Exception as e:
            logger.error(f"Error updating settings for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update settings")
        if not settings:
            raise HTTPException(status_code=500, detail="Failed to update settings")
        return SettingsUpdateResult(success=True, settings=SettingsResponse(**settings))
