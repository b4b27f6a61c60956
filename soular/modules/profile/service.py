from supabase import Client
from soular.config.settings import settings
from soular.core.utils import row_or_none, utc_now_iso
from soular.modules.profile.schemas import ProfileResponse, ProfileUpdate, AvatarUploadResponse
from soular.modules.uploads.bucket_storage import BucketStorage
from soular.modules.uploads.service import file_extension
from fastapi import HTTPException, UploadFile
import time
import logging

logger = logging.getLogger(__name__)

ALLOWED_AVATAR_TYPES = ["image/jpeg", "image/jpg", "image/png", "image/webp", "image/gif"]


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.avatars = BucketStorage(supabase, settings.avatar_bucket)

    def get_profile(self, user_data: dict) -> ProfileResponse:
        try:
            profile = row_or_none(
                self.supabase.table("profiles")
                .select("*")
                .eq("id", user_data["id"])
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching profile: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch profile")
        if not profile:
            raise HTTPException(status_code=404, detail="Profile not found")
        return ProfileResponse(**{**profile, "email": user_data.get("email") or profile.get("email")})

    def update_profile(self, user_data: dict, profile_data: ProfileUpdate) -> ProfileResponse:
        fields = profile_data.model_dump(exclude_unset=True)
        updates = {}

        if "name" in fields:
            name = (fields["name"] or "").strip()
            if not name:
                raise HTTPException(status_code=400, detail="Name must be a non-empty string")
            updates["name"] = name
        if "bio" in fields:
            updates["bio"] = (fields["bio"] or "").strip() or None
        if "avatar" in fields:
            updates["avatar"] = fields["avatar"] or None

        if not updates:
            raise HTTPException(status_code=400, detail="No valid fields to update")
        updates["updated_at"] = utc_now_iso()

        try:
            profile = row_or_none(
                self.supabase.table("profiles")
                .update(updates)
                .eq("id", user_data["id"])
                .execute()
            )
        except Exception as e:
            logger.error(f"Error updating profile: {e}")
            raise HTTPException(status_code=500, detail="Failed to update profile")
        if not profile:
            raise HTTPException(status_code=404, detail="Profile not found")
        return ProfileResponse(**{**profile, "email": user_data.get("email") or profile.get("email")})

    async def upload_avatar(self, user_id: str, file: UploadFile) -> AvatarUploadResponse:
        if file.content_type not in ALLOWED_AVATAR_TYPES:
            raise HTTPException(
                status_code=400,
                detail="Invalid file type. Only JPEG, PNG, WebP, and GIF are allowed."
            )
        file_content = await file.read()
        if not file_content:
            raise HTTPException(status_code=400, detail="No file provided")
        if len(file_content) > settings.avatar_max_bytes:
            raise HTTPException(status_code=400, detail="File size exceeds 5MB limit")

        file_path = f"{user_id}/{int(time.time() * 1000)}.{file_extension(file.filename, 'jpg')}"
        try:
            self.avatars.upload_file(file_content, file_path, content_type=file.content_type)
        except Exception:
            raise HTTPException(status_code=500, detail="Failed to upload avatar")
        public_url = self.avatars.get_public_url(file_path)

        try:
            self.supabase.table("profiles")\
                .update({"avatar": public_url, "updated_at": utc_now_iso()})\
                .eq("id", user_id)\
                .execute()
        except Exception as e:
            # the object is stored; the client can retry the profile update with the URL
            logger.warning(f"Avatar uploaded but profile {user_id} not updated: {e}")

        return AvatarUploadResponse(url=public_url, path=file_path)

    def delete_avatar(self, user_id: str) -> bool:
        try:
            profile = row_or_none(
                self.supabase.table("profiles")
                .select("avatar")
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching profile avatar: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch profile")
        if not profile or not profile.get("avatar"):
            raise HTTPException(status_code=400, detail="No avatar to delete")

        try:
            self.avatars.delete_files([self.avatars.path_from_url(profile["avatar"])])
        except Exception:
            logger.warning(f"Continuing avatar removal for {user_id} after storage error")

        try:
            self.supabase.table("profiles")\
                .update({"avatar": None, "updated_at": utc_now_iso()})\
                .eq("id", user_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error removing avatar from profile: {e}")
            raise HTTPException(status_code=500, detail="Failed to update profile")
        return True
