from supabase import Client
from soular.config.settings import settings
from soular.config.roles_config import BUCKET_PERMISSIONS, role_has_permission
from soular.core.dependencies import get_user_role
from soular.modules.uploads.bucket_storage import BucketStorage
from soular.modules.uploads.schemas import UploadResponse
from typing import Optional, Dict, Any
from fastapi import HTTPException, UploadFile
import time
import uuid
import logging

logger = logging.getLogger(__name__)


def file_extension(filename: Optional[str], default: str = "bin") -> str:
    """Text after the last dot of filename, lower-cased."""
    if not filename:
        return default
    ext = filename.rsplit(".", 1)[-1].strip().lower()
    return ext or default


class UploadService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def check_bucket_access(
        self,
        bucket: str,
        user_data: dict,
        action: str = "upload to",
        cache: Optional[Dict[str, Any]] = None
    ) -> None:
        permission = BUCKET_PERMISSIONS.get(bucket)
        if permission is None:
            raise HTTPException(status_code=400, detail="Invalid bucket name")
        role = get_user_role(user_data["id"], self.supabase, cache)
        if not role_has_permission(role or "user", permission):
            raise HTTPException(
                status_code=403,
                detail=f"Forbidden: Only curators and admins can {action} this bucket"
            )

    async def upload(
        self,
        file: UploadFile,
        bucket: str,
        folder: Optional[str],
        user_data: dict,
        cache: Optional[Dict[str, Any]] = None
    ) -> UploadResponse:
        if not bucket:
            raise HTTPException(status_code=400, detail="Bucket name is required")
        self.check_bucket_access(bucket, user_data, "upload to", cache)

        file_content = await file.read()
        if not file_content:
            raise HTTPException(status_code=400, detail="No file provided")
        if len(file_content) > settings.upload_max_bytes:
            raise HTTPException(status_code=400, detail="File size exceeds upload limit")

        file_name = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:13]}.{file_extension(file.filename)}"
        folder = (folder or "").strip("/")
        file_path = f"{folder}/{file_name}" if folder else file_name

        storage = BucketStorage(self.supabase, bucket)
        try:
            storage.upload_file(file_content, file_path, content_type=file.content_type)
        except Exception:
            raise HTTPException(status_code=400, detail="Failed to upload file")

        logger.info(f"User {user_data['id']} uploaded {file_path} to {bucket}")
        return UploadResponse(
            message="File uploaded successfully",
            url=storage.get_public_url(file_path),
            path=file_path,
            bucket=bucket
        )

    def delete(
        self,
        bucket: Optional[str],
        path: Optional[str],
        user_data: dict,
        cache: Optional[Dict[str, Any]] = None
    ) -> bool:
        if not bucket or not path:
            raise HTTPException(status_code=400, detail="Bucket and path are required")
        self.check_bucket_access(bucket, user_data, "delete from", cache)

        try:
            BucketStorage(self.supabase, bucket).delete_files([path])
        except Exception:
            raise HTTPException(status_code=400, detail="Failed to delete file")
        return True
