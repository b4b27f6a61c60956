from supabase import Client
from soular.config.settings import settings
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)

PUBLIC_OBJECT_MARKER = "/storage/v1/object/public/"


class BucketStorage:
    """Thin wrapper over one Supabase Storage bucket."""

    def __init__(self, supabase: Client, bucket: str):
        self.supabase = supabase
        self.bucket = bucket

    def upload_file(self, file_content: bytes, path: str, content_type: Optional[str] = None) -> str:
        """Upload bytes to path (no upsert) and return the stored path"""
        file_options = {
            "cache-control": settings.storage_cache_control,
            "upsert": "false",
        }
        if content_type:
            file_options["content-type"] = content_type
        try:
            self.supabase.storage.from_(self.bucket).upload(
                path,
                file_content,
                file_options=file_options
            )
            return path
        except Exception as e:
            logger.error(f"Failed to upload {path} to bucket {self.bucket}: {e}")
            raise

    def get_public_url(self, path: str) -> str:
        url = self.supabase.storage.from_(self.bucket).get_public_url(path)
        # storage3 releases differ: plain string or {"publicUrl": ...}
        if isinstance(url, dict):
            url = url.get("publicUrl") or url.get("publicURL") or ""
        return url.rstrip("?") if isinstance(url, str) else str(url)

    def delete_files(self, paths: List[str]) -> None:
        try:
            self.supabase.storage.from_(self.bucket).remove(paths)
        except Exception as e:
            logger.error(f"Failed to delete {paths} from bucket {self.bucket}: {e}")
            raise

    def path_from_url(self, value: str) -> str:
        """Object path for a public URL of this bucket; other values are returned unchanged."""
        marker = f"{PUBLIC_OBJECT_MARKER}{self.bucket}/"
        if marker in value:
            return value.split(marker, 1)[1]
        return value
