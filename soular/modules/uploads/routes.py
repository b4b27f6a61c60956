from fastapi import APIRouter, Depends, UploadFile, File, Form
from soular.database.supabase_client import get_supabase
from soular.modules.uploads.schemas import UploadResponse, UploadDeleteRequest
from soular.modules.uploads.service import UploadService
from soular.core.dependencies import get_current_user, get_access_cache
from supabase import Client
from typing import Optional, Dict

router = APIRouter(prefix="/upload", tags=["uploads"])


def get_upload_service(supabase: Client = Depends(get_supabase)) -> UploadService:
    return UploadService(supabase)


@router.post("", response_model=UploadResponse, status_code=201)
async def upload_file(
    file: UploadFile = File(...),
    bucket: str = Form(""),
    folder: Optional[str] = Form(None),
    user_data: Dict = Depends(get_current_user),
    cache: Dict = Depends(get_access_cache),
    service: UploadService = Depends(get_upload_service)
):
    """
    Upload a file to a storage bucket.
    Avatars are open to every member; films, posters, thumbnails and
    events need curator or admin rights.
    """
    return await service.upload(file, bucket, folder, user_data, cache)


@router.delete("")
async def delete_file(
    delete_request: UploadDeleteRequest,
    user_data: Dict = Depends(get_current_user),
    cache: Dict = Depends(get_access_cache),
    service: UploadService = Depends(get_upload_service)
):
    service.delete(delete_request.bucket, delete_request.path, user_data, cache)
    return {"message": "File deleted successfully"}
