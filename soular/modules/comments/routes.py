from fastapi import APIRouter, Depends, Query
from soular.database.supabase_client import get_supabase
from soular.modules.comments.schemas import CommentCreate, CommentListResponse, CommentResult
from soular.modules.comments.service import CommentService
from soular.core.dependencies import get_current_user, require_active_member, get_access_cache
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/films/{film_id}/comments", tags=["comments"])


def get_comment_service(supabase: Client = Depends(get_supabase)) -> CommentService:
    return CommentService(supabase)


@router.get("", response_model=CommentListResponse)
async def list_comments(
    film_id: str,
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: CommentService = Depends(get_comment_service)
):
    """Comments for a film with the total count and average rating"""
    return service.list_comments(film_id, limit=limit, offset=offset)


@router.post("", response_model=CommentResult, status_code=201)
async def create_comment(
    film_id: str,
    comment_data: CommentCreate,
    user_data: Dict = Depends(require_active_member),
    service: CommentService = Depends(get_comment_service)
):
    return service.create_comment(film_id, user_data["id"], comment_data)


@router.patch("/{comment_id}", response_model=CommentResult)
async def update_comment(
    film_id: str,
    comment_id: str,
    comment_data: CommentCreate,
    user_data: Dict = Depends(require_active_member),
    service: CommentService = Depends(get_comment_service)
):
    """Edit the caller's own comment"""
    return service.update_comment(film_id, comment_id, user_data["id"], comment_data)


@router.delete("/{comment_id}")
async def delete_comment(
    film_id: str,
    comment_id: str,
    user_data: Dict = Depends(get_current_user),
    cache: Dict = Depends(get_access_cache),
    service: CommentService = Depends(get_comment_service)
):
    """Delete a comment (owner, or moderator/admin)"""
    service.delete_comment(film_id, comment_id, user_data, cache)
    return {"success": True, "message": "Comment deleted successfully"}


@router.post("/{comment_id}/like")
async def like_comment(
    film_id: str,
    comment_id: str,
    user_data: Dict = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service)
):
    service.like_comment(film_id, comment_id, user_data["id"])
    return {"success": True, "message": "Comment liked successfully"}


@router.delete("/{comment_id}/like")
async def unlike_comment(
    film_id: str,
    comment_id: str,
    user_data: Dict = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service)
):
    service.unlike_comment(comment_id, user_data["id"])
    return {"success": True, "message": "Comment unliked successfully"}
