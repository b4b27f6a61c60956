from fastapi import APIRouter, Depends, Query
from soular.database.supabase_client import get_supabase
from soular.modules.forum.schemas import (
    DiscussionCreate, DiscussionUpdate, PostCreate, DiscussionResponse, DiscussionListResponse,
    PostResponse, LikeStatus, UserActivityResponse
)
from soular.modules.forum.service import ForumService
from soular.core.dependencies import get_current_user, get_optional_user, require_active_member, get_access_cache
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(prefix="/forum", tags=["forum"])


def get_forum_service(supabase: Client = Depends(get_supabase)) -> ForumService:
    return ForumService(supabase)


@router.get("", response_model=DiscussionListResponse)
async def list_discussions(
    category: str = "all",
    sort: str = "latest",
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    search: Optional[str] = None,
    service: ForumService = Depends(get_forum_service)
):
    """List discussions sorted by latest activity, views (popular) or replies (most_replies)"""
    return service.list_discussions(category=category, sort=sort, limit=limit, offset=offset, search=search)


@router.post("", response_model=DiscussionResponse, status_code=201)
async def create_discussion(
    discussion_data: DiscussionCreate,
    user_data: Dict = Depends(require_active_member),
    service: ForumService = Depends(get_forum_service)
):
    return service.create_discussion(discussion_data, user_data["id"])


@router.patch("/posts/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    post_data: PostCreate,
    user_data: Dict = Depends(require_active_member),
    service: ForumService = Depends(get_forum_service)
):
    return service.update_post(post_id, user_data["id"], post_data)


@router.delete("/posts/{post_id}")
async def delete_post(
    post_id: str,
    user_data: Dict = Depends(get_current_user),
    cache: Dict = Depends(get_access_cache),
    service: ForumService = Depends(get_forum_service)
):
    """Delete a post (author, or moderator/admin)"""
    service.delete_post(post_id, user_data, cache)
    return {"message": "Post deleted successfully"}


@router.get("/user/{user_id}", response_model=UserActivityResponse)
async def user_activity(
    user_id: str,
    service: ForumService = Depends(get_forum_service)
):
    return service.user_activity(user_id)


@router.get("/{discussion_id}", response_model=DiscussionResponse)
async def get_discussion(
    discussion_id: str,
    user_data: Optional[Dict] = Depends(get_optional_user),
    service: ForumService = Depends(get_forum_service)
):
    """Get a discussion and count the view"""
    return service.get_discussion(discussion_id, user_data["id"] if user_data else None)


@router.patch("/{discussion_id}", response_model=DiscussionResponse)
async def update_discussion(
    discussion_id: str,
    discussion_data: DiscussionUpdate,
    user_data: Dict = Depends(require_active_member),
    service: ForumService = Depends(get_forum_service)
):
    return service.update_discussion(discussion_id, user_data["id"], discussion_data)


@router.delete("/{discussion_id}")
async def delete_discussion(
    discussion_id: str,
    user_data: Dict = Depends(get_current_user),
    cache: Dict = Depends(get_access_cache),
    service: ForumService = Depends(get_forum_service)
):
    """Delete a discussion (author, or moderator/admin)"""
    service.delete_discussion(discussion_id, user_data, cache)
    return {"message": "Discussion deleted successfully"}


@router.get("/{discussion_id}/posts", response_model=List[PostResponse])
async def list_posts(
    discussion_id: str,
    user_data: Optional[Dict] = Depends(get_optional_user),
    service: ForumService = Depends(get_forum_service)
):
    return service.list_posts(discussion_id, user_data["id"] if user_data else None)


@router.post("/{discussion_id}/posts", response_model=PostResponse, status_code=201)
async def create_post(
    discussion_id: str,
    post_data: PostCreate,
    user_data: Dict = Depends(require_active_member),
    service: ForumService = Depends(get_forum_service)
):
    """Reply to a discussion; locked discussions reject new posts"""
    return service.create_post(discussion_id, user_data["id"], post_data)


@router.get("/{discussion_id}/like", response_model=LikeStatus)
async def like_status(
    discussion_id: str,
    user_data: Optional[Dict] = Depends(get_optional_user),
    service: ForumService = Depends(get_forum_service)
):
    if user_data is None:
        return LikeStatus(is_liked=False)
    return service.like_status(discussion_id, user_data["id"])


@router.post("/{discussion_id}/like")
async def like_discussion(
    discussion_id: str,
    user_data: Dict = Depends(get_current_user),
    service: ForumService = Depends(get_forum_service)
):
    service.like_discussion(discussion_id, user_data["id"])
    return {"message": "Discussion liked successfully"}


@router.delete("/{discussion_id}/like")
async def unlike_discussion(
    discussion_id: str,
    user_data: Dict = Depends(get_current_user),
    service: ForumService = Depends(get_forum_service)
):
    service.unlike_discussion(discussion_id, user_data["id"])
    return {"message": "Discussion unliked successfully"}
