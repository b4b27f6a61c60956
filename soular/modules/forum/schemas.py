from pydantic import BaseModel
from typing import Optional, List, Dict, Any
from datetime import datetime


class DiscussionCreate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[Any] = None


class DiscussionUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[Any] = None


class PostCreate(BaseModel):
    content: Optional[str] = None


class DiscussionResponse(BaseModel):
    id: str
    author_id: Optional[str] = None
    title: str
    content: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    is_pinned: Optional[bool] = False
    is_locked: Optional[bool] = False
    view_count: Optional[int] = 0
    reply_count: Optional[int] = 0
    last_activity_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    profiles: Optional[Dict[str, Any]] = None
    is_author: Optional[bool] = None

    class Config:
        from_attributes = True


class DiscussionListResponse(BaseModel):
    discussions: List[DiscussionResponse]
    total: int
    limit: int
    offset: int
    has_more: bool


class PostResponse(BaseModel):
    id: str
    discussion_id: str
    author_id: Optional[str] = None
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    profiles: Optional[Dict[str, Any]] = None
    forum_discussions: Optional[Dict[str, Any]] = None
    is_author: Optional[bool] = None

    class Config:
        from_attributes = True


class LikeStatus(BaseModel):
    is_liked: bool


class UserActivityStats(BaseModel):
    total_discussions: int
    total_posts: int


class UserActivityResponse(BaseModel):
    profile: Dict[str, Any]
    discussions: List[DiscussionResponse]
    posts: List[PostResponse]
    stats: UserActivityStats
