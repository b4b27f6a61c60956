from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime


class CommentCreate(BaseModel):
    comment: Optional[str] = None
    rating: Optional[int] = None


class CommentResponse(BaseModel):
    id: str
    film_id: str
    user_id: str
    comment: str
    rating: Optional[int] = None
    like_count: Optional[int] = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    username: Optional[str] = None
    user_avatar: Optional[str] = None
    is_liked: Optional[bool] = None

    class Config:
        from_attributes = True
        extra = "allow"


class CommentListResponse(BaseModel):
    comments: List[CommentResponse]
    total: int
    average_rating: float
    limit: int
    offset: int


class CommentResult(BaseModel):
    success: bool
    comment: CommentResponse
