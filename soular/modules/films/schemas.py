from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime


class FilmCreate(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    director: Optional[str] = None
    year: Optional[int] = None
    duration: Optional[int] = None
    category: Optional[str] = None
    youtube_url: Optional[str] = None
    thumbnail: Optional[str] = None
    is_premium: Optional[bool] = None
    is_published: Optional[bool] = None


class FilmResponse(BaseModel):
    id: str
    title: str
    slug: str
    description: Optional[str] = None
    director: Optional[str] = None
    year: Optional[int] = None
    duration: Optional[int] = None
    category: Optional[str] = None
    youtube_url: Optional[str] = None
    thumbnail: Optional[str] = None
    is_premium: Optional[bool] = False
    is_published: Optional[bool] = True
    view_count: Optional[int] = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class FilmListResponse(BaseModel):
    films: List[FilmResponse]
    pagination: Pagination


class FilmDetailResponse(BaseModel):
    film: FilmResponse


class FilmCreateResponse(BaseModel):
    message: str
    film: FilmResponse
