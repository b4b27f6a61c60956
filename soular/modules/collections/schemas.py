from pydantic import BaseModel
from typing import Optional, List, Dict, Any
from datetime import datetime


class CollectionCreate(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    is_published: bool = True


class CollectionUpdate(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    is_published: Optional[bool] = None


class CollectionResponse(BaseModel):
    id: str
    title: str
    slug: str
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    film_count: Optional[int] = 0
    is_published: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CollectionDetailResponse(CollectionResponse):
    films: List[Dict[str, Any]] = []


class CollectionPagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class CollectionListResponse(BaseModel):
    collections: List[CollectionResponse]
    pagination: CollectionPagination


class CollectionFilmAdd(BaseModel):
    film_id: Optional[str] = None
    display_order: int = 0


class CollectionFilmResponse(BaseModel):
    id: Optional[str] = None
    collection_id: str
    film_id: str
    display_order: int = 0
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
