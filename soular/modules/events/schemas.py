from pydantic import BaseModel
from typing import Optional, List, Dict, Any
from datetime import datetime


class EventCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    event_date: Optional[datetime] = None
    location: Optional[str] = None
    max_participants: Optional[int] = None
    image_url: Optional[str] = None
    tags: Optional[List[Any]] = None


class EventUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    event_date: Optional[datetime] = None
    location: Optional[str] = None
    max_participants: Optional[int] = None
    image_url: Optional[str] = None
    tags: Optional[List[Any]] = None


class EventResponse(BaseModel):
    id: str
    title: str
    slug: Optional[str] = None
    description: Optional[str] = None
    event_date: Optional[datetime] = None
    location: Optional[str] = None
    host_id: Optional[str] = None
    max_participants: Optional[int] = None
    image_url: Optional[str] = None
    tags: Optional[List[str]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        extra = "allow"


class EventDetailResponse(EventResponse):
    is_registered: bool = False
    registration_status: Optional[str] = None


class EventListResponse(BaseModel):
    events: List[EventResponse]
    total: int
    limit: int
    offset: int
    has_more: bool


class RegistrationResponse(BaseModel):
    id: str
    event_id: Optional[str] = None
    user_id: Optional[str] = None
    status: str
    registered_at: Optional[datetime] = None
    profiles: Optional[Dict[str, Any]] = None

    class Config:
        from_attributes = True


class RegisterResult(BaseModel):
    message: str
    registration: RegistrationResponse
    waitlisted: bool


class RegistrationStatus(BaseModel):
    is_registered: bool
    registration: Optional[RegistrationResponse] = None


class MyEventResponse(EventResponse):
    registration_status: Optional[str] = None
    registered_at: Optional[datetime] = None
    registration_id: str
