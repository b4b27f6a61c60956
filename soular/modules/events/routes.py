from fastapi import APIRouter, Depends, Query
from soular.database.supabase_client import get_supabase
from soular.modules.events.schemas import (
    EventCreate, EventUpdate, EventResponse, EventDetailResponse, EventListResponse,
    RegistrationResponse, RegisterResult, RegistrationStatus, MyEventResponse
)
from soular.modules.events.service import EventService
from soular.core.dependencies import get_current_user, get_optional_user, require_permission, get_access_cache
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(tags=["events"])


def get_event_service(supabase: Client = Depends(get_supabase)) -> EventService:
    return EventService(supabase)


@router.get("/events", response_model=EventListResponse)
async def list_events(
    status: str = "upcoming",
    search: Optional[str] = None,
    limit: int = Query(12, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: EventService = Depends(get_event_service)
):
    """List events by status (upcoming, past or all)"""
    return service.list_events(status=status, search=search, limit=limit, offset=offset)


@router.post("/events", response_model=EventResponse, status_code=201)
async def create_event(
    event_data: EventCreate,
    user_data: Dict = Depends(require_permission("events:create")),
    service: EventService = Depends(get_event_service)
):
    """Create an event hosted by the caller (curators and admins)"""
    return service.create_event(event_data, user_data["id"])


@router.get("/events/{event_id}", response_model=EventDetailResponse)
async def get_event(
    event_id: str,
    user_data: Optional[Dict] = Depends(get_optional_user),
    service: EventService = Depends(get_event_service)
):
    return service.get_event(event_id, user_data["id"] if user_data else None)


@router.patch("/events/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: str,
    event_data: EventUpdate,
    user_data: Dict = Depends(get_current_user),
    cache: Dict = Depends(get_access_cache),
    service: EventService = Depends(get_event_service)
):
    return service.update_event(event_id, event_data, user_data, cache)


@router.delete("/events/{event_id}")
async def delete_event(
    event_id: str,
    user_data: Dict = Depends(get_current_user),
    cache: Dict = Depends(get_access_cache),
    service: EventService = Depends(get_event_service)
):
    service.delete_event(event_id, user_data, cache)
    return {"success": True}


@router.get("/events/{event_id}/registrations", response_model=List[RegistrationResponse])
async def list_registrations(
    event_id: str,
    user_data: Dict = Depends(get_current_user),
    cache: Dict = Depends(get_access_cache),
    service: EventService = Depends(get_event_service)
):
    """Registrations for an event, newest first (host or admin)"""
    return service.list_registrations(event_id, user_data, cache)


@router.post("/events/{event_id}/register", response_model=RegisterResult)
async def register_for_event(
    event_id: str,
    user_data: Dict = Depends(get_current_user),
    service: EventService = Depends(get_event_service)
):
    """Register for an event; full events put the caller on the waitlist"""
    return service.register(event_id, user_data["id"])


@router.delete("/events/{event_id}/register")
async def unregister_from_event(
    event_id: str,
    user_data: Dict = Depends(get_current_user),
    service: EventService = Depends(get_event_service)
):
    service.unregister(event_id, user_data["id"])
    return {"message": "Successfully unregistered from event"}


@router.get("/events/{event_id}/register", response_model=RegistrationStatus)
async def get_registration_status(
    event_id: str,
    user_data: Optional[Dict] = Depends(get_optional_user),
    service: EventService = Depends(get_event_service)
):
    if user_data is None:
        return RegistrationStatus(is_registered=False)
    return service.registration_status(event_id, user_data["id"])


@router.get("/my-events", response_model=List[MyEventResponse])
async def my_events(
    user_data: Dict = Depends(get_current_user),
    service: EventService = Depends(get_event_service)
):
    """Events the caller registered for, with the registration status"""
    return service.my_events(user_data["id"])
