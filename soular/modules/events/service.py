from supabase import Client
from soular.core.dependencies import check_owner_or_permission
from soular.core.utils import (
    row_or_none, rows, result_count, clean_search, ilike_any, slugify, is_uuid,
    is_unique_violation, normalize_tags, utc_now_iso
)
from soular.modules.events.schemas import (
    EventCreate, EventUpdate, EventResponse, EventDetailResponse, EventListResponse,
    RegistrationResponse, RegisterResult, RegistrationStatus, MyEventResponse
)
from soular.modules.notifications.service import NotificationService
from typing import List, Optional, Dict, Any
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

STATUS_CONFIRMED = "confirmed"
STATUS_WAITLIST = "waitlist"
STATUS_CANCELLED = "cancelled"

MY_EVENT_COLUMNS = (
    "id, status, registered_at, event_id, "
    "events (id, title, slug, description, event_date, location, host_id, max_participants, image_url, tags, created_at)"
)


class EventService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.notifications = NotificationService(supabase)

    def list_events(
        self,
        status: str = "upcoming",
        search: Optional[str] = None,
        limit: int = 12,
        offset: int = 0
    ) -> EventListResponse:
        """
        upcoming: event_date >= now, soonest first
        past: event_date < now, most recent first
        all: no date filter, ascending
        """
        try:
            query = self.supabase.table("events").select("*", count="exact")
            now = utc_now_iso()
            if status == "upcoming":
                query = query.gte("event_date", now)
            elif status == "past":
                query = query.lt("event_date", now)
            term = clean_search(search)
            if term:
                query = query.or_(ilike_any(["title", "description", "location"], term))
            query = query.order("event_date", desc=status == "past")
            result = query.range(offset, offset + limit - 1).execute()
        except Exception as e:
            logger.error(f"Error fetching events: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch events")
        total = result_count(result)
        return EventListResponse(
            events=[EventResponse(**e) for e in rows(result)],
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + limit < total
        )

    def _get_event_row(self, event_id: str, columns: str = "*") -> dict:
        if not is_uuid(event_id):
            raise HTTPException(status_code=404, detail="Event not found")
        try:
            event = row_or_none(
                self.supabase.table("events").select(columns).eq("id", event_id).limit(1).execute()
            )
        except Exception as e:
            logger.error(f"Error fetching event {event_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch event")
        if not event:
            raise HTTPException(status_code=404, detail="Event not found")
        return event

    def _find_registration(self, event_id: str, user_id: str) -> Optional[dict]:
        return row_or_none(
            self.supabase.table("event_registrations")
            .select("id, event_id, user_id, status, registered_at")
            .eq("event_id", event_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )

    def _confirmed_count(self, event_id: str) -> int:
        result = self.supabase.table("event_registrations")\
            .select("id", count="exact", head=True)\
            .eq("event_id", event_id)\
            .eq("status", STATUS_CONFIRMED)\
            .execute()
        return result_count(result)

    def get_event(self, event_id: str, user_id: Optional[str] = None) -> EventDetailResponse:
        event = self._get_event_row(event_id)
        registration = None
        if user_id:
            try:
                registration = self._find_registration(event_id, user_id)
            except Exception as e:
                logger.warning(f"Error checking registration for event {event_id}: {e}")
        active = registration is not None and registration.get("status") != STATUS_CANCELLED
        return EventDetailResponse(
            **event,
            is_registered=active,
            registration_status=registration.get("status") if active else None
        )

    def create_event(self, event_data: EventCreate, host_id: str) -> EventResponse:
        title = (event_data.title or "").strip()
        if not title:
            raise HTTPException(status_code=400, detail="Title is required")
        if event_data.event_date is None:
            raise HTTPException(status_code=400, detail="Event date is required")
        if event_data.max_participants is not None and event_data.max_participants < 1:
            raise HTTPException(status_code=400, detail="max_participants must be at least 1")

        try:
            event = row_or_none(
                self.supabase.table("events").insert({
                    "title": title,
                    "slug": slugify(title),
                    "description": event_data.description or None,
                    "event_date": event_data.event_date.isoformat(),
                    "location": event_data.location or None,
                    "host_id": host_id,
                    "max_participants": event_data.max_participants,
                    "image_url": event_data.image_url or None,
                    "tags": normalize_tags(event_data.tags),
                }).execute()
            )
        except Exception as e:
            logger.error(f"Error creating event: {e}")
            raise HTTPException(status_code=500, detail="Failed to create event")
        if not event:
            raise HTTPException(status_code=500, detail="Failed to create event")
        logger.info(f"Event created: {event.get('id')} by {host_id}")
        return EventResponse(**event)

    def update_event(
        self,
        event_id: str,
        event_data: EventUpdate,
        user_data: dict,
        cache: Optional[Dict[str, Any]] = None
    ) -> EventResponse:
        event = self._get_event_row(event_id)
        check_owner_or_permission(
            event.get("host_id"), user_data, "events:manage", self.supabase,
            "Only the host can edit this event", cache
        )

        fields = event_data.model_dump(exclude_unset=True)
        update_data = {}
        if "title" in fields:
            title = (fields["title"] or "").strip()
            if not title:
                raise HTTPException(status_code=400, detail="Title cannot be empty")
            update_data["title"] = title
            update_data["slug"] = slugify(title)
        if "event_date" in fields:
            if fields["event_date"] is None:
                raise HTTPException(status_code=400, detail="Event date cannot be empty")
            update_data["event_date"] = fields["event_date"].isoformat()
        if "max_participants" in fields:
            if fields["max_participants"] is not None and fields["max_participants"] < 1:
                raise HTTPException(status_code=400, detail="max_participants must be at least 1")
            update_data["max_participants"] = fields["max_participants"]
        for key in ("description", "location", "image_url"):
            if key in fields:
                update_data[key] = fields[key] or None
        if "tags" in fields:
            update_data["tags"] = normalize_tags(fields["tags"])
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields to update")
        update_data["updated_at"] = utc_now_iso()

        try:
            updated = row_or_none(
                self.supabase.table("events").update(update_data).eq("id", event_id).execute()
            )
        except Exception as e:
            logger.error(f"Error updating event {event_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update event")
        if not updated:
            raise HTTPException(status_code=404, detail="Event not found")

        if "max_participants" in update_data:
            self.promote_waitlist(updated)
        return EventResponse(**updated)

    def delete_event(self, event_id: str, user_data: dict, cache: Optional[Dict[str, Any]] = None) -> bool:
        event = self._get_event_row(event_id, "id, host_id")
        check_owner_or_permission(
            event.get("host_id"), user_data, "events:manage", self.supabase,
            "Only the host can delete this event", cache
        )
        try:
            self.supabase.table("events").delete().eq("id", event_id).execute()
            return True
        except Exception as e:
            logger.error(f"Error deleting event {event_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete event")

    def list_registrations(
        self,
        event_id: str,
        user_data: dict,
        cache: Optional[Dict[str, Any]] = None
    ) -> List[RegistrationResponse]:
        event = self._get_event_row(event_id, "id, host_id")
        check_owner_or_permission(
            event.get("host_id"), user_data, "events:manage", self.supabase,
            "Only the host can view registrations", cache
        )
        try:
            result = self.supabase.table("event_registrations")\
                .select("id, event_id, user_id, status, registered_at, profiles:user_id (id, username, name, avatar)")\
                .eq("event_id", event_id)\
                .order("registered_at", desc=True)\
                .execute()
            return [RegistrationResponse(**r) for r in rows(result)]
        except Exception as e:
            logger.error(f"Error fetching registrations for event {event_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch registrations")

    def register(self, event_id: str, user_id: str) -> RegisterResult:
        """
        Register user_id for the event.
        When the event has max_participants and the confirmed registrations
        already fill it, the registration is stored as waitlist.
        """
        event = self._get_event_row(event_id, "id, title, max_participants")
        try:
            existing = self._find_registration(event_id, user_id)
            if existing and existing.get("status") != STATUS_CANCELLED:
                raise HTTPException(status_code=409, detail="Already registered for this event")

            status = STATUS_CONFIRMED
            max_participants = event.get("max_participants")
            if max_participants and self._confirmed_count(event_id) >= max_participants:
                status = STATUS_WAITLIST

            if existing:
                registration = row_or_none(
                    self.supabase.table("event_registrations")
                    .update({"status": status, "registered_at": utc_now_iso()})
                    .eq("id", existing["id"])
                    .execute()
                )
            else:
                registration = row_or_none(
                    self.supabase.table("event_registrations").insert({
                        "event_id": event_id,
                        "user_id": user_id,
                        "status": status,
                    }).execute()
                )
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail="Already registered for this event")
            logger.error(f"Error registering for event {event_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to register for event")
        if not registration:
            raise HTTPException(status_code=500, detail="Failed to register for event")

        waitlisted = status == STATUS_WAITLIST
        return RegisterResult(
            message="Event is full, you have been added to the waitlist" if waitlisted
            else "Successfully registered for event",
            registration=RegistrationResponse(**registration),
            waitlisted=waitlisted
        )

    def unregister(self, event_id: str, user_id: str) -> List[dict]:
        """Remove the caller's registration. Returns the waitlisted registrations promoted as a result."""
        event = self._get_event_row(event_id, "id, title, max_participants")
        try:
            existing = self._find_registration(event_id, user_id)
            if not existing:
                return []
            self.supabase.table("event_registrations")\
                .delete()\
                .eq("event_id", event_id)\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error unregistering from event {event_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to unregister from event")

        if existing.get("status") == STATUS_CONFIRMED and event.get("max_participants"):
            return self.promote_waitlist(event)
        return []

    def promote_waitlist(self, event: dict) -> List[dict]:
        """
        Move the oldest waitlisted registrations to confirmed while seats are open.
        Failures are logged; the triggering request still succeeds.
        """
        event_id = event["id"]
        max_participants = event.get("max_participants")
        promoted = []
        try:
            query = self.supabase.table("event_registrations")\
                .select("id, user_id")\
                .eq("event_id", event_id)\
                .eq("status", STATUS_WAITLIST)\
                .order("registered_at")
            if max_participants:
                open_seats = max_participants - self._confirmed_count(event_id)
                if open_seats <= 0:
                    return []
                query = query.limit(open_seats)
            for registration in rows(query.execute()):
                self.supabase.table("event_registrations")\
                    .update({"status": STATUS_CONFIRMED})\
                    .eq("id", registration["id"])\
                    .eq("status", STATUS_WAITLIST)\
                    .execute()
                promoted.append(registration)
        except Exception as e:
            logger.warning(f"Error promoting waitlist for event {event_id}: {e}")

        for registration in promoted:
            logger.info(f"Promoted registration {registration['id']} for event {event_id}")
            self.notifications.notify(
                registration["user_id"],
                "event_promoted",
                "You're in!",
                message=f"A spot opened up for {event.get('title') or 'an event'} and your registration is confirmed.",
                link_url=f"/events/{event_id}"
            )
        return promoted

    def registration_status(self, event_id: str, user_id: str) -> RegistrationStatus:
        if not is_uuid(event_id):
            return RegistrationStatus(is_registered=False)
        try:
            registration = self._find_registration(event_id, user_id)
        except Exception as e:
            logger.error(f"Error fetching registration for event {event_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch registration")
        if not registration or registration.get("status") == STATUS_CANCELLED:
            return RegistrationStatus(is_registered=False)
        return RegistrationStatus(is_registered=True, registration=RegistrationResponse(**registration))

    def my_events(self, user_id: str) -> List[MyEventResponse]:
        try:
            result = self.supabase.table("event_registrations")\
                .select(MY_EVENT_COLUMNS)\
                .eq("user_id", user_id)\
                .order("registered_at", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching registered events: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch registered events")

        events = []
        for registration in rows(result):
            event = registration.get("events")
            if isinstance(event, list):
                event = event[0] if event else None
            if not event:
                continue
            events.append(MyEventResponse(
                **event,
                registration_status=registration.get("status"),
                registered_at=registration.get("registered_at"),
                registration_id=registration["id"]
            ))
        return events
