"""Event routes for listing and managing events."""
from uuid import UUID

from fastapi import APIRouter, Depends

from app.core.security import authenticated, public, require_admin
from app.schemas.base import Message
from app.schemas.event import EventAdminRead, EventIn, EventRead, EventSummary
from app.schemas.rsvp import RsvpRead
from app.stores.events import EventStore, get_event_store
from app.stores.rsvps import RsvpStore, get_rsvp_store

router = APIRouter(tags=["events"])


@router.get("/events", response_model=list[EventRead], dependencies=[Depends(public)])
def list_events(store: EventStore = Depends(get_event_store)):
    """
    List every event.

    Returns full records for all events, including ones not marked public.
    """
    return store.list_public()


@router.get(
    "/events/admin",
    response_model=list[EventAdminRead],
    dependencies=[Depends(require_admin)],
)
def list_events_admin(store: EventStore = Depends(get_event_store)):
    """List all events, public and private, for the admin dashboard."""
    return [EventAdminRead.model_validate(row) for row in store.list_admin_projection()]


@router.get(
    "/events/{user_id}",
    response_model=list[EventSummary],
    dependencies=[Depends(authenticated)],
)
def list_upcoming_for_user(
    user_id: str, store: RsvpStore = Depends(get_rsvp_store)
):
    """List upcoming events the user has RSVPed to."""
    return [EventSummary.model_validate(row) for row in store.list_upcoming_for_user(user_id)]


@router.get(
    "/event/{event_id}", response_model=EventRead, dependencies=[Depends(authenticated)]
)
def get_event(event_id: UUID, store: EventStore = Depends(get_event_store)):
    return store.get(event_id)


@router.get(
    "/event/{event_id}/rsvps",
    response_model=list[RsvpRead],
    dependencies=[Depends(authenticated)],
)
def list_event_rsvps(event_id: UUID, store: RsvpStore = Depends(get_rsvp_store)):
    """List RSVPs for an event. An unknown event simply has none."""
    return store.list_by_event(event_id)


@router.post(
    "/event/new", response_model=EventRead, dependencies=[Depends(require_admin)]
)
def create_event(data: EventIn, store: EventStore = Depends(get_event_store)):
    """
    Create an event.

    Returns 409 if an event with the same title, location and start time
    already exists.
    """
    return store.create(data)


@router.put(
    "/event/{event_id}", response_model=EventRead, dependencies=[Depends(require_admin)]
)
def update_event(
    event_id: UUID, data: EventIn, store: EventStore = Depends(get_event_store)
):
    """
    Replace an event.

    Every field is overwritten; optional fields missing from the body are
    cleared.
    """
    return store.update(event_id, data)


@router.delete(
    "/event/{event_id}", response_model=Message, dependencies=[Depends(require_admin)]
)
def delete_event(event_id: UUID, store: EventStore = Depends(get_event_store)):
    """Delete an event and all RSVPs for it."""
    store.delete_cascade(event_id)
    return Message(message="Event and RSVPs successfully deleted.")
