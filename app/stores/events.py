"""Event persistence."""
import logging
from collections.abc import Sequence
from datetime import datetime
from uuid import UUID

from fastapi import Depends
from sqlalchemy.engine import Row
from sqlmodel import Session, select

from app.core.database import get_session
from app.core.exceptions import Conflict, NotFound
from app.models import Event
from app.schemas.event import EventIn
from app.stores.base import Store
from app.stores.rsvps import RsvpStore

logger = logging.getLogger(__name__)

DUPLICATE_EVENT = (
    "You have already created an event with this title, location, and start date/time."
)


class EventStore(Store):
    """Create, read, replace and delete events."""

    def list_public(self) -> Sequence[Event]:
        """All events with every field, in insertion order.

        Non-public events are included.
        """
        return self.session.exec(select(Event).order_by(Event.created_at)).all()

    def list_admin_projection(self) -> Sequence[Row]:
        """All events reduced to the columns the admin listing shows."""
        statement = select(
            Event.id,
            Event.title,
            Event.start_datetime,
            Event.end_datetime,
            Event.view_public,
        ).order_by(Event.created_at)
        return self.session.exec(statement).all()

    def get(self, event_id: UUID) -> Event:
        event = self.session.get(Event, event_id)
        if not event:
            raise NotFound("Event not found.")
        return event

    def create(self, data: EventIn) -> Event:
        if self._find_duplicate(data.title, data.location, data.start_datetime):
            logger.info(f"Rejected duplicate event '{data.title}' at {data.location}")
            raise Conflict(DUPLICATE_EVENT)

        event = Event(**data.model_dump())
        return self._save(event, DUPLICATE_EVENT)

    def update(self, event_id: UUID, data: EventIn) -> Event:
        """Replace every editable field of an event."""
        event = self.get(event_id)

        duplicate = self._find_duplicate(data.title, data.location, data.start_datetime)
        if duplicate and duplicate.id != event.id:
            raise Conflict(DUPLICATE_EVENT)

        for field, value in data.model_dump().items():
            setattr(event, field, value)
        return self._save(event, DUPLICATE_EVENT)

    def delete_cascade(self, event_id: UUID) -> int:
        """Delete an event together with all of its RSVPs.

        Both deletes are committed in one transaction. Returns the number of
        RSVPs removed.
        """
        event = self.get(event_id)
        removed = RsvpStore(self.session).delete_by_event(event_id)
        self.session.delete(event)
        self.session.commit()
        logger.info(f"Deleted event {event_id} and {removed} RSVPs")
        return removed

    def _find_duplicate(self, title: str, location: str, start: datetime) -> Event | None:
        statement = (
            select(Event)
            .where(Event.title == title)
            .where(Event.location == location)
            .where(Event.start_datetime == start)
        )
        return self.session.exec(statement).first()


def get_event_store(session: Session = Depends(get_session)) -> EventStore:
    return EventStore(session)
