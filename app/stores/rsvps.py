"""RSVP persistence."""
import logging
from collections.abc import Sequence
from datetime import datetime
from uuid import UUID

from fastapi import Depends
from sqlalchemy.engine import Row
from sqlmodel import Session, col, select

from app.core.database import get_session
from app.core.exceptions import Conflict, Forbidden, NotFound
from app.models import Event, Rsvp
from app.models.types import utcnow
from app.schemas.rsvp import RsvpCreate, RsvpUpdate
from app.stores.base import Store

logger = logging.getLogger(__name__)

DUPLICATE_RSVP = "You have already RSVPed to this event."


class RsvpStore(Store):
    """Create, read and replace RSVPs."""

    def list_by_event(self, event_id: UUID) -> Sequence[Rsvp]:
        statement = (
            select(Rsvp).where(Rsvp.event_id == event_id).order_by(Rsvp.created_at)
        )
        return self.session.exec(statement).all()

    def list_upcoming_for_user(
        self, user_id: str, now: datetime | None = None
    ) -> Sequence[Row]:
        """Events the user has RSVPed to that have not started yet.

        Events starting exactly at ``now`` are included. Results keep
        insertion order rather than being sorted by start time.
        """
        now = now or utcnow()
        event_ids = self.session.exec(
            select(Rsvp.event_id).where(Rsvp.user_id == user_id)
        ).all()
        if not event_ids:
            return []

        statement = (
            select(Event.id, Event.title, Event.start_datetime, Event.end_datetime)
            .where(col(Event.id).in_(event_ids))
            .where(Event.start_datetime >= now)
            .order_by(Event.created_at)
        )
        return self.session.exec(statement).all()

    def get(self, rsvp_id: UUID) -> Rsvp:
        rsvp = self.session.get(Rsvp, rsvp_id)
        if not rsvp:
            raise NotFound("RSVP not found.")
        return rsvp

    def create(self, data: RsvpCreate) -> Rsvp:
        existing = self.session.exec(
            select(Rsvp)
            .where(Rsvp.event_id == data.event_id)
            .where(Rsvp.user_id == data.user_id)
        ).first()
        if existing:
            raise Conflict(DUPLICATE_RSVP)

        rsvp = Rsvp(**data.model_dump())
        return self._save(rsvp, DUPLICATE_RSVP)

    def get_owned(self, rsvp_id: UUID, acting_user: str) -> Rsvp:
        """Load an RSVP, refusing anyone but the user who created it."""
        rsvp = self.get(rsvp_id)
        if rsvp.user_id != acting_user:
            logger.warning(f"User {acting_user} tried to edit RSVP {rsvp_id} owned by {rsvp.user_id}")
            raise Forbidden("You cannot edit someone else's RSVP.")
        return rsvp

    def update(self, rsvp_id: UUID, data: RsvpUpdate, acting_user: str) -> Rsvp:
        """Replace an RSVP's response on behalf of its owner."""
        rsvp = self.get_owned(rsvp_id, acting_user)
        for field, value in data.model_dump().items():
            setattr(rsvp, field, value)
        return self._save(rsvp, DUPLICATE_RSVP)

    def delete_by_event(self, event_id: UUID) -> int:
        """Stage deletion of every RSVP for an event.

        The caller commits, so the removal can share a transaction with
        deleting the event itself.
        """
        rsvps = self.list_by_event(event_id)
        for rsvp in rsvps:
            self.session.delete(rsvp)
        return len(rsvps)


def get_rsvp_store(session: Session = Depends(get_session)) -> RsvpStore:
    return RsvpStore(session)
