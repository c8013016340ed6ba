"""RSVP request and response bodies."""

from uuid import UUID

from app.schemas.base import CamelModel


class RsvpUpdate(CamelModel):
    """Fields an RSVP owner may replace."""
    name: str
    attending: bool
    guests: int | None = None
    comments: str | None = None


class RsvpCreate(RsvpUpdate):
    user_id: str
    event_id: UUID


class RsvpRead(RsvpCreate):
    id: UUID
