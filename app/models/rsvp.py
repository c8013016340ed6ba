"""RSVP model for a user's response to an event."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from app.models.types import UTCDateTime, utcnow


class Rsvp(SQLModel, table=True):
    """One user's attendance response to one event.

    ``event_id`` is not a foreign key: RSVPs are removed explicitly when
    their event is deleted.

    Attributes:
        id: Unique identifier (UUID).
        user_id: Identity provider subject of the responding user. Only
            this user may edit the RSVP.
        name: Display name given by the user.
        event_id: The event being responded to.
        attending: Whether the user will attend.
        guests: Number of additional guests.
        comments: Free-form comments.
        created_at: Insertion timestamp.
    """
    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_rsvp_event_user"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: str = Field(index=True)
    name: str
    event_id: UUID = Field(index=True)
    attending: bool
    guests: int | None = None
    comments: str | None = None
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
