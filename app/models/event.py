"""Event model for scheduled occurrences users can RSVP to.

Events are created and maintained by admins. Each event may have any
number of RSVPs referencing it by ``event_id``; deleting the event
removes those RSVPs as well (see ``EventStore.delete_cascade``).
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from app.models.types import UTCDateTime, utcnow


class Event(SQLModel, table=True):
    """A scheduled event.

    Attributes:
        id: Unique identifier (UUID).
        title: Event title.
        location: Where the event takes place.
        start_datetime: When the event starts.
        end_datetime: When the event ends, if known.
        description: Free-form description.
        view_public: Whether non-admin users should see the event.
        created_at: Insertion timestamp, used for store-default ordering.
    """
    __table_args__ = (
        UniqueConstraint(
            "title", "location", "start_datetime", name="uq_event_title_location_start"
        ),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str
    location: str
    start_datetime: datetime = Field(sa_type=UTCDateTime, index=True)
    end_datetime: datetime | None = Field(default=None, sa_type=UTCDateTime)
    description: str | None = None
    view_public: bool | None = None
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
