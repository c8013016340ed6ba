"""Event request and response bodies."""

from datetime import datetime
from uuid import UUID

from app.schemas.base import CamelModel


class EventIn(CamelModel):
    """Body for creating or replacing an event.

    Updates replace every field, so optional fields left out of a PUT are
    cleared.
    """
    title: str
    location: str
    start_datetime: datetime
    end_datetime: datetime | None = None
    description: str | None = None
    view_public: bool | None = None


class EventRead(EventIn):
    id: UUID


class EventAdminRead(CamelModel):
    """Admin listing projection."""
    id: UUID
    title: str
    start_datetime: datetime
    end_datetime: datetime | None = None
    view_public: bool | None = None


class EventSummary(CamelModel):
    """Upcoming event as shown on a user's profile."""
    id: UUID
    title: str
    start_datetime: datetime
    end_datetime: datetime | None = None
