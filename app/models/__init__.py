from app.models.event import Event
from app.models.order import Order
from app.models.rsvp import Rsvp

__all__ = ["Event", "Rsvp", "Order"]
