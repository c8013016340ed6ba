"""Order persistence."""
import logging

from fastapi import Depends
from sqlmodel import Session, select

from app.core.database import get_session
from app.core.exceptions import Conflict
from app.models import Order
from app.stores.base import Store

logger = logging.getLogger(__name__)

DUPLICATE_ORDER = "This order has already been validated."

# TODO: bind orders to the authenticated subject once product decides whether
# order validation requires a login. Until then every order gets this owner.
PLACEHOLDER_OWNER = "userId"


class OrderStore(Store):
    def exists(self, fs_id: str) -> bool:
        return self.session.exec(select(Order).where(Order.fs_id == fs_id)).first() is not None

    def validate(self, fs_id: str) -> Order:
        """Record a commerce order the first time it is seen."""
        if self.exists(fs_id):
            raise Conflict(DUPLICATE_ORDER)

        order = Order(fs_id=fs_id, user_id=PLACEHOLDER_OWNER)
        order = self._save(order, DUPLICATE_ORDER)
        logger.info(f"Recorded order {fs_id}")
        return order


def get_order_store(session: Session = Depends(get_session)) -> OrderStore:
    return OrderStore(session)
