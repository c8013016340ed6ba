"""Common persistence helpers for the stores."""
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel

from app.core.exceptions import Conflict

logger = logging.getLogger(__name__)


class Store:
    """A store bound to one request's database session."""

    def __init__(self, session: Session):
        self.session = session

    def _save(self, record: SQLModel, conflict_message: str) -> SQLModel:
        """Commit a new or changed record and reload it.

        Duplicate checks run before writes, but two identical requests can
        both pass them. The unique constraints catch the second one, which
        is reported as a Conflict like any other duplicate.
        """
        self.session.add(record)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.info(f"Unique constraint rejected {type(record).__name__}: {e.orig}")
            raise Conflict(conflict_message) from e
        self.session.refresh(record)
        return record
