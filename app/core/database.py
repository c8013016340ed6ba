"""Database configuration and session management.

Events, RSVPs and orders all live in one SQL database reached through a
single engine. Every request gets its own session from ``get_session``;
stores receive that session instead of reaching for a global client.

SQLite Configuration Choices:
    - **WAL (Write-Ahead Logging)**: Lets readers proceed while a write
      is in progress, so listing events does not block behind an RSVP
      being saved.

    - **check_same_thread=False**: Required for FastAPI. Sync
      dependencies run in a threadpool, so a session may be used from a
      different thread than the one that opened its connection.
"""

from sqlalchemy import event as sa_event
from sqlmodel import Session, SQLModel, create_engine

from app.core.config import settings

connect_args = {}
if settings.database_url.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(
    settings.database_url,
    connect_args=connect_args,
    echo=settings.debug,  # Log SQL statements when DEBUG=true
)


@sa_event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Configure SQLite pragmas on each new connection.

    Pragmas are connection-level, so they are applied every time the
    pool opens a new connection.
    """
    if not settings.database_url.startswith("sqlite"):
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def create_db_and_tables():
    """Create all database tables."""
    # Import models so their tables are registered on the metadata
    import app.models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session():
    """Dependency for getting database session."""
    with Session(engine) as session:
        yield session
