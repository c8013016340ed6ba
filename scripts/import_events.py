#!/usr/bin/env python3
"""
One-off script to import events from a JSON export into the database.

Use it to move events out of the retired embedded store (or any other
export) so that every endpoint reads the same data. Records use the same
camelCase fields as the API. Events that already exist (same title,
location and start time) are skipped.

Usage:
    python scripts/import_events.py FILE [--dry-run]

Options:
    --dry-run    Show what would be imported without making changes
"""
import argparse
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from pydantic import ValidationError
from sqlmodel import Session

from app.core.database import create_db_and_tables, engine
from app.core.exceptions import Conflict
from app.schemas.event import EventIn
from app.stores.events import EventStore


def load_events(path: Path) -> list[EventIn]:
    """Parse and validate every record in the export file."""
    records = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(records, list):
        raise ValueError("Expected a JSON array of events")

    events = []
    for index, record in enumerate(records):
        try:
            events.append(EventIn.model_validate(record))
        except ValidationError as e:
            print(f"  Skipping record {index}: {e.error_count()} invalid field(s)")
    return events


def import_events(session: Session, events: list[EventIn]) -> dict:
    """Create each event that is not already in the database."""
    store = EventStore(session)
    stats = {"created": 0, "skipped": 0}
    for event in events:
        try:
            store.create(event)
        except Conflict:
            print(f"  Exists:   {event.title} @ {event.location}")
            stats["skipped"] += 1
        else:
            print(f"  Imported: {event.title} @ {event.location}")
            stats["created"] += 1
    return stats


def main(path: Path, dry_run: bool = False):
    """Import the export file into the configured database."""
    events = load_events(path)
    print(f"Found {len(events)} valid events in {path}\n")

    if dry_run:
        for event in events:
            print(f"  Would import: {event.title} @ {event.location} ({event.start_datetime})")
        print("\n--- DRY RUN: No changes made ---")
        return

    create_db_and_tables()
    with Session(engine) as session:
        stats = import_events(session, events)

    print(f"\nComplete: {stats['created']} imported, {stats['skipped']} already present")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Import events from a JSON export")
    parser.add_argument("file", type=Path, help="JSON file containing an array of events")
    parser.add_argument("--dry-run", action="store_true", help="Show what would be imported")
    args = parser.parse_args()
    main(args.file, dry_run=args.dry_run)
