"""
repositories/event_repo.py
--------------------------
Data access layer for events.
All SQL queries related to the `events` table live here, including the
cascade that removes an event's RSVPs together with the event.
"""

from datetime import date, datetime
from typing import Optional, Union

from psycopg2.extras import RealDictCursor

from db.connection import ConnectionProvider, get_default_provider
from models.event import Event
from repositories.result import Result
from utils.logger import get_logger

logger = get_logger(__name__)


class EventRepository:
    """Repository for CRUD and search operations on the events table."""

    def __init__(self, provider: Optional[ConnectionProvider] = None):
        self.db = provider or get_default_provider()

    # ── CREATE ────────────────────────────────────────────

    def add_event(self, event: Event) -> Result:
        """
        Insert a new event. The caller is expected to have validated it.

        `event_id` is assigned by the store and `current_attendees` takes
        the column default.

        Returns:
            Result.ok(new_event_id), or Result.failed on error or when the
            insert produced no id.
        """
        sql = """
            INSERT INTO events
                (event_name, event_date, location, description, event_type, max_attendees, created_by)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            RETURNING event_id;
        """
        try:
            with self.db.connection() as conn:
                with conn.cursor(cursor_factory=RealDictCursor) as cur:
                    cur.execute(sql, (
                        event.event_name, event.event_date, event.location,
                        event.description, event.event_type, event.max_attendees,
                        event.created_by,
                    ))
                    row = cur.fetchone()
                conn.commit()
        except Exception as e:
            logger.error(f"Failed to add event '{event.event_name}': {e}")
            return Result.failed(e)

        if not row:
            logger.error(f"Insert of event '{event.event_name}' returned no id")
            return Result.failed(RuntimeError("insert returned no event_id"))
        logger.info(f"Added event #{row['event_id']} '{event.event_name}'")
        return Result.ok(row["event_id"])

    # ── READ ──────────────────────────────────────────────

    def get_all_events(self) -> Result:
        """All events, latest first."""
        sql = "SELECT * FROM events ORDER BY event_date DESC;"
        return self._fetch_events(sql, (), "retrieve events")

    def get_events_by_type(self, event_type: str) -> Result:
        """Events whose type matches exactly, latest first."""
        sql = "SELECT * FROM events WHERE event_type = %s ORDER BY event_date DESC;"
        return self._fetch_events(sql, (event_type,), f"retrieve events of type '{event_type}'")

    def search_events(
        self,
        event_type: Optional[str] = None,
        location: Optional[str] = None,
        on_date: Optional[Union[date, datetime]] = None,
    ) -> Result:
        """
        Search events by any combination of filters.

        Args:
            event_type: Exact match on event_type. None/empty: no constraint.
            location: Case-sensitive substring of location. None/empty: no constraint.
            on_date: Calendar day of the event; time of day is ignored.

        Returns:
            Result.ok(list[Event]) ordered by event_date descending.
        """
        sql = "SELECT * FROM events WHERE 1=1"
        params: list = []
        if event_type:
            sql += " AND event_type = %s"
            params.append(event_type)
        if location:
            sql += " AND location LIKE %s"
            params.append(f"%{location}%")
        if on_date is not None:
            sql += " AND DATE(event_date) = %s"
            params.append(self._as_day(on_date))
        sql += " ORDER BY event_date DESC;"
        return self._fetch_events(sql, params, "search events")

    def get_event_by_id(self, event_id: int) -> Result:
        """
        Fetch a single event by ID.

        Returns:
            Result.ok(Event), Result.not_found(), or Result.failed.
        """
        sql = "SELECT * FROM events WHERE event_id = %s;"
        try:
            with self.db.connection() as conn:
                with conn.cursor(cursor_factory=RealDictCursor) as cur:
                    cur.execute(sql, (event_id,))
                    row = cur.fetchone()
        except Exception as e:
            logger.error(f"Failed to retrieve event #{event_id}: {e}")
            return Result.failed(e)
        return Result.ok(self._row_to_event(row)) if row else Result.not_found()

    # ── UPDATE ────────────────────────────────────────────

    def update_event(self, event: Event) -> Result:
        """
        Overwrite every field of an existing event except current_attendees.

        Returns:
            Result.ok(True) if a row was updated, Result.not_found() if no
            event has that id.
        """
        sql = """
            UPDATE events
            SET event_name = %s, event_date = %s, location = %s, description = %s,
                event_type = %s, max_attendees = %s, created_by = %s
            WHERE event_id = %s;
        """
        params = (
            event.event_name, event.event_date, event.location, event.description,
            event.event_type, event.max_attendees, event.created_by, event.event_id,
        )
        return self._execute_write(sql, params, f"update event #{event.event_id}")

    def update_attendee_count(self, event_id: int, count: int) -> Result:
        """
        Set the stored attendee counter directly.

        Nothing checks `count` against the RSVP total for the event; see
        AttendanceService.sync_attendee_count for the derived path.
        """
        sql = "UPDATE events SET current_attendees = %s WHERE event_id = %s;"
        return self._execute_write(sql, (count, event_id), f"update attendee count of event #{event_id}")

    # ── DELETE ────────────────────────────────────────────

    def delete_event(self, event_id: int) -> Result:
        """
        Delete an event and all RSVPs referencing it in one transaction.

        Returns:
            Result.ok(True) if the event row was removed, Result.not_found()
            if it did not exist. Any failure rolls back both statements.
        """
        try:
            with self.db.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("DELETE FROM rsvps WHERE event_id = %s;", (event_id,))
                    rsvps_deleted = cur.rowcount
                    cur.execute("DELETE FROM events WHERE event_id = %s;", (event_id,))
                    deleted = cur.rowcount > 0
                conn.commit()
        except Exception as e:
            logger.error(f"Failed to delete event #{event_id}: {e}")
            return Result.failed(e)

        if not deleted:
            return Result.not_found()
        logger.info(f"Deleted event #{event_id} and {rsvps_deleted} RSVP(s)")
        return Result.ok(True)

    # ── HELPERS ───────────────────────────────────────────

    def _fetch_events(self, sql: str, params, action: str) -> Result:
        try:
            with self.db.connection() as conn:
                with conn.cursor(cursor_factory=RealDictCursor) as cur:
                    cur.execute(sql, params)
                    rows = cur.fetchall()
        except Exception as e:
            logger.error(f"Failed to {action}: {e}")
            return Result.failed(e)
        return Result.ok([self._row_to_event(r) for r in rows])

    def _execute_write(self, sql: str, params, action: str) -> Result:
        """Run a single-row UPDATE; not-found when no row matched."""
        try:
            with self.db.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, params)
                    updated = cur.rowcount > 0
                conn.commit()
        except Exception as e:
            logger.error(f"Failed to {action}: {e}")
            return Result.failed(e)
        return Result.ok(True) if updated else Result.not_found()

    @staticmethod
    def _as_day(value: Union[date, datetime]) -> date:
        """Truncate a timestamp to its calendar day."""
        return value.date() if isinstance(value, datetime) else value

    @staticmethod
    def _row_to_event(row: dict) -> Event:
        """Convert a database row (column name -> value) to an Event."""
        event = Event(
            event_id=row["event_id"],
            event_name=row["event_name"],
            event_date=row["event_date"],
            location=row["location"],
            description=row["description"],
            event_type=row["event_type"],
            max_attendees=row["max_attendees"],
            created_by=row["created_by"],
        )
        if row.get("current_attendees") is not None:
            event.current_attendees = row["current_attendees"]
        return event
