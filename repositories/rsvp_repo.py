"""
repositories/rsvp_repo.py
-------------------------
Data access layer for RSVPs.
All SQL queries related to the `rsvps` table live here.
"""

from typing import Optional

from psycopg2.extras import RealDictCursor

from db.connection import ConnectionProvider, get_default_provider
from models.rsvp import RSVP
from repositories.result import Result
from utils.logger import get_logger

logger = get_logger(__name__)


class RSVPRepository:
    """Repository for CRUD and aggregate operations on the rsvps table."""

    def __init__(self, provider: Optional[ConnectionProvider] = None):
        self.db = provider or get_default_provider()

    # ── CREATE ────────────────────────────────────────────

    def create_rsvp(self, rsvp: RSVP) -> Result:
        """
        Create an RSVP, or update the attendee count of the user's existing one.

        A user is identified per event by email. Uses PostgreSQL's
        ON CONFLICT (upsert) on (event_id, user_email) for atomicity; an
        existing row keeps its id and user_name.

        Returns:
            Result.ok(rsvp_id) of the new or existing row, or Result.failed.
        """
        sql = """
            INSERT INTO rsvps (event_id, user_name, user_email, attendee_count)
            VALUES (%s, %s, %s, %s)
            ON CONFLICT (event_id, user_email)
            DO UPDATE SET attendee_count = EXCLUDED.attendee_count
            RETURNING rsvp_id;
        """
        try:
            with self.db.connection() as conn:
                with conn.cursor(cursor_factory=RealDictCursor) as cur:
                    cur.execute(sql, (
                        rsvp.event_id, rsvp.user_name, rsvp.user_email, rsvp.attendee_count,
                    ))
                    row = cur.fetchone()
                conn.commit()
        except Exception as e:
            logger.error(f"Failed to save RSVP of {rsvp.user_email} for event #{rsvp.event_id}: {e}")
            return Result.failed(e)

        if not row:
            logger.error(f"Upsert of RSVP for {rsvp.user_email} returned no id")
            return Result.failed(RuntimeError("upsert returned no rsvp_id"))
        logger.info(f"Saved RSVP #{row['rsvp_id']} for event #{rsvp.event_id} (x{rsvp.attendee_count})")
        return Result.ok(row["rsvp_id"])

    # ── READ ──────────────────────────────────────────────

    def get_rsvps_by_event(self, event_id: int) -> Result:
        """All RSVPs for an event, in no particular order."""
        sql = "SELECT * FROM rsvps WHERE event_id = %s;"
        try:
            with self.db.connection() as conn:
                with conn.cursor(cursor_factory=RealDictCursor) as cur:
                    cur.execute(sql, (event_id,))
                    rows = cur.fetchall()
        except Exception as e:
            logger.error(f"Failed to retrieve RSVPs for event #{event_id}: {e}")
            return Result.failed(e)
        return Result.ok([self._row_to_rsvp(r) for r in rows])

    def get_total_attendees(self, event_id: int) -> Result:
        """Sum of attendee_count over the event's RSVPs; 0 when there are none."""
        sql = "SELECT COALESCE(SUM(attendee_count), 0) AS total FROM rsvps WHERE event_id = %s;"
        try:
            with self.db.connection() as conn:
                with conn.cursor(cursor_factory=RealDictCursor) as cur:
                    cur.execute(sql, (event_id,))
                    row = cur.fetchone()
        except Exception as e:
            logger.error(f"Failed to count attendees for event #{event_id}: {e}")
            return Result.failed(e)
        if not row or row["total"] is None:
            return Result.ok(0)
        return Result.ok(int(row["total"]))

    def get_user_rsvp(self, event_id: int, user_email: str) -> Result:
        """
        Fetch the RSVP a user holds for an event.

        Returns:
            Result.ok(RSVP), Result.not_found(), or Result.failed.
        """
        sql = "SELECT * FROM rsvps WHERE event_id = %s AND user_email = %s;"
        try:
            with self.db.connection() as conn:
                with conn.cursor(cursor_factory=RealDictCursor) as cur:
                    cur.execute(sql, (event_id, user_email))
                    row = cur.fetchone()
        except Exception as e:
            logger.error(f"Failed to look up RSVP of {user_email} for event #{event_id}: {e}")
            return Result.failed(e)
        return Result.ok(self._row_to_rsvp(row)) if row else Result.not_found()

    # ── DELETE ────────────────────────────────────────────

    def delete_rsvp(self, rsvp_id: int) -> Result:
        """Delete an RSVP by ID."""
        sql = "DELETE FROM rsvps WHERE rsvp_id = %s;"
        try:
            with self.db.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, (rsvp_id,))
                    deleted = cur.rowcount > 0
                conn.commit()
        except Exception as e:
            logger.error(f"Failed to delete RSVP #{rsvp_id}: {e}")
            return Result.failed(e)

        if not deleted:
            return Result.not_found()
        logger.info(f"Deleted RSVP #{rsvp_id}")
        return Result.ok(True)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_rsvp(row: dict) -> RSVP:
        """Convert a database row (column name -> value) to an RSVP."""
        return RSVP(
            rsvp_id=row["rsvp_id"],
            event_id=row["event_id"],
            user_name=row["user_name"],
            user_email=row["user_email"],
            attendee_count=row["attendee_count"],
        )
