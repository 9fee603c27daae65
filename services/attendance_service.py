"""
services/attendance_service.py
------------------------------
Business logic tying RSVPs to an event's capacity and stored attendee counter.

The stored `events.current_attendees` counter and the RSVP total
(`RSVPRepository.get_total_attendees`) are two separate paths and can
drift apart. This service writes the derived total into the counter
after every change it makes, and exposes the drift for callers that
write the counter themselves.
"""

from typing import Optional

from db.connection import ConnectionProvider
from models.rsvp import RSVP
from repositories.event_repo import EventRepository
from repositories.result import Result
from repositories.rsvp_repo import RSVPRepository
from utils.logger import get_logger

logger = get_logger(__name__)


class CapacityError(Exception):
    """An RSVP would push the event over its max_attendees."""


class AttendanceService:
    """Manages RSVP submission against event capacity."""

    def __init__(
        self,
        provider: Optional[ConnectionProvider] = None,
        event_repo: Optional[EventRepository] = None,
        rsvp_repo: Optional[RSVPRepository] = None,
    ):
        self.event_repo = event_repo or EventRepository(provider)
        self.rsvp_repo = rsvp_repo or RSVPRepository(provider)

    def submit_rsvp(self, rsvp: RSVP) -> Result:
        """
        Create or update a user's RSVP if the event has room for it.

        The user's existing RSVP (if any) is not counted against capacity,
        since the upsert replaces it. An event without max_attendees has no
        limit.

        The capacity check and the upsert run on separate connections with
        no lock between them, so two concurrent submissions for the same
        event can both pass the check and overbook it. Callers must
        serialize submissions per event if that matters.

        Returns:
            Result.ok(rsvp_id); Result.not_found() if the event does not exist;
            Result.failed(ValueError | CapacityError | store error) otherwise.
        """
        if rsvp.attendee_count < 1:
            return Result.failed(ValueError(f"attendee_count must be >= 1, got {rsvp.attendee_count}"))

        event_result = self.event_repo.get_event_by_id(rsvp.event_id)
        if not event_result:
            return event_result
        event = event_result.value

        total = self.rsvp_repo.get_total_attendees(rsvp.event_id)
        if not total:
            return total
        existing = self.rsvp_repo.get_user_rsvp(rsvp.event_id, rsvp.user_email)
        if existing.is_failed:
            return existing
        previous = existing.value.attendee_count if existing else 0

        requested = total.value - previous + rsvp.attendee_count
        if event.max_attendees is not None and requested > event.max_attendees:
            logger.warning(
                f"RSVP of {rsvp.user_email} refused: event #{event.event_id} "
                f"would have {requested}/{event.max_attendees} attendees"
            )
            return Result.failed(CapacityError(
                f"event #{event.event_id} has {event.max_attendees - (total.value - previous)} spot(s) left"
            ))

        created = self.rsvp_repo.create_rsvp(rsvp)
        if created:
            self._sync_quietly(rsvp.event_id)
        return created

    def cancel_rsvp(self, rsvp_id: int, event_id: int) -> Result:
        """Delete an RSVP and re-sync the event's counter."""
        deleted = self.rsvp_repo.delete_rsvp(rsvp_id)
        if deleted:
            self._sync_quietly(event_id)
        return deleted

    def sync_attendee_count(self, event_id: int) -> Result:
        """
        Copy the RSVP total into events.current_attendees.

        Returns:
            Result.ok(total) once written, otherwise the failing Result.
        """
        total = self.rsvp_repo.get_total_attendees(event_id)
        if not total:
            return total
        written = self.event_repo.update_attendee_count(event_id, total.value)
        if not written:
            return written
        return Result.ok(total.value)

    def find_drift(self, event_id: int) -> Result:
        """
        Difference between the stored counter and the RSVP total.

        Returns:
            Result.ok(current_attendees - rsvp_total); 0 means in step.
        """
        event_result = self.event_repo.get_event_by_id(event_id)
        if not event_result:
            return event_result
        total = self.rsvp_repo.get_total_attendees(event_id)
        if not total:
            return total
        return Result.ok(event_result.value.current_attendees - total.value)

    def _sync_quietly(self, event_id: int) -> None:
        synced = self.sync_attendee_count(event_id)
        if not synced:
            logger.warning(f"Attendee counter of event #{event_id} not synced: {synced.status.value}")
