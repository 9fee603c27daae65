"""
models/rsvp.py
--------------
Domain model for event RSVPs.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class RSVP:
    """
    A user's reply to an event. A user is identified per event by email.

    Attributes:
        event_id: The event this RSVP belongs to.
        user_name: Display name of the responding user.
        user_email: Email address; unique per event.
        attendee_count: Number of guests this RSVP represents (>= 1).
        rsvp_id: Database primary key (None for new records).
    """
    event_id: int
    user_name: str
    user_email: str
    attendee_count: int = 1
    rsvp_id: Optional[int] = None

    def __str__(self) -> str:
        return f"{self.user_name} <{self.user_email}> x{self.attendee_count} (event #{self.event_id})"
