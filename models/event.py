"""
models/event.py
---------------
Domain model for scheduled events.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Event:
    """
    Represents a single event that users can RSVP to.

    Attributes:
        event_name: Display name of the event.
        event_date: When the event takes place.
        location: Free-text venue description.
        description: Longer human-readable details.
        event_type: Category (e.g., 'social', 'workshop').
        max_attendees: Capacity of the event; None means no limit.
        created_by: Identity of the owner.
        current_attendees: Stored attendee counter (store default: 0).
        event_id: Database primary key (None for new records).
    """
    event_name: str
    event_date: datetime
    location: str
    description: str
    event_type: str
    max_attendees: Optional[int]
    created_by: str
    current_attendees: int = 0
    event_id: Optional[int] = None

    def spots_left(self) -> Optional[int]:
        """Remaining capacity according to the stored counter, never negative.

        None when the event has no capacity limit.
        """
        if self.max_attendees is None:
            return None
        return max(0, self.max_attendees - self.current_attendees)

    def is_full(self) -> bool:
        if self.max_attendees is None:
            return False
        return self.current_attendees >= self.max_attendees

    def __str__(self) -> str:
        return (
            f"{self.event_name} | {self.event_type} | {self.event_date:%Y-%m-%d %H:%M} "
            f"| {self.location} ({self.current_attendees}/{self.max_attendees})"
        )
