"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in events/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime

from events.domain.value_objects import (
    EventId,
    EventStatus,
    MessageId,
    RegistrationId,
    RegistrationStatus,
)


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    title: str
    description: str
    location: str
    start_time: datetime
    total_seats: int
    occupied_seats: int
    status: EventStatus
    image_ref: str | None
    created_at: datetime
    updated_at: datetime

    @property
    def available_seats(self) -> int:
        return self.total_seats - self.occupied_seats

    @property
    def is_full(self) -> bool:
        return self.occupied_seats >= self.total_seats

    @property
    def accepts_registrations(self) -> bool:
        return self.status is EventStatus.PUBLISHED


@dataclass(frozen=True)
class NewEvent:
    """Fields an administrator supplies when creating an event."""

    title: str
    description: str
    location: str
    start_time: datetime
    total_seats: int
    image_ref: str | None = None


@dataclass(frozen=True)
class Registration:
    """Domain representation of a Registration."""

    id: RegistrationId
    event_id: EventId
    name: str
    email: str
    status: RegistrationStatus
    created_at: datetime
    event_title: str | None = None


@dataclass(frozen=True)
class ContactMessage:
    """Domain representation of a message sent through the contact form."""

    id: MessageId
    name: str
    email: str
    message: str
    created_at: datetime
