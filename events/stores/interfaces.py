"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
Conditional updates return False instead of raising when their
precondition no longer holds; services decide what that means.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Any

from events.domain import (
    ContactMessage,
    Event,
    EventId,
    EventStatus,
    MessageId,
    NewEvent,
    Registrant,
    Registration,
    RegistrationId,
    RegistrationStatus,
)


class Transactions(ABC):
    """Unit-of-work boundary shared by the stores of one backend."""

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Return a context manager; writes inside it commit or roll back together."""
        ...


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def list_events(
        self,
        search: str | None = None,
        statuses: frozenset[EventStatus] | None = None,
        starts_after: datetime | None = None,
    ) -> list[Event]:
        """Return matching events ordered by start_time ascending."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def add_event(self, new_event: NewEvent) -> Event:
        """Persist a draft event with no occupied seats."""
        ...

    @abstractmethod
    def update_event(self, event_id: EventId, changes: dict[str, Any]) -> Event | None:
        """Overwrite plain fields (title, description, location, start_time,
        image_ref, status). Returns None if the event does not exist."""
        ...

    @abstractmethod
    def delete_event(self, event_id: EventId) -> bool:
        """Delete an event and its registrations. False if it did not exist."""
        ...

    @abstractmethod
    def increment_occupied_seats(self, event_id: EventId, expected: int) -> bool:
        """Add one occupied seat if occupied_seats still equals expected,
        the event is published and it is not full."""
        ...

    @abstractmethod
    def set_total_seats(self, event_id: EventId, total: int) -> bool:
        """Set total_seats if occupied_seats <= total."""
        ...


class RegistrationStore(ABC):
    """Interface for registration persistence operations."""

    @abstractmethod
    def list_registrations(
        self,
        event_id: EventId | None = None,
        status: RegistrationStatus | None = None,
        search: str | None = None,
    ) -> list[Registration]:
        """Return matching registrations, newest first."""
        ...

    @abstractmethod
    def get_registration(self, registration_id: RegistrationId) -> Registration | None:
        """Return a registration by ID, or None if not found."""
        ...

    @abstractmethod
    def add_registration(self, event_id: EventId, registrant: Registrant) -> Registration:
        """Persist a pending registration for an event."""
        ...

    @abstractmethod
    def update_registration_status(
        self,
        registration_id: RegistrationId,
        expected: RegistrationStatus,
        new: RegistrationStatus,
    ) -> bool:
        """Set the status if it still equals expected."""
        ...


class MessageStore(ABC):
    """Interface for contact message persistence operations."""

    @abstractmethod
    def list_messages(self) -> list[ContactMessage]:
        """Return all messages, newest first."""
        ...

    @abstractmethod
    def add_message(self, name: str, email: str, message: str) -> ContactMessage:
        """Persist a contact message."""
        ...

    @abstractmethod
    def delete_message(self, message_id: MessageId) -> bool:
        """Delete a message. False if it did not exist."""
        ...
