"""In-memory implementation of the stores.

All stores built from one InMemoryDatabase share its lock. A transaction
holds the lock for its whole body and restores a snapshot of every table
if the body raises, so partial writes are never observable.
"""

import threading
import uuid
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import replace
from datetime import datetime, timezone
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
from events.stores.interfaces import EventStore, MessageStore, RegistrationStore, Transactions

_EVENT_FIELDS = {"title", "description", "location", "start_time", "image_ref", "status"}


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryDatabase:
    """Tables keyed by UUID plus the lock that guards them."""

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.events: dict[uuid.UUID, Event] = {}
        self.registrations: dict[uuid.UUID, Registration] = {}
        self.messages: dict[uuid.UUID, ContactMessage] = {}

    def snapshot(self) -> tuple[dict, dict, dict]:
        return dict(self.events), dict(self.registrations), dict(self.messages)

    def restore(self, snapshot: tuple[dict, dict, dict]) -> None:
        self.events, self.registrations, self.messages = snapshot


class InMemoryTransactions(Transactions):
    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    def atomic(self) -> AbstractContextManager[None]:
        return self._atomic()

    @contextmanager
    def _atomic(self) -> Iterator[None]:
        with self._db.lock:
            snapshot = self._db.snapshot()
            try:
                yield
            except BaseException:
                self._db.restore(snapshot)
                raise


class InMemoryEventStore(EventStore):
    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    def list_events(
        self,
        search: str | None = None,
        statuses: frozenset[EventStatus] | None = None,
        starts_after: datetime | None = None,
    ) -> list[Event]:
        with self._db.lock:
            events = list(self._db.events.values())
        if search:
            needle = search.casefold()
            events = [
                e
                for e in events
                if needle in e.title.casefold()
                or needle in e.description.casefold()
                or needle in e.location.casefold()
            ]
        if statuses is not None:
            events = [e for e in events if e.status in statuses]
        if starts_after is not None:
            events = [e for e in events if e.start_time >= starts_after]
        return sorted(events, key=lambda e: (e.start_time, e.created_at))

    def get_event(self, event_id: EventId) -> Event | None:
        with self._db.lock:
            return self._db.events.get(event_id.value)

    def add_event(self, new_event: NewEvent) -> Event:
        now = _now()
        event = Event(
            id=EventId(uuid.uuid4()),
            title=new_event.title,
            description=new_event.description,
            location=new_event.location,
            start_time=new_event.start_time,
            total_seats=new_event.total_seats,
            occupied_seats=0,
            status=EventStatus.DRAFT,
            image_ref=new_event.image_ref,
            created_at=now,
            updated_at=now,
        )
        with self._db.lock:
            self._db.events[event.id.value] = event
        return event

    def update_event(self, event_id: EventId, changes: dict[str, Any]) -> Event | None:
        unknown = set(changes) - _EVENT_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")
        with self._db.lock:
            current = self._db.events.get(event_id.value)
            if current is None:
                return None
            updated = replace(current, **changes, updated_at=_now())
            self._db.events[event_id.value] = updated
            return updated

    def delete_event(self, event_id: EventId) -> bool:
        with self._db.lock:
            if self._db.events.pop(event_id.value, None) is None:
                return False
            self._db.registrations = {
                key: reg
                for key, reg in self._db.registrations.items()
                if reg.event_id != event_id
            }
            return True

    def increment_occupied_seats(self, event_id: EventId, expected: int) -> bool:
        with self._db.lock:
            current = self._db.events.get(event_id.value)
            if (
                current is None
                or current.status is not EventStatus.PUBLISHED
                or current.occupied_seats != expected
                or current.is_full
            ):
                return False
            self._db.events[event_id.value] = replace(
                current, occupied_seats=current.occupied_seats + 1, updated_at=_now()
            )
            return True

    def set_total_seats(self, event_id: EventId, total: int) -> bool:
        with self._db.lock:
            current = self._db.events.get(event_id.value)
            if current is None or current.occupied_seats > total:
                return False
            self._db.events[event_id.value] = replace(
                current, total_seats=total, updated_at=_now()
            )
            return True


class InMemoryRegistrationStore(RegistrationStore):
    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    def _with_event_title(self, registration: Registration) -> Registration:
        event = self._db.events.get(registration.event_id.value)
        return replace(registration, event_title=event.title if event else None)

    def list_registrations(
        self,
        event_id: EventId | None = None,
        status: RegistrationStatus | None = None,
        search: str | None = None,
    ) -> list[Registration]:
        with self._db.lock:
            registrations = [
                self._with_event_title(r) for r in self._db.registrations.values()
            ]
        if event_id is not None:
            registrations = [r for r in registrations if r.event_id == event_id]
        if status is not None:
            registrations = [r for r in registrations if r.status is status]
        if search:
            needle = search.casefold()
            registrations = [
                r
                for r in registrations
                if needle in r.name.casefold() or needle in r.email.casefold()
            ]
        return sorted(registrations, key=lambda r: r.created_at, reverse=True)

    def get_registration(self, registration_id: RegistrationId) -> Registration | None:
        with self._db.lock:
            registration = self._db.registrations.get(registration_id.value)
            return self._with_event_title(registration) if registration else None

    def add_registration(self, event_id: EventId, registrant: Registrant) -> Registration:
        registration = Registration(
            id=RegistrationId(uuid.uuid4()),
            event_id=event_id,
            name=registrant.name,
            email=registrant.email,
            status=RegistrationStatus.PENDING,
            created_at=_now(),
        )
        with self._db.lock:
            self._db.registrations[registration.id.value] = registration
            return self._with_event_title(registration)

    def update_registration_status(
        self,
        registration_id: RegistrationId,
        expected: RegistrationStatus,
        new: RegistrationStatus,
    ) -> bool:
        with self._db.lock:
            current = self._db.registrations.get(registration_id.value)
            if current is None or current.status is not expected:
                return False
            self._db.registrations[registration_id.value] = replace(current, status=new)
            return True


class InMemoryMessageStore(MessageStore):
    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    def list_messages(self) -> list[ContactMessage]:
        with self._db.lock:
            messages = list(self._db.messages.values())
        return sorted(messages, key=lambda m: m.created_at, reverse=True)

    def add_message(self, name: str, email: str, message: str) -> ContactMessage:
        contact = ContactMessage(
            id=MessageId(uuid.uuid4()),
            name=name,
            email=email,
            message=message,
            created_at=_now(),
        )
        with self._db.lock:
            self._db.messages[contact.id.value] = contact
        return contact

    def delete_message(self, message_id: MessageId) -> bool:
        with self._db.lock:
            return self._db.messages.pop(message_id.value, None) is not None
