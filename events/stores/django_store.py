"""Django ORM implementation of the stores.

Conditional updates are single UPDATE statements filtered on the expected
state, so the database decides which concurrent writer wins.
"""

from contextlib import AbstractContextManager
from datetime import datetime
from typing import Any

from django.db import transaction
from django.db.models import F, Q
from django.utils import timezone

from events import models as orm
from events.cache import invalidate_event
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
_EVENT_COLUMNS = {"image_ref": "image"}


def store_event_image(upload) -> str:
    """Save an uploaded event image to media storage and return its stored name."""
    field = orm.Event._meta.get_field("image")
    name = field.generate_filename(None, upload.name)
    return field.storage.save(name, upload, max_length=field.max_length)


def _to_event(row: orm.Event) -> Event:
    return Event(
        id=EventId(row.id),
        title=row.title,
        description=row.description,
        location=row.location,
        start_time=row.start_time,
        total_seats=row.total_seats,
        occupied_seats=row.occupied_seats,
        status=EventStatus(row.status),
        image_ref=row.image.name or None,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_registration(row: orm.Registration) -> Registration:
    return Registration(
        id=RegistrationId(row.id),
        event_id=EventId(row.event_id),
        name=row.name,
        email=row.email,
        status=RegistrationStatus(row.status),
        created_at=row.created_at,
        event_title=row.event.title,
    )


def _to_message(row: orm.ContactMessage) -> ContactMessage:
    return ContactMessage(
        id=MessageId(row.id),
        name=row.name,
        email=row.email,
        message=row.message,
        created_at=row.created_at,
    )


class DjangoTransactions(Transactions):
    """Transactions backed by django.db.transaction."""

    def atomic(self) -> AbstractContextManager[None]:
        return transaction.atomic()


class DjangoEventStore(EventStore):
    """PostgreSQL-backed event store using Django ORM."""

    def list_events(
        self,
        search: str | None = None,
        statuses: frozenset[EventStatus] | None = None,
        starts_after: datetime | None = None,
    ) -> list[Event]:
        qs = orm.Event.objects.all()
        if search:
            qs = qs.filter(
                Q(title__icontains=search)
                | Q(description__icontains=search)
                | Q(location__icontains=search)
            )
        if statuses is not None:
            qs = qs.filter(status__in=[s.value for s in statuses])
        if starts_after is not None:
            qs = qs.filter(start_time__gte=starts_after)
        return [_to_event(row) for row in qs.order_by("start_time", "created_at")]

    def get_event(self, event_id: EventId) -> Event | None:
        row = orm.Event.objects.filter(pk=event_id.value).first()
        return _to_event(row) if row else None

    def add_event(self, new_event: NewEvent) -> Event:
        row = orm.Event.objects.create(
            title=new_event.title,
            description=new_event.description,
            location=new_event.location,
            start_time=new_event.start_time,
            total_seats=new_event.total_seats,
            image=new_event.image_ref,
        )
        return _to_event(row)

    def update_event(self, event_id: EventId, changes: dict[str, Any]) -> Event | None:
        unknown = set(changes) - _EVENT_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")
        values = {
            _EVENT_COLUMNS.get(key, key): value.value if isinstance(value, EventStatus) else value
            for key, value in changes.items()
        }
        updated = orm.Event.objects.filter(pk=event_id.value).update(
            **values, updated_at=timezone.now()
        )
        invalidate_event(event_id)
        if not updated:
            return None
        return self.get_event(event_id)

    def delete_event(self, event_id: EventId) -> bool:
        row = orm.Event.objects.filter(pk=event_id.value).first()
        if row is None:
            return False
        row.delete()
        return True

    def increment_occupied_seats(self, event_id: EventId, expected: int) -> bool:
        updated = orm.Event.objects.filter(
            pk=event_id.value,
            status=EventStatus.PUBLISHED.value,
            occupied_seats=expected,
            occupied_seats__lt=F("total_seats"),
        ).update(occupied_seats=F("occupied_seats") + 1, updated_at=timezone.now())
        if updated:
            invalidate_event(event_id)
        return updated == 1

    def set_total_seats(self, event_id: EventId, total: int) -> bool:
        updated = orm.Event.objects.filter(
            pk=event_id.value,
            occupied_seats__lte=total,
        ).update(total_seats=total, updated_at=timezone.now())
        if updated:
            invalidate_event(event_id)
        return updated == 1


class DjangoRegistrationStore(RegistrationStore):
    """Registration store using Django ORM."""

    def list_registrations(
        self,
        event_id: EventId | None = None,
        status: RegistrationStatus | None = None,
        search: str | None = None,
    ) -> list[Registration]:
        qs = orm.Registration.objects.select_related("event")
        if event_id is not None:
            qs = qs.filter(event_id=event_id.value)
        if status is not None:
            qs = qs.filter(status=status.value)
        if search:
            qs = qs.filter(Q(name__icontains=search) | Q(email__icontains=search))
        return [_to_registration(row) for row in qs.order_by("-created_at")]

    def get_registration(self, registration_id: RegistrationId) -> Registration | None:
        row = (
            orm.Registration.objects.select_related("event")
            .filter(pk=registration_id.value)
            .first()
        )
        return _to_registration(row) if row else None

    def add_registration(self, event_id: EventId, registrant: Registrant) -> Registration:
        row = orm.Registration.objects.create(
            event_id=event_id.value,
            name=registrant.name,
            email=registrant.email,
            status=RegistrationStatus.PENDING.value,
        )
        return _to_registration(row)

    def update_registration_status(
        self,
        registration_id: RegistrationId,
        expected: RegistrationStatus,
        new: RegistrationStatus,
    ) -> bool:
        updated = orm.Registration.objects.filter(
            pk=registration_id.value,
            status=expected.value,
        ).update(status=new.value)
        return updated == 1


class DjangoMessageStore(MessageStore):
    """Contact message store using Django ORM."""

    def list_messages(self) -> list[ContactMessage]:
        return [_to_message(row) for row in orm.ContactMessage.objects.order_by("-created_at")]

    def add_message(self, name: str, email: str, message: str) -> ContactMessage:
        row = orm.ContactMessage.objects.create(name=name, email=email, message=message)
        return _to_message(row)

    def delete_message(self, message_id: MessageId) -> bool:
        deleted, _ = orm.ContactMessage.objects.filter(pk=message_id.value).delete()
        return deleted > 0
