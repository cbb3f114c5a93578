"""Event service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
from datetime import datetime, timezone
from typing import Any

from events.domain import Capacity, Event, EventStatus, NewEvent
from events.domain.errors import (
    EventNotFoundError,
    InvalidTransitionError,
    ValidationError,
)
from events.services.reservation_service import ReservationService, parse_event_id
from events.stores.interfaces import EventStore, Transactions

logger = logging.getLogger(__name__)

_REQUIRED_TEXT = ("title", "description", "location")
_PLAIN_FIELDS = ("title", "description", "location", "start_time", "image_ref")
PUBLIC_STATUSES = frozenset(
    {EventStatus.PUBLISHED, EventStatus.CANCELLED, EventStatus.COMPLETED}
)


def _parse_status(value: str) -> EventStatus:
    try:
        return EventStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown event status: {value}") from None


class EventService:
    """Service for event catalog operations."""

    def __init__(
        self,
        store: EventStore,
        transactions: Transactions,
        reservations: ReservationService,
    ) -> None:
        self._store = store
        self._transactions = transactions
        self._reservations = reservations

    def list_events(
        self,
        search: str | None = None,
        status: str | None = None,
        upcoming: bool = False,
        include_drafts: bool = False,
    ) -> list[Event]:
        """Return events ordered by start time.

        Drafts are only listed when include_drafts is set.
        """
        if status:
            statuses = frozenset({_parse_status(status)})
            if not include_drafts:
                statuses &= PUBLIC_STATUSES
        else:
            statuses = None if include_drafts else PUBLIC_STATUSES
        starts_after = datetime.now(timezone.utc) if upcoming else None
        return self._store.list_events(
            search=search or None, statuses=statuses, starts_after=starts_after
        )

    def get_event(self, event_id: str) -> Event:
        """Return an event by ID.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        eid = parse_event_id(event_id)
        event = self._store.get_event(eid)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def create_event(
        self,
        title: str,
        description: str,
        location: str,
        start_time: datetime,
        total_seats: int,
        image_ref: str | None = None,
    ) -> Event:
        """Create a draft event with no occupied seats.

        Raises:
            ValidationError: If a required field is blank or total_seats is negative.
        """
        fields = {"title": title, "description": description, "location": location}
        for name in _REQUIRED_TEXT:
            if not fields[name] or not fields[name].strip():
                raise ValidationError(f"{name} is required")
        try:
            capacity = Capacity(total_seats)
        except (ValueError, TypeError) as exc:
            raise ValidationError(str(exc)) from None

        event = self._store.add_event(
            NewEvent(
                title=title.strip(),
                description=description.strip(),
                location=location.strip(),
                start_time=start_time,
                total_seats=capacity.value,
                image_ref=image_ref or None,
            )
        )
        logger.info(
            "Event created",
            extra={"event_id": str(event.id), "total_seats": event.total_seats},
        )
        return event

    def update_event(self, event_id: str, changes: dict[str, Any]) -> Event:
        """Apply an admin edit in one transaction.

        changes may hold title, description, location, start_time,
        image_ref, total_seats and status.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            ValidationError: If a field is blank or unknown.
            InvalidCapacityError: If total_seats is below occupied_seats.
            InvalidTransitionError: If the status change is not allowed.
        """
        eid = parse_event_id(event_id)
        unknown = set(changes) - set(_PLAIN_FIELDS) - {"total_seats", "status"}
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")
        for name in _REQUIRED_TEXT:
            if name in changes and (not changes[name] or not changes[name].strip()):
                raise ValidationError(f"{name} cannot be blank")

        plain = {
            name: changes[name].strip() if name in _REQUIRED_TEXT else changes[name]
            for name in _PLAIN_FIELDS
            if name in changes
        }
        if "image_ref" in plain:
            plain["image_ref"] = plain["image_ref"] or None

        with self._transactions.atomic():
            current = self._store.get_event(eid)
            if current is None:
                raise EventNotFoundError(event_id)

            if "status" in changes:
                target = _parse_status(changes["status"])
                if target is not current.status:
                    if not current.status.can_transition_to(target):
                        raise InvalidTransitionError(current.status.value, target.value)
                    plain["status"] = target

            if "total_seats" in changes:
                self._reservations.apply_capacity(eid, changes["total_seats"])

            if plain:
                self._store.update_event(eid, plain)

            updated = self._store.get_event(eid)
            if updated is None:
                raise EventNotFoundError(event_id)

        logger.info(
            "Event updated",
            extra={"event_id": event_id, "fields": sorted(changes)},
        )
        return updated

    def delete_event(self, event_id: str) -> None:
        """Delete an event together with its registrations.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        eid = parse_event_id(event_id)
        if not self._store.delete_event(eid):
            raise EventNotFoundError(event_id)
        logger.info("Event deleted", extra={"event_id": event_id})
