"""Reservation service - the only path that changes seat occupancy.

A registration is created and the event's occupied_seats incremented inside
one transaction. The increment is conditional on the occupancy read before
the transaction; when another registration got there first the transaction
is rolled back (taking the new registration with it) and the whole attempt
is retried from a fresh read.
"""

import logging

from events.domain import (
    Capacity,
    Event,
    EventId,
    Registrant,
    Registration,
    RegistrationId,
    RegistrationStatus,
)
from events.domain.errors import (
    CapacityExceededError,
    ConflictError,
    EventNotFoundError,
    EventNotPublishedError,
    InvalidCapacityError,
    InvalidEventIdError,
    InvalidRegistrationIdError,
    InvalidTransitionError,
    RegistrationNotFoundError,
    ValidationError,
)
from events.stores.interfaces import EventStore, RegistrationStore, Transactions

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5


class _SeatClaimLost(Exception):
    """The conditional increment matched no row; roll back and retry."""


def parse_event_id(event_id: str) -> EventId:
    try:
        return EventId.from_string(event_id)
    except (ValueError, TypeError, AttributeError):
        raise InvalidEventIdError() from None


def parse_registration_id(registration_id: str) -> RegistrationId:
    try:
        return RegistrationId.from_string(registration_id)
    except (ValueError, TypeError, AttributeError):
        raise InvalidRegistrationIdError() from None


class ReservationService:
    """Registrations, their status transitions and event capacity."""

    def __init__(
        self,
        events: EventStore,
        registrations: RegistrationStore,
        transactions: Transactions,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._events = events
        self._registrations = registrations
        self._transactions = transactions
        self._max_attempts = max_attempts

    def register(self, event_id: str, name: str, email: str) -> Registration:
        """Claim one seat of a published event for a registrant.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            ValidationError: If name or email is missing or malformed.
            EventNotFoundError: If the event does not exist.
            EventNotPublishedError: If the event is not published.
            CapacityExceededError: If no seats are left.
            ConflictError: If every attempt lost a race with another writer.
        """
        eid = parse_event_id(event_id)
        try:
            registrant = Registrant(name=name, email=email)
        except ValueError as exc:
            raise ValidationError(str(exc)) from None

        for attempt in range(1, self._max_attempts + 1):
            event = self._load_open_event(eid)
            try:
                with self._transactions.atomic():
                    registration = self._registrations.add_registration(eid, registrant)
                    if not self._events.increment_occupied_seats(
                        eid, expected=event.occupied_seats
                    ):
                        raise _SeatClaimLost()
            except _SeatClaimLost:
                logger.info(
                    "Seat claim lost a race, retrying",
                    extra={"event_id": str(eid), "attempt": attempt},
                )
                continue

            logger.info(
                "Registration created",
                extra={
                    "event_id": str(eid),
                    "registration_id": str(registration.id),
                    "occupied_seats": event.occupied_seats + 1,
                    "total_seats": event.total_seats,
                },
            )
            return registration

        logger.warning(
            "Registration gave up after repeated conflicts",
            extra={"event_id": str(eid), "attempts": self._max_attempts},
        )
        raise ConflictError(str(eid), self._max_attempts)

    def _load_open_event(self, event_id: EventId) -> Event:
        event = self._events.get_event(event_id)
        if event is None:
            raise EventNotFoundError(str(event_id))
        if not event.accepts_registrations:
            raise EventNotPublishedError(str(event_id), event.status.value)
        if event.is_full:
            logger.info(
                "Registration rejected, event is full",
                extra={"event_id": str(event_id), "total_seats": event.total_seats},
            )
            raise CapacityExceededError(str(event_id))
        return event

    def set_status(self, registration_id: str, new_status: str) -> Registration:
        """Move a registration along pending -> confirmed | cancelled.

        Seats are not released when a registration is cancelled.

        Raises:
            InvalidRegistrationIdError: If the registration_id is not a valid UUID.
            ValidationError: If new_status is not a known status.
            RegistrationNotFoundError: If the registration does not exist.
            InvalidTransitionError: If the transition is not allowed.
        """
        rid = parse_registration_id(registration_id)
        try:
            target = RegistrationStatus(new_status)
        except ValueError:
            raise ValidationError(f"Unknown registration status: {new_status}") from None

        current = self._registrations.get_registration(rid)
        if current is None:
            raise RegistrationNotFoundError(str(rid))
        if not current.status.can_transition_to(target):
            raise InvalidTransitionError(current.status.value, target.value)

        if not self._registrations.update_registration_status(
            rid, expected=current.status, new=target
        ):
            # Another admin moved it first; every status it can reach is final.
            latest = self._registrations.get_registration(rid)
            if latest is None:
                raise RegistrationNotFoundError(str(rid))
            raise InvalidTransitionError(latest.status.value, target.value)

        logger.info(
            "Registration status changed",
            extra={
                "registration_id": str(rid),
                "from_status": current.status.value,
                "to_status": target.value,
            },
        )
        updated = self._registrations.get_registration(rid)
        if updated is None:
            raise RegistrationNotFoundError(str(rid))
        return updated

    def set_capacity(self, event_id: str, total_seats: int) -> Event:
        """Change an event's total seats.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            ValidationError: If total_seats is negative.
            EventNotFoundError: If the event does not exist.
            InvalidCapacityError: If total_seats is below occupied_seats.
        """
        return self.apply_capacity(parse_event_id(event_id), total_seats)

    def apply_capacity(self, event_id: EventId, total_seats: int) -> Event:
        try:
            capacity = Capacity(total_seats)
        except (ValueError, TypeError) as exc:
            raise ValidationError(str(exc)) from None

        if not self._events.set_total_seats(event_id, capacity.value):
            event = self._events.get_event(event_id)
            if event is None:
                raise EventNotFoundError(str(event_id))
            logger.info(
                "Capacity change rejected",
                extra={
                    "event_id": str(event_id),
                    "requested": capacity.value,
                    "occupied_seats": event.occupied_seats,
                },
            )
            raise InvalidCapacityError(capacity.value, event.occupied_seats)

        event = self._events.get_event(event_id)
        if event is None:
            raise EventNotFoundError(str(event_id))
        logger.info(
            "Capacity changed",
            extra={"event_id": str(event_id), "total_seats": event.total_seats},
        )
        return event

    def list_registrations(
        self,
        event_id: str | None = None,
        status: str | None = None,
        search: str | None = None,
    ) -> list[Registration]:
        """Return registrations, newest first.

        Raises:
            InvalidEventIdError: If event_id is given and not a valid UUID.
            ValidationError: If status is not a known status.
        """
        eid = parse_event_id(event_id) if event_id else None
        try:
            wanted = RegistrationStatus(status) if status else None
        except ValueError:
            raise ValidationError(f"Unknown registration status: {status}") from None
        return self._registrations.list_registrations(
            event_id=eid, status=wanted, search=search or None
        )
