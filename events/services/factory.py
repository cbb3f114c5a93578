"""Services wired to the Django ORM stores."""

from django.conf import settings

from events.services.contact_service import ContactService
from events.services.event_service import EventService
from events.services.reservation_service import DEFAULT_MAX_ATTEMPTS, ReservationService
from events.stores.django_store import (
    DjangoEventStore,
    DjangoMessageStore,
    DjangoRegistrationStore,
    DjangoTransactions,
)


def reservation_service() -> ReservationService:
    return ReservationService(
        events=DjangoEventStore(),
        registrations=DjangoRegistrationStore(),
        transactions=DjangoTransactions(),
        max_attempts=getattr(settings, "RESERVATION_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS),
    )


def event_service() -> EventService:
    return EventService(
        store=DjangoEventStore(),
        transactions=DjangoTransactions(),
        reservations=reservation_service(),
    )


def contact_service() -> ContactService:
    return ContactService(store=DjangoMessageStore())
