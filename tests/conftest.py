"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone

import pytest
from rest_framework.authtoken.models import Token
from rest_framework.test import APIClient

from events import models as orm
from events.domain import EventStatus, NewEvent
from events.services import ContactService, EventService, ReservationService
from events.stores.memory_store import (
    InMemoryDatabase,
    InMemoryEventStore,
    InMemoryMessageStore,
    InMemoryRegistrationStore,
    InMemoryTransactions,
)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


# ---------------------------------------------------------------------------
# In-memory stores and services
# ---------------------------------------------------------------------------


@pytest.fixture
def memory_db() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def event_store(memory_db) -> InMemoryEventStore:
    return InMemoryEventStore(memory_db)


@pytest.fixture
def registration_store(memory_db) -> InMemoryRegistrationStore:
    return InMemoryRegistrationStore(memory_db)


@pytest.fixture
def reservations(memory_db, event_store, registration_store) -> ReservationService:
    return ReservationService(
        events=event_store,
        registrations=registration_store,
        transactions=InMemoryTransactions(memory_db),
        max_attempts=5,
    )


@pytest.fixture
def event_service(memory_db, event_store, reservations) -> EventService:
    return EventService(
        store=event_store,
        transactions=InMemoryTransactions(memory_db),
        reservations=reservations,
    )


@pytest.fixture
def contact_service(memory_db) -> ContactService:
    return ContactService(store=InMemoryMessageStore(memory_db))


@pytest.fixture
def make_event(event_store):
    """Create an event in the in-memory store with the given occupancy."""

    def _make(
        total_seats: int = 10,
        occupied_seats: int = 0,
        status: EventStatus = EventStatus.PUBLISHED,
        title: str = "Python Meetup",
    ):
        event = event_store.add_event(
            NewEvent(
                title=title,
                description="Talks and networking",
                location="Lisbon",
                start_time=datetime.now(timezone.utc) + timedelta(days=7),
                total_seats=total_seats,
            )
        )
        event_store.update_event(event.id, {"status": EventStatus.PUBLISHED})
        for taken in range(occupied_seats):
            assert event_store.increment_occupied_seats(event.id, expected=taken)
        if status is not EventStatus.PUBLISHED:
            event_store.update_event(event.id, {"status": status})
        return event_store.get_event(event.id)

    return _make


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def db_event(db):
    """Create an ORM event row."""

    def _make(
        total_seats: int = 10,
        occupied_seats: int = 0,
        status: str = "published",
        title: str = "Python Meetup",
        description: str = "Talks and networking",
        location: str = "Lisbon",
        start_time: datetime | None = None,
    ) -> orm.Event:
        return orm.Event.objects.create(
            title=title,
            description=description,
            location=location,
            start_time=start_time or datetime.now(timezone.utc) + timedelta(days=7),
            total_seats=total_seats,
            occupied_seats=occupied_seats,
            status=status,
        )

    return _make


@pytest.fixture
def admin_api_client(admin_user) -> APIClient:
    token, _ = Token.objects.get_or_create(user=admin_user)
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token.key}")
    return client


@pytest.fixture
def member_api_client(django_user_model) -> APIClient:
    user = django_user_model.objects.create_user(
        username="member", email="member@example.com", password="member-pass-123"
    )
    token, _ = Token.objects.get_or_create(user=user)
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token.key}")
    return client
