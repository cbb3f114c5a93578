from events.domain.models import ContactMessage, Event, NewEvent, Registration
from events.domain.value_objects import (
    Capacity,
    EventId,
    EventStatus,
    MessageId,
    Registrant,
    RegistrationId,
    RegistrationStatus,
)

__all__ = [
    "Event",
    "NewEvent",
    "Registration",
    "ContactMessage",
    "EventId",
    "RegistrationId",
    "MessageId",
    "Capacity",
    "Registrant",
    "EventStatus",
    "RegistrationStatus",
]
