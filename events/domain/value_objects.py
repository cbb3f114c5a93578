"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from enum import Enum
from typing import Self
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class RegistrationId:
    """Unique identifier for a Registration."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class MessageId:
    """Unique identifier for a ContactMessage."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Capacity:
    """Non-negative integer representing a number of seats."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")


@dataclass(frozen=True)
class Registrant:
    """Name and email supplied by the person registering.

    Emails are checked with Django's validator, the same one behind the
    API's EmailField.
    """

    name: str
    email: str

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Name is required")
        if not self.email:
            raise ValueError("A valid email is required")
        try:
            validate_email(self.email.strip())
        except DjangoValidationError:
            raise ValueError("A valid email is required") from None
        object.__setattr__(self, "name", self.name.strip())
        object.__setattr__(self, "email", self.email.strip())


class EventStatus(Enum):
    """Lifecycle of an event. Only published events take registrations."""

    DRAFT = "draft"
    PUBLISHED = "published"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

    def can_transition_to(self, target: "EventStatus") -> bool:
        return target in _EVENT_TRANSITIONS[self]


_EVENT_TRANSITIONS: dict[EventStatus, frozenset[EventStatus]] = {
    EventStatus.DRAFT: frozenset({EventStatus.PUBLISHED, EventStatus.CANCELLED}),
    EventStatus.PUBLISHED: frozenset(
        {EventStatus.DRAFT, EventStatus.CANCELLED, EventStatus.COMPLETED}
    ),
    EventStatus.CANCELLED: frozenset(),
    EventStatus.COMPLETED: frozenset(),
}


class RegistrationStatus(Enum):
    """Review state of a registration."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"

    def can_transition_to(self, target: "RegistrationStatus") -> bool:
        return target in _REGISTRATION_TRANSITIONS[self]


_REGISTRATION_TRANSITIONS: dict[RegistrationStatus, frozenset[RegistrationStatus]] = {
    RegistrationStatus.PENDING: frozenset(
        {RegistrationStatus.CONFIRMED, RegistrationStatus.CANCELLED}
    ),
    RegistrationStatus.CONFIRMED: frozenset(),
    RegistrationStatus.CANCELLED: frozenset(),
}
