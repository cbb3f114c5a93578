"""Domain error codes for the events module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    REGISTRATION_NOT_FOUND = "REGISTRATION_NOT_FOUND"
    MESSAGE_NOT_FOUND = "MESSAGE_NOT_FOUND"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    INVALID_REGISTRATION_ID = "INVALID_REGISTRATION_ID"
    INVALID_MESSAGE_ID = "INVALID_MESSAGE_ID"
    EVENT_NOT_PUBLISHED = "EVENT_NOT_PUBLISHED"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    CONFLICT = "CONFLICT"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    INVALID_CAPACITY = "INVALID_CAPACITY"
    VALIDATION_ERROR = "VALIDATION_ERROR"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class RegistrationNotFoundError(DomainError):
    """Raised when a registration is not found."""

    def __init__(self, registration_id: str) -> None:
        super().__init__(
            code=ErrorCode.REGISTRATION_NOT_FOUND,
            message="Registration not found",
        )
        self.registration_id = registration_id


class MessageNotFoundError(DomainError):
    """Raised when a contact message is not found."""

    def __init__(self, message_id: str) -> None:
        super().__init__(
            code=ErrorCode.MESSAGE_NOT_FOUND,
            message="Message not found",
        )
        self.message_id = message_id


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class InvalidRegistrationIdError(DomainError):
    """Raised when a registration ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_REGISTRATION_ID,
            message="Invalid registration ID format",
        )


class InvalidMessageIdError(DomainError):
    """Raised when a message ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_MESSAGE_ID,
            message="Invalid message ID format",
        )


class EventNotPublishedError(DomainError):
    """Raised when registering for an event that is not published."""

    def __init__(self, event_id: str, status: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_PUBLISHED,
            message="Event is not open for registrations",
        )
        self.event_id = event_id
        self.status = status


class CapacityExceededError(DomainError):
    """Raised when an event has no seats left."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_EXCEEDED,
            message="No seats left for this event",
        )
        self.event_id = event_id


class ConflictError(DomainError):
    """Raised when concurrent updates kept winning over ours. Safe to retry."""

    def __init__(self, event_id: str, attempts: int) -> None:
        super().__init__(
            code=ErrorCode.CONFLICT,
            message="The event was modified concurrently, please retry",
        )
        self.event_id = event_id
        self.attempts = attempts


class InvalidTransitionError(DomainError):
    """Raised for a status change the transition table does not allow."""

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_TRANSITION,
            message=f"Cannot change status from {current} to {requested}",
        )
        self.current = current
        self.requested = requested


class InvalidCapacityError(DomainError):
    """Raised when total seats would drop below the seats already taken."""

    def __init__(self, requested: int, occupied: int) -> None:
        super().__init__(
            code=ErrorCode.INVALID_CAPACITY,
            message=f"Total seats cannot be lower than occupied seats ({occupied})",
        )
        self.requested = requested
        self.occupied = occupied


class ValidationError(DomainError):
    """Raised when required input is missing or malformed."""

    def __init__(self, message: str) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=message,
        )
