"""Contact form messages: public submission, admin listing and deletion."""

import logging

from events.domain import ContactMessage, MessageId, Registrant
from events.domain.errors import InvalidMessageIdError, MessageNotFoundError, ValidationError
from events.stores.interfaces import MessageStore

logger = logging.getLogger(__name__)


class ContactService:
    def __init__(self, store: MessageStore) -> None:
        self._store = store

    def submit_message(self, name: str, email: str, message: str) -> ContactMessage:
        """Store a message sent from the contact page.

        Raises:
            ValidationError: If a field is missing or the email is malformed.
        """
        try:
            sender = Registrant(name=name, email=email)
        except ValueError as exc:
            raise ValidationError(str(exc)) from None
        if not message or not message.strip():
            raise ValidationError("Message is required")

        contact = self._store.add_message(sender.name, sender.email, message.strip())
        logger.info("Contact message received", extra={"message_id": str(contact.id)})
        return contact

    def list_messages(self) -> list[ContactMessage]:
        return self._store.list_messages()

    def delete_message(self, message_id: str) -> None:
        """Raises InvalidMessageIdError or MessageNotFoundError."""
        try:
            mid = MessageId.from_string(message_id)
        except (ValueError, TypeError, AttributeError):
            raise InvalidMessageIdError() from None
        if not self._store.delete_message(mid):
            raise MessageNotFoundError(message_id)
        logger.info("Contact message deleted", extra={"message_id": message_id})
