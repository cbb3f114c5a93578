from events.stores.interfaces import EventStore, MessageStore, RegistrationStore, Transactions

__all__ = [
    "EventStore",
    "RegistrationStore",
    "MessageStore",
    "Transactions",
]
