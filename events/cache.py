"""Cache keys for event reads and their invalidation.

Invalidation runs after the surrounding transaction commits. Reads made
inside an open transaction are never written to the cache, since they may
see rows that are later rolled back.
"""

from django.conf import settings
from django.core.cache import cache
from django.db import transaction

EVENT_LIST_KEY = "events:list"


def event_detail_key(event_id) -> str:
    return f"events:{event_id}"


def cache_timeout() -> int:
    return getattr(settings, "EVENT_CACHE_TIMEOUT", 60)


def cache_event_read(key: str, data) -> None:
    """Cache serialized event data unless it was read inside a transaction."""
    if transaction.get_connection().in_atomic_block:
        return
    cache.set(key, data, cache_timeout())


def invalidate_event(event_id) -> None:
    """Drop the cached detail of one event and the public list once committed."""
    keys = [EVENT_LIST_KEY, event_detail_key(event_id)]
    transaction.on_commit(lambda: cache.delete_many(keys))
