"""Redis integration for ledgerline event sourcing.

This module provides a Redis implementation of the EventStore interface
using the async client from redis-py.

Installation:
    pip install ledgerline

Usage:
    >>> from ledgerline.integrations.redis import (
    ...     RedisConfiguration,
    ...     RedisEventStore,
    ... )
    >>>
    >>> config = RedisConfiguration(uri="redis://localhost:6379/0")
    >>> event_store = RedisEventStore.from_configuration(config)
    >>>
    >>> await event_store.save(invoice)
    >>> await event_store.load(Invoice(id=invoice.id))
    >>>
    >>> await config.on_shutdown()
"""

from .codec import EventRecordCodec, StoredRecord, epoch_microseconds
from .config import RedisConfiguration
from .event_store import RedisEventStore

__all__ = [
    "RedisConfiguration",
    "RedisEventStore",
    "EventRecordCodec",
    "StoredRecord",
    "epoch_microseconds",
]
