"""Event storage infrastructure for ledgerline.

This package provides:
- EventStore: Durable event persistence interface
- EventDescriber: Naming strategies for event types
- The exceptions raised while storing and replaying events
"""

from .describer import EventDescriber, KebabCase
from .exceptions import (
    EventCodecError,
    EventCorruptedError,
    EventDecodingError,
    EventEncodingError,
    EventRetrievalFailedError,
    EventStorageFailedError,
    EventStoreError,
)
from .store import EventStore

__all__ = [
    "EventStore",
    # Naming strategies
    "EventDescriber",
    "KebabCase",
    # Errors
    "EventStoreError",
    "EventStorageFailedError",
    "EventRetrievalFailedError",
    "EventCorruptedError",
    "EventCodecError",
    "EventEncodingError",
    "EventDecodingError",
]
