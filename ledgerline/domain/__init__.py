"""Domain primitives for event sourcing.

This module contains the core building blocks that users extend to create
their domain models:

- Aggregate: Base class for domain aggregates that emit events
- Event: Immutable wrapper around typed event data
"""

from .aggregate import Aggregate
from .event import Event, utc_now

__all__ = [
    "Aggregate",
    "Event",
    "utc_now",
]
