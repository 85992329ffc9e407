"""Ledgerline - Event-sourced aggregate storage on Redis.

This module provides the public API for persisting and replaying
event-sourced aggregates.
"""

from .domain import Aggregate, Event
from .events import EventDescriber, EventStore, KebabCase
from .routing import applies_event

__all__ = [
    # Domain primitives
    "Aggregate",
    "Event",
    # Storage
    "EventStore",
    "EventDescriber",
    "KebabCase",
    # Decorators
    "applies_event",
]
