"""Naming strategies that turn an event's type into a readable name."""

import re
from abc import ABC, abstractmethod
from typing import Any

from ..domain import Event

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


class EventDescriber(ABC):
    """Maps an event to the name used for it in storage keys.

    Implementations must be pure: the same event type always yields the
    same name.
    """

    @abstractmethod
    def describe(self, event: Event[Any]) -> str:
        """Return the stored name for the event's type."""
        ...


class KebabCase(EventDescriber):
    """Describe events by their data class name in kebab-case.

    Examples:
        >>> KebabCase().describe(Event(aggregate_id="12-34", data=InvoiceWasCreated(...)))
        'invoice-was-created'
        >>> KebabCase().describe(Event(aggregate_id="12-34", data=HTTPRequestWasSent()))
        'http-request-was-sent'
    """

    def describe(self, event: Event[Any]) -> str:
        return _WORD_BOUNDARY.sub("-", event.event_type.__name__).lower()
