from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar
from uuid import uuid4

from pydantic import BaseModel, Field

from ..routing import setup_event_applying
from .event import Event, utc_now

if TYPE_CHECKING:
    from ..routing import MessageRouter


T = TypeVar("T", bound=BaseModel)

_ONE_MICROSECOND = timedelta(microseconds=1)


class Aggregate(BaseModel):
    """Base class for all aggregates in the event sourcing system.

    Aggregates are the core domain objects that maintain consistency boundaries
    and emit domain events when their state changes. State changes are expressed
    as events that are applied to update the aggregate's state.

    Event handling is routed based on method decorators. Use @applies_event to
    mark event applier methods; the framework routes events to them based on
    their type annotations. Annotate the parameter as ``Event[T]`` to receive
    the full event (with ``recorded_at``) instead of only its data.

    Examples:
        >>> from ledgerline.routing import applies_event
        >>>
        >>> class PaymentTransactionWasStarted(BaseModel):
        ...     method: str
        ...     amount: float
        >>>
        >>> class Invoice(Aggregate):
        ...     paid: float = 0.0
        ...
        ...     def start_payment(self, method: str, amount: float) -> None:
        ...         self.emit(PaymentTransactionWasStarted(method=method, amount=amount))
        ...
        ...     @applies_event
        ...     def apply_started(self, evt: PaymentTransactionWasStarted) -> None:
        ...         self.paid += evt.amount
        >>>
        >>> invoice = Invoice(id="12-34")
        >>> invoice.start_payment("Manual", 10.0)
        >>> len(invoice.get_uncommitted_events())
        1

    Attributes:
        id: Aggregate root identifier. Names the aggregate's event stream and
            must stay stable for the aggregate's lifetime.
        last_event_time: Timestamp of the most recent emitted or replayed event.
        uncommitted_events: Events that have been emitted but not yet
            persisted, oldest first. Excluded from serialization.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    last_event_time: datetime | None = None
    uncommitted_events: list[Event[Any]] = Field(default_factory=list, exclude=True)

    # Class-level routing table
    _event_router: ClassVar["MessageRouter"]

    def __init_subclass__(cls, **kwargs: object) -> None:
        """Set up event routing when a subclass is defined."""
        super().__init_subclass__(**kwargs)  # type: ignore[arg-type]
        cls._event_router = setup_event_applying(cls)

    def apply(self, data: BaseModel, event: Event[Any] | None = None) -> object:
        """Route event data to its registered applier method.

        Args:
            data: The event data to apply to the aggregate state.
            event: The full event, handed to appliers annotated with ``Event[T]``.
        """
        return self._event_router.route(self, data, event_wrapper=event)

    def emit(self, data: T) -> Event[T]:
        """Record a new domain event and apply it to the aggregate state.

        The event is appended to the uncommitted events and applied right away.
        ``recorded_at`` is kept strictly increasing within this aggregate: if
        the clock has not moved past the previous event, the new event is
        stamped one microsecond after it.

        Args:
            data: The event data as a Pydantic model representing what happened.

        Returns:
            The emitted event.
        """
        current_time = utc_now()
        if self.last_event_time is not None and current_time <= self.last_event_time:
            current_time = self.last_event_time + _ONE_MICROSECOND

        event: Event[T] = Event(aggregate_id=self.id, data=data, recorded_at=current_time)
        self.last_event_time = current_time
        self.uncommitted_events.append(event)
        self.apply(data, event)
        return event

    def replay_event(self, event: Event[Any]) -> None:
        """Apply a previously stored event without recording it as pending.

        This is called by event stores while rehydrating an aggregate.

        Args:
            event: The stored event to apply.
        """
        self.last_event_time = event.recorded_at
        self.apply(event.data, event)

    def get_uncommitted_events(self) -> list[Event[Any]]:
        """Get the list of events that haven't been persisted yet.

        Returns:
            List of uncommitted event objects, oldest first.
        """
        return self.uncommitted_events

    def acknowledge_persisted(self, event: Event[Any]) -> None:
        """Remove a single event from the uncommitted events.

        Called by event stores once the event is durably stored. Matching is
        by identity, so an equal but distinct event is left untouched.

        Args:
            event: The event that was persisted.
        """
        self.uncommitted_events[:] = [
            pending for pending in self.uncommitted_events if pending is not event
        ]
