"""Event store interface for durable event persistence."""

from abc import ABC, abstractmethod

from ..domain import Aggregate


class EventStore(ABC):
    """Abstract interface for durable event persistence.

    EventStore provides the foundation for event sourcing by persisting
    events as an immutable, append-only log. Each aggregate's events form
    a stream that can be replayed to reconstruct aggregate state.

    Key responsibilities:
    - **Durability**: Events survive system failures
    - **Ordering**: Events are stored and replayed in recorded order
    - **Immutability**: Events cannot be modified after storage

    Concurrency control is not part of this interface; two concurrent saves
    for the same aggregate may interleave.
    """

    @abstractmethod
    async def save(self, aggregate: Aggregate) -> None:
        """Persist the aggregate's uncommitted events, oldest first.

        Each event is acknowledged on the aggregate as soon as it has been
        stored, so a failure part way leaves only the unsaved events pending.

        Args:
            aggregate: The aggregate whose uncommitted events to persist.

        Raises:
            EventStorageFailedError: If an event could not be encoded or stored.
        """
        ...

    @abstractmethod
    async def load(self, aggregate: Aggregate) -> None:
        """Replay every stored event for the aggregate, in recorded order.

        Events are applied to the aggregate one by one as they are read. No
        uncommitted events are recorded on the aggregate.

        Args:
            aggregate: A blank aggregate carrying the ID to load.

        Raises:
            EventRetrievalFailedError: If keys or events could not be fetched.
            EventCorruptedError: If a stored event cannot be decoded.
        """
        ...
