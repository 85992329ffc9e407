"""Exceptions raised while storing and replaying event streams."""


class EventStoreError(Exception):
    """Base class for event store failures.

    Attributes:
        aggregate_id: The aggregate whose stream was being accessed, if known.
        event_type: Qualified name of the event type involved, if known.
        key: The storage key involved, if known.
    """

    def __init__(
        self,
        message: str,
        *,
        aggregate_id: str | None = None,
        event_type: str | None = None,
        key: str | None = None,
    ):
        super().__init__(message)
        self.aggregate_id = aggregate_id
        self.event_type = event_type
        self.key = key


class EventStorageFailedError(EventStoreError):
    """Raised when an event or its index entry could not be stored.

    Events stored before the failing one remain stored; the failing event and
    all later ones are still pending on the aggregate, so the whole save can
    be retried.
    """

    pass


class EventRetrievalFailedError(EventStoreError):
    """Raised when keys or events could not be fetched during replay.

    The aggregate passed to ``load`` is partially rehydrated and must be
    discarded.
    """

    pass


class EventCorruptedError(EventStoreError):
    """Raised when a stored event exists in the index but cannot be decoded.

    Unlike retrieval failures this points at a data integrity problem, so
    retrying the load will not help.
    """

    pass


class EventCodecError(Exception):
    """Base class for event record encoding and decoding failures."""

    pass


class EventEncodingError(EventCodecError):
    """Raised when an event's payload cannot be serialized."""

    pass


class EventDecodingError(EventCodecError):
    """Raised when a stored record is malformed or names an unknown event type."""

    pass
