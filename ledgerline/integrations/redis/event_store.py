"""Redis implementation of EventStore for event sourcing.

Every event is stored as a JSON string under its own key, and its key is
added to a sorted set named after the aggregate, scored by the event's
recorded time in epoch microseconds. Replaying an aggregate walks that
sorted set oldest first.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import aclosing
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import RedisError

from ...domain import Aggregate, Event
from ...events.describer import EventDescriber, KebabCase
from ...events.exceptions import (
    EventCorruptedError,
    EventDecodingError,
    EventEncodingError,
    EventRetrievalFailedError,
    EventStorageFailedError,
)
from ...events.store import EventStore
from .codec import EventRecordCodec, epoch_microseconds
from .config import KEY_RANGE_LIMIT, RedisConfiguration
from .type_loader import get_qualified_name

LOGGER = logging.getLogger(__name__)


class RedisEventStore(EventStore):
    """Redis implementation of the EventStore interface.

    Keys:
        - ``<aggregate_id>:<epoch µs>-<described name>``: one JSON record per event
        - ``<aggregate_id>``: sorted set of the aggregate's event keys

    Only GET, SET, ZADD and ZRANGE are used. There is no locking or
    optimistic concurrency control; concurrent saves for one aggregate may
    interleave.

    Attributes:
        client: Async Redis client
        codec: Key and record codec
        key_range_limit: Sorted-set members fetched per window during load

    Examples:
        >>> config = RedisConfiguration(uri="redis://localhost:6379/0")
        >>> store = RedisEventStore.from_configuration(config)
        >>>
        >>> invoice = Invoice.create("12-34", item)
        >>> await store.save(invoice)
        >>>
        >>> restored = Invoice(id="12-34")
        >>> await store.load(restored)
    """

    def __init__(
        self,
        client: Redis,
        describer: EventDescriber | None = None,
        key_range_limit: int = KEY_RANGE_LIMIT,
    ):
        """Initialize the Redis event store.

        Args:
            client: Async Redis client
            describer: Naming strategy for storage keys, defaults to KebabCase
            key_range_limit: Sorted-set members fetched per window during load
        """
        if key_range_limit < 1:
            raise ValueError(f"key_range_limit must be at least 1, got {key_range_limit}")
        self.client = client
        self.codec = EventRecordCodec(describer or KebabCase())
        self.key_range_limit = key_range_limit

    @classmethod
    def from_configuration(
        cls,
        config: RedisConfiguration,
        describer: EventDescriber | None = None,
    ) -> "RedisEventStore":
        """Create an event store using the configuration's client and window size."""
        return cls(config.client, describer, key_range_limit=config.key_range_limit)

    async def save(self, aggregate: Aggregate) -> None:
        """Store the aggregate's uncommitted events one at a time, in order.

        Each event is written, then indexed, then acknowledged on the
        aggregate. The first failure stops the loop.

        Args:
            aggregate: The aggregate whose uncommitted events to persist.

        Raises:
            EventStorageFailedError: If an event could not be encoded or stored.
        """
        for event in list(aggregate.get_uncommitted_events()):
            await self._store(aggregate.id, event)
            aggregate.acknowledge_persisted(event)

    async def load(self, aggregate: Aggregate) -> None:
        """Replay every stored event for the aggregate, oldest first.

        Each event is fetched, decoded and applied before the next is read.

        Args:
            aggregate: A blank aggregate carrying the ID to load.

        Raises:
            EventRetrievalFailedError: If keys or events could not be fetched.
            EventCorruptedError: If a stored event is missing or cannot be decoded.
        """
        replayed = 0
        async with aclosing(self._keys(aggregate.id)) as keys:
            async for key in keys:
                try:
                    raw = await self.client.get(key)
                except RedisError as err:
                    LOGGER.error(
                        "Failed to fetch event",
                        extra={"aggregate_id": aggregate.id, "key": key},
                    )
                    raise EventRetrievalFailedError(
                        f'Failed to fetch event with key "{key}".',
                        aggregate_id=aggregate.id,
                        key=key,
                    ) from err

                try:
                    event = self.codec.decode(aggregate.id, raw)
                except EventDecodingError as err:
                    LOGGER.error(
                        "Stored event is corrupted",
                        extra={"aggregate_id": aggregate.id, "key": key},
                    )
                    raise EventCorruptedError(
                        f'Event with key "{key}" cannot be decoded: {err}',
                        aggregate_id=aggregate.id,
                        key=key,
                    ) from err

                aggregate.replay_event(event)
                replayed += 1

        LOGGER.debug(
            "Loaded aggregate",
            extra={"aggregate_id": aggregate.id, "event_count": replayed},
        )

    async def _store(self, aggregate_id: str, event: Event[Any]) -> None:
        event_type = get_qualified_name(event.event_type)
        key = self.codec.key_for(event)

        try:
            record = self.codec.encode(event)
            await self.client.set(key, record)
        except (EventEncodingError, RedisError) as err:
            LOGGER.error(
                "Failed to store event",
                extra={"aggregate_id": aggregate_id, "event_type": event_type},
            )
            raise EventStorageFailedError(
                f'Failed to store event "{event_type}" for aggregate {aggregate_id}.',
                aggregate_id=aggregate_id,
                event_type=event_type,
            ) from err

        try:
            await self.client.zadd(aggregate_id, {key: epoch_microseconds(event.recorded_at)})
        except RedisError as err:
            LOGGER.error(
                "Failed to index event",
                extra={"aggregate_id": aggregate_id, "key": key},
            )
            raise EventStorageFailedError(
                f'Failed to store key "{key}" for aggregate {aggregate_id}.',
                aggregate_id=aggregate_id,
                event_type=event_type,
                key=key,
            ) from err

        LOGGER.debug(
            "Stored event",
            extra={"aggregate_id": aggregate_id, "event_type": event_type, "key": key},
        )

    async def _keys(self, aggregate_id: str) -> AsyncIterator[str]:
        """Yield the aggregate's event keys oldest first, one window at a time.

        Windows are consecutive rank ranges of ``key_range_limit`` members;
        a window shorter than that ends the stream.
        """
        start = 0
        while True:
            stop = start + self.key_range_limit - 1
            try:
                members = await self.client.zrange(aggregate_id, start, stop)
            except RedisError as err:
                LOGGER.error("Failed to fetch keys", extra={"aggregate_id": aggregate_id})
                raise EventRetrievalFailedError(
                    f"Failed to fetch keys for aggregate {aggregate_id}.",
                    aggregate_id=aggregate_id,
                ) from err

            for member in members:
                yield member.decode() if isinstance(member, bytes) else member

            if len(members) < self.key_range_limit:
                return
            start += self.key_range_limit
