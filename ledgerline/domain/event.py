from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

T = TypeVar("T", bound=BaseModel)
M = TypeVar("M", bound=BaseModel)


def utc_now() -> datetime:
    """Get the current UTC timestamp.

    Returns:
        Current datetime with UTC timezone information

    Note:
        Used as default_factory for Event.recorded_at to ensure all
        events are timestamped in UTC regardless of system timezone.
    """
    return datetime.now(tz=timezone.utc)


class Event(BaseModel, Generic[T]):
    """Immutable record of a state change in an aggregate.

    Each event represents a fact that occurred in the past. Events are:

    - **Immutable**: Once created, events cannot be modified
    - **Typed**: The class of ``data`` is the event's type discriminator
    - **Timestamped**: ``recorded_at`` is timezone-aware with microsecond
      resolution, and orders events within an aggregate's stream

    Type Parameters:
        T: Pydantic BaseModel subclass defining the event data schema

    Attributes:
        aggregate_id: ID of the aggregate that produced this event
        data: Typed event data (e.g., InvoiceWasCreated)
        recorded_at: When the event occurred

    Note:
        Events are typically created by aggregates via ``emit()``, or
        rebuilt from storage via ``from_payload()``.

    Examples:
        >>> event = Event(aggregate_id="12-34", data=PaymentTransactionWasCompleted())
        >>> event.payload()
        {}
    """

    model_config = ConfigDict(frozen=True)

    aggregate_id: str = Field(description="ID of the aggregate that produced this event")
    data: T = Field(description="Typed event data conforming to schema T")
    recorded_at: AwareDatetime = Field(
        default_factory=utc_now,
        description="When the event occurred, with microsecond precision",
    )

    @property
    def event_type(self) -> type[BaseModel]:
        """The concrete type of the event data."""
        return type(self.data)

    def payload(self) -> dict[str, Any]:
        """Dump the event data to a JSON-compatible mapping.

        Raises:
            pydantic_core.PydanticSerializationError: If a value in the
                data cannot be serialized.
        """
        return self.data.model_dump(mode="json")

    @classmethod
    def from_payload(
        cls,
        aggregate_id: str,
        data_type: type[M],
        payload: Mapping[str, Any],
        recorded_at: datetime,
    ) -> "Event[M]":
        """Rebuild an event from its stored parts.

        Args:
            aggregate_id: ID of the aggregate the event belongs to
            data_type: The event data class named by the discriminator
            payload: Field values to validate into ``data_type``
            recorded_at: The exact instant the event was recorded

        Raises:
            pydantic.ValidationError: If the payload does not fit ``data_type``.
        """
        return cls(
            aggregate_id=aggregate_id,
            data=data_type.model_validate(payload),
            recorded_at=recorded_at,
        )
