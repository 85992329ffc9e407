"""Storage keys and JSON records for events kept in Redis.

A stored record looks like::

    {
        "eventClass": "billing.events.InvoiceWasCreated",
        "payload": {"number": "12-34", "items": [...]},
        "recordedAt": "2026-10-19T09:41:07+00:00",
        "microseconds": 123456
    }

``recordedAt`` is truncated to whole seconds, so ``microseconds`` must always
be read together with it to get the exact instant back.
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticSerializationError

from ...domain import Event
from ...events.describer import EventDescriber
from ...events.exceptions import EventDecodingError, EventEncodingError
from .type_loader import get_qualified_name, load_type

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MICROSECOND = timedelta(microseconds=1)


def epoch_microseconds(instant: datetime) -> int:
    """Whole microseconds between the Unix epoch and ``instant``.

    Computed with timedelta arithmetic, so the result is exact.
    """
    return (instant - EPOCH) // _ONE_MICROSECOND


class StoredRecord(BaseModel):
    """Durable form of one event."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    event_class: str = Field(alias="eventClass", min_length=1)
    payload: dict[str, Any]
    recorded_at: str = Field(alias="recordedAt", min_length=1)
    microseconds: int = Field(ge=0, le=999_999)

    @field_validator("payload", mode="before")
    @classmethod
    def empty_list_is_empty_payload(cls, value: Any) -> Any:
        # PHP json_encode writes an empty payload array as []
        if isinstance(value, list) and not value:
            return {}
        return value


class EventRecordCodec:
    """Derives storage keys and converts events to and from stored records.

    Attributes:
        describer: Naming strategy used for the readable part of each key.
    """

    __slots__ = ("describer",)

    def __init__(self, describer: EventDescriber):
        self.describer = describer

    def key_for(self, event: Event[Any]) -> str:
        """Storage key for ``event``: ``<aggregate_id>:<epoch µs>-<name>``.

        Example:
            >>> codec.key_for(event)
            '12-34:1792402867123456-invoice-was-created'
        """
        return (
            f"{event.aggregate_id}:"
            f"{epoch_microseconds(event.recorded_at)}-"
            f"{self.describer.describe(event)}"
        )

    def encode(self, event: Event[Any]) -> str:
        """Serialize ``event`` to its stored JSON record.

        Raises:
            EventEncodingError: If the payload cannot be serialized, including
                payloads holding NaN or infinite floats.
        """
        try:
            record = StoredRecord(
                event_class=get_qualified_name(event.event_type),
                payload=event.payload(),
                recorded_at=event.recorded_at.replace(microsecond=0).isoformat(),
                microseconds=event.recorded_at.microsecond,
            )
            return json.dumps(
                record.model_dump(mode="json", by_alias=True),
                allow_nan=False,
                separators=(",", ":"),
            )
        except (PydanticSerializationError, ValidationError, TypeError, ValueError) as err:
            raise EventEncodingError(
                f"Failed to encode payload of {get_qualified_name(event.event_type)}: {err}"
            ) from err

    def decode(self, aggregate_id: str, raw: bytes | str | None) -> Event[Any]:
        """Rebuild an event from its stored JSON record.

        The whole-second ``recordedAt`` is parsed first and its microsecond
        component is then replaced with the stored ``microseconds`` value.

        Raises:
            EventDecodingError: If the record is missing or malformed, or
                names an unknown event type.
        """
        if raw is None:
            raise EventDecodingError("Record is missing")

        try:
            record = StoredRecord.model_validate_json(raw)
        except ValidationError as err:
            raise EventDecodingError(f"Malformed event record: {err}") from err

        try:
            recorded_at = datetime.fromisoformat(record.recorded_at)
        except ValueError as err:
            raise EventDecodingError(f"Invalid recordedAt {record.recorded_at!r}") from err
        if recorded_at.tzinfo is None:
            raise EventDecodingError(f"recordedAt has no UTC offset: {record.recorded_at!r}")

        try:
            data_type = load_type(record.event_class)
        except Exception as err:
            raise EventDecodingError(f"Unknown event class {record.event_class!r}") from err

        if not issubclass(data_type, BaseModel):
            raise EventDecodingError(f"{record.event_class!r} is not an event data model")

        recorded_at = recorded_at.replace(microsecond=record.microseconds)
        try:
            return Event.from_payload(aggregate_id, data_type, record.payload, recorded_at)
        except ValidationError as err:
            raise EventDecodingError(
                f"Payload does not match {record.event_class}: {err}"
            ) from err
