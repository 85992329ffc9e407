"""Tests for event applier routing."""

import pytest
from pydantic import BaseModel

from ledgerline.domain import Aggregate, Event
from ledgerline.routing import MessageRouter, applies_event


class CounterIncremented(BaseModel):
    by: int


class CounterReset(BaseModel):
    pass


class Counter(Aggregate):
    value: int = 0
    reset_at: object = None

    @applies_event
    def apply_incremented(self, evt: CounterIncremented) -> None:
        self.value += evt.by

    @applies_event
    def apply_reset(self, event: Event[CounterReset]) -> None:
        self.value = 0
        self.reset_at = event.recorded_at


class DoublingCounter(Counter):
    @applies_event
    def apply_incremented(self, evt: CounterIncremented) -> None:
        self.value += evt.by * 2


def test_payload_applier_receives_event_data():
    counter = Counter(id="c-1")

    counter.emit(CounterIncremented(by=3))
    counter.emit(CounterIncremented(by=4))

    assert counter.value == 7


def test_wrapper_applier_receives_full_event():
    counter = Counter(id="c-1")
    counter.emit(CounterIncremented(by=3))

    reset = counter.emit(CounterReset())

    assert counter.value == 0
    assert counter.reset_at == reset.recorded_at


def test_wrapper_applier_requires_event():
    counter = Counter(id="c-1")

    with pytest.raises(TypeError):
        counter.apply(CounterReset())


def test_subclass_applier_overrides_inherited_one():
    counter = DoublingCounter(id="c-1")

    counter.emit(CounterIncremented(by=3))

    assert counter.value == 6


def test_applier_without_annotation_is_rejected():
    with pytest.raises(ValueError, match="must have a type annotation"):

        @applies_event
        def apply_anything(self, evt) -> None:  # type: ignore[no-untyped-def]
            pass


def test_unparametrized_event_annotation_is_rejected():
    with pytest.raises(ValueError, match="must have a type argument"):

        @applies_event
        def apply_anything(self, evt: Event) -> None:  # type: ignore[type-arg]
            pass


def test_router_ignores_unregistered_types():
    router = MessageRouter()

    assert router.route(object(), CounterReset()) is None
