"""Tests for qualified-name type loading."""

import pytest

from ledgerline.domain import Event
from ledgerline.integrations.redis.type_loader import get_qualified_name, load_type
from tests.fixtures import Billing, InvoiceWasCreated


def test_get_qualified_name():
    assert get_qualified_name(InvoiceWasCreated) == "tests.fixtures.invoicing.InvoiceWasCreated"


def test_load_type_round_trips_qualified_name():
    assert load_type(get_qualified_name(InvoiceWasCreated)) is InvoiceWasCreated
    assert load_type("ledgerline.domain.event.Event") is Event


def test_load_type_resolves_nested_class():
    qualified_name = get_qualified_name(Billing.InvoiceWasVoided)

    assert qualified_name == "tests.fixtures.invoicing.Billing.InvoiceWasVoided"
    assert load_type(qualified_name) is Billing.InvoiceWasVoided


@pytest.mark.parametrize(
    "qualified_name",
    [
        "NoModule",
        "nonexistent.module.SomeClass",
        "tests.fixtures.invoicing.Missing",
        "tests.fixtures.invoicing.applies_event",
        "tests.fixtures.invoicing.Billing.Missing",
    ],
)
def test_load_type_rejects_unknown_names(qualified_name: str):
    with pytest.raises(ImportError):
        load_type(qualified_name)


def test_load_type_reports_module_that_fails_to_import():
    with pytest.raises(ImportError) as exc_info:
        load_type("tests.fixtures.broken_events.SomethingHappened")

    assert isinstance(exc_info.value.__cause__, RuntimeError)
