"""Tests for event naming strategies."""

import pytest
from pydantic import BaseModel

from ledgerline.domain import Event
from ledgerline.events import KebabCase
from tests.fixtures import InvoiceWasCreated, PaymentTransactionWasCompleted


class HTTPRequestWasSent(BaseModel):
    pass


class Item2WasAdded(BaseModel):
    pass


@pytest.mark.parametrize(
    ("data", "expected"),
    [
        (InvoiceWasCreated(number="12-34", items=[]), "invoice-was-created"),
        (PaymentTransactionWasCompleted(), "payment-transaction-was-completed"),
        (HTTPRequestWasSent(), "http-request-was-sent"),
        (Item2WasAdded(), "item2-was-added"),
    ],
)
def test_kebab_case_describes_data_class(data: BaseModel, expected: str):
    event = Event(aggregate_id="12-34", data=data)

    assert KebabCase().describe(event) == expected
