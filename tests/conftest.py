"""Central test fixtures - imports from the shared invoicing domain."""

import pytest

from ledgerline.integrations.redis import RedisEventStore
from tests.fixtures import InMemoryRedis, Invoice, Item


@pytest.fixture
def aggregate_id() -> str:
    """The invoice number used as aggregate ID."""
    return "12-34"


@pytest.fixture
def items() -> list[Item]:
    """A product line and a shipping line."""
    return [
        Item(reference="prod.123.456", description="Product", quantity=3, price=5.95, tax=21.0),
        Item(reference=None, description="Shipping", quantity=1, price=4.95, tax=0.0),
    ]


@pytest.fixture
def invoice(aggregate_id: str, items: list[Item]) -> Invoice:
    """An invoice with three uncommitted events: created, payment started, payment completed."""
    invoice = Invoice.create(aggregate_id, *items)
    invoice.start_payment_transaction("Manual", 10.0)
    invoice.complete_payment_transaction()
    return invoice


@pytest.fixture
def redis_client() -> InMemoryRedis:
    """Create an in-memory Redis double."""
    return InMemoryRedis()


@pytest.fixture
def event_store(redis_client: InMemoryRedis) -> RedisEventStore:
    """Create a RedisEventStore on top of the in-memory double."""
    return RedisEventStore(redis_client)
