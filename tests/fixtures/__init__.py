"""Shared test domain and store doubles."""

from .in_memory_redis import InMemoryRedis
from .invoicing import (
    Billing,
    Invoice,
    InvoiceWasCreated,
    Item,
    PaymentTransaction,
    PaymentTransactionWasCompleted,
    PaymentTransactionWasStarted,
)

__all__ = [
    "Billing",
    "InMemoryRedis",
    "Invoice",
    "InvoiceWasCreated",
    "Item",
    "PaymentTransaction",
    "PaymentTransactionWasCompleted",
    "PaymentTransactionWasStarted",
]
