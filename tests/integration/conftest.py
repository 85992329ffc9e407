"""Pytest fixtures for Redis integration tests."""

from collections.abc import AsyncIterator
from uuid import uuid4

import pytest
import pytest_asyncio
from redis.exceptions import RedisError

from ledgerline.integrations.redis import RedisConfiguration

# Assumes a Redis container is running locally on port 6379
LOCAL_REDIS_URI = "redis://localhost:6379/15"


@pytest_asyncio.fixture
async def redis_config() -> AsyncIterator[RedisConfiguration]:
    """Create a RedisConfiguration pointing to local Redis, skipping when it is down."""
    config = RedisConfiguration(uri=LOCAL_REDIS_URI)
    try:
        await config.client.ping()
    except (RedisError, OSError):
        await config.on_shutdown()
        pytest.skip(f"Redis is not reachable at {LOCAL_REDIS_URI}")
    try:
        yield config
    finally:
        await config.on_shutdown()


@pytest.fixture
def aggregate_id() -> str:
    """A unique invoice number so runs never see each other's streams."""
    return f"12-34-{uuid4().hex}"
