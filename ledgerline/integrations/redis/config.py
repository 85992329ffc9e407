"""Redis configuration using pydantic-settings."""

from functools import cached_property

from pydantic import Field
from pydantic_settings import BaseSettings
from redis.asyncio import Redis

KEY_RANGE_LIMIT = 25


class RedisConfiguration(BaseSettings):
    """Configuration and factory for Redis resources.

    All settings can be configured via environment variables with the
    LEDGERLINE_REDIS_ prefix. For example:
    - LEDGERLINE_REDIS_URI=redis://localhost:6379/0
    - LEDGERLINE_REDIS_KEY_RANGE_LIMIT=50

    The configuration also acts as a factory, providing a lazily created
    client that is closed on shutdown.

    Attributes:
        uri: Redis connection URI.
        key_range_limit: Number of sorted-set members fetched per window
            while replaying an aggregate.

    Example:
        >>> config = RedisConfiguration()
        >>> store = RedisEventStore.from_configuration(config)
        >>> await store.load(invoice)
        >>> await config.on_shutdown()
    """

    uri: str = "redis://localhost:6379/0"
    key_range_limit: int = Field(default=KEY_RANGE_LIMIT, ge=1)

    model_config = {"env_prefix": "LEDGERLINE_REDIS_"}

    @cached_property
    def client(self) -> Redis:
        """Get the async Redis client.

        The client is lazily created and cached for reuse.
        """
        return Redis.from_url(self.uri)

    async def on_startup(self) -> None:
        """Called when the application starts.

        No-op for Redis - connections are established lazily.
        """
        pass

    async def on_shutdown(self) -> None:
        """Called when the application shuts down.

        Closes the Redis client if it was created.
        """
        if "client" in self.__dict__:
            await self.client.aclose()
            del self.__dict__["client"]
