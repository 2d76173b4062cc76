"""
Async Store class implementation for the in-memory database.
"""

import asyncio
from typing import Optional

from .engine import EngineSnapshot, TransactionalEngine
from .logging import get_logger

logger = get_logger("async_store")


class AsyncStore:
    """
    An async in-memory key-value store with nested transactions.

    Same operations as ``Store``, as coroutines serialized by one
    ``asyncio.Lock``. The engine never awaits, so each operation runs to
    completion once the lock is held.

    Example usage:
        async with AsyncStore() as store:
            await store.begin()
            await store.set("a", "50")
            await store.begin()
            await store.set("a", "60")
            await store.rollback()
            await store.get("a")   # "50"
    """

    def __init__(self, engine: Optional[TransactionalEngine] = None) -> None:
        """
        Initialize the async store.

        Args:
            engine: Optional engine to wrap. A fresh one is created if None.
        """
        self._engine = engine if engine is not None else TransactionalEngine()
        self._lock = asyncio.Lock()

    async def set(self, key: str, value: str) -> None:
        """Set a key-value pair."""
        async with self._lock:
            self._engine.set(key, value)
            logger.debug("set", key=key, value=value, depth=self._engine.depth)

    async def unset(self, key: str) -> None:
        """Remove the value of a key."""
        async with self._lock:
            self._engine.unset(key)
            logger.debug("unset", key=key, depth=self._engine.depth)

    async def get(self, key: str) -> Optional[str]:
        """Get the value for a key, or None if it has no value."""
        async with self._lock:
            return self._engine.get(key)

    async def num_equal_to(self, value: str) -> int:
        """Count the keys whose current value equals ``value``."""
        async with self._lock:
            return self._engine.num_equal_to(value)

    async def begin(self) -> int:
        """Begin a new transaction and return the new depth."""
        async with self._lock:
            self._engine.begin()
            logger.debug("begin", depth=self._engine.depth)
            return self._engine.depth

    async def commit(self) -> bool:
        """
        Commit all open transactions.

        Returns:
            True if transactions were committed, False if none was open
        """
        async with self._lock:
            committed = self._engine.commit()
            if not committed:
                logger.info("commit_without_transaction")
            return committed

    async def rollback(self) -> bool:
        """
        Rollback the innermost transaction.

        Returns:
            True if a transaction was discarded, False if none was open
        """
        async with self._lock:
            rolled_back = self._engine.rollback()
            if not rolled_back:
                logger.info("rollback_without_transaction")
            return rolled_back

    # Additional utility methods

    def has_active_transaction(self) -> bool:
        """Check if there's an open transaction."""
        return self._engine.has_active_transaction()

    @property
    def transaction_depth(self) -> int:
        """Number of currently open transactions."""
        return self._engine.depth

    async def inspect(self) -> EngineSnapshot:
        """Snapshot the internal structures (for diagnostics and tests)."""
        async with self._lock:
            return self._engine.inspect()

    async def clear(self) -> None:
        """Drop all committed data and open transactions."""
        async with self._lock:
            self._engine.clear()

    async def close(self) -> None:
        """Close the store, discarding its in-memory data."""
        await self.clear()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
