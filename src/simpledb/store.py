"""
Main Store class implementation for the in-memory database.
"""

import threading
from typing import Optional

from .engine import EngineSnapshot, TransactionalEngine
from .logging import get_logger

logger = get_logger("store")


class Store:
    """
    A thread-safe in-memory key-value store with nested transactions.

    Every operation runs against a single ``TransactionalEngine`` while
    holding one exclusive lock, so no caller ever observes a half-applied
    commit or rollback.

    Example usage:
        store = Store()

        store.set("a", "10")
        store.begin()
        store.set("a", "20")
        store.num_equal_to("20")   # 1
        store.rollback()
        store.get("a")             # "10"

        # Commit flattens every open transaction
        store.begin()
        store.set("a", "30")
        store.begin()
        store.unset("a")
        store.commit()
        store.get("a")             # None
    """

    def __init__(self, engine: Optional[TransactionalEngine] = None) -> None:
        """
        Initialize the store.

        Args:
            engine: Optional engine to wrap. A fresh one is created if None.
        """
        self._engine = engine if engine is not None else TransactionalEngine()
        self._lock = threading.RLock()

    def set(self, key: str, value: str) -> None:
        """
        Set a key-value pair.

        The write lands in the innermost open transaction, or directly in
        the committed data when no transaction is open.

        Args:
            key: The key to set
            value: The value to associate with the key
        """
        with self._lock:
            self._engine.set(key, value)
            logger.debug("set", key=key, value=value, depth=self._engine.depth)

    def unset(self, key: str) -> None:
        """
        Remove the value of a key.

        Args:
            key: The key to unset
        """
        with self._lock:
            self._engine.unset(key)
            logger.debug("unset", key=key, depth=self._engine.depth)

    def get(self, key: str) -> Optional[str]:
        """
        Get the value for a key.

        Args:
            key: The key to retrieve

        Returns:
            The current value of the key, or None if it has no value
        """
        with self._lock:
            return self._engine.get(key)

    def num_equal_to(self, value: str) -> int:
        """
        Count the keys currently holding a value.

        Args:
            value: The value to count

        Returns:
            The number of keys whose current value equals ``value``
        """
        with self._lock:
            return self._engine.num_equal_to(value)

    def begin(self) -> int:
        """
        Begin a new transaction.

        Returns:
            The transaction depth after opening it
        """
        with self._lock:
            self._engine.begin()
            depth = self._engine.depth
            logger.debug("begin", depth=depth)
            return depth

    def commit(self) -> bool:
        """
        Commit all open transactions.

        Returns:
            True if transactions were committed, False if none was open
        """
        with self._lock:
            depth = self._engine.depth
            committed = self._engine.commit()
            if committed:
                logger.debug("commit", flattened=depth)
            else:
                logger.info("commit_without_transaction")
            return committed

    def rollback(self) -> bool:
        """
        Rollback the innermost transaction.

        Returns:
            True if a transaction was discarded, False if none was open
        """
        with self._lock:
            rolled_back = self._engine.rollback()
            if rolled_back:
                logger.debug("rollback", depth=self._engine.depth)
            else:
                logger.info("rollback_without_transaction")
            return rolled_back

    # Additional utility methods

    def has_active_transaction(self) -> bool:
        """
        Check if there's an open transaction.

        Returns:
            True if there's an open transaction, False otherwise
        """
        with self._lock:
            return self._engine.has_active_transaction()

    @property
    def transaction_depth(self) -> int:
        """Number of currently open transactions."""
        with self._lock:
            return self._engine.depth

    def inspect(self) -> EngineSnapshot:
        """
        Snapshot the internal structures (for diagnostics and tests).

        Returns:
            A deep copy of the engine state
        """
        with self._lock:
            return self._engine.inspect()

    def clear(self) -> None:
        """Drop all committed data and open transactions."""
        with self._lock:
            self._engine.clear()
            logger.debug("clear")

    def close(self) -> None:
        """
        Close the store.

        The data only lives in memory, so closing discards it.
        """
        self.clear()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
