"""
Store manager for handling named store instances.
"""
import threading
from typing import Dict, List

from simpledb import Store


class StoreManager:
    """Keeps one Store per name, created on first use."""

    def __init__(self) -> None:
        self._stores: Dict[str, Store] = {}
        self._lock = threading.Lock()

    def get_store(self, name: str) -> Store:
        """Get or create the store with the given name."""
        with self._lock:
            if name not in self._stores:
                self._stores[name] = Store()
            return self._stores[name]

    def store_names(self) -> List[str]:
        """Names of the stores that currently exist."""
        with self._lock:
            return sorted(self._stores)

    def close_store(self, name: str) -> bool:
        """Close and remove a store instance."""
        with self._lock:
            store = self._stores.pop(name, None)
        if store is None:
            return False
        store.close()
        return True

    def close_all_stores(self) -> None:
        """Close all store instances."""
        for name in self.store_names():
            self.close_store(name)


# Global store manager instance
store_manager = StoreManager()
