"""
SimpleDB

An in-memory key-value store with nested transactions, O(1) value counts
and a line-oriented command protocol.
"""

from .engine import TransactionalEngine, EngineSnapshot, UNSET
from .store import Store
from .async_store import AsyncStore
from .commands import CommandDispatcher, process_input
from .exceptions import (
    StoreError,
    CommandError,
    UnknownCommandError,
    InvalidArgumentsError,
)

__version__ = "0.1.0"
__all__ = [
    "TransactionalEngine",
    "EngineSnapshot",
    "UNSET",
    "Store",
    "AsyncStore",
    "CommandDispatcher",
    "process_input",
    "StoreError",
    "CommandError",
    "UnknownCommandError",
    "InvalidArgumentsError",
]
