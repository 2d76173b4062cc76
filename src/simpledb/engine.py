"""
Transactional state engine for the in-memory database.
"""

import copy
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union


class _Unset:
    """Marker recorded in a transaction frame when a key is unset."""

    _instance: Optional['_Unset'] = None

    def __new__(cls) -> '_Unset':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __copy__(self) -> '_Unset':
        return self

    def __deepcopy__(self, memo) -> '_Unset':
        return self

    def __reduce__(self):
        return (_Unset, ())


UNSET = _Unset()

FrameValue = Union[str, _Unset]
Frame = Dict[str, FrameValue]


@dataclass(frozen=True)
class EngineSnapshot:
    """Read-only copy of every internal structure of the engine."""
    db: Dict[str, str] = field(default_factory=dict)
    transactions: List[Frame] = field(default_factory=list)
    transaction_indices_by_key: Dict[str, List[int]] = field(default_factory=dict)
    current_values: Dict[str, str] = field(default_factory=dict)
    value_counts: Dict[str, int] = field(default_factory=dict)

    @property
    def depth(self) -> int:
        """Number of open transactions at the time of the snapshot."""
        return len(self.transactions)


class TransactionalEngine:
    """
    Key-value state with nested transactions.

    Committed values live in ``db``. Every open transaction is a frame on
    ``transactions`` holding the writes made while it was the innermost one.
    Two derived indices, ``current_values`` and ``value_counts``, are kept in
    step with every mutation so that ``get`` and ``num_equal_to`` never have
    to walk the frames.
    """

    def __init__(self) -> None:
        self.db: Dict[str, str] = {}
        self.transactions: List[Frame] = []
        self.transaction_indices_by_key: Dict[str, List[int]] = {}
        self.current_values: Dict[str, str] = {}
        self.value_counts: Dict[str, int] = {}

    @property
    def depth(self) -> int:
        """Number of open transactions."""
        return len(self.transactions)

    def has_active_transaction(self) -> bool:
        """Check if there's an open transaction."""
        return len(self.transactions) > 0

    def begin(self) -> None:
        """Open a new, empty transaction frame."""
        self.transactions.append({})

    def commit(self) -> bool:
        """
        Commit every open transaction at once.

        The current-value cache already holds the most recent write of each
        pending key, so it is what gets applied to ``db``. The cache and the
        value counts describe the post-commit state already and stay as they
        are.

        Returns:
            False if there was no open transaction, True otherwise
        """
        if not self.transactions:
            return False

        for key in self.transaction_indices_by_key:
            self._write_db(key, self.current_values.get(key, UNSET))

        self.transactions = []
        self.transaction_indices_by_key = {}
        return True

    def rollback(self) -> bool:
        """
        Discard the innermost transaction.

        Returns:
            False if there was no open transaction, True otherwise
        """
        if not self.transactions:
            return False

        frame = self.transactions.pop()

        for key in frame:
            indices = self.transaction_indices_by_key[key]
            indices.pop()

            if indices:
                reverted = self.transactions[indices[-1]][key]
            else:
                del self.transaction_indices_by_key[key]
                reverted = self.db.get(key, UNSET)

            self._update_current_value(key, reverted)

        return True

    def get(self, key: str) -> Optional[str]:
        """Get the current value of a key, or None if it has none."""
        return self.current_values.get(key)

    def set(self, key: str, value: FrameValue) -> None:
        """
        Set a key in the innermost transaction, or in ``db`` if none is open.

        ``value`` may be ``UNSET``, which removes the key's value.
        """
        if self.transactions:
            innermost = len(self.transactions) - 1
            self.transactions[innermost][key] = value

            indices = self.transaction_indices_by_key.setdefault(key, [])
            # repeated writes inside one frame keep a single index entry
            if not indices or indices[-1] != innermost:
                indices.append(innermost)
        else:
            self._write_db(key, value)

        self._update_current_value(key, value)

    def unset(self, key: str) -> None:
        """Unset a key."""
        self.set(key, UNSET)

    def num_equal_to(self, value: str) -> int:
        """Count the keys whose current value equals ``value``."""
        return self.value_counts.get(value, 0)

    def clear(self) -> None:
        """Drop all committed data and open transactions."""
        self.db = {}
        self.transactions = []
        self.transaction_indices_by_key = {}
        self.current_values = {}
        self.value_counts = {}

    def inspect(self) -> EngineSnapshot:
        """Take a deep copy of the internal structures."""
        return EngineSnapshot(
            db=dict(self.db),
            transactions=[dict(frame) for frame in self.transactions],
            transaction_indices_by_key=copy.deepcopy(self.transaction_indices_by_key),
            current_values=dict(self.current_values),
            value_counts=dict(self.value_counts),
        )

    def _write_db(self, key: str, value: FrameValue) -> None:
        if value is UNSET:
            self.db.pop(key, None)
        else:
            self.db[key] = value

    def _update_current_value(self, key: str, value: FrameValue) -> None:
        previous = self.current_values.get(key, UNSET)
        if previous == value:
            return

        if previous is not UNSET:
            remaining = self.value_counts[previous] - 1
            if remaining:
                self.value_counts[previous] = remaining
            else:
                del self.value_counts[previous]

        if value is UNSET:
            del self.current_values[key]
        else:
            self.current_values[key] = value
            self.value_counts[value] = self.value_counts.get(value, 0) + 1
