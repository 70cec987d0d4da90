"""Local in-memory key-value client.

Simple dict-based client with redis-like semantics, suitable for
single-process use and testing.

Usage:
    client = LocalClient()
    store = KeyValueStore(client)
    repo = Repository(store=store)
"""

from __future__ import annotations

import pickle  # nosec B403 - Used only for local testing/prototyping, not production
import threading
from collections.abc import Iterable
from typing import Any


class LocalClient:
    """In-memory KeyValueClient backed by a single dict.

    Structure:
        _data[key] = bytes | list[bytes] | set[bytes]

    All operations hold one lock, so counters are atomic and single keys are
    never read half-written.
    """

    def __init__(self) -> None:
        """Initialize empty client."""
        self._data: dict[str, Any] = {}
        self._lock = threading.RLock()

    def _typed(self, key: str, kind: type) -> Any:
        """Get the value at key if present, checking its kind."""
        value = self._data.get(key)
        if value is not None and not isinstance(value, kind):
            raise TypeError(f"key '{key}' holds {type(value).__name__}, not {kind.__name__}")
        return value

    def get(self, key: str) -> bytes | None:
        """Get a string value.

        Args:
            key: Key to read.

        Returns:
            Stored bytes, or None if the key is absent.
        """
        with self._lock:
            return self._typed(key, bytes)

    def set(self, key: str, value: bytes) -> None:
        """Set a string value, replacing whatever the key held."""
        with self._lock:
            self._data[key] = bytes(value)

    def exists(self, key: str) -> bool:
        """Check whether a key of any kind exists."""
        with self._lock:
            return key in self._data

    def delete(self, key: str) -> bool:
        """Delete a key of any kind.

        Returns:
            True if the key existed, False otherwise.
        """
        with self._lock:
            return self._data.pop(key, None) is not None

    def incr(self, key: str) -> int:
        """Atomically increment an integer counter.

        Missing counters start at 0, so the first call returns 1.

        Returns:
            The incremented value.
        """
        with self._lock:
            current = self._typed(key, bytes)
            value = int(current) + 1 if current is not None else 1
            self._data[key] = str(value).encode("ascii")
            return value

    def rpush(self, key: str, values: Iterable[bytes]) -> int:
        """Append values to a list, creating it if needed.

        Returns:
            The new list length.
        """
        with self._lock:
            items = list(values)
            current = self._typed(key, list)
            if current is None:
                if not items:
                    return 0
                current = self._data[key] = []
            current.extend(items)
            return len(current)

    def lrange(self, key: str, start: int = 0, stop: int = -1) -> list[bytes]:
        """Get list items from start to stop inclusive.

        Returns:
            Copy of the requested slice, empty if the key is absent.
        """
        with self._lock:
            current = self._typed(key, list) or []
            end = None if stop == -1 else stop + 1
            return list(current[start:end])

    def sadd(self, key: str, values: Iterable[bytes]) -> int:
        """Add members to a set, creating it if needed.

        Returns:
            Number of members that were not already present.
        """
        with self._lock:
            items = set(values)
            current = self._typed(key, set)
            if current is None:
                if not items:
                    return 0
                current = self._data[key] = set()
            added = len(items - current)
            current.update(items)
            return added

    def smembers(self, key: str) -> set[bytes]:
        """Get a copy of all set members, empty if the key is absent."""
        with self._lock:
            return set(self._typed(key, set) or ())

    def keys(self) -> list[str]:
        """List all keys (for debugging and tests)."""
        with self._lock:
            return list(self._data)

    def snapshot(self) -> bytes:
        """Pickle entire state for serialization.

        Not efficient - use only for testing/prototyping, not production.

        Returns:
            Pickled bytes of client state.
        """
        with self._lock:
            return pickle.dumps(self._data)

    def restore(self, data: bytes) -> None:
        """Restore from pickle snapshot.

        Args:
            data: Pickled bytes from previous snapshot() call.
        """
        state = pickle.loads(data)  # nosec B301 - Used only for local testing, not production
        with self._lock:
            self._data = state
