"""Storage protocols for swappable backends.

Two layers:
- Store: entity-aware adapter the repository talks to. Every call is keyed by
  (entity type, entity id, field), and encoding is the adapter's business.
- KeyValueClient: redis-like primitives a Store can be built on.

Usage:
    client = LocalClient()
    store = KeyValueStore(client)
    repo = Repository(store=store)
"""

from __future__ import annotations

from collections.abc import Collection, Iterable
from typing import Any, Protocol, runtime_checkable

from kvgraph.core.entity.models import FieldDescriptor


@runtime_checkable
class Store(Protocol):
    """Entity-level key-value operations consumed by the repository.

    Implementations must allocate ids atomically per entity type and must not
    return torn reads for a single field key.
    """

    def next_id(self, entity_type: type) -> int:
        """Atomically allocate a fresh positive id for a type."""
        ...

    def write_id(self, entity: Any, entity_id: int) -> None:
        """Persist the (type, id) existence marker."""
        ...

    def remove_id(self, entity: Any, entity_id: int) -> None:
        """Remove the (type, id) existence marker."""
        ...

    def exists(self, entity: Any, entity_id: int) -> bool:
        """Check the (type, id) existence marker."""
        ...

    def has_key(self, entity_type: type, entity_id: int, field: FieldDescriptor) -> bool:
        """Check whether a field-level value is stored."""
        ...

    def write(self, entity: Any, entity_id: int, field: FieldDescriptor) -> None:
        """Persist a scalar Value field read from the entity."""
        ...

    def read_value(self, entity: Any, entity_id: int, field: FieldDescriptor) -> Any:
        """Read and decode a scalar Value field."""
        ...

    def write_collection(
        self,
        entity: Any,
        collection: Collection[Any],
        entity_id: int,
        field: FieldDescriptor,
    ) -> None:
        """Persist a Value collection, replacing any stored one."""
        ...

    def read_values(
        self,
        entity: Any,
        entity_id: int,
        field: FieldDescriptor,
        into: list[Any] | set[Any],
    ) -> None:
        """Read and decode a Value collection into the given container."""
        ...

    def write_reference(
        self, entity: Any, field: FieldDescriptor, entity_id: int, referred_id: int
    ) -> None:
        """Persist the id of the entity a scalar Reference field points to."""
        ...

    def get_referred_id(self, entity: Any, entity_id: int, field: FieldDescriptor) -> int:
        """Read the id stored for a scalar Reference field."""
        ...

    def write_reference_collection(
        self, entity: Any, field: FieldDescriptor, entity_id: int, ids: list[int]
    ) -> None:
        """Persist the ordered ids of a Reference collection, replacing any stored one."""
        ...

    def get_referred_ids(self, entity: Any, entity_id: int, field: FieldDescriptor) -> list[int]:
        """Read the ids of a Reference collection in stored order."""
        ...

    def delete(self, entity: Any, entity_id: int, field: FieldDescriptor) -> None:
        """Remove one field-level stored key."""
        ...


@runtime_checkable
class KeyValueClient(Protocol):
    """Minimal redis-like client. Keys are str, stored items are bytes."""

    def get(self, key: str) -> bytes | None:
        """Get a string value, None if absent."""
        ...

    def set(self, key: str, value: bytes) -> None:
        """Set a string value."""
        ...

    def exists(self, key: str) -> bool:
        """Check whether a key of any kind exists."""
        ...

    def delete(self, key: str) -> bool:
        """Delete a key of any kind. Returns True if it existed."""
        ...

    def incr(self, key: str) -> int:
        """Atomically increment an integer counter and return the new value."""
        ...

    def rpush(self, key: str, values: Iterable[bytes]) -> int:
        """Append values to a list. Returns the new length."""
        ...

    def lrange(self, key: str, start: int = 0, stop: int = -1) -> list[bytes]:
        """Get list items from start to stop inclusive (negative indices count from the end)."""
        ...

    def sadd(self, key: str, values: Iterable[bytes]) -> int:
        """Add members to a set. Returns the number of new members."""
        ...

    def smembers(self, key: str) -> set[bytes]:
        """Get all set members."""
        ...
