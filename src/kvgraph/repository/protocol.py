"""Repository protocols: what callers of the engine depend on."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

from kvgraph.core.types import Shell

T = TypeVar("T")


@runtime_checkable
class EntityWriter(Protocol):
    """Persists an entity graph and returns the root id."""

    def write(self, entity: Any) -> int: ...


@runtime_checkable
class EntityReader(Protocol):
    """Hydrates a caller-supplied shell from the store."""

    def get(self, shell: Shell[T], entity_id: int) -> T: ...


@runtime_checkable
class EntityEraser(Protocol):
    """Removes one entity's stored fields."""

    def delete(self, entity: Any) -> None: ...
