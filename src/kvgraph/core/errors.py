"""Exception hierarchy shared by the core, storage and repository layers."""

from __future__ import annotations

from typing import Any


class KvGraphError(Exception):
    """Base class for all kvgraph errors."""

    pass


class EntityValidationError(KvGraphError, TypeError):
    """Raised when an entity type fails structural validation."""

    pass


class UnsupportedCollectionTypeError(EntityValidationError):
    """Raised when a declared collection type has no concrete container."""

    pass


class ConverterError(KvGraphError, TypeError):
    """Raised when a value cannot be encoded or decoded for its declared type."""

    pass


class InvalidIdError(KvGraphError, ValueError):
    """Raised when an operation needs an assigned id and the entity has none."""

    def __init__(self, entity_type: type, entity_id: Any):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type.__qualname__}, invalid id: {entity_id}")


class MissingEntityError(KvGraphError, LookupError):
    """Raised when no entity is stored for a (type, id) pair."""

    def __init__(self, entity_type: type, entity_id: int):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"No {entity_type.__qualname__} stored with id {entity_id}")


class FieldAccessError(KvGraphError):
    """Raised when reading or writing a single field fails.

    The original exception is chained as ``__cause__``.
    """

    def __init__(self, action: str, entity_type: type, entity_id: int, field_name: str):
        self.action = action
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.field_name = field_name
        super().__init__(
            f"error {action} {entity_type.__qualname__} - {entity_id} - {field_name}"
        )
