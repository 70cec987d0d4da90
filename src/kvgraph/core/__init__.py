"""Core functionalities: stateless protocols and primitives.

Architecture Note:
    core/ contains pure functionalities with no store I/O of their own:
    field markers and classification, collection materialization, entity
    validation and identity handling. For stateful services, see storage/
    and repository/.
"""

from kvgraph.core.entity import (
    EntityDescriptor,
    EntityRegistry,
    EntityTypeMeta,
    EntityValidator,
    FieldDescriptor,
    FieldKind,
    Id,
    Reference,
    RegistryValidator,
    Shape,
    Value,
    entity,
    get_registry,
    materialize,
)
from kvgraph.core.errors import (
    ConverterError,
    EntityValidationError,
    FieldAccessError,
    InvalidIdError,
    KvGraphError,
    MissingEntityError,
    UnsupportedCollectionTypeError,
)
from kvgraph.core.identity import assign_id, read_id, set_id
from kvgraph.core.types import Shell

__all__ = [
    # Types
    "Shell",
    # Entity
    "entity",
    "get_registry",
    "EntityRegistry",
    "EntityTypeMeta",
    "EntityDescriptor",
    "FieldDescriptor",
    "FieldKind",
    "Id",
    "Value",
    "Reference",
    "Shape",
    "materialize",
    # Validation
    "EntityValidator",
    "RegistryValidator",
    # Identity
    "read_id",
    "set_id",
    "assign_id",
    # Errors
    "KvGraphError",
    "EntityValidationError",
    "UnsupportedCollectionTypeError",
    "MissingEntityError",
    "FieldAccessError",
    "InvalidIdError",
    "ConverterError",
]
