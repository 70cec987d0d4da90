"""Entity functionality: markers, registry, decorator, classification and validation."""

from kvgraph.core.entity.core import (
    EntityRegistry,
    describe_field,
    entity,
    get_registry,
    split_annotation,
)
from kvgraph.core.entity.models import (
    EntityDescriptor,
    EntityTypeMeta,
    FieldDescriptor,
    FieldKind,
    Id,
    Reference,
    Shape,
    Value,
)
from kvgraph.core.entity.operations import container_shape, insert, materialize
from kvgraph.core.entity.validation import EntityValidator, RegistryValidator

__all__ = [
    # Models
    "FieldKind",
    "Id",
    "Value",
    "Reference",
    "Shape",
    "FieldDescriptor",
    "EntityTypeMeta",
    "EntityDescriptor",
    # Core
    "entity",
    "get_registry",
    "EntityRegistry",
    "describe_field",
    "split_annotation",
    # Operations
    "container_shape",
    "materialize",
    "insert",
    # Validation
    "EntityValidator",
    "RegistryValidator",
]
