"""Entity models: field markers, descriptors and metadata.

Field markers are used as ``typing.Annotated`` metadata on entity fields:

    @entity
    @dataclass
    class Person:
        id: Annotated[int, Id] = 0
        name: Annotated[str | None, Value] = None
        address: Annotated[Address | None, Reference] = None
        tags: Annotated[list[str] | None, Value] = None
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class FieldKind(Enum):
    """How a field is persisted."""

    ID = auto()  # Surrogate identifier, one per entity
    VALUE = auto()  # Stored directly through a type converter
    REFERENCE = auto()  # Stored as the referred entity's id


Id = FieldKind.ID
Value = FieldKind.VALUE
Reference = FieldKind.REFERENCE


class Shape(Enum):
    """Container shape of a declared field type."""

    SCALAR = auto()
    SEQUENCE = auto()
    SET = auto()


@dataclass(slots=True, frozen=True)
class FieldDescriptor:
    """Derived description of one classified entity field.

    Attributes:
        name: Attribute name on the entity.
        kind: Persistence kind from the field's marker.
        declared_type: Annotated type with ``Optional`` stripped.
        item_type: Element type for collections, the declared type otherwise.
        container: Collection origin (``list``, ``set``, ``Sequence``...) or None.
        shape: SEQUENCE or SET for mappable collections, None for collections
            with no concrete container, SCALAR otherwise.
    """

    name: str
    kind: FieldKind
    declared_type: Any
    item_type: Any
    container: Any = None
    shape: Shape | None = Shape.SCALAR

    @property
    def is_collection(self) -> bool:
        return self.container is not None

    def get(self, entity: Any) -> Any:
        return getattr(entity, self.name, None)

    def set(self, entity: Any, value: Any) -> None:
        setattr(entity, self.name, value)


@dataclass(slots=True, frozen=True)
class EntityTypeMeta:
    """Metadata for registered entity types."""

    type_name: str
    entity_type: type


@dataclass(slots=True)
class EntityDescriptor:
    """Classified fields of one entity type, in declaration order.

    ``problems`` collects annotation combinations that cannot be persisted;
    the validator turns them into errors.
    """

    meta: EntityTypeMeta
    id_fields: list[FieldDescriptor] = field(default_factory=list)
    fields: list[FieldDescriptor] = field(default_factory=list)
    problems: list[str] = field(default_factory=list)

    @property
    def id_field(self) -> FieldDescriptor:
        return self.id_fields[0]

    def classified(self, kind: FieldKind | None = None) -> list[FieldDescriptor]:
        if kind is None:
            return list(self.fields)
        return [f for f in self.fields if f.kind is kind]

