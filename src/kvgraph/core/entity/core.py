"""Entity registry, decorator, and field classification.

Usage:
    @entity
    @dataclass
    class Address:
        id: Annotated[int, Id] = 0
        town: Annotated[str | None, Value] = None

    @entity(name="person")
    @dataclass
    class Person:
        id: Annotated[int, Id] = 0
        name: Annotated[str | None, Value] = None
        address: Annotated[Address | None, Reference] = None
        friends: Annotated[list["Person"] | None, Reference] = None

Field descriptors are built on first use rather than at decoration time, so
annotations may refer to types declared later in the module (or to the
entity itself).
"""

from __future__ import annotations

import dataclasses
import types
from collections.abc import Callable, Collection, Iterable
from typing import Annotated, Any, TypeVar, Union, get_args, get_origin, get_type_hints, overload

from kvgraph.core.entity.models import (
    EntityDescriptor,
    EntityTypeMeta,
    FieldDescriptor,
    FieldKind,
)
from kvgraph.core.entity.operations import container_shape
from kvgraph.core.errors import EntityValidationError

T = TypeVar("T")

_NOT_COLLECTIONS = (str, bytes, bytearray)


def _is_pydantic(cls: type) -> bool:
    """Check if class is a Pydantic model without importing pydantic.

    Args:
        cls: Class to check.

    Returns:
        True if class inherits from pydantic.BaseModel, False otherwise.
    """
    for base in cls.__mro__:
        if base.__module__.startswith("pydantic") and base.__name__ == "BaseModel":
            return True
    return False


def _strip_optional(tp: Any) -> Any:
    if get_origin(tp) in (Union, types.UnionType):
        args = [a for a in get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


def split_annotation(hint: Any) -> tuple[Any, list[FieldKind]]:
    """Peel ``Annotated`` and ``Optional`` layers off a field annotation.

    Args:
        hint: Resolved annotation, e.g. ``Annotated[str | None, Value]``.

    Returns:
        Tuple of (bare declared type, field markers found on any layer).
    """
    markers: list[FieldKind] = []
    tp = hint
    while True:
        if get_origin(tp) is Annotated:
            markers.extend(m for m in tp.__metadata__ if isinstance(m, FieldKind))
            tp = get_args(tp)[0]
            continue
        stripped = _strip_optional(tp)
        if stripped is tp:
            return tp, markers
        tp = stripped


def _collection_origin(tp: Any) -> Any:
    """Return the container type of a collection annotation, None for scalars."""
    origin = get_origin(tp) or tp
    if not isinstance(origin, type) or issubclass(origin, _NOT_COLLECTIONS):
        return None
    # Plain Iterable only: models that merely define __iter__ are scalars
    if origin is Iterable or issubclass(origin, Collection):
        return origin
    return None


def describe_field(name: str, hint: Any) -> FieldDescriptor | None:
    """Classify one field from its resolved annotation.

    Args:
        name: Attribute name.
        hint: Resolved annotation including ``Annotated`` extras.

    Returns:
        Field descriptor, or None for fields without a marker.

    Raises:
        EntityValidationError: If the field carries conflicting markers.
    """
    declared, markers = split_annotation(hint)
    kinds = set(markers)
    if not kinds:
        return None
    if len(kinds) > 1:
        names = ", ".join(sorted(k.name for k in kinds))
        raise EntityValidationError(f"field '{name}' has conflicting markers: {names}")
    kind = kinds.pop()

    container = _collection_origin(declared)
    if container is None:
        return FieldDescriptor(name=name, kind=kind, declared_type=declared, item_type=declared)

    args = get_args(declared)
    item_type = _strip_optional(args[0]) if args else Any
    return FieldDescriptor(
        name=name,
        kind=kind,
        declared_type=declared,
        item_type=item_type,
        container=container,
        shape=container_shape(container),
    )


def _field_hints(cls: type) -> list[tuple[str, Any]]:
    """Resolved annotations of the persisted attributes, in declaration order."""
    if _is_pydantic(cls):
        hints = []
        for name, info in cls.model_fields.items():  # type: ignore[attr-defined]
            hint = info.annotation
            if info.metadata:
                hint = Annotated[(hint, *info.metadata)]
            hints.append((name, hint))
        return hints

    resolved = get_type_hints(cls, localns={cls.__name__: cls}, include_extras=True)
    return [(f.name, resolved[f.name]) for f in dataclasses.fields(cls)]


class EntityRegistry:
    """Process-local registry of entity types and their field descriptors.

    Maps entity types to stable type names used as the first element of every
    store key, and caches the classified fields of each type.
    """

    def __init__(self) -> None:
        """Initialize empty entity registry."""
        self._by_type: dict[type, EntityTypeMeta] = {}
        self._by_name: dict[str, type] = {}
        self._descriptors: dict[type, EntityDescriptor] = {}

    def register(self, cls: type, name: str | None = None) -> EntityTypeMeta:
        """Register an entity type and return its metadata.

        Args:
            cls: Entity class to register.
            name: Type name used in store keys. Defaults to the fully
                qualified class name.

        Returns:
            Entity metadata including the type name.

        Raises:
            RuntimeError: If the type name is already taken by another class.
        """
        if cls in self._by_type:
            return self._by_type[cls]

        type_name = name or f"{cls.__module__}.{cls.__qualname__}"
        if type_name in self._by_name:
            existing = self._by_name[type_name]
            raise RuntimeError(f"Entity name collision: {cls} and {existing} use '{type_name}'")

        meta = EntityTypeMeta(type_name=type_name, entity_type=cls)
        self._by_type[cls] = meta
        self._by_name[type_name] = cls
        return meta

    def get_type(self, type_name: str) -> type | None:
        """Get entity class by its type name."""
        return self._by_name.get(type_name)

    def is_registered(self, cls: type) -> bool:
        """Check if a type is registered as an entity."""
        return cls in self._by_type

    def type_name(self, cls: type) -> str:
        """Get the store type name of a registered entity type.

        Raises:
            EntityValidationError: If the type is not registered.
        """
        meta = self._by_type.get(cls)
        if meta is None:
            raise EntityValidationError(f"{cls.__qualname__} is not a registered entity")
        return meta.type_name

    def describe(self, cls: type) -> EntityDescriptor:
        """Classify the fields of a registered entity type.

        The result is computed once per type and cached. Conflicting markers
        and unresolvable annotations are recorded as problems rather than
        raised, so the validator can report them with the entity's name.

        Args:
            cls: Registered entity class.

        Returns:
            Descriptor with the id field(s) and classified fields in order.

        Raises:
            EntityValidationError: If the type is not registered.
        """
        cached = self._descriptors.get(cls)
        if cached is not None:
            return cached

        meta = self._by_type.get(cls)
        if meta is None:
            raise EntityValidationError(f"{cls.__qualname__} is not a registered entity")

        descriptor = EntityDescriptor(meta=meta)
        try:
            hints = _field_hints(cls)
        except NameError as e:
            # Not cached: the missing name may be declared later in the module
            descriptor.problems.append(f"cannot resolve annotations: {e}")
            return descriptor

        for name, hint in hints:
            try:
                field = describe_field(name, hint)
            except EntityValidationError as e:
                descriptor.problems.append(str(e))
                continue
            if field is None:
                continue
            if field.kind is FieldKind.ID:
                descriptor.id_fields.append(field)
            else:
                descriptor.fields.append(field)

        self._descriptors[cls] = descriptor
        return descriptor


# Module-level registry instance
_registry = EntityRegistry()


def get_registry() -> EntityRegistry:
    """Access the global entity registry.

    Returns:
        The process-local EntityRegistry instance.
    """
    return _registry


@overload
def entity(cls: type[T]) -> type[T]: ...


@overload
def entity(cls: None = None, *, name: str | None = None) -> Callable[[type[T]], type[T]]: ...


def entity(
    cls: type[T] | None = None, *, name: str | None = None
) -> type[T] | Callable[[type[T]], type[T]]:
    """Register a dataclass or Pydantic model as an entity type.

    Supports three forms:
        @entity                       # bare decorator
        @entity()                     # parenthesized, no args
        @entity(name="person")        # explicit store type name

    Args:
        cls: The class to register, or None if called with arguments.
        name: Type name used in store keys instead of the qualified class name.

    Returns:
        Decorated class or decorator function.

    Raises:
        EntityValidationError: If class is neither a dataclass nor Pydantic model.

    Note:
        Apply @entity AFTER @dataclass.
    """

    def decorator(c: type[T]) -> type[T]:
        if not (dataclasses.is_dataclass(c) or _is_pydantic(c)):
            raise EntityValidationError(
                f"Entity {c.__name__} must be a dataclass or Pydantic model. "
                f"Did you forget @dataclass decorator?"
            )
        meta = _registry.register(c, name=name)
        c.__entity_meta__ = meta  # type: ignore[attr-defined]
        return c

    if cls is None:
        return decorator
    return decorator(cls)
