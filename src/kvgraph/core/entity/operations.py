"""Collection materialization: pure functions mapping declared container kinds.

Declared sequence-like types are read back into a ``list`` in store order,
set-like types into a ``set``. Every other collection kind is a hard failure.
"""

from __future__ import annotations

from collections.abc import (
    Callable,
    Collection,
    Iterable,
    MutableSequence,
    MutableSet,
    Sequence,
)
from collections.abc import Set as AbstractSet
from typing import Any

from kvgraph.core.entity.models import FieldDescriptor, Shape
from kvgraph.core.errors import UnsupportedCollectionTypeError

_SHAPES: dict[Any, Shape] = {
    list: Shape.SEQUENCE,
    Sequence: Shape.SEQUENCE,
    MutableSequence: Shape.SEQUENCE,
    Collection: Shape.SEQUENCE,
    Iterable: Shape.SEQUENCE,
    set: Shape.SET,
    AbstractSet: Shape.SET,
    MutableSet: Shape.SET,
}

_FACTORIES: dict[Shape, Callable[[], Any]] = {
    Shape.SEQUENCE: list,
    Shape.SET: set,
}


def container_shape(container: Any) -> Shape | None:
    """Get the shape a declared container maps to.

    Args:
        container: Collection origin type, e.g. ``list`` or ``Sequence``.

    Returns:
        SEQUENCE or SET, or None if the container kind is not supported.
    """
    return _SHAPES.get(container)


def materialize(field: FieldDescriptor) -> list[Any] | set[Any]:
    """Instantiate an empty concrete container for a collection field.

    Args:
        field: Descriptor of a collection field.

    Returns:
        A new ``list`` for sequence-like fields or ``set`` for set-like fields.

    Raises:
        UnsupportedCollectionTypeError: If the declared container has no mapping.
    """
    shape = container_shape(field.container)
    if shape is None:
        raise UnsupportedCollectionTypeError(
            f"unsupported collection type {field.declared_type!r} on field '{field.name}'"
        )
    return _FACTORIES[shape]()


def insert(container: list[Any] | set[Any], item: Any) -> None:
    """Add item to a materialized container, appending for lists."""
    if isinstance(container, list):
        container.append(item)
    else:
        container.add(item)
