"""Identity management: read, set and assign surrogate entity ids.

Ids are positive integers. A missing, ``None`` or non-positive id means the
entity has not been assigned one yet.

Usage:
    person = Person(name="mikael")
    read_id(person)               # 0
    assign_id(person, store)      # 1, and person.id == 1
    assign_id(person, store)      # still 1
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from kvgraph.core.entity.core import EntityRegistry, get_registry

if TYPE_CHECKING:
    from kvgraph.storage.protocol import Store

logger = logging.getLogger(__name__)


def read_id(entity: Any, registry: EntityRegistry | None = None) -> int:
    """Extract the current id of an entity.

    Args:
        entity: Instance of a registered entity type.
        registry: Registry holding the type (default: global registry).

    Returns:
        The id, or 0 if the entity has none.
    """
    descriptor = (registry or get_registry()).describe(type(entity))
    value = descriptor.id_field.get(entity)
    return value if value is not None else 0


def set_id(entity: Any, entity_id: int, registry: EntityRegistry | None = None) -> None:
    """Write an id into the entity's identifier field."""
    descriptor = (registry or get_registry()).describe(type(entity))
    descriptor.id_field.set(entity, entity_id)


def assign_id(entity: Any, store: Store, registry: EntityRegistry | None = None) -> int:
    """Return the entity's id, allocating one from the store if unset.

    Args:
        entity: Instance of a registered entity type.
        store: Store used to allocate a fresh id for the entity's type.
        registry: Registry holding the type (default: global registry).

    Returns:
        Existing id when positive, otherwise the newly allocated id (which is
        also written into the entity).
    """
    current = read_id(entity, registry)
    if current > 0:
        return current

    new_id = store.next_id(type(entity))
    set_id(entity, new_id, registry)
    logger.debug("assigned id %d to %s", new_id, type(entity).__qualname__)
    return new_id
