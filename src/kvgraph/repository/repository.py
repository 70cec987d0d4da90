"""Repository: writes, reads and deletes entity graphs through a Store.

Usage:
    repo = Repository()

    person = Person(name="mikael", age=33, address=Address(town="Stockholm"))
    person_id = repo.write(person)          # also writes the address

    loaded = repo.get(Person(), person_id)  # hydrates the address too
    repo.delete(loaded)                     # the address stays stored

Traversal visits every distinct entity once per top-level call: writes track
instances already written, reads track (type, id) pairs already hydrated.
Cyclic graphs therefore terminate, and an entity referenced twice is written
once and read back as one shared instance.

Nothing is rolled back on failure: fields and referenced entities written
before the failing field stay persisted.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, TypeVar

from kvgraph.core.entity.core import EntityRegistry, get_registry
from kvgraph.core.entity.models import FieldDescriptor, FieldKind
from kvgraph.core.entity.operations import insert, materialize
from kvgraph.core.entity.validation import EntityValidator, RegistryValidator
from kvgraph.core.errors import FieldAccessError, InvalidIdError, MissingEntityError
from kvgraph.core.identity import assign_id, read_id, set_id
from kvgraph.core.types import Shell
from kvgraph.storage.keyvalue import KeyValueStore
from kvgraph.storage.protocol import Store

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Repository:
    """Entity graph persistence engine.

    Args:
        store: Store adapter (default: KeyValueStore over a LocalClient).
        validator: Entity type validator (default: RegistryValidator).
        registry: Entity registry (default: global registry).
    """

    def __init__(
        self,
        store: Store | None = None,
        validator: EntityValidator | None = None,
        registry: EntityRegistry | None = None,
    ):
        self._registry = registry or get_registry()
        self._store = store if store is not None else KeyValueStore(registry=self._registry)
        self._validator = validator or RegistryValidator(self._registry)

    @property
    def store(self) -> Store:
        return self._store

    def _validate_graph(self, entity_type: type) -> None:
        """Validate a type and every entity type reachable through its references."""
        seen = {entity_type}
        pending = deque([entity_type])
        while pending:
            current = pending.popleft()
            self._validator.validate_entity(current)
            for field in self._registry.describe(current).classified(FieldKind.REFERENCE):
                if field.item_type not in seen:
                    seen.add(field.item_type)
                    pending.append(field.item_type)

    # Graph writer

    def write(self, entity: Any) -> int:
        """Persist an entity and, depth-first, every entity it references.

        Assigns ids to entities that have none. Entities that already have an
        id are overwritten in place under that id.

        Args:
            entity: Instance of a registered entity type.

        Returns:
            The root entity's id.

        Raises:
            EntityValidationError: If a reachable entity type is invalid.
            FieldAccessError: If persisting a field fails; the cause is chained.
        """
        self._validate_graph(type(entity))
        return self._write(entity, {})

    def _write(self, entity: Any, visited: dict[int, int]) -> int:
        written = visited.get(id(entity))
        if written is not None:
            logger.debug("%s %d already written in this call", type(entity).__qualname__, written)
            return written

        entity_type = type(entity)
        self._validator.validate_entity(entity_type)
        descriptor = self._registry.describe(entity_type)

        entity_id = assign_id(entity, self._store, self._registry)
        visited[id(entity)] = entity_id
        self._store.write_id(entity, entity_id)

        for field in descriptor.fields:
            value = field.get(entity)
            if value is None:
                continue
            try:
                self._write_field(entity, entity_id, field, value, visited)
            except Exception as e:
                raise FieldAccessError("writing", entity_type, entity_id, field.name) from e

        logger.debug("wrote %s %d", entity_type.__qualname__, entity_id)
        return entity_id

    def _write_field(
        self,
        entity: Any,
        entity_id: int,
        field: FieldDescriptor,
        value: Any,
        visited: dict[int, int],
    ) -> None:
        if field.kind is FieldKind.VALUE:
            if field.is_collection:
                self._store.write_collection(entity, value, entity_id, field)
            else:
                self._store.write(entity, entity_id, field)
            return

        if not field.is_collection:
            referred_id = self._write(value, visited)
            self._store.write_reference(entity, field, entity_id, referred_id)
            return

        ids = [self._write(item, visited) for item in value]
        # Empty reference collections leave no stored mapping
        if not ids:
            return
        self._store.write_reference_collection(entity, field, entity_id, ids)

    # Graph reader

    def get(self, shell: Shell[T], entity_id: int) -> T:
        """Hydrate a shell and every entity it references from the store.

        Fields with no stored key keep the shell's defaults.

        Args:
            shell: Empty instance of a registered entity type, filled in place.
            entity_id: Id of the stored entity.

        Returns:
            The populated shell.

        Raises:
            EntityValidationError: If a reachable entity type is invalid.
            MissingEntityError: If no entity of the shell's type has this id.
            FieldAccessError: If reading a field fails, including references
                to entities that are no longer stored.
        """
        self._validate_graph(type(shell))
        return self._get(shell, entity_id, {})

    def load(self, entity_type: type[T], entity_id: int) -> T:
        """Hydrate a fresh instance of entity_type. See get()."""
        return self.get(entity_type(), entity_id)

    def _get(self, shell: T, entity_id: int, visited: dict[tuple[type, int], Any]) -> T:
        entity_type = type(shell)
        self._validator.validate_entity(entity_type)
        if not self._store.exists(shell, entity_id):
            raise MissingEntityError(entity_type, entity_id)

        visited[(entity_type, entity_id)] = shell
        set_id(shell, entity_id, self._registry)

        for field in self._registry.describe(entity_type).fields:
            if not self._store.has_key(entity_type, entity_id, field):
                continue
            try:
                field.set(shell, self._read_field(shell, entity_id, field, visited))
            except Exception as e:
                raise FieldAccessError("reading", entity_type, entity_id, field.name) from e

        logger.debug("read %s %d", entity_type.__qualname__, entity_id)
        return shell

    def _read_field(
        self,
        shell: Any,
        entity_id: int,
        field: FieldDescriptor,
        visited: dict[tuple[type, int], Any],
    ) -> Any:
        if field.kind is FieldKind.VALUE:
            if not field.is_collection:
                return self._store.read_value(shell, entity_id, field)
            values = materialize(field)
            self._store.read_values(shell, entity_id, field, values)
            return values

        if not field.is_collection:
            referred_id = self._store.get_referred_id(shell, entity_id, field)
            return self._resolve(field.item_type, referred_id, visited)

        referred = materialize(field)
        for referred_id in self._store.get_referred_ids(shell, entity_id, field):
            insert(referred, self._resolve(field.item_type, referred_id, visited))
        return referred

    def _resolve(
        self, entity_type: type, entity_id: int, visited: dict[tuple[type, int], Any]
    ) -> Any:
        found = visited.get((entity_type, entity_id))
        if found is not None:
            logger.debug("%s %d already read in this call", entity_type.__qualname__, entity_id)
            return found
        return self._get(entity_type(), entity_id, visited)

    # Entity eraser

    def delete(self, entity: Any) -> None:
        """Remove an entity's existence marker and stored fields.

        Referenced entities are not deleted.

        Args:
            entity: Instance with an assigned id.

        Raises:
            EntityValidationError: If the entity type is invalid.
            InvalidIdError: If the entity has no id.
        """
        entity_type = type(entity)
        self._validator.validate_entity(entity_type)
        entity_id = read_id(entity, self._registry)
        if entity_id <= 0:
            raise InvalidIdError(entity_type, entity_id)

        self._store.remove_id(entity, entity_id)
        for field in self._registry.describe(entity_type).fields:
            if self._store.has_key(entity_type, entity_id, field):
                self._store.delete(entity, entity_id, field)
        logger.debug("deleted %s %d", entity_type.__qualname__, entity_id)
