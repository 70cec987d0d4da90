"""Store adapter over a redis-like key-value client.

Key layout (defaults, see StoreSettings):
    {type}:next_id          id counter per entity type
    {type}:{id}             existence marker
    {type}:{id}:{field}     scalar value / referred id (string),
                            value sequence / referred ids (list),
                            value set (set)

Type names come from the entity registry (qualified class name unless given
with ``@entity(name=...)``), lowercased by default:

    person:2:name     -> b"mikael"
    person:2:age      -> b"33"
    person:2:address  -> b"6"
"""

from __future__ import annotations

from collections.abc import Collection
from typing import Any

from kvgraph.config.settings import StoreSettings
from kvgraph.core.entity.core import EntityRegistry, get_registry
from kvgraph.core.entity.models import FieldDescriptor, Shape
from kvgraph.core.entity.operations import insert
from kvgraph.core.errors import EntityValidationError
from kvgraph.storage.converters import Converters
from kvgraph.storage.local import LocalClient
from kvgraph.storage.protocol import KeyValueClient

_MARKER = b"1"


class KeyValueStore:
    """Store implementation that renders (type, id, field) triples as string keys.

    Args:
        client: Key-value client (default: new LocalClient).
        converters: Value codec (default: built-in converters).
        settings: Key layout settings (default: loaded from environment).
        registry: Entity registry used for type names (default: global registry).
    """

    def __init__(
        self,
        client: KeyValueClient | None = None,
        converters: Converters | None = None,
        settings: StoreSettings | None = None,
        registry: EntityRegistry | None = None,
    ):
        self._client = client if client is not None else LocalClient()
        self._converters = converters or Converters()
        self._settings = settings or StoreSettings()
        self._registry = registry or get_registry()
        self._type_keys: dict[str, type] = {}

    @property
    def client(self) -> KeyValueClient:
        return self._client

    @property
    def converters(self) -> Converters:
        return self._converters

    # Keys

    def type_key(self, entity_type: type) -> str:
        """Key fragment naming an entity type.

        Raises:
            EntityValidationError: If another type already renders to the same
                fragment, e.g. names differing only in case when lowercased.
        """
        name = self._registry.type_name(entity_type)
        if self._settings.lowercase_type_names:
            name = name.lower()
        key = f"{self._settings.key_prefix}{name}"
        owner = self._type_keys.setdefault(key, entity_type)
        if owner is not entity_type:
            raise EntityValidationError(
                f"{entity_type.__qualname__} and {owner.__qualname__} share store keys '{key}'"
            )
        return key

    def counter_key(self, entity_type: type) -> str:
        sep = self._settings.key_separator
        return f"{self.type_key(entity_type)}{sep}{self._settings.id_counter_field}"

    def entity_key(self, entity_type: type, entity_id: int) -> str:
        return f"{self.type_key(entity_type)}{self._settings.key_separator}{entity_id}"

    def field_key(self, entity_type: type, entity_id: int, field_name: str) -> str:
        sep = self._settings.key_separator
        return f"{self.entity_key(entity_type, entity_id)}{sep}{field_name}"

    def _key(self, entity: Any, entity_id: int, field: FieldDescriptor) -> str:
        return self.field_key(type(entity), entity_id, field.name)

    # Identity

    def next_id(self, entity_type: type) -> int:
        return self._client.incr(self.counter_key(entity_type))

    def write_id(self, entity: Any, entity_id: int) -> None:
        self._client.set(self.entity_key(type(entity), entity_id), _MARKER)

    def remove_id(self, entity: Any, entity_id: int) -> None:
        self._client.delete(self.entity_key(type(entity), entity_id))

    def exists(self, entity: Any, entity_id: int) -> bool:
        return self._client.exists(self.entity_key(type(entity), entity_id))

    def has_key(self, entity_type: type, entity_id: int, field: FieldDescriptor) -> bool:
        return self._client.exists(self.field_key(entity_type, entity_id, field.name))

    # Values

    def write(self, entity: Any, entity_id: int, field: FieldDescriptor) -> None:
        data = self._converters.encode(field.item_type, field.get(entity))
        self._client.set(self._key(entity, entity_id, field), data)

    def read_value(self, entity: Any, entity_id: int, field: FieldDescriptor) -> Any:
        data = self._client.get(self._key(entity, entity_id, field))
        if data is None:
            return None
        return self._converters.decode(field.item_type, data)

    def write_collection(
        self,
        entity: Any,
        collection: Collection[Any],
        entity_id: int,
        field: FieldDescriptor,
    ) -> None:
        """Replace the stored collection. Encoding happens before the old one is dropped."""
        encoded = [self._converters.encode(field.item_type, item) for item in collection]
        key = self._key(entity, entity_id, field)
        self._client.delete(key)
        if field.shape is Shape.SET:
            self._client.sadd(key, encoded)
        else:
            self._client.rpush(key, encoded)

    def read_values(
        self,
        entity: Any,
        entity_id: int,
        field: FieldDescriptor,
        into: list[Any] | set[Any],
    ) -> None:
        key = self._key(entity, entity_id, field)
        raw = self._client.smembers(key) if field.shape is Shape.SET else self._client.lrange(key)
        for data in raw:
            insert(into, self._converters.decode(field.item_type, data))

    # References

    def write_reference(
        self, entity: Any, field: FieldDescriptor, entity_id: int, referred_id: int
    ) -> None:
        self._client.set(self._key(entity, entity_id, field), str(referred_id).encode("ascii"))

    def get_referred_id(self, entity: Any, entity_id: int, field: FieldDescriptor) -> int:
        data = self._client.get(self._key(entity, entity_id, field))
        if data is None:
            raise KeyError(self._key(entity, entity_id, field))
        return int(data)

    def write_reference_collection(
        self, entity: Any, field: FieldDescriptor, entity_id: int, ids: list[int]
    ) -> None:
        key = self._key(entity, entity_id, field)
        self._client.delete(key)
        self._client.rpush(key, [str(i).encode("ascii") for i in ids])

    def get_referred_ids(self, entity: Any, entity_id: int, field: FieldDescriptor) -> list[int]:
        return [int(data) for data in self._client.lrange(self._key(entity, entity_id, field))]

    def delete(self, entity: Any, entity_id: int, field: FieldDescriptor) -> None:
        self._client.delete(self._key(entity, entity_id, field))
