"""kvgraph: entity graph persistence over key-value stores.

Usage:
    from dataclasses import dataclass
    from typing import Annotated

    from kvgraph import Id, Reference, Repository, Value, entity

    @entity
    @dataclass
    class Address:
        id: Annotated[int, Id] = 0
        town: Annotated[str | None, Value] = None

    @entity
    @dataclass
    class Person:
        id: Annotated[int, Id] = 0
        name: Annotated[str | None, Value] = None
        address: Annotated[Address | None, Reference] = None

    repo = Repository()
    person_id = repo.write(Person(name="mikael", address=Address(town="Stockholm")))
    person = repo.get(Person(), person_id)
"""

__version__ = "0.1.0"

# Configuration
from kvgraph.config import StoreSettings

# Core primitives
from kvgraph.core import (
    ConverterError,
    EntityRegistry,
    EntityValidationError,
    EntityValidator,
    FieldAccessError,
    FieldDescriptor,
    FieldKind,
    Id,
    InvalidIdError,
    KvGraphError,
    MissingEntityError,
    Reference,
    RegistryValidator,
    Shell,
    UnsupportedCollectionTypeError,
    Value,
    entity,
    get_registry,
)

# Repository
from kvgraph.repository import EntityEraser, EntityReader, EntityWriter, Repository

# Storage
from kvgraph.storage import (
    Converters,
    KeyValueClient,
    KeyValueStore,
    LocalClient,
    SimpleConverter,
    Store,
    TypeConverter,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "entity",
    "get_registry",
    "EntityRegistry",
    "FieldDescriptor",
    "FieldKind",
    "Id",
    "Value",
    "Reference",
    "Shell",
    "EntityValidator",
    "RegistryValidator",
    # Errors
    "KvGraphError",
    "EntityValidationError",
    "UnsupportedCollectionTypeError",
    "MissingEntityError",
    "FieldAccessError",
    "InvalidIdError",
    "ConverterError",
    # Repository
    "Repository",
    "EntityWriter",
    "EntityReader",
    "EntityEraser",
    # Storage
    "Store",
    "KeyValueClient",
    "KeyValueStore",
    "LocalClient",
    "TypeConverter",
    "SimpleConverter",
    "Converters",
    # Config
    "StoreSettings",
]
