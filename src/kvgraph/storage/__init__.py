"""Storage backends."""

from kvgraph.storage.converters import (
    BUILTIN_CONVERTERS,
    Converters,
    EnumConverter,
    SimpleConverter,
    TypeConverter,
)
from kvgraph.storage.keyvalue import KeyValueStore
from kvgraph.storage.local import LocalClient
from kvgraph.storage.protocol import KeyValueClient, Store

__all__ = [
    "Store",
    "KeyValueClient",
    "KeyValueStore",
    "LocalClient",
    "TypeConverter",
    "SimpleConverter",
    "EnumConverter",
    "Converters",
    "BUILTIN_CONVERTERS",
]
