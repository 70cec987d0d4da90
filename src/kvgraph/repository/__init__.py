"""Repository: graph writer, graph reader and entity eraser."""

from kvgraph.repository.protocol import EntityEraser, EntityReader, EntityWriter
from kvgraph.repository.repository import Repository

__all__ = [
    "Repository",
    "EntityWriter",
    "EntityReader",
    "EntityEraser",
]
