"""Entity identity functionality: reading and assigning surrogate ids."""

from kvgraph.core.identity.core import assign_id, read_id, set_id

__all__ = [
    "read_id",
    "set_id",
    "assign_id",
]
