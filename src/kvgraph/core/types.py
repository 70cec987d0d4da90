"""Core type definitions for kvgraph."""

from typing import TypeVar

from typing_extensions import TypeAliasType

T = TypeVar("T")

Shell = TypeAliasType("Shell", T, type_params=(T,))
"""Type alias indicating a caller-supplied instance that is filled in place.

When you see `Shell[T]` in a parameter, pass a freshly constructed entity
(e.g. `Person()`). Only its id field and its Value/Reference fields with a
stored key are overwritten; everything else keeps the constructor defaults.
"""
