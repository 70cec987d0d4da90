"""Structural validation of entity types.

The repository validates the root type of every public operation before any
store I/O. Validation results are cached per type.
"""

from __future__ import annotations

import dataclasses
from typing import Protocol, runtime_checkable

from kvgraph.core.entity.core import EntityRegistry, _is_pydantic, get_registry
from kvgraph.core.entity.models import EntityDescriptor, FieldKind, Shape
from kvgraph.core.errors import EntityValidationError, UnsupportedCollectionTypeError


@runtime_checkable
class EntityValidator(Protocol):
    """Checks that a type can be persisted by the repository."""

    def validate_entity(self, entity_type: type) -> None:
        """Raise EntityValidationError if the type cannot be persisted."""
        ...


def _is_frozen(cls: type) -> bool:
    if _is_pydantic(cls):
        return bool(cls.model_config.get("frozen", False))  # type: ignore[attr-defined]
    params = getattr(cls, "__dataclass_params__", None)
    return bool(params and params.frozen)


def _required_fields(cls: type) -> list[str]:
    """Names of fields that have no default, so a shell cannot be created."""
    if _is_pydantic(cls):
        return [
            name
            for name, info in cls.model_fields.items()  # type: ignore[attr-defined]
            if info.is_required()
        ]
    return [
        f.name
        for f in dataclasses.fields(cls)
        if f.init
        and f.default is dataclasses.MISSING
        and f.default_factory is dataclasses.MISSING
    ]


class RegistryValidator:
    """Default validator backed by the entity registry.

    A valid entity type:
    - is registered with @entity
    - is mutable and constructible without arguments
    - has exactly one integer field marked Id
    - has no field marked both Value and Reference
    - references only registered entity types
    - declares only collections that map to a list or set

    Args:
        registry: Registry to validate against (default: global registry).
    """

    def __init__(self, registry: EntityRegistry | None = None):
        self._registry = registry or get_registry()
        self._valid: set[type] = set()

    def validate_entity(self, entity_type: type) -> None:
        """Validate an entity type.

        Args:
            entity_type: Class to check.

        Raises:
            EntityValidationError: If any structural rule is violated.
            UnsupportedCollectionTypeError: If a collection field has no container.
        """
        if entity_type in self._valid:
            return

        descriptor = self._registry.describe(entity_type)
        name = entity_type.__qualname__

        if descriptor.problems:
            raise EntityValidationError(f"{name}: {'; '.join(descriptor.problems)}")
        if _is_frozen(entity_type):
            raise EntityValidationError(f"{name}: entity types must be mutable")

        required = _required_fields(entity_type)
        if required:
            raise EntityValidationError(
                f"{name}: fields without defaults prevent creating empty instances: "
                f"{', '.join(required)}"
            )

        self._check_id_field(name, descriptor)
        self._check_fields(name, descriptor)
        self._valid.add(entity_type)

    def _check_id_field(self, name: str, descriptor: EntityDescriptor) -> None:
        if len(descriptor.id_fields) != 1:
            raise EntityValidationError(
                f"{name}: expected exactly one Id field, found {len(descriptor.id_fields)}"
            )
        id_field = descriptor.id_field
        if id_field.declared_type is not int:
            raise EntityValidationError(
                f"{name}: Id field '{id_field.name}' must be int, "
                f"got {id_field.declared_type!r}"
            )

    def _check_fields(self, name: str, descriptor: EntityDescriptor) -> None:
        for field in descriptor.fields:
            if field.is_collection and field.shape is None:
                raise UnsupportedCollectionTypeError(
                    f"{name}: unsupported collection type {field.declared_type!r} "
                    f"on field '{field.name}'"
                )
            if field.kind is FieldKind.REFERENCE and not (
                isinstance(field.item_type, type) and self._registry.is_registered(field.item_type)
            ):
                raise EntityValidationError(
                    f"{name}: Reference field '{field.name}' must point to a registered "
                    f"entity type, got {field.item_type!r}"
                )
            # Set members must be hashable
            if (
                field.kind is FieldKind.REFERENCE
                and field.shape is Shape.SET
                and getattr(field.item_type, "__hash__", None) is None
            ):
                raise EntityValidationError(
                    f"{name}: set-typed Reference field '{field.name}' needs hashable "
                    f"entities, {field.item_type.__qualname__} is unhashable "
                    f"(use @dataclass(eq=False) or define __hash__)"
                )
