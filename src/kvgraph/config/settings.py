"""Configuration settings using Pydantic Settings.

Provides typed configuration with environment variable support for stores.

Usage:
    from kvgraph.config import StoreSettings

    # Load from environment variables (KVGRAPH_*)
    settings = StoreSettings()

    # Or override with explicit values
    settings = StoreSettings(key_prefix="app:", key_separator="/")
"""

from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for key-value store adapters.

    Attributes:
        key_prefix: String prepended to every key (namespacing several
            applications in one backend).
        key_separator: Separator between type name, id and field name.
        id_counter_field: Key suffix of the per-type id counter.
        lowercase_type_names: Lowercase entity type names in keys.

    Environment Variables:
        KVGRAPH_KEY_PREFIX
        KVGRAPH_KEY_SEPARATOR
        KVGRAPH_ID_COUNTER_FIELD
        KVGRAPH_LOWERCASE_TYPE_NAMES
    """

    model_config = SettingsConfigDict(
        env_prefix="KVGRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    key_prefix: str = ""
    key_separator: str = ":"
    id_counter_field: str = "next_id"
    lowercase_type_names: bool = True

    @field_validator("key_separator", "id_counter_field")
    @classmethod
    def _not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("must not be empty")
        return value
