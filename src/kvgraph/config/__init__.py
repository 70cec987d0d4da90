"""Configuration module using Pydantic Settings.

Provides typed configuration for store adapters with environment variable support.

Usage:
    from kvgraph.config import StoreSettings

    settings = StoreSettings(key_prefix="app:")
"""

from kvgraph.config.settings import StoreSettings

__all__ = [
    "StoreSettings",
]
