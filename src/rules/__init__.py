"""Configuration and membership rules for multicatalog."""

from rules.config import (
    CatalogSetupConfig,
    ConfigError,
    MultiCatalogConfig,
    load_config,
)
from rules.membership import build_predicate, location_in_group, matches_key_globs

__all__ = [
    "CatalogSetupConfig",
    "ConfigError",
    "MultiCatalogConfig",
    "build_predicate",
    "load_config",
    "location_in_group",
    "matches_key_globs",
]
