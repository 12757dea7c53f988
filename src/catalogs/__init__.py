"""Catalog partitioning and the multi-catalog build pipeline."""

from catalogs.builder import BuildResult, MultiCatalogBuilder
from catalogs.partition import (
    CatalogConfigError,
    CatalogPartition,
    CatalogPartitioner,
    CatalogSetup,
)

__all__ = [
    "BuildResult",
    "CatalogConfigError",
    "CatalogPartition",
    "CatalogPartitioner",
    "CatalogSetup",
    "MultiCatalogBuilder",
]
