"""Stable contract surface for multicatalog.

This module exposes the data model shared by the base builder, the
partitioner and the serialization sink.
"""

from contract.artifacts import (
    ARTIFACT_SCHEMA_VERSION,
    BUILD_MANIFEST_JSON,
    BUNDLE_EXTENSION,
    BUNDLE_RESOURCE_TYPE,
    DEFAULT_CATALOG_FILENAME,
    PLAN_SUMMARY_JSON,
)


def __getattr__(name: str) -> object:
    if name in {
        "AssetGroup",
        "BuildManifest",
        "CatalogBuildInfo",
        "DefaultCatalogSpec",
        "Location",
    }:
        from contract.models import (
            AssetGroup,
            BuildManifest,
            CatalogBuildInfo,
            DefaultCatalogSpec,
            Location,
        )

        return {
            "AssetGroup": AssetGroup,
            "BuildManifest": BuildManifest,
            "CatalogBuildInfo": CatalogBuildInfo,
            "DefaultCatalogSpec": DefaultCatalogSpec,
            "Location": Location,
        }[name]

    if name in {"ManifestError", "load_manifest"}:
        from contract.manifest import ManifestError, load_manifest

        return {
            "ManifestError": ManifestError,
            "load_manifest": load_manifest,
        }[name]

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "ARTIFACT_SCHEMA_VERSION",
    "BUILD_MANIFEST_JSON",
    "BUNDLE_EXTENSION",
    "BUNDLE_RESOURCE_TYPE",
    "DEFAULT_CATALOG_FILENAME",
    "PLAN_SUMMARY_JSON",
    "AssetGroup",
    "BuildManifest",
    "CatalogBuildInfo",
    "DefaultCatalogSpec",
    "Location",
    "ManifestError",
    "load_manifest",
]
