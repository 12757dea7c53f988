"""Catalog contract definitions.

This module defines the stable boundary between the base builder, the
catalog partitioner and the serialization sink.
"""

from __future__ import annotations

# Schema version for emitted catalog records and plan files.
ARTIFACT_SCHEMA_VERSION = 1

# Resource type tag carried by bundle-typed locations.
BUNDLE_RESOURCE_TYPE = "AssetBundle"

# File extension appended to a bundle name to form its bundle id.
BUNDLE_EXTENSION = ".bundle"

# Input/output filename constants (stable contract identifiers).
BUILD_MANIFEST_JSON = "build_manifest.json"
DEFAULT_CATALOG_FILENAME = "catalog.json"
PLAN_SUMMARY_JSON = "plan_summary.json"


def plan_catalog_filename(identifier: str) -> str:
    """Return the plan file name holding the catalog called ``identifier``."""
    return f"{identifier}.json"
