"""Data models exchanged between the base builder, partitioner and sink."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from contract.artifacts import (
    ARTIFACT_SCHEMA_VERSION,
    BUNDLE_EXTENSION,
    BUNDLE_RESOURCE_TYPE,
    DEFAULT_CATALOG_FILENAME,
)


class Location(BaseModel):
    """A build-time reference to one loadable resource.

    ``keys[0]`` is the canonical id other locations use in their
    ``dependencies``.
    """

    model_config = ConfigDict(frozen=True)

    resource_type: str
    internal_id: str
    provider: str
    keys: tuple[str, ...] = Field(min_length=1)
    dependencies: tuple[str, ...] = Field(default_factory=tuple)
    data: dict[str, Any] | None = None

    @property
    def primary_key(self) -> str:
        return self.keys[0]

    @property
    def is_bundle(self) -> bool:
        return self.resource_type == BUNDLE_RESOURCE_TYPE

    @property
    def bundle_id(self) -> str | None:
        """Bundle file id (``<bundle_name>.bundle``) for bundle-typed locations."""
        if not self.is_bundle or not self.data:
            return None
        bundle_name = self.data.get("bundle_name")
        if not bundle_name:
            return None
        return f"{bundle_name}{BUNDLE_EXTENSION}"


class AssetGroup(BaseModel):
    """An authoring group as reported by the base builder."""

    model_config = ConfigDict(extra="forbid")

    name: str
    build_path: str = Field(
        default="",
        description="Identity of the path setting the group builds into",
    )
    keys: list[str] = Field(
        default_factory=list,
        description="Entry guids and addresses owned by the group",
    )
    bundles: list[str] = Field(
        default_factory=list,
        description="Bundle ids produced by the group",
    )


class DefaultCatalogSpec(BaseModel):
    """The dependency-free default catalog description."""

    model_config = ConfigDict(extra="forbid")

    name: str = "MainContentCatalog"
    filename: str = DEFAULT_CATALOG_FILENAME
    build_path: str = "[LocalBuildPath]"
    load_path: str = "[LocalLoadPath]"


class BuildManifest(BaseModel):
    """Everything the base builder hands over for one build pass."""

    model_config = ConfigDict(extra="forbid")

    build_target: str
    catalog: DefaultCatalogSpec = Field(default_factory=DefaultCatalogSpec)
    groups: list[AssetGroup] = Field(default_factory=list)
    locations: list[Location] = Field(default_factory=list)

    @field_validator("build_target")
    @classmethod
    def validate_build_target(cls, v: str) -> str:
        if not v.strip():
            msg = "build_target must be a non-empty string"
            raise ValueError(msg)
        return v


class CatalogBuildInfo(BaseModel):
    """One catalog handed to the serialization sink."""

    model_config = ConfigDict(populate_by_name=True)

    schema_version: int = Field(default=ARTIFACT_SCHEMA_VERSION)
    identifier: str
    filename: str
    build_path: str
    load_path: str
    register_catalog: bool = Field(default=True, alias="register")
    locations: list[Location] = Field(default_factory=list)


class PlanCatalogSummary(BaseModel):
    """Per-catalog entry of the plan summary."""

    identifier: str
    location_count: int
    bundle_count: int = 0
    unresolved: list[str] = Field(default_factory=list)


class PlanSummary(BaseModel):
    """Summary written next to the catalog plan files."""

    schema_version: int = Field(default=ARTIFACT_SCHEMA_VERSION)
    build_target: str
    catalogs: list[PlanCatalogSummary] = Field(default_factory=list)
    empty_catalogs: list[str] = Field(default_factory=list)


__all__ = [
    "AssetGroup",
    "BuildManifest",
    "CatalogBuildInfo",
    "DefaultCatalogSpec",
    "Location",
    "PlanCatalogSummary",
    "PlanSummary",
]
