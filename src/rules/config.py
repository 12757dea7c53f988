from __future__ import annotations

from pathlib import Path
from typing import Any

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator

from contract.artifacts import BUILD_MANIFEST_JSON
from profiles.settings import PathReference, ProfileSettings

CONFIG_FILENAME = "multicatalog.toml"

DEFAULT_BUILD_PATH_VARIABLE = "LocalBuildPath"


class CatalogSetupConfig(BaseModel):
    """Definition of a single named output catalog."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(description="Catalog name, also used for its file name")
    groups: list[str] = Field(
        default_factory=list,
        description="Asset group names whose content belongs to this catalog",
    )
    keys: list[str] = Field(
        default_factory=list,
        description="Glob patterns matched against every location key",
    )
    build_path: str = Field(
        default="",
        description="Path setting (profile variable name or expression) to build into",
    )
    load_path: str = Field(
        default="",
        description="Path setting (profile variable name or expression) to load from",
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            msg = "catalog name must be a non-empty string"
            raise ValueError(msg)
        return v

    @property
    def build_path_ref(self) -> PathReference:
        return PathReference(self.build_path)

    @property
    def load_path_ref(self) -> PathReference:
        return PathReference(self.load_path)


class MultiCatalogConfig(BaseModel):
    """Configuration for multi-catalog builds."""

    model_config = ConfigDict(extra="forbid")

    output_dir: str = Field(
        default=".multicatalog",
        description="Output directory for catalog plan files",
    )
    manifest: str = Field(
        default=BUILD_MANIFEST_JSON,
        description="Build manifest written by the base builder",
    )
    default_build_path: str = Field(
        default=DEFAULT_BUILD_PATH_VARIABLE,
        description="Path setting the base builder writes bundles into",
    )
    protected_dirs: list[str] = Field(
        default_factory=list,
        description="Extra project directories that catalog cleanup must never "
        "delete, on top of Library and Assets",
    )
    profile: dict[str, str] = Field(
        default_factory=dict,
        description="Profile variables: name -> path expression",
    )
    catalogs: list[CatalogSetupConfig | None] = Field(
        default_factory=list,
        description="Named catalogs, evaluated in order",
    )

    @field_validator("catalogs")
    @classmethod
    def validate_unique_names(
        cls, v: list[CatalogSetupConfig | None]
    ) -> list[CatalogSetupConfig | None]:
        seen: set[str] = set()
        for catalog in v:
            if catalog is None:
                continue
            if catalog.name in seen:
                msg = f"Duplicate catalog name '{catalog.name}'"
                raise ValueError(msg)
            seen.add(catalog.name)
        return v

    @field_validator("profile", mode="before")
    @classmethod
    def validate_profile(cls, v: Any) -> Any:
        if v is None:
            return {}

        if not isinstance(v, dict):
            msg = "profile must be a mapping of variable name -> expression"
            raise TypeError(msg)

        for name, value in v.items():
            if not isinstance(name, str) or not isinstance(value, str):
                msg = "profile must be a mapping of str -> str"
                raise TypeError(msg)

        return v

    def profile_settings(self, build_target: str = "") -> ProfileSettings:
        return ProfileSettings(variables=dict(self.profile), build_target=build_target)


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def resolve_output_dir(root: Path, output_dir: str) -> Path:
    """Resolve a config-provided output_dir safely within the project root.

    The config output_dir must be a non-empty relative path that remains
    within the project root after resolution. Absolute paths and paths
    that escape the root are rejected.
    """
    if not output_dir:
        msg = "output_dir must be a non-empty relative path"
        raise ConfigError(msg)

    if output_dir.startswith("~"):
        msg = "output_dir must be a relative path within the project root"
        raise ConfigError(msg)

    output_path = Path(output_dir)
    if output_path.is_absolute():
        msg = "output_dir must be a relative path within the project root"
        raise ConfigError(msg)

    try:
        resolved_root = root.resolve()
        resolved_output = (resolved_root / output_path).resolve()
    except OSError as exc:
        msg = f"Failed to resolve output_dir '{output_dir}': {exc}"
        raise ConfigError(msg) from exc

    try:
        resolved_output.relative_to(resolved_root)
    except ValueError as exc:
        msg = f"output_dir '{output_dir}' escapes the project root"
        raise ConfigError(msg) from exc

    if resolved_output == resolved_root:
        msg = "output_dir must not be the project root"
        raise ConfigError(msg)

    return resolved_output


def load_config(root: Path) -> MultiCatalogConfig:
    """Load configuration from multicatalog.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return MultiCatalogConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return MultiCatalogConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
