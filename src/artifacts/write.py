from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from artifacts.utils import _write_json
from catalogs.builder import BuildResult, MultiCatalogBuilder
from contract.artifacts import PLAN_SUMMARY_JSON, plan_catalog_filename
from contract.manifest import ManifestError, load_manifest
from rules.config import load_config, resolve_output_dir
from utils import resolve_project_path

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from artifacts.clean import CleanResult
    from contract.models import CatalogBuildInfo, PlanSummary
    from rules.config import MultiCatalogConfig

logger = logging.getLogger(__name__)


class CatalogWriter(Protocol):
    """Serialization sink receiving the final, ordered catalog list."""

    def write(self, catalogs: Sequence[CatalogBuildInfo]) -> list[Path]: ...


class JsonCatalogWriter:
    """Write each catalog as JSON to ``<build_path>/<filename>``."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def write(self, catalogs: Sequence[CatalogBuildInfo]) -> list[Path]:
        written: list[Path] = []
        for catalog in catalogs:
            catalog_dir = resolve_project_path(self.root, catalog.build_path)
            catalog_dir.mkdir(parents=True, exist_ok=True)
            path = catalog_dir / catalog.filename
            _write_json(path, catalog)
            logger.debug(f"Wrote catalog '{catalog.identifier}' to {path}")
            written.append(path)
        return written


def write_plan(
    out_dir: Path,
    catalogs: Sequence[CatalogBuildInfo],
    summary: PlanSummary,
) -> list[Path]:
    """Write one plan file per catalog plus the plan summary."""
    out_dir.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    for catalog in catalogs:
        path = out_dir / plan_catalog_filename(catalog.identifier)
        _write_json(path, catalog)
        written.append(path)

    summary_path = out_dir / PLAN_SUMMARY_JSON
    _write_json(summary_path, summary)
    written.append(summary_path)
    return written


def generate_plan(
    *,
    root: Path,
    out_dir: Path | None = None,
    config: MultiCatalogConfig | None = None,
) -> dict[str, object]:
    """Partition the build manifest and write the catalog plan.

    Nothing outside ``out_dir`` is touched: no catalog is written to its
    build path and no bundle is relocated.

    Args:
        root: Project root holding the config and the build manifest
        out_dir: Optional plan directory (default: config output dir)
        config: Optional configuration (default: loaded from ``root``)

    Returns:
        Dictionary with counts and the list of written plan files.
    """
    if config is None:
        config = load_config(root)

    if out_dir is None:
        out_dir = resolve_output_dir(root, config.output_dir)

    manifest = load_manifest(resolve_project_path(root, config.manifest))
    builder = MultiCatalogBuilder(config, root)
    catalogs = builder.get_content_catalogs(manifest)
    summary = builder.summary()
    written = write_plan(out_dir, catalogs, summary)

    return {
        "catalog_count": len(catalogs),
        "location_count": sum(len(catalog.locations) for catalog in catalogs),
        "unresolved_count": sum(len(c.unresolved) for c in summary.catalogs),
        "artifacts": [str(path) for path in written],
    }


def build_catalogs(
    *,
    root: Path,
    config: MultiCatalogConfig | None = None,
    writer: CatalogWriter | None = None,
) -> BuildResult:
    """Run a full multi-catalog build for the project at ``root``."""
    if config is None:
        config = load_config(root)

    if writer is None:
        writer = JsonCatalogWriter(root)

    manifest = load_manifest(resolve_project_path(root, config.manifest))
    builder = MultiCatalogBuilder(config, root)
    return builder.build(manifest, writer)


def _manifest_build_target(root: Path, config: MultiCatalogConfig) -> str:
    try:
        manifest = load_manifest(resolve_project_path(root, config.manifest))
    except ManifestError as exc:
        logger.warning(f"No build target for cleanup: {exc}")
        return ""
    return manifest.build_target


def clean_catalogs(
    *,
    root: Path,
    config: MultiCatalogConfig | None = None,
    build_target: str = "",
) -> CleanResult:
    """Remove the build directories of every configured catalog.

    Without ``build_target`` the target recorded in the build manifest is
    used, so ``[BuildTarget]`` expands the same way it did during the build.
    """
    if config is None:
        config = load_config(root)

    if not build_target:
        build_target = _manifest_build_target(root, config)

    builder = MultiCatalogBuilder(config, root)
    return builder.clear_cached_data(config.profile_settings(build_target))


__all__ = [
    "CatalogWriter",
    "JsonCatalogWriter",
    "build_catalogs",
    "clean_catalogs",
    "generate_plan",
    "write_plan",
]
