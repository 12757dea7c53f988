"""Determinism check of a written catalog plan against a fresh partition."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from artifacts.utils import _load_json, _to_dict
from catalogs.builder import MultiCatalogBuilder
from contract.artifacts import PLAN_SUMMARY_JSON, plan_catalog_filename
from contract.manifest import load_manifest
from rules.config import load_config
from utils import resolve_project_path

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeterminismResult:
    """Per-catalog outcome of comparing a plan with a fresh partition.

    ``reordered`` lists catalogs holding the same locations in a different
    order; ``changed`` lists catalogs whose record differs otherwise.
    """

    ok: bool
    changed: tuple[str, ...] = field(default_factory=tuple)
    reordered: tuple[str, ...] = field(default_factory=tuple)
    missing: tuple[str, ...] = field(default_factory=tuple)
    extra: tuple[str, ...] = field(default_factory=tuple)
    summary_changed: bool = False


def _location_key(location: dict[str, Any]) -> str:
    keys = location.get("keys") or [""]
    return keys[0]


def _is_reordered(planned: dict[str, Any], fresh: dict[str, Any]) -> bool:
    """Return True when only the location order differs between two records."""
    planned_rest = {k: v for k, v in planned.items() if k != "locations"}
    fresh_rest = {k: v for k, v in fresh.items() if k != "locations"}
    if planned_rest != fresh_rest:
        return False
    planned_locations = planned.get("locations", [])
    fresh_locations = fresh.get("locations", [])
    return sorted(planned_locations, key=_location_key) == sorted(
        fresh_locations, key=_location_key
    )


def _load_catalog_record(plan_dir: Path, identifier: str) -> dict[str, Any]:
    path = plan_dir / plan_catalog_filename(identifier)
    if not path.is_file():
        logger.warning(f"Plan file for catalog '{identifier}' is missing: {path}")
        return {}
    try:
        return _load_json(path)
    except ValueError as exc:
        logger.warning(f"Unreadable plan file for catalog '{identifier}': {exc}")
        return {}


def _load_plan_summary(plan_dir: Path) -> dict[str, Any]:
    path = plan_dir / PLAN_SUMMARY_JSON
    if not path.is_file():
        msg = f"Plan summary not found: {path}"
        raise FileNotFoundError(msg)
    return _load_json(path)


def verify_determinism(*, root: Path, plan_dir: Path) -> DeterminismResult:
    """Verify that partitioning the project again reproduces its plan.

    The catalogs listed in the plan summary are compared, by identifier,
    against the catalogs a fresh pass produces. Location order is part of
    the comparison; a catalog whose locations only moved is reported as
    reordered.

    Args:
        root: Project root holding the config and the build manifest.
        plan_dir: Directory containing a previously written plan.

    Returns:
        DeterminismResult naming every catalog that differs.

    Raises:
        FileNotFoundError: If plan_dir or its plan summary does not exist.
        NotADirectoryError: If plan_dir is not a directory.
    """
    if not plan_dir.exists():
        msg = f"Plan directory does not exist: {plan_dir}"
        raise FileNotFoundError(msg)
    if not plan_dir.is_dir():
        msg = f"Plan path is not a directory: {plan_dir}"
        raise NotADirectoryError(msg)

    planned_summary = _load_plan_summary(plan_dir)
    planned_ids = [
        entry["identifier"] for entry in planned_summary.get("catalogs", [])
    ]

    config = load_config(root)
    manifest = load_manifest(resolve_project_path(root, config.manifest))
    builder = MultiCatalogBuilder(config, root)
    fresh = {
        catalog.identifier: _to_dict(catalog)
        for catalog in builder.get_content_catalogs(manifest)
    }

    missing = tuple(name for name in planned_ids if name not in fresh)
    extra = tuple(name for name in fresh if name not in planned_ids)

    changed: list[str] = []
    reordered: list[str] = []
    for identifier in planned_ids:
        if identifier not in fresh:
            continue
        planned = _load_catalog_record(plan_dir, identifier)
        regenerated = fresh[identifier]
        if planned == regenerated:
            continue
        if _is_reordered(planned, regenerated):
            reordered.append(identifier)
        else:
            changed.append(identifier)

    summary_changed = planned_summary != _to_dict(builder.summary())

    ok = not (missing or extra or changed or reordered or summary_changed)
    return DeterminismResult(
        ok=ok,
        changed=tuple(changed),
        reordered=tuple(reordered),
        missing=missing,
        extra=extra,
        summary_changed=summary_changed,
    )


__all__ = ["DeterminismResult", "verify_determinism"]
