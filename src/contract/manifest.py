"""Loading of the base builder's manifest."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import orjson
from pydantic import ValidationError

from contract.models import BuildManifest

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class ManifestError(Exception):
    """Raised when the build manifest is missing or cannot be parsed."""


def load_manifest(path: Path) -> BuildManifest:
    """Load and validate a build manifest JSON file."""
    if not path.is_file():
        msg = f"Build manifest not found: {path}"
        raise ManifestError(msg)

    try:
        data = orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError as e:
        msg = f"Invalid JSON in {path}: {e}"
        raise ManifestError(msg) from e

    try:
        manifest = BuildManifest.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid build manifest in {path}: {e}"
        raise ManifestError(msg) from e

    logger.debug(
        f"Loaded manifest {path}: {len(manifest.locations)} locations, "
        f"{len(manifest.groups)} groups"
    )
    return manifest
