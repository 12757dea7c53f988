"""Relocation of bundle files into named catalog build directories."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rules.config import DEFAULT_BUILD_PATH_VARIABLE, ConfigError
from utils import bundle_file_name, resolve_project_path

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from catalogs.partition import CatalogSetup
    from contract.context import BuildContext
    from contract.models import Location

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelocationResult:
    copied: tuple[tuple[Path, Path], ...] = field(default_factory=tuple)
    deleted: tuple[Path, ...] = field(default_factory=tuple)
    skipped: tuple[str, ...] = field(default_factory=tuple)


def copy_overwrite(src: Path, dst: Path) -> bool:
    """Copy ``src`` to ``dst``, overwriting any existing destination file.

    Returns False without touching the file system when both paths are the
    same file. The destination is left alone when ``src`` is missing.

    Raises:
        FileNotFoundError: If ``src`` is not a file.
    """
    if src == dst:
        return False

    if not src.is_file():
        msg = f"Bundle file not found: {src}"
        raise FileNotFoundError(msg)

    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(src, dst)
    return True


class ArtifactRelocator:
    """Copy claimed bundles into catalog directories, then drop the originals.

    Only bundles whose owning group builds into the default build path
    setting are relocated. Sources are deleted after every catalog got its
    copy, since one bundle may be claimed by several catalogs.
    """

    def __init__(
        self,
        root: Path,
        context: BuildContext,
        default_build_path: str = DEFAULT_BUILD_PATH_VARIABLE,
    ) -> None:
        self.root = root
        self.context = context
        self.default_build_path = default_build_path
        self._default_build_dir: Path | None = None

    def default_build_dir(self) -> Path:
        if self._default_build_dir is None:
            value = self.context.profile.value_of(self.default_build_path)
            if not value.strip():
                msg = (
                    f"The default build path setting '{self.default_build_path}' "
                    "resolves to an empty path."
                )
                raise ConfigError(msg)
            self._default_build_dir = resolve_project_path(self.root, value)
        return self._default_build_dir

    def _builds_to_default_path(self, location: Location) -> bool:
        bundle_id = location.bundle_id
        if bundle_id is None:
            return False
        group = self.context.group_for_bundle(bundle_id)
        # Compared by path setting identity, not by the evaluated path.
        return group is not None and group.build_path == self.default_build_path

    def relocate(self, setups: Sequence[CatalogSetup]) -> RelocationResult:
        """Copy every relocatable bundle, then delete the copied sources.

        Raises:
            OSError: If a copy or delete fails.
            ConfigError: If the default build path cannot be resolved.
        """
        copied: list[tuple[Path, Path]] = []
        skipped: list[str] = []
        sources: dict[Path, None] = {}
        destinations: set[Path] = set()

        for setup in setups:
            if setup.is_empty:
                continue

            catalog_dir = resolve_project_path(self.root, setup.build_path)
            for location in setup.bundles:
                if not self._builds_to_default_path(location):
                    skipped.append(location.bundle_id or location.internal_id)
                    continue

                file_name = bundle_file_name(
                    location.internal_id, self.context.build_target
                )
                src = self.default_build_dir() / file_name
                dst = catalog_dir / file_name
                destinations.add(dst)

                if not src.is_file() and dst.is_file():
                    logger.debug(
                        f"Bundle {file_name} already relocated for catalog "
                        f"'{setup.name}'"
                    )
                    continue

                if copy_overwrite(src, dst):
                    logger.debug(f"Copied {src} -> {dst} for catalog '{setup.name}'")
                    copied.append((src, dst))
                    sources[src] = None

        deleted: list[Path] = []
        for src in sources:
            if src in destinations:
                continue
            if src.exists():
                src.unlink()
                deleted.append(src)

        if copied:
            logger.info(
                f"Relocated {len(sources)} bundles into {len(copied)} catalog copies"
            )

        return RelocationResult(
            copied=tuple(copied),
            deleted=tuple(deleted),
            skipped=tuple(skipped),
        )


__all__ = ["ArtifactRelocator", "RelocationResult", "copy_overwrite"]
