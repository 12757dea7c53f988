"""Removal of previously emitted catalog build directories."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from profiles.settings import ProfileSettings
    from rules.config import CatalogSetupConfig

logger = logging.getLogger(__name__)

DEFAULT_PROTECTED_DIRS = ("Library", "Assets")


@dataclass(frozen=True)
class CleanResult:
    removed: tuple[Path, ...] = field(default_factory=tuple)
    protected: tuple[Path, ...] = field(default_factory=tuple)


class CatalogSetupCleaner:
    """Delete catalog build directories without touching protected roots.

    The project root, ``DEFAULT_PROTECTED_DIRS`` and every extra entry of
    ``protected_dirs`` are protected. A build directory equal to, or
    containing, one of them is never removed.
    """

    def __init__(
        self,
        root: Path,
        protected_dirs: Sequence[str] = (),
    ) -> None:
        self.root = root.resolve()
        names = dict.fromkeys((*DEFAULT_PROTECTED_DIRS, *protected_dirs))
        self.protected_paths: tuple[Path, ...] = (
            self.root,
            *((self.root / name).resolve() for name in names),
        )

    def is_protected(self, directory: Path) -> bool:
        resolved = directory.resolve()
        return any(
            resolved == protected or protected.is_relative_to(resolved)
            for protected in self.protected_paths
        )

    def build_directory(
        self, catalog: CatalogSetupConfig, profile: ProfileSettings
    ) -> Path:
        """Return the directory a catalog was built into.

        Falls back to the raw path reference when it does not resolve.
        """
        build_path = catalog.build_path_ref.resolve(profile)
        if not build_path:
            build_path = catalog.build_path_ref.id

        candidate = Path(build_path).expanduser()
        if not candidate.is_absolute():
            candidate = self.root / candidate
        return candidate

    def clean(
        self,
        catalogs: Iterable[CatalogSetupConfig | None],
        profile: ProfileSettings,
    ) -> CleanResult:
        removed: list[Path] = []
        protected: list[Path] = []

        for catalog in catalogs:
            if catalog is None:
                continue

            directory = self.build_directory(catalog, profile)
            if not directory.is_dir():
                continue

            if self.is_protected(directory):
                logger.warning(
                    f"Refusing to delete {directory} for catalog '{catalog.name}': "
                    "it is a protected project directory."
                )
                protected.append(directory)
                continue

            if directory.is_symlink():
                directory.unlink()
            else:
                shutil.rmtree(directory)
            logger.info(f"Removed catalog directory {directory}")
            removed.append(directory)

        return CleanResult(removed=tuple(removed), protected=tuple(protected))


__all__ = ["DEFAULT_PROTECTED_DIRS", "CatalogSetupCleaner", "CleanResult"]
