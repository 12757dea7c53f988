"""Multi-catalog build pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from artifacts.clean import CatalogSetupCleaner, CleanResult
from artifacts.relocate import ArtifactRelocator, RelocationResult
from catalogs.partition import CatalogPartition, CatalogPartitioner, CatalogSetup
from contract.context import BuildContext
from contract.models import CatalogBuildInfo, PlanCatalogSummary, PlanSummary
from graph.closure import DependencyGraph, close_partition

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence
    from pathlib import Path

    from artifacts.write import CatalogWriter
    from contract.models import BuildManifest
    from profiles.settings import ProfileSettings
    from rules.config import MultiCatalogConfig
    from rules.membership import MembershipPredicate

    ArtifactBuildHook = Callable[[BuildContext, Sequence[CatalogBuildInfo]], None]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildResult:
    catalogs: tuple[CatalogBuildInfo, ...]
    written: tuple[Path, ...] = field(default_factory=tuple)
    relocation: RelocationResult = field(default_factory=RelocationResult)
    unresolved: dict[str, tuple[str, ...]] = field(default_factory=dict)


class MultiCatalogBuilder:
    """Build the default catalog plus one catalog per configured setup.

    The instance can be reused across builds; partition state is reset at
    the start of every pass.
    """

    def __init__(
        self,
        config: MultiCatalogConfig,
        root: Path,
        *,
        predicates: Mapping[str, MembershipPredicate] | None = None,
        build_artifacts: ArtifactBuildHook | None = None,
    ) -> None:
        self.config = config
        self.root = root
        self._predicates = dict(predicates or {})
        self._build_artifacts = build_artifacts
        self._setups: list[CatalogSetup] = []
        self._default: CatalogPartition | None = None
        self._context: BuildContext | None = None

    @property
    def setups(self) -> list[CatalogSetup]:
        return self._setups

    @property
    def default_partition(self) -> CatalogPartition | None:
        return self._default

    def _profile_for(
        self, manifest: BuildManifest, profile: ProfileSettings | None
    ) -> ProfileSettings:
        if profile is None:
            return self.config.profile_settings(manifest.build_target)
        if not profile.build_target:
            return replace(profile, build_target=manifest.build_target)
        return profile

    def get_content_catalogs(
        self,
        manifest: BuildManifest,
        profile: ProfileSettings | None = None,
    ) -> list[CatalogBuildInfo]:
        """Partition the manifest locations and close every named catalog.

        Returns:
            The default catalog followed by every non-empty named catalog,
            in configuration order.

        Raises:
            CatalogConfigError: If a named catalog has no usable build path.
        """
        self._setups.clear()
        self._default = None

        profile = self._profile_for(manifest, profile)
        context = BuildContext(manifest=manifest, profile=profile)
        self._context = context

        spec = manifest.catalog
        default = CatalogPartition(
            CatalogBuildInfo(
                identifier=spec.name,
                filename=spec.filename,
                build_path=profile.evaluate(spec.build_path),
                load_path=profile.evaluate(spec.load_path),
                register_catalog=True,
            )
        )

        partitioner = CatalogPartitioner(context)
        for catalog in self.config.catalogs:
            if catalog is None:
                continue
            self._setups.append(
                partitioner.create_setup(
                    catalog, spec.filename, self._predicates.get(catalog.name)
                )
            )

        partitioner.partition(manifest.locations, default, self._setups)
        self._default = default

        graph = DependencyGraph(manifest.locations)
        for setup in self._setups:
            result = close_partition(
                setup, graph, adopt=partitioner.adopter_for(setup, default)
            )
            if result.added:
                logger.debug(
                    f"Catalog '{setup.name}' pulled in {len(result.added)} dependencies"
                )

        catalogs = [default.build_info]
        catalogs.extend(setup.build_info for setup in self._setups if not setup.is_empty)
        logger.info(
            f"Partitioned {len(manifest.locations)} locations into "
            f"{len(catalogs)} catalogs"
        )
        return catalogs

    def build(
        self,
        manifest: BuildManifest,
        writer: CatalogWriter,
        profile: ProfileSettings | None = None,
    ) -> BuildResult:
        """Run a full pass: partition, build, write catalogs, relocate bundles."""
        catalogs = self.get_content_catalogs(manifest, profile)
        context = self._context
        if context is None:
            msg = "Partitioning did not produce a build context"
            raise RuntimeError(msg)

        if self._build_artifacts is not None:
            self._build_artifacts(context, catalogs)

        written = writer.write(catalogs)

        relocator = ArtifactRelocator(
            self.root, context, self.config.default_build_path
        )
        relocation = relocator.relocate(self._setups)

        return BuildResult(
            catalogs=tuple(catalogs),
            written=tuple(written),
            relocation=relocation,
            unresolved=self.unresolved(),
        )

    def unresolved(self) -> dict[str, tuple[str, ...]]:
        return {
            setup.name: tuple(setup.unresolved)
            for setup in self._setups
            if setup.unresolved
        }

    def summary(self) -> PlanSummary:
        """Summarize the last pass."""
        if self._default is None or self._context is None:
            msg = "No catalogs have been partitioned yet"
            raise RuntimeError(msg)

        partitions: list[CatalogPartition] = [self._default]
        partitions.extend(setup for setup in self._setups if not setup.is_empty)
        return PlanSummary(
            build_target=self._context.build_target,
            catalogs=[
                PlanCatalogSummary(
                    identifier=partition.name,
                    location_count=len(partition.locations),
                    bundle_count=len(partition.bundles),
                    unresolved=list(partition.unresolved),
                )
                for partition in partitions
            ],
            empty_catalogs=[setup.name for setup in self._setups if setup.is_empty],
        )

    def clear_cached_data(self, profile: ProfileSettings | None = None) -> CleanResult:
        """Remove the build directories of every configured catalog."""
        if profile is None:
            profile = self.config.profile_settings()
        cleaner = CatalogSetupCleaner(self.root, self.config.protected_dirs)
        return cleaner.clean(self.config.catalogs, profile)


__all__ = ["BuildResult", "MultiCatalogBuilder"]
