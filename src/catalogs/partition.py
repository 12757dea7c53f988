"""Assignment of locations to named catalogs."""

from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from contract.models import CatalogBuildInfo
from rules.config import ConfigError
from rules.membership import build_predicate
from utils import bundle_file_name, join_load_path

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from contract.context import BuildContext
    from contract.models import Location
    from rules.config import CatalogSetupConfig
    from rules.membership import MembershipPredicate

logger = logging.getLogger(__name__)


class CatalogConfigError(ConfigError):
    """Raised when a named catalog cannot be set up from its configuration."""


class CatalogPartition:
    """Ordered locations destined for one catalog."""

    def __init__(self, build_info: CatalogBuildInfo) -> None:
        self.build_info = build_info
        self.bundles: list[Location] = []
        self.unresolved: list[str] = []
        self._by_key: dict[str, Location] = {}
        self._members: set[int] = set()

    @property
    def name(self) -> str:
        return self.build_info.identifier

    @property
    def locations(self) -> list[Location]:
        return self.build_info.locations

    @property
    def build_path(self) -> str:
        return self.build_info.build_path

    @property
    def load_path(self) -> str:
        return self.build_info.load_path

    @property
    def is_empty(self) -> bool:
        return not self.build_info.locations

    def add(self, location: Location) -> Location:
        self.build_info.locations.append(location)
        self._by_key.setdefault(location.primary_key, location)
        self._members.add(id(location))
        return location

    def get(self, key: str) -> Location | None:
        """Return the location held under canonical ``key``, if any."""
        return self._by_key.get(key)

    def holds(self, location: Location) -> bool:
        """Check membership of this exact location instance."""
        return id(location) in self._members

    def track_bundle(self, location: Location) -> None:
        self.bundles.append(location)

    def record_unresolved(self, dependency_id: str) -> bool:
        """Record a missing dependency id, returning False if already known."""
        if dependency_id in self.unresolved:
            return False
        self.unresolved.append(dependency_id)
        return True


class CatalogSetup(CatalogPartition):
    """A named catalog: its configuration, predicate and partition."""

    def __init__(
        self,
        config: CatalogSetupConfig,
        build_info: CatalogBuildInfo,
        predicate: MembershipPredicate,
    ) -> None:
        super().__init__(build_info)
        self.config = config
        self.predicate = predicate


class CatalogPartitioner:
    """Split a flat location list into the default and the named catalogs.

    Membership is not exclusive: a location is added to every catalog whose
    predicate matches, and only falls back to the default catalog when no
    predicate matched at all.
    """

    def __init__(self, context: BuildContext) -> None:
        self.context = context

    def create_setup(
        self,
        config: CatalogSetupConfig,
        default_filename: str,
        predicate: MembershipPredicate | None = None,
    ) -> CatalogSetup:
        """Resolve paths and file name for one configured catalog.

        Raises:
            CatalogConfigError: If the build path resolves to nothing.
        """
        profile = self.context.profile
        filename = f"{config.name}{PurePosixPath(default_filename).suffix}"

        build_path = config.build_path_ref.resolve(profile)
        if not build_path.strip():
            build_path = config.build_path_ref.evaluate(profile)
            if not build_path.strip():
                msg = f"The catalog build path for catalog '{config.name}' is empty."
                raise CatalogConfigError(msg)

        load_path = config.load_path_ref.resolve(profile)
        if not load_path:
            load_path = config.load_path_ref.evaluate(profile)

        build_info = CatalogBuildInfo(
            identifier=config.name,
            filename=filename,
            build_path=build_path,
            load_path=load_path,
            register_catalog=False,
        )
        return CatalogSetup(config, build_info, predicate or build_predicate(config))

    def create_setups(
        self,
        configs: Iterable[CatalogSetupConfig | None],
        default_filename: str,
    ) -> list[CatalogSetup]:
        return [
            self.create_setup(config, default_filename)
            for config in configs
            if config is not None
        ]

    def partition(
        self,
        locations: Iterable[Location],
        default: CatalogPartition,
        setups: Sequence[CatalogSetup],
    ) -> None:
        """Assign every location to its matching catalogs or to ``default``."""
        for location in locations:
            added_to_any = False
            for setup in setups:
                if setup.predicate(location, self.context):
                    self.claim(setup, location)
                    added_to_any = True

            if not added_to_any:
                default.add(location)

        for setup in setups:
            logger.debug(
                f"Catalog '{setup.name}' claimed {len(setup.locations)} locations "
                f"({len(setup.bundles)} bundles)"
            )

    def claim(self, setup: CatalogPartition, location: Location) -> Location:
        """Add a location to a named catalog.

        Bundles are added as a copy whose load path points into the catalog's
        own load path; the unmodified record is tracked for relocation.
        """
        if not location.is_bundle:
            return setup.add(location)

        file_name = bundle_file_name(location.internal_id, self.context.build_target)
        rewritten = location.model_copy(
            update={"internal_id": join_load_path(setup.load_path, file_name)}
        )
        setup.track_bundle(location)
        return setup.add(rewritten)

    def adopter_for(
        self, setup: CatalogPartition, default: CatalogPartition
    ) -> Callable[[Location], Location]:
        """Return the hook dependency closure uses to add pulled locations.

        A bundle that left the default catalog is rewritten and relocated for
        ``setup`` as well; everything else is added unchanged.
        """

        def adopt(location: Location) -> Location:
            if location.is_bundle and not default.holds(location):
                return self.claim(setup, location)
            return setup.add(location)

        return adopt


__all__ = [
    "CatalogConfigError",
    "CatalogPartition",
    "CatalogPartitioner",
    "CatalogSetup",
]
