"""Per-pass build context shared by predicates and the relocator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contract.models import AssetGroup, BuildManifest
    from profiles.settings import ProfileSettings


@dataclass
class BuildContext:
    """Read-only view of one build pass: manifest, profile and group indexes."""

    manifest: BuildManifest
    profile: ProfileSettings
    _groups_by_name: dict[str, AssetGroup] = field(
        default_factory=dict, init=False, repr=False
    )
    _bundle_to_group: dict[str, AssetGroup] = field(
        default_factory=dict, init=False, repr=False
    )
    _group_keys: dict[str, frozenset[str]] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        for group in self.manifest.groups:
            self._groups_by_name.setdefault(group.name, group)
            self._group_keys.setdefault(group.name, frozenset(group.keys))
            for bundle_id in group.bundles:
                self._bundle_to_group.setdefault(bundle_id, group)

    @property
    def build_target(self) -> str:
        return self.manifest.build_target

    def group_named(self, name: str) -> AssetGroup | None:
        return self._groups_by_name.get(name)

    def group_keys(self, name: str) -> frozenset[str]:
        return self._group_keys.get(name, frozenset())

    def group_for_bundle(self, bundle_id: str) -> AssetGroup | None:
        """Return the group that produced ``bundle_id``, if any."""
        return self._bundle_to_group.get(bundle_id)


__all__ = ["BuildContext"]
