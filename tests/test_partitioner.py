from __future__ import annotations

import pytest

from catalogs.partition import (
    CatalogConfigError,
    CatalogPartition,
    CatalogPartitioner,
)
from contract.context import BuildContext
from contract.models import BuildManifest, CatalogBuildInfo, Location
from profiles.settings import ProfileSettings
from rules.config import CatalogSetupConfig


def _context() -> BuildContext:
    manifest = BuildManifest.model_validate(
        {
            "build_target": "StandaloneLinux64",
            "groups": [
                {"name": "UI", "keys": ["ui/button.png"], "bundles": ["ui.bundle"]},
                {"name": "Audio", "keys": ["audio/click.wav"]},
            ],
        }
    )
    profile = ProfileSettings(
        variables={
            "UIBuildPath": "Catalogs/UI/[BuildTarget]",
            "UILoadPath": "https://cdn.example.com/ui/[BuildTarget]",
        },
        build_target="StandaloneLinux64",
    )
    return BuildContext(manifest=manifest, profile=profile)


def _default() -> CatalogPartition:
    return CatalogPartition(
        CatalogBuildInfo(
            identifier="Main",
            filename="catalog.json",
            build_path="Library/aa",
            load_path="{Runtime}",
        )
    )


def _asset(key: str) -> Location:
    return Location(
        resource_type="Texture2D",
        internal_id=f"Assets/{key}",
        provider="BundledAssetProvider",
        keys=(key,),
    )


def _ui_bundle() -> Location:
    return Location(
        resource_type="AssetBundle",
        internal_id="{Runtime}/StandaloneLinux64/ui.bundle",
        provider="AssetBundleProvider",
        keys=("bundle-ui",),
        data={"bundle_name": "ui"},
    )


def _ui_config(**overrides: object) -> CatalogSetupConfig:
    values: dict[str, object] = {
        "name": "UI",
        "groups": ["UI"],
        "build_path": "UIBuildPath",
        "load_path": "UILoadPath",
    }
    values.update(overrides)
    return CatalogSetupConfig.model_validate(values)


def test_claimed_location_leaves_default_catalog() -> None:
    partitioner = CatalogPartitioner(_context())
    default = _default()
    setup = partitioner.create_setup(_ui_config(), "catalog.json")
    location = _asset("ui/button.png")

    partitioner.partition([location], default, [setup])

    assert default.locations == []
    assert setup.locations == [location]
    assert setup.locations[0] is location


def test_unclaimed_location_goes_to_default_exactly_once() -> None:
    partitioner = CatalogPartitioner(_context())
    default = _default()
    setup = partitioner.create_setup(_ui_config(), "catalog.json")
    location = _asset("levels/intro.unity")

    partitioner.partition([location], default, [setup])

    assert default.locations == [location]
    assert setup.is_empty


def test_overlapping_catalogs_both_receive_location() -> None:
    partitioner = CatalogPartitioner(_context())
    default = _default()
    ui = partitioner.create_setup(_ui_config(), "catalog.json")
    shared = partitioner.create_setup(
        _ui_config(name="Shared", groups=[], keys=["ui/*"]), "catalog.json"
    )
    location = _asset("ui/button.png")

    partitioner.partition([location], default, [ui, shared])

    assert default.locations == []
    assert ui.locations == [location]
    assert shared.locations == [location]


def test_claimed_bundle_is_rewritten_and_tracked() -> None:
    partitioner = CatalogPartitioner(_context())
    default = _default()
    setup = partitioner.create_setup(_ui_config(), "catalog.json")
    bundle = _ui_bundle()

    partitioner.partition([bundle], default, [setup])

    assert len(setup.locations) == 1
    rewritten = setup.locations[0]
    assert rewritten is not bundle
    assert rewritten.internal_id == (
        "https://cdn.example.com/ui/StandaloneLinux64/ui.bundle"
    )
    assert rewritten.keys == bundle.keys
    assert rewritten.data == bundle.data
    assert bundle.internal_id == "{Runtime}/StandaloneLinux64/ui.bundle"
    assert setup.bundles == [bundle]
    assert setup.bundles[0] is bundle


def test_create_setup_resolves_paths_and_filename() -> None:
    partitioner = CatalogPartitioner(_context())

    setup = partitioner.create_setup(_ui_config(), "catalog.bin")

    assert setup.build_info.filename == "UI.bin"
    assert setup.build_path == "Catalogs/UI/StandaloneLinux64"
    assert setup.load_path == "https://cdn.example.com/ui/StandaloneLinux64"
    assert setup.build_info.register_catalog is False


def test_create_setup_falls_back_to_evaluating_raw_expression() -> None:
    partitioner = CatalogPartitioner(_context())

    setup = partitioner.create_setup(
        _ui_config(build_path="Out/[BuildTarget]", load_path="http://x/[BuildTarget]"),
        "catalog.json",
    )

    assert setup.build_path == "Out/StandaloneLinux64"
    assert setup.load_path == "http://x/StandaloneLinux64"


def test_empty_build_path_is_fatal_and_names_catalog() -> None:
    partitioner = CatalogPartitioner(_context())

    with pytest.raises(CatalogConfigError, match="'UI'"):
        partitioner.create_setup(_ui_config(build_path=""), "catalog.json")


def test_create_setups_skips_missing_entries() -> None:
    partitioner = CatalogPartitioner(_context())

    setups = partitioner.create_setups(
        [None, _ui_config(), None], "catalog.json"
    )

    assert [setup.name for setup in setups] == ["UI"]


def test_custom_predicate_receives_build_context() -> None:
    context = _context()
    partitioner = CatalogPartitioner(context)
    seen: list[BuildContext] = []

    def everything(location: Location, ctx: BuildContext) -> bool:
        seen.append(ctx)
        return True

    setup = partitioner.create_setup(_ui_config(), "catalog.json", everything)
    default = _default()
    partitioner.partition([_asset("a"), _asset("b")], default, [setup])

    assert [loc.primary_key for loc in setup.locations] == ["a", "b"]
    assert len(seen) == 2
    assert all(ctx is context for ctx in seen)
