from __future__ import annotations

from pathlib import Path

import pytest

from rules.config import ConfigError, load_config, resolve_output_dir


def _write_config(project_root: Path, toml_content: str) -> None:
    (project_root / "multicatalog.toml").write_text(toml_content, encoding="utf-8")


def test_unknown_top_level_key_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "bogus_key = true")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_invalid_toml_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "[[catalogs]\nname = ")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path)


def test_unknown_nested_catalog_key_rejected(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[[catalogs]]
name = "UI"
build_path = "UIBuildPath"
bogus = true
""".strip(),
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_empty_catalog_name_rejected(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[[catalogs]]
name = "  "
build_path = "UIBuildPath"
""".strip(),
    )

    with pytest.raises(ConfigError, match="non-empty"):
        load_config(tmp_path)


def test_duplicate_catalog_names_rejected(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[[catalogs]]
name = "UI"
build_path = "A"

[[catalogs]]
name = "UI"
build_path = "B"
""".strip(),
    )

    with pytest.raises(ConfigError, match="Duplicate catalog name 'UI'"):
        load_config(tmp_path)


def test_valid_catalogs_config_accepted(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
default_build_path = "LocalBuildPath"

[profile]
LocalBuildPath = "Library/aa/[BuildTarget]"
UIBuildPath = "Catalogs/UI"

[[catalogs]]
name = "UI"
groups = ["UI"]
keys = ["ui/*"]
build_path = "UIBuildPath"
load_path = "https://cdn.example.com/ui"

[[catalogs]]
name = "Audio"
groups = ["Audio"]
build_path = "Catalogs/Audio"
""".strip(),
    )

    config = load_config(tmp_path)

    assert [c.name for c in config.catalogs if c is not None] == ["UI", "Audio"]
    ui = config.catalogs[0]
    assert ui is not None
    assert ui.groups == ["UI"]
    assert ui.keys == ["ui/*"]
    assert ui.build_path_ref.id == "UIBuildPath"
    assert config.profile["UIBuildPath"] == "Catalogs/UI"
    profile = config.profile_settings("StandaloneLinux64")
    assert profile.value_of("LocalBuildPath") == "Library/aa/StandaloneLinux64"


def test_missing_config_uses_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config.output_dir == ".multicatalog"
    assert config.manifest == "build_manifest.json"
    assert config.default_build_path == "LocalBuildPath"
    assert config.protected_dirs == []
    assert config.catalogs == []


def test_resolve_output_dir_rejects_escape(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="escapes the project root"):
        resolve_output_dir(tmp_path, "../outside")


def test_resolve_output_dir_rejects_project_root(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="must not be the project root"):
        resolve_output_dir(tmp_path, ".")
