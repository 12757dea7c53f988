from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from cli import main
from contract.artifacts import PLAN_SUMMARY_JSON
from rules.config import load_config

TARGET = "StandaloneLinux64"


def _copy_mini_project_fixture(root: Path) -> None:
    fixture_project = Path(__file__).parent / "fixtures" / "mini_project"
    shutil.copytree(fixture_project, root)


def test_cli_plan_default_output_dir_from_fixture(tmp_path: Path) -> None:
    project_root = tmp_path / "project"
    _copy_mini_project_fixture(project_root)

    assert not (project_root / ".multicatalog").exists(), "plan dir must not pre-exist"
    exit_code = main(["plan", str(project_root)])

    plan_dir = project_root / ".multicatalog"
    assert exit_code == 0
    assert sorted(path.name for path in plan_dir.iterdir()) == [
        "Audio.json",
        "MainContentCatalog.json",
        "UI.json",
        PLAN_SUMMARY_JSON,
    ]
    summary = json.loads((plan_dir / PLAN_SUMMARY_JSON).read_text(encoding="utf-8"))
    assert summary["build_target"] == TARGET
    assert summary["empty_catalogs"] == ["Unused"]
    assert [c["identifier"] for c in summary["catalogs"]] == [
        "MainContentCatalog",
        "UI",
        "Audio",
    ]


def test_cli_plan_does_not_touch_bundles(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    project_root = tmp_path / "project"
    _copy_mini_project_fixture(project_root)

    out_dir = tmp_path / "plan"
    exit_code = main(["plan", str(project_root), "--out-dir", str(out_dir)])

    assert exit_code == 0
    assert (project_root / "Library" / "aa" / TARGET / "ui_assets_all.bundle").exists()
    assert not (project_root / "Catalogs").exists()
    assert "1 unresolved dependencies" in capsys.readouterr().err


def test_cli_build_relocates_and_reports_unresolved(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    project_root = tmp_path / "project"
    _copy_mini_project_fixture(project_root)

    exit_code = main(["build", str(project_root)])

    assert exit_code == 0
    assert (project_root / "Catalogs" / "UI" / TARGET / "ui_assets_all.bundle").exists()
    assert "unresolved: UI: missing-dep" in capsys.readouterr().err


def test_cli_build_twice_keeps_relocated_bundles(tmp_path: Path) -> None:
    project_root = tmp_path / "project"
    _copy_mini_project_fixture(project_root)
    relocated = project_root / "Catalogs" / "UI" / TARGET / "ui_assets_all.bundle"
    source = project_root / "Library" / "aa" / TARGET / "ui_assets_all.bundle"

    assert main(["build", str(project_root)]) == 0
    exit_code = main(["build", str(project_root)])

    assert exit_code == 0
    assert relocated.read_text(encoding="utf-8") == "ui_assets_all payload\n"
    assert not source.exists()


def test_cli_build_missing_manifest_reports_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    project_root = tmp_path / "project"
    project_root.mkdir()

    exit_code = main(["build", str(project_root)])

    assert exit_code == 2
    assert "Build manifest not found" in capsys.readouterr().err


def test_cli_build_empty_catalog_build_path_reports_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    project_root = tmp_path / "project"
    _copy_mini_project_fixture(project_root)
    config_path = project_root / "multicatalog.toml"
    config_path.write_text(
        config_path.read_text(encoding="utf-8")
        + '\n[[catalogs]]\nname = "Broken"\nbuild_path = ""\n',
        encoding="utf-8",
    )

    exit_code = main(["build", str(project_root)])

    assert exit_code == 2
    assert "'Broken'" in capsys.readouterr().err


def test_cli_build_missing_bundle_is_fatal(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    project_root = tmp_path / "project"
    _copy_mini_project_fixture(project_root)
    (project_root / "Library" / "aa" / TARGET / "ui_assets_all.bundle").unlink()

    exit_code = main(["build", str(project_root)])

    assert exit_code == 1
    assert "build failed" in capsys.readouterr().err


def test_cli_verify_default_plan_dir_reports_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    project_root = tmp_path / "project"
    _copy_mini_project_fixture(project_root)
    default_plan_dir = (project_root / load_config(project_root).output_dir).resolve()

    monkeypatch.chdir(project_root)
    exit_code = main(["verify"])

    assert exit_code == 2
    captured = capsys.readouterr()
    assert f"plan-dir: {default_plan_dir}" in captured.err
    assert "Plan directory does not exist" in captured.err


def test_cli_verify_after_plan_succeeds(tmp_path: Path) -> None:
    project_root = tmp_path / "project"
    _copy_mini_project_fixture(project_root)

    assert main(["plan", str(project_root)]) == 0
    assert main(["verify", str(project_root)]) == 0


def test_cli_clean_removes_catalog_directories(tmp_path: Path) -> None:
    project_root = tmp_path / "project"
    _copy_mini_project_fixture(project_root)
    assert main(["build", str(project_root)]) == 0

    exit_code = main(["clean", str(project_root), "--build-target", TARGET])

    assert exit_code == 0
    assert not (project_root / "Catalogs" / "UI" / TARGET).exists()
    assert (project_root / "Library").exists()


def test_cli_clean_without_build_target_uses_manifest_target(tmp_path: Path) -> None:
    project_root = tmp_path / "project"
    _copy_mini_project_fixture(project_root)
    assert main(["build", str(project_root)]) == 0

    exit_code = main(["clean", str(project_root)])

    assert exit_code == 0
    assert not (project_root / "Catalogs" / "UI" / TARGET).exists()
    assert not (project_root / "Catalogs" / "Audio" / TARGET).exists()
    assert (project_root / "Library" / "aa" / TARGET).exists()


def test_cli_invalid_config_reports_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    project_root = tmp_path / "project"
    project_root.mkdir()
    (project_root / "multicatalog.toml").write_text("bogus = 1", encoding="utf-8")

    exit_code = main(["plan", str(project_root)])

    assert exit_code == 2
    assert "Invalid config" in capsys.readouterr().err
