"""Command-line interface for multicatalog."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from artifacts.write import build_catalogs, clean_catalogs, generate_plan
from contract.manifest import ManifestError
from rules.config import ConfigError, load_config
from verify.verify import verify_determinism


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Project root (default: .)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="multicatalog")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    plan_parser = subparsers.add_parser(
        "plan", help="Partition the build manifest and write the catalog plan"
    )
    _add_common_paths(plan_parser)
    plan_parser.add_argument(
        "--out-dir",
        default=None,
        help="Output directory for plan files (default: config output dir)",
    )

    build_parser = subparsers.add_parser(
        "build", help="Write every catalog and relocate its bundles"
    )
    _add_common_paths(build_parser)

    verify_parser = subparsers.add_parser(
        "verify", help="Verify determinism of the catalog plan"
    )
    _add_common_paths(verify_parser)
    verify_parser.add_argument(
        "--plan-dir",
        default=None,
        help="Plan directory (default: config output dir)",
    )

    clean_parser = subparsers.add_parser(
        "clean", help="Remove the build directories of every named catalog"
    )
    _add_common_paths(clean_parser)
    clean_parser.add_argument(
        "--build-target",
        default="",
        help="Build target used to expand [BuildTarget] (default: from the manifest)",
    )

    return parser


def _resolve_output_dir(out_dir: str | None) -> Path | None:
    if out_dir is None:
        return None
    return Path(out_dir).expanduser().resolve()


def _resolve_plan_dir(root: Path, plan_dir: str | None) -> Path:
    if plan_dir is None:
        config = load_config(root)
        return (root / config.output_dir).resolve()
    return Path(plan_dir).expanduser().resolve()


def _handle_plan(root: Path, out_dir: str | None) -> int:
    result = generate_plan(root=root, out_dir=_resolve_output_dir(out_dir))
    if result["unresolved_count"]:
        sys.stderr.write(
            f"warning: {result['unresolved_count']} unresolved dependencies\n"
        )
    return 0


def _handle_build(root: Path) -> int:
    try:
        result = build_catalogs(root=root)
    except OSError as exc:
        sys.stderr.write(f"error: build failed: {exc}\n")
        return 1
    for catalog_name, missing in result.unresolved.items():
        for dependency_id in missing:
            sys.stderr.write(f"unresolved: {catalog_name}: {dependency_id}\n")
    return 0


def _handle_verify(root: Path, plan_dir: str | None) -> int:
    resolved_plan_dir = _resolve_plan_dir(root, plan_dir)
    try:
        result = verify_determinism(root=root, plan_dir=resolved_plan_dir)
    except (FileNotFoundError, NotADirectoryError) as exc:
        sys.stderr.write(f"plan-dir: {resolved_plan_dir}\n")
        sys.stderr.write(f"error: {exc}\n")
        return 2
    if not result.ok:
        for label, identifiers in (
            ("missing", result.missing),
            ("extra", result.extra),
            ("reordered", result.reordered),
            ("changed", result.changed),
        ):
            for identifier in identifiers:
                sys.stderr.write(f"{label}: {identifier}\n")
        if result.summary_changed:
            sys.stderr.write("changed: plan summary\n")
        return 1
    return 0


def _handle_clean(root: Path, build_target: str) -> int:
    try:
        result = clean_catalogs(root=root, build_target=build_target)
    except OSError as exc:
        sys.stderr.write(f"error: clean failed: {exc}\n")
        return 1
    for path in result.protected:
        sys.stderr.write(f"protected: {path}\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    root = Path(args.root).expanduser().resolve()

    try:
        if args.command == "plan":
            return _handle_plan(root, args.out_dir)

        if args.command == "build":
            return _handle_build(root)

        if args.command == "verify":
            return _handle_verify(root, args.plan_dir)

        if args.command == "clean":
            return _handle_clean(root, args.build_target)
    except (ConfigError, ManifestError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
