"""Shared utilities for multicatalog."""

from __future__ import annotations

from pathlib import Path


def bundle_file_name(internal_id: str, build_target: str = "") -> str:
    """Return the file name a bundle is written under for ``build_target``.

    Args:
        internal_id: Internal id of a bundle location, either a path or a URL
        build_target: Build target identifier (naming is target independent
            today, the argument keeps call sites explicit)

    Returns:
        Last path segment of the internal id

    Examples:
        >>> bundle_file_name("Library/aa/StandaloneLinux64/ui_assets.bundle")
        'ui_assets.bundle'
        >>> bundle_file_name("{Runtime}\\\\StandaloneLinux64\\\\ui_assets.bundle")
        'ui_assets.bundle'
    """
    del build_target
    normalized = internal_id.replace("\\", "/").rstrip("/")
    return normalized.rsplit("/", 1)[-1]


def join_load_path(load_path: str, file_name: str) -> str:
    """Join a runtime load path and a file name with a forward slash.

    Examples:
        >>> join_load_path("http://cdn/ui/", "a.bundle")
        'http://cdn/ui/a.bundle'
        >>> join_load_path("", "a.bundle")
        'a.bundle'
    """
    base = load_path.replace("\\", "/").rstrip("/")
    if not base:
        return file_name
    return f"{base}/{file_name}"


def resolve_project_path(root: Path, path: str | Path) -> Path:
    """Resolve a build path against the project root.

    Absolute paths are kept; relative ones are anchored at ``root``.
    """
    candidate = Path(path).expanduser()
    if not candidate.is_absolute():
        candidate = root / candidate
    return candidate.resolve()
