"""Utility functions for writing catalog artifacts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import orjson

if TYPE_CHECKING:
    from pathlib import Path


def _to_dict(obj: object) -> object:
    """Convert object to dict for JSON serialization."""
    from dataclasses import asdict, is_dataclass

    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json", by_alias=True)
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    return obj


def _write_json(path: Path, obj: object) -> None:
    payload = _to_dict(obj)
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    path.write_bytes(orjson.dumps(payload, option=opts))


def _load_json(path: Path) -> dict[str, Any]:
    """Load a JSON object from a file."""
    data = orjson.loads(path.read_bytes())
    if not isinstance(data, dict):
        msg = f"Expected a JSON object in {path}"
        raise ValueError(msg)
    return data
