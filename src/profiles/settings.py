"""Profile variables and symbolic path resolution."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

BUILD_TARGET_VARIABLE = "BuildTarget"

# Nested variables are expanded at most this many times.
_MAX_EXPANSION_DEPTH = 16

_TOKEN = re.compile(r"\[([^\[\]]+)\]")


@dataclass
class ProfileSettings:
    """Key-value resolver for ``[Name]`` path expressions.

    Unknown bracket tokens and ``{Runtime}`` tokens are left untouched so
    load paths can still be expanded by the runtime.
    """

    variables: dict[str, str] = field(default_factory=dict)
    build_target: str = ""

    def _lookup(self, name: str) -> str | None:
        if name in self.variables:
            return self.variables[name]
        if name == BUILD_TARGET_VARIABLE and self.build_target:
            return self.build_target
        return None

    def has_variable(self, name: str) -> bool:
        return self._lookup(name) is not None

    def evaluate(self, expression: str) -> str:
        """Expand every known ``[Name]`` token in ``expression``."""
        if not expression:
            return ""

        def _replace(match: re.Match[str]) -> str:
            value = self._lookup(match.group(1))
            return match.group(0) if value is None else value

        result = expression
        for _ in range(_MAX_EXPANSION_DEPTH):
            expanded = _TOKEN.sub(_replace, result)
            if expanded == result:
                break
            result = expanded
        return result

    def value_of(self, name: str) -> str:
        """Return the evaluated value of variable ``name`` or ``""``."""
        value = self._lookup(name)
        if value is None:
            return ""
        return self.evaluate(value)


@dataclass(frozen=True)
class PathReference:
    """Reference to a path setting, identified by its variable name.

    ``id`` may also be a raw expression, which is what ``evaluate`` uses as a
    fallback when no variable of that name exists.
    """

    id: str

    def resolve(self, profile: ProfileSettings) -> str:
        return profile.value_of(self.id)

    def evaluate(self, profile: ProfileSettings) -> str:
        return profile.evaluate(self.id)


__all__ = ["BUILD_TARGET_VARIABLE", "PathReference", "ProfileSettings"]
