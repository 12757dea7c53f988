"""Catalog membership predicates."""

from __future__ import annotations

from fnmatch import fnmatch
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from contract.context import BuildContext
    from contract.models import Location
    from rules.config import CatalogSetupConfig

    MembershipPredicate = Callable[[Location, BuildContext], bool]


def location_in_group(location: Location, group_name: str, context: BuildContext) -> bool:
    """Check whether a location was produced by the named asset group.

    Bundle-typed locations match on their bundle id, every other location
    matches when any of its keys is an entry key of the group.
    """
    group = context.group_named(group_name)
    if group is None:
        return False

    if location.is_bundle:
        bundle_id = location.bundle_id
        return bundle_id is not None and bundle_id in group.bundles

    group_keys = context.group_keys(group_name)
    return any(key in group_keys for key in location.keys)


def matches_key_globs(location: Location, patterns: Sequence[str]) -> bool:
    """Check whether any key of the location matches any glob pattern."""
    for pattern in patterns:
        for key in location.keys:
            if fnmatch(key, pattern):
                return True
    return False


def build_predicate(catalog: CatalogSetupConfig) -> MembershipPredicate:
    """Build the membership predicate for a configured catalog.

    A location is a member when it belongs to any listed group or when one
    of its keys matches any key glob. A catalog with neither claims nothing.
    """
    groups = tuple(catalog.groups)
    patterns = tuple(catalog.keys)

    def predicate(location: Location, context: BuildContext) -> bool:
        if any(location_in_group(location, name, context) for name in groups):
            return True
        return matches_key_globs(location, patterns)

    return predicate
