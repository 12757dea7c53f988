"""Profile-based path resolution."""

from profiles.settings import BUILD_TARGET_VARIABLE, PathReference, ProfileSettings

__all__ = ["BUILD_TARGET_VARIABLE", "PathReference", "ProfileSettings"]
