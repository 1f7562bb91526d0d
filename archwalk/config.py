from __future__ import annotations

"""
Walk configuration: symlink policy, exclusions and error strictness.

This is the single place the CLI and the builder read their options from.
"""

from dataclasses import dataclass, field
from typing import Sequence

from archwalk.traversal import FindFlags


@dataclass
class WalkConfig:
    """
    Options for building an archive member list.

    follow_symlinks: archive link targets instead of the links.
    exclude: glob patterns; a matching entry (and everything below it) is
             left out. Patterns are matched against the member name and
             the leaf name.
    strict: entries that cannot be archived abort the walk instead of
            being skipped with a warning.
    """

    follow_symlinks: bool = False
    exclude: Sequence[str] = field(default_factory=tuple)
    strict: bool = False

    @property
    def flags(self) -> FindFlags:
        if self.follow_symlinks:
            return FindFlags.FOLLOW_SYMLINKS
        return FindFlags.NONE


def get_default_config() -> WalkConfig:
    """Return the configuration the CLI uses when no options are given."""
    return WalkConfig()
