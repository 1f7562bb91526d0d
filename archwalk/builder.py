from __future__ import annotations

"""
Archive member builder: drives the walker and collects archive members.

A Builder walks one or more paths with traversal.find(), turns every
accepted entry into a Member and keeps an ErrorAccumulator that both the
walker and the builder's visitor record into. It does not write archive
bytes; it produces the member list an archive writer would consume.
"""

import logging
import os
from fnmatch import fnmatchcase
from typing import List, Optional, Union

from archwalk.config import WalkConfig, get_default_config
from archwalk.errors.accumulator import ErrorAccumulator
from archwalk.errors.models import Severity
from archwalk.members import Member, MemberKind, kind_of, member_from_stat
from archwalk.traversal import find

logger = logging.getLogger(__name__)


class Builder:
    """
    Collects archive members from walked trees.

    An ErrorAccumulator is created unless one is passed in. Pass
    no_error=True to build without one; every visitor error then aborts the
    walk.
    """

    def __init__(
        self,
        config: Optional[WalkConfig] = None,
        error: Optional[ErrorAccumulator] = None,
        no_error: bool = False,
    ) -> None:
        self.config = config if config is not None else get_default_config()
        self.error: Optional[ErrorAccumulator] = None
        if not no_error:
            self.error = error if error is not None else ErrorAccumulator()
        self.members: List[Member] = []

    def get_error(self) -> Optional[ErrorAccumulator]:
        return self.error

    def add_path(
        self,
        path: Union[str, os.PathLike],
        member_name: Union[str, os.PathLike, None] = None,
    ) -> int:
        """
        Walk path and append a Member for every entry kept.

        Args:
            path: Directory or file to add.
            member_name: Name to store path under; defaults to path itself.

        Returns:
            0 when the walk completed, -1 when it was aborted.
        """
        if member_name is None:
            member_name = path

        before = len(self.members)
        res = find(self, path, member_name, visit_entry, self.config.flags)

        logger.info(
            "Added %d member(s) from %s%s",
            len(self.members) - before,
            path,
            "" if res == 0 else " (aborted)",
        )
        return res

    def excluded(self, name: str) -> bool:
        """True if name or its leaf matches one of the exclude patterns."""
        if not self.config.exclude:
            return False
        leaf = name.rstrip("/").rsplit("/", 1)[-1]
        return any(
            fnmatchcase(name, pattern) or fnmatchcase(leaf, pattern)
            for pattern in self.config.exclude
        )

    def record_failure(self, errno: int, message: str, path: str) -> int:
        """Record a failed entry and return the visitor error code."""
        severity = Severity.FATAL if self.config.strict else Severity.WARN
        if self.error is not None:
            self.error.set(severity, errno, message, path)
        else:
            logger.error("%s: %s", path, message)
        return -1


def visit_entry(builder: Builder, disk_path: str, logical_path: str, st: os.stat_result) -> int:
    """Visitor handed to find(): keeps, prunes or rejects one entry."""
    if builder.excluded(logical_path):
        logger.debug("Excluded %s", logical_path)
        return 0

    try:
        kind = kind_of(st.st_mode)
    except ValueError:
        return builder.record_failure(0, "Unknown file type", disk_path)

    if kind is MemberKind.SOCKET:
        return builder.record_failure(0, "Cannot archive socket", disk_path)

    try:
        member = member_from_stat(disk_path, logical_path, st)
    except OSError as e:
        return builder.record_failure(e.errno or 0, f"Cannot read entry: {e.strerror}", disk_path)

    builder.members.append(member)
    return 1
