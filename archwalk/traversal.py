"""
File system traversal: walk a tree and report every entry to a visitor.

This module is the walking engine behind the archive builder. find() starts
at an on-disk path, reports it and everything below it to a visitor, and
lets the visitor prune directories or stop the walk. Entries can be reported
under a different name than their disk path, which is how a tree at
/home/me/src ends up stored as pkg/... inside an archive.

The walk is an iterative pre-order depth-first search over an explicit stack
of open directories, so deep trees do not hit the recursion limit and every
open directory handle is closed on every exit path.

Typical usage:
    from archwalk.traversal import FindFlags, find

    def visitor(builder, disk_path, logical_path, st):
        print(logical_path)
        return 1  # keep going, descend into directories

    # Report /home/me/src as pkg, pkg/main.c, ...
    find(None, "/home/me/src", "pkg", visitor)

    # Report link targets instead of the links themselves
    find(None, "/home/me/src", "pkg", visitor, FindFlags.FOLLOW_SYMLINKS)
"""

import enum
import errno
import logging
import os
from dataclasses import dataclass
from stat import S_ISDIR
from typing import Any, Callable, Iterator, Optional, Union

from archwalk.errors.accumulator import ErrorAccumulator
from archwalk.errors.models import Severity
from archwalk.paths import PathError, clean
from archwalk.stack import Stack

logger = logging.getLogger(__name__)

ROOT = "/"
OPEN_DIRECTORY_FAILED = "Unable to open directory"

# visitor(builder, disk_path, logical_path, stat) -> int
#   > 0: accept, descend if it is a directory
#   = 0: skip, do not descend
#   < 0: error, the builder's error accumulator decides whether it is fatal
Visitor = Callable[[Any, str, str, os.stat_result], int]


class FindFlags(enum.IntFlag):
    """Options for find(). Bits not listed here are ignored."""

    NONE = 0
    FOLLOW_SYMLINKS = 1 << 0


def stat_of(path: str, flags: int = 0) -> os.stat_result:
    """
    Return metadata for path according to the symlink policy in flags.

    With FOLLOW_SYMLINKS the link is resolved (stat); without it the link
    itself is described (lstat).

    Raises:
        OSError: Unchanged from the underlying call.
    """
    if flags & FindFlags.FOLLOW_SYMLINKS:
        return os.stat(path)
    return os.lstat(path)


@dataclass
class EntryRecord:
    """One directory entry as read from a DirectoryFrame."""

    name: str
    path: str
    stat: os.stat_result

    @property
    def is_dir(self) -> bool:
        return S_ISDIR(self.stat.st_mode)


class DirectoryFrame:
    """
    An open directory being enumerated, with its path.

    read() yields one EntryRecord at a time and None at the end. A failed
    read or stat also ends the frame; the OSError is kept on `error`.
    """

    def __init__(self, path: str, entries: Iterator[os.DirEntry]) -> None:
        self.path = path
        self.error: Optional[OSError] = None
        self._entries: Optional[Iterator[os.DirEntry]] = entries

    @classmethod
    def open(cls, path: str) -> "DirectoryFrame":
        """
        Open path for enumeration.

        Raises:
            OSError: If the directory cannot be opened (EACCES, ENOENT,
                     ENOTDIR, ...). Nothing is left open in that case.
        """
        entries = os.scandir(path)
        logger.debug("Opened directory %s", path)
        return cls(path, entries)

    @property
    def closed(self) -> bool:
        return self._entries is None

    def read(self, flags: int = 0) -> Optional[EntryRecord]:
        if self._entries is None:
            return None

        try:
            entry = next(self._entries, None)
        except OSError as e:
            self.error = e
            logger.warning("Failed to read directory %s: %s", self.path, e)
            return None

        if entry is None:
            return None

        # No extra separator under the filesystem root.
        if self.path == ROOT:
            path = self.path + entry.name
        else:
            path = self.path + "/" + entry.name

        try:
            st = stat_of(path, flags)
        except OSError as e:
            self.error = e
            logger.warning("Failed to stat %s: %s", path, e)
            return None

        return EntryRecord(name=entry.name, path=path, stat=st)

    def close(self) -> None:
        if self._entries is None:
            return
        self._entries.close()
        self._entries = None
        logger.debug("Closed directory %s", self.path)


def subst_member_name(path: str, member_name: str, current: str) -> Optional[str]:
    """
    Return the name current should be reported under, or None to keep it.

    When path and member_name differ, the first len(path) characters of
    current are replaced by member_name. This is plain string splicing:
    current must start with path, which holds for every entry below a
    cleaned starting path.

    Examples:
        >>> subst_member_name("/t", "pkg", "/t/b/c")
        'pkg/b/c'
        >>> subst_member_name("/t", "/t", "/t/b/c") is None
        True
    """
    if path == member_name:
        return None
    return member_name + current[len(path):]


def _get_error(builder: Any) -> Optional[ErrorAccumulator]:
    """A builder without get_error() has no accumulator."""
    get_error = getattr(builder, "get_error", None)
    if get_error is None:
        return None
    return get_error()


def _is_fatal(err: Optional[ErrorAccumulator]) -> bool:
    """A visitor error aborts the walk unless a non-fatal error was recorded."""
    return err is None or err.is_fatal()


def _open_failed(err: Optional[ErrorAccumulator], exc: OSError, path: str) -> None:
    if err is not None:
        err.set(Severity.WARN, exc.errno or 0, OPEN_DIRECTORY_FAILED, path)
    else:
        logger.warning("%s %s: %s", OPEN_DIRECTORY_FAILED, path, exc)


def find(
    builder: Any,
    path: Union[str, os.PathLike],
    member_name: Union[str, os.PathLike],
    visitor: Visitor,
    flags: int = 0,
) -> int:
    """
    Walk the tree at path and report every entry to visitor.

    The starting entry is reported first, under member_name. Every entry
    below it is reported in pre-order depth-first order, under its disk path
    with the leading path replaced by member_name. "." and ".." are never
    reported.

    Args:
        builder: Passed through to the visitor. If it has a get_error()
                 method, that supplies the ErrorAccumulator used to record
                 warnings and to decide whether visitor errors are fatal.
        path: Where to start on disk. Cleaned with paths.clean(); a path
              that cannot be cleaned (empty, NUL byte, not a str or
              PathLike) makes find() return -1.
        member_name: Name to report path under. Cleaned with paths.clean().
        visitor: Called as visitor(builder, disk_path, logical_path, stat).
                 Return > 0 to accept (and descend into directories), 0 to
                 skip (and prune directories), < 0 for an error.
        flags: FindFlags bits; FOLLOW_SYMLINKS selects stat over lstat.

    Returns:
        0 when the walk completed, -1 when it was aborted.

    Notes:
        - A directory below the start that cannot be opened because of
          EACCES is recorded as a warning and skipped; any other open
          failure aborts.
        - A visitor error is skipped when the accumulator's current error is
          not fatal, and aborts the walk otherwise (or with no accumulator).
        - Failure to read or stat an entry ends enumeration of its
          directory.
        - Exceptions raised by the visitor propagate after every open
          directory has been closed.
    """
    err = _get_error(builder)

    try:
        clean_path = clean(path)
        clean_member_name = clean(member_name)
    except (PathError, TypeError) as e:
        logger.error("Cannot start walk: %s", e)
        return -1

    with Stack(destructor=DirectoryFrame.close) as dirs:
        return _walk(builder, err, dirs, clean_path, clean_member_name, visitor, flags)


def _walk(
    builder: Any,
    err: Optional[ErrorAccumulator],
    dirs: Stack[DirectoryFrame],
    path: str,
    member_name: str,
    visitor: Visitor,
    flags: int,
) -> int:
    try:
        st = stat_of(path, flags)
    except OSError as e:
        logger.error("Cannot stat %s: %s", path, e)
        return -1

    logger.info("Starting walk of %s as %s", path, member_name)

    res = visitor(builder, path, member_name, st)

    if res < 0 and _is_fatal(err):
        logger.error("Walk of %s aborted on its starting entry", path)
        return -1

    # Skipped, or nothing to descend into.
    if res <= 0 or not S_ISDIR(st.st_mode):
        return 0

    try:
        dirs.push(DirectoryFrame.open(path))
    except OSError as e:
        _open_failed(err, e, path)
        return -1

    visited = 1

    while True:
        cwd = dirs.top()

        if cwd is None:
            break

        item = cwd.read(flags)

        if item is None:
            dirs.drop()
            continue

        if item.name in (".", ".."):
            continue

        logical_path = subst_member_name(path, member_name, item.path)
        if logical_path is None:
            logical_path = item.path

        logger.debug("Visiting %s as %s", item.path, logical_path)
        visited += 1

        res = visitor(builder, item.path, logical_path, item.stat)

        if res == 0:
            continue

        if res < 0:
            if not _is_fatal(err):
                continue
            logger.error("Walk of %s aborted at %s", path, item.path)
            return -1

        if item.is_dir:
            try:
                newdir = DirectoryFrame.open(item.path)
            except OSError as e:
                _open_failed(err, e, item.path)

                if e.errno == errno.EACCES:
                    continue
                return -1

            dirs.push(newdir)

    logger.info("Walk of %s complete: %d entries visited", path, visited)
    return 0
