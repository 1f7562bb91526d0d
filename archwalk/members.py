# Archive member description built from a walked entry: MemberKind, Member.

import os
import stat
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class MemberKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    FIFO = "fifo"
    CHARDEV = "chardev"
    BLOCKDEV = "blockdev"
    SOCKET = "socket"


_TYPE_BITS = {
    MemberKind.FILE: stat.S_IFREG,
    MemberKind.DIRECTORY: stat.S_IFDIR,
    MemberKind.SYMLINK: stat.S_IFLNK,
    MemberKind.FIFO: stat.S_IFIFO,
    MemberKind.CHARDEV: stat.S_IFCHR,
    MemberKind.BLOCKDEV: stat.S_IFBLK,
    MemberKind.SOCKET: stat.S_IFSOCK,
}


def kind_of(mode: int) -> MemberKind:
    """Map st_mode file-type bits to a MemberKind."""
    file_type = stat.S_IFMT(mode)
    for kind, bits in _TYPE_BITS.items():
        if bits == file_type:
            return kind
    raise ValueError(f"Unknown file type in mode {mode:o}")


class Member(BaseModel):
    """One entry as it would be stored in an archive."""

    name: str
    disk_path: str
    kind: MemberKind
    mode: int = Field(..., ge=0, description="permission bits, without the file type")
    size: int = Field(0, ge=0, description="0 for anything but regular files")
    uid: int = 0
    gid: int = 0
    mtime: float = 0.0
    link_target: Optional[str] = None

    @property
    def filemode(self) -> str:
        """ls-style mode string, e.g. drwxr-xr-x."""
        return stat.filemode(_TYPE_BITS[self.kind] | self.mode)


def member_from_stat(disk_path: str, name: str, st: os.stat_result) -> Member:
    """
    Build a Member for an entry reported by the walker.

    Directory names get a trailing "/" as archive formats expect. Symlink
    targets are read from disk.

    Raises:
        OSError: If the symlink target cannot be read.
        ValueError: If the file type is not recognized.
    """
    kind = kind_of(st.st_mode)

    link_target = None
    if kind is MemberKind.SYMLINK:
        link_target = os.readlink(disk_path)

    if kind is MemberKind.DIRECTORY and not name.endswith("/"):
        name = name + "/"

    return Member(
        name=name,
        disk_path=disk_path,
        kind=kind,
        mode=stat.S_IMODE(st.st_mode),
        size=st.st_size if kind is MemberKind.FILE else 0,
        uid=st.st_uid,
        gid=st.st_gid,
        mtime=st.st_mtime,
        link_target=link_target,
    )
