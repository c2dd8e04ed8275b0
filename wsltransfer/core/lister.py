"""
One-level directory listing for a rooted path.
"""
from __future__ import annotations

import errno
import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class EntryKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


class ListErrorKind(str, Enum):
    NOT_FOUND = "not found"
    PERMISSION_DENIED = "permission denied"
    NOT_A_DIRECTORY = "not a directory"
    IO_ERROR = "I/O error"


class ListError(Exception):
    """Raised when a directory cannot be listed."""

    def __init__(self, kind, path, message=''):
        self.kind = ListErrorKind(kind)
        self.path = path
        self.message = message or self.kind.value
        super().__init__(f'{path}: {self.message}')

    @classmethod
    def from_os_error(cls, exc, path):
        if isinstance(exc, FileNotFoundError):
            kind = ListErrorKind.NOT_FOUND
        elif isinstance(exc, PermissionError):
            kind = ListErrorKind.PERMISSION_DENIED
        elif isinstance(exc, NotADirectoryError) or exc.errno == errno.ENOTDIR:
            kind = ListErrorKind.NOT_A_DIRECTORY
        else:
            kind = ListErrorKind.IO_ERROR
        return cls(kind, path, exc.strerror or str(exc))


@dataclass(frozen=True)
class DirectoryEntry:
    """A single immediate child of a listed directory."""

    name: str
    kind: EntryKind
    size: Optional[int] = None
    is_symlink: bool = False

    @property
    def is_dir(self):
        return self.kind is EntryKind.DIRECTORY


def entry_sort_key(entry):
    """Directories first, then files; plain codepoint order inside each group."""
    return (0 if entry.is_dir else 1, entry.name)


def _scan_entry(dirent):
    try:
        is_link = dirent.is_symlink()
    except OSError:
        is_link = False
    try:
        is_dir = dirent.is_dir()
    except OSError:
        is_dir = False
    if is_dir:
        return DirectoryEntry(dirent.name, EntryKind.DIRECTORY, None, is_link)
    try:
        size = dirent.stat().st_size
    except OSError:
        size = None
    return DirectoryEntry(dirent.name, EntryKind.FILE, size, is_link)


def list_directory(path):
    """Return the sorted immediate children of ``path`` (a RootedPath).

    Raises ListError when the directory itself cannot be read. Entries whose
    metadata cannot be read are still listed, without a size.
    """
    native = path.native
    try:
        with os.scandir(native) as it:
            entries = [_scan_entry(dirent) for dirent in it]
    except OSError as exc:
        raise ListError.from_os_error(exc, path.display) from exc
    entries.sort(key=entry_sort_key)
    return tuple(entries)
