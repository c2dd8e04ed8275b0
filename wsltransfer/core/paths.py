"""
Root-confined path values for the two filesystem namespaces.

A pane never handles raw path strings. It holds a ``RootedPath``: the root it
belongs to plus the tuple of entry names below that root. Joining happens one
validated name at a time, so a path can never climb out of its root, and the
root's ``PathSyntax`` decides how the path is spelled for the user while
``native`` gives the host path handed to ``os``.
"""
from __future__ import annotations

import os
import posixpath
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath, PureWindowsPath

DEFAULT_MOUNT_PREFIX = '/mnt'

_DRIVE_RE = re.compile(r'^([A-Za-z]):(?:[\\/]+(.*))?$')
_WINDOWS_FORBIDDEN = set('<>:"|?*\\')
_RESERVED_NAMES = {'', '.', '..'}


class PathError(ValueError):
    """Raised when a name cannot be joined onto a rooted path."""


class PathSyntax(str, Enum):
    """Path spelling used by a root."""

    UNIX = "unix"
    WINDOWS = "windows"

    @property
    def flavor(self):
        return PureWindowsPath if self is PathSyntax.WINDOWS else PurePosixPath


def windows_to_host(path, mount_prefix=DEFAULT_MOUNT_PREFIX):
    """Map ``C:\\Users\\me`` to its WSL mount ``/mnt/c/Users/me``.

    Returns None when ``path`` is not a drive-letter path.
    """
    match = _DRIVE_RE.match(path.strip())
    if not match:
        return None
    drive, rest = match.groups()
    parts = [p for p in re.split(r'[\\/]+', rest or '') if p]
    return posixpath.join(mount_prefix or '/', drive.lower(), *parts)


def host_to_windows(path, mount_prefix=DEFAULT_MOUNT_PREFIX):
    """Map a WSL mount path ``/mnt/c/Users/me`` back to ``C:\\Users\\me``.

    Returns None when ``path`` is not below a drive mount.
    """
    prefix = (mount_prefix or '/').rstrip('/') + '/'
    if not path.startswith(prefix):
        return None
    pieces = path[len(prefix):].split('/')
    drive = pieces[0]
    if len(drive) != 1 or not drive.isalpha():
        return None
    tail = [p for p in pieces[1:] if p]
    return str(PureWindowsPath(f'{drive.upper()}:\\', *tail))


@dataclass(frozen=True)
class Root:
    """Immutable pane root: display base, syntax tag and host base path."""

    label: str
    base: str
    syntax: PathSyntax
    host_base: str

    @classmethod
    def create(cls, label, path, syntax=PathSyntax.UNIX, mount_prefix=DEFAULT_MOUNT_PREFIX):
        """Build a root from a configured path written in ``syntax``."""
        syntax = PathSyntax(syntax)
        raw = os.path.expanduser(str(path).strip())
        if syntax is PathSyntax.WINDOWS and os.sep == '/':
            host = windows_to_host(raw, mount_prefix) or raw
            host = os.path.normpath(host)
            base = host_to_windows(host, mount_prefix) or host
        else:
            host = os.path.normpath(raw)
            base = host
        return cls(label=label, base=base, syntax=syntax, host_base=host)

    def path(self):
        """Return the rooted path of the root directory itself."""
        return RootedPath(self)

    def display(self, parts=()):
        return str(self.syntax.flavor(self.base).joinpath(*parts))

    def native(self, parts=()):
        return os.path.join(self.host_base, *parts)

    def validate_name(self, name):
        """Raise PathError unless ``name`` is a single entry name in this syntax."""
        if not isinstance(name, str) or name in _RESERVED_NAMES:
            raise PathError(f'Invalid entry name: {name!r}')
        if '/' in name or '\x00' in name:
            raise PathError(f'Invalid entry name: {name!r}')
        if self.syntax is PathSyntax.WINDOWS:
            bad = sorted(set(name) & _WINDOWS_FORBIDDEN)
            if bad or name.endswith((' ', '.')):
                raise PathError(f'Name not allowed on {self.label}: {name!r}')
        return name


@dataclass(frozen=True)
class RootedPath:
    """A location inside a root, stored as entry names below the root."""

    root: Root
    parts: tuple = ()

    @property
    def is_root(self):
        return not self.parts

    @property
    def name(self):
        if self.parts:
            return self.parts[-1]
        return self.root.syntax.flavor(self.root.base).name or self.root.base

    @property
    def parent(self):
        if not self.parts:
            return self
        return RootedPath(self.root, self.parts[:-1])

    def child(self, name):
        self.root.validate_name(name)
        return RootedPath(self.root, self.parts + (name,))

    def relative_to(self, ancestor):
        """Return names below ``ancestor``; raise PathError when not inside it."""
        if ancestor.root != self.root or self.parts[:len(ancestor.parts)] != ancestor.parts:
            raise PathError(f'{self.display} is not inside {ancestor.display}')
        return self.parts[len(ancestor.parts):]

    @property
    def native(self):
        return self.root.native(self.parts)

    @property
    def display(self):
        return self.root.display(self.parts)

    @property
    def relative(self):
        return '/'.join(self.parts)

    def __str__(self):
        return self.display
