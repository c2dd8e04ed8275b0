"""
Recursive, failure-tolerant copy between two roots.

Conflict policy: an existing destination file is overwritten, an existing
destination directory is merged into (entries only present at the destination
are left alone). A failing entry is recorded and the walk carries on with its
siblings; nothing is retried.
"""
from __future__ import annotations

import errno
import logging
import os
import shutil
import stat
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .lister import ListError, ListErrorKind, list_directory
from .paths import PathError

LOGGER = logging.getLogger(__name__)

_OUT_OF_SPACE_ERRNOS = {errno.ENOSPC, getattr(errno, 'EDQUOT', errno.ENOSPC)}
_PERMISSION_ERRNOS = {errno.EACCES, errno.EPERM}


class CopyStatus(str, Enum):
    SUCCESS = "success"
    PARTIAL_FAILURE = "partial failure"
    FATAL = "fatal"


class CopyErrorKind(str, Enum):
    PERMISSION_DENIED = "permission denied"
    IO_ERROR = "I/O error"
    OUT_OF_SPACE = "out of space"
    NAME_TOO_LONG = "name too long"
    SOURCE_VANISHED = "source vanished"
    INVALID_NAME = "invalid name"


@dataclass(frozen=True)
class CopyFailure:
    """One entry that could not be copied, relative to the copied item's parent."""

    path: str
    kind: CopyErrorKind
    message: str = ''


@dataclass(frozen=True)
class CopyOutcome:
    """Aggregate result of one top-level copy invocation."""

    status: CopyStatus
    name: str
    destination: str
    failures: tuple = ()
    reason: Optional[str] = None
    files_copied: int = 0
    dirs_created: int = 0
    bytes_copied: int = 0

    @property
    def ok(self):
        return self.status is CopyStatus.SUCCESS

    def summary(self, verb='Copied', limit=3):
        """One status-bar line: counts plus the first few failing paths."""
        if self.status is CopyStatus.FATAL:
            return f'{verb} {self.name} failed: {self.reason}'
        counts = f'{self.files_copied} files, {self.dirs_created} dirs'
        if self.status is CopyStatus.SUCCESS:
            return f'{verb} {self.name} to {self.destination} ({counts})'
        shown = ', '.join(f'{f.path} ({f.kind.value})' for f in self.failures[:limit])
        extra = len(self.failures) - limit
        if extra > 0:
            shown += f', +{extra} more'
        return f'{verb} {self.name} with {len(self.failures)} failed ({counts}): {shown}'


def classify_os_error(exc, source_native=None):
    """Map an OSError raised while copying onto a CopyErrorKind."""
    code = getattr(exc, 'errno', None)
    if isinstance(exc, PermissionError) or code in _PERMISSION_ERRNOS:
        return CopyErrorKind.PERMISSION_DENIED
    if code in _OUT_OF_SPACE_ERRNOS:
        return CopyErrorKind.OUT_OF_SPACE
    if code == errno.ENAMETOOLONG:
        return CopyErrorKind.NAME_TOO_LONG
    if isinstance(exc, FileNotFoundError) and source_native and exc.filename == source_native:
        return CopyErrorKind.SOURCE_VANISHED
    return CopyErrorKind.IO_ERROR


def _list_error_kind(exc):
    if exc.kind is ListErrorKind.NOT_FOUND:
        return CopyErrorKind.SOURCE_VANISHED
    if exc.kind is ListErrorKind.PERMISSION_DENIED:
        return CopyErrorKind.PERMISSION_DENIED
    return CopyErrorKind.IO_ERROR


@dataclass
class _CopyReport:
    files_copied: int = 0
    dirs_created: int = 0
    bytes_copied: int = 0
    failures: list = field(default_factory=list)
    active_dirs: set = field(default_factory=set)
    target_dirs: set = field(default_factory=set)

    def fail(self, relative, kind, message):
        LOGGER.debug('copy failed for %s: %s (%s)', relative, message, kind.value)
        self.failures.append(CopyFailure(relative, kind, message))

    def reaches_target(self, src_real):
        """True when a source directory is, or contains, a directory this copy writes to."""
        prefix = src_real.rstrip(os.sep) + os.sep
        return any(t == src_real or t.startswith(prefix) for t in self.target_dirs)


class CopyEngine:
    """Copies a file or directory tree into a destination directory."""

    def __init__(self, lister=list_directory):
        self._lister = lister

    def copy(self, source, destination_dir, progress=None):
        """Copy ``source`` into ``destination_dir`` (both RootedPath values)."""
        name = source.name
        dest_display = destination_dir.display

        def fatal(reason):
            LOGGER.info('copy of %s aborted: %s', source.display, reason)
            return CopyOutcome(CopyStatus.FATAL, name, dest_display, reason=reason)

        src_native = source.native
        try:
            src_stat = os.stat(src_native)
        except OSError as exc:
            return fatal(f'cannot read {source.display}: {exc.strerror or exc}')
        if not os.path.isdir(destination_dir.native):
            return fatal(f'destination {dest_display} is not a directory')
        try:
            target = destination_dir.child(name)
        except PathError as exc:
            return fatal(str(exc))

        is_dir = stat.S_ISDIR(src_stat.st_mode)
        src_real = os.path.realpath(src_native)
        target_real = os.path.realpath(target.native)
        if src_real == target_real:
            return fatal('source and destination are the same')
        if is_dir and target_real.startswith(src_real.rstrip(os.sep) + os.sep):
            return fatal('cannot copy a directory into itself')

        report = _CopyReport()
        LOGGER.info('copying %s -> %s', source.display, target.display)
        if is_dir:
            done = self._copy_directory(source, target, name, report, progress)
        else:
            if progress is not None:
                progress(name)
            done = self._copy_file(source, target, name, report)

        if not done:
            first = report.failures[0] if report.failures else None
            reason = f'{first.message} ({first.kind.value})' if first else 'copy failed'
            return fatal(reason)

        status = CopyStatus.PARTIAL_FAILURE if report.failures else CopyStatus.SUCCESS
        return CopyOutcome(
            status,
            name,
            dest_display,
            failures=tuple(report.failures),
            files_copied=report.files_copied,
            dirs_created=report.dirs_created,
            bytes_copied=report.bytes_copied,
        )

    def _copy_file(self, source, target, relative, report):
        src_native = source.native
        dst_native = target.native
        try:
            shutil.copyfile(src_native, dst_native)
        except OSError as exc:
            report.fail(relative, classify_os_error(exc, src_native), exc.strerror or str(exc))
            return False
        report.files_copied += 1
        try:
            report.bytes_copied += os.path.getsize(dst_native)
        except OSError:
            pass
        try:
            shutil.copystat(src_native, dst_native)
        except OSError:
            LOGGER.debug('could not copy metadata to %s', dst_native, exc_info=True)
        return True

    def _copy_directory(self, source, target, relative, report, progress):
        src_real = os.path.realpath(source.native)
        if src_real in report.active_dirs:
            report.fail(relative, CopyErrorKind.IO_ERROR, 'symlink loop')
            return False
        if report.reaches_target(src_real):
            report.fail(relative, CopyErrorKind.IO_ERROR, 'symlink into destination')
            return False
        try:
            children = self._lister(source)
        except ListError as exc:
            report.fail(relative, _list_error_kind(exc), exc.message)
            return False

        dst_native = target.native
        existed = os.path.isdir(dst_native)
        try:
            os.makedirs(dst_native, exist_ok=True)
        except OSError as exc:
            report.fail(relative, classify_os_error(exc), exc.strerror or str(exc))
            return False
        if not existed:
            report.dirs_created += 1
        report.target_dirs.add(os.path.realpath(dst_native))

        report.active_dirs.add(src_real)
        try:
            for entry in children:
                child_relative = f'{relative}/{entry.name}'
                try:
                    child_source = source.child(entry.name)
                    child_target = target.child(entry.name)
                except PathError as exc:
                    report.fail(child_relative, CopyErrorKind.INVALID_NAME, str(exc))
                    continue
                if progress is not None:
                    progress(child_relative)
                if entry.is_dir:
                    self._copy_directory(child_source, child_target, child_relative, report, progress)
                else:
                    self._copy_file(child_source, child_target, child_relative, report)
        finally:
            report.active_dirs.discard(src_real)
        return True
