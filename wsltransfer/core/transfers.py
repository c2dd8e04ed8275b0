"""Inline or background execution of copy jobs."""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass

from .copy_engine import CopyEngine, CopyOutcome, CopyStatus

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferJob:
    """A resolved transfer: what to copy, where to, and which pane receives it."""

    direction: str
    source: object
    destination_dir: object
    destination_side: str
    verb: str = 'Copied'


class TransferRunner:
    """Runs copy jobs one at a time, moving long ones onto a worker thread."""

    LONG_TRANSFER_BYTES = 8 * 1024 * 1024
    JOIN_TIMEOUT = 5.0

    def __init__(self, engine=None, long_transfer_bytes=None):
        self._engine = engine or CopyEngine()
        if long_transfer_bytes is not None:
            self.LONG_TRANSFER_BYTES = long_transfer_bytes
        self._state = None

    @property
    def busy(self):
        return self._state is not None

    def is_long_transfer(self, entry):
        """Directories and big files go to the background."""
        if entry is None:
            return False
        if entry.is_dir:
            return True
        size = entry.size
        if size is None:
            return False
        return int(size) >= self.LONG_TRANSFER_BYTES

    def run(self, job, background=False):
        """Copy ``job`` now and return its CopyOutcome, or start it and return None.

        Callers must check ``busy`` first; a second job is never started while
        one is in flight.
        """
        if self._state is not None:
            raise RuntimeError('a transfer is already running')
        if not background:
            return self._engine.copy(job.source, job.destination_dir)

        state = {
            'job': job,
            'outcome': None,
            'current': job.source.name,
            'done': False,
            'started_at': time.monotonic(),
            'thread': None,
        }

        def _progress(relative):
            state['current'] = relative

        def _runner():
            try:
                state['outcome'] = self._engine.copy(job.source, job.destination_dir, progress=_progress)
            except Exception as exc:
                LOGGER.exception('transfer of %s crashed', job.source.display)
                state['outcome'] = CopyOutcome(
                    CopyStatus.FATAL, job.source.name, job.destination_dir.display, reason=str(exc),
                )
            finally:
                state['done'] = True

        thread = threading.Thread(target=_runner, name='wsltransfer-copy', daemon=True)
        state['thread'] = thread
        self._state = state
        LOGGER.debug('started background transfer of %s', job.source.display)
        thread.start()
        return None

    def progress_label(self):
        """Return ``'<entry> (<seconds>s)'`` for the in-flight job, or None."""
        state = self._state
        if not state:
            return None
        elapsed = max(0.0, time.monotonic() - state['started_at'])
        return f"{state['current']} ({elapsed:.0f}s)"

    def current_job(self):
        state = self._state
        return state['job'] if state else None

    def poll(self):
        """Return ``(job, outcome)`` once the background job has finished, else None."""
        state = self._state
        if not state or not state['done']:
            return None
        self._state = None
        thread = state.get('thread')
        if thread is not None:
            thread.join()
        return state['job'], state['outcome']

    def shutdown(self, timeout=None):
        """Wait for an in-flight job; return False if it is still running after ``timeout``."""
        state = self._state
        if not state:
            return True
        thread = state.get('thread')
        if thread is None or not thread.is_alive():
            return True
        thread.join(timeout=self.JOIN_TIMEOUT if timeout is None else timeout)
        if thread.is_alive():
            LOGGER.warning(
                'Background transfer did not finish within %.1fs during shutdown.',
                self.JOIN_TIMEOUT if timeout is None else timeout,
            )
            return False
        return True
