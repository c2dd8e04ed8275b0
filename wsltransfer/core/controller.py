"""
Dual-pane controller: routes navigation to the focused pane and runs
fixed-direction transfers between the WSL pane and the Windows pane.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .actions import NAVIGATION_COMMANDS, ActionResult, ActionType, Command
from .clipboard import copy_text
from .copy_engine import CopyOutcome
from .pane import PaneState
from .paths import PathError
from .transfers import TransferJob, TransferRunner

LOGGER = logging.getLogger(__name__)


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"

    @property
    def other(self):
        return Side.RIGHT if self is Side.LEFT else Side.LEFT


class Direction(str, Enum):
    """Export copies WSL -> Windows, Import copies Windows -> WSL."""

    EXPORT = "export"
    IMPORT = "import"


# direction -> (source side, destination side, progress verb, done verb)
_ROUTES = {
    Direction.EXPORT: (Side.LEFT, Side.RIGHT, 'Exporting', 'Exported'),
    Direction.IMPORT: (Side.RIGHT, Side.LEFT, 'Importing', 'Imported'),
}


@dataclass(frozen=True)
class PaneSnapshot:
    label: str
    path: str
    entries: tuple
    selected_index: int
    scroll_offset: int
    error_message: Optional[str]
    focused: bool


@dataclass(frozen=True)
class ControllerSnapshot:
    """Read-only view handed to the renderer."""

    left: PaneSnapshot
    right: PaneSnapshot
    focus: Side
    status_message: Optional[str]
    status_is_error: bool
    last_outcome: Optional[CopyOutcome]
    transfer: Optional[str]


class DualPaneController:
    """Owns the two panes, the focus flag and the transfer runner."""

    def __init__(self, wsl_pane, windows_pane, runner=None, clipboard=copy_text):
        self.panes = {Side.LEFT: wsl_pane, Side.RIGHT: windows_pane}
        self.focus = Side.LEFT
        self.last_outcome = None
        self.status_message = None
        self.status_is_error = False
        self._runner = runner if runner is not None else TransferRunner()
        self._copy_text = clipboard

    @classmethod
    def from_roots(cls, wsl_root, windows_root, runner=None):
        """Open both panes at their roots; ListError propagates (fatal at startup)."""
        return cls(PaneState.open(wsl_root), PaneState.open(windows_root), runner=runner)

    @property
    def wsl_pane(self):
        return self.panes[Side.LEFT]

    @property
    def windows_pane(self):
        return self.panes[Side.RIGHT]

    @property
    def focused_pane(self):
        return self.panes[self.focus]

    @property
    def transfer_in_flight(self):
        return self._runner.busy

    def switch_focus(self):
        self.focus = self.focus.other
        return ActionResult(ActionType.REFRESH)

    def dispatch(self, command):
        """Apply one abstract command; the only entry point used by the app loop."""
        if command is None:
            return None
        command = Command(command)
        self.status_message = None
        self.status_is_error = False
        if command is Command.QUIT:
            return ActionResult(ActionType.EXIT)
        if command is Command.SWITCH_FOCUS:
            return self.switch_focus()
        if command is Command.EXPORT:
            return self.dispatch_transfer(Direction.EXPORT)
        if command is Command.IMPORT:
            return self.dispatch_transfer(Direction.IMPORT)
        if command is Command.YANK_PATH:
            return self.yank_selected_path()
        return self.dispatch_navigation(command)

    def dispatch_navigation(self, command):
        """Forward a navigation command to the focused pane only."""
        command = Command(command)
        if command not in NAVIGATION_COMMANDS:
            return ActionResult(ActionType.ERROR, f'Not a navigation command: {command.value}')
        pane = self.focused_pane
        pane.clear_error()
        if command is Command.MOVE_UP:
            result = pane.move_selection(-1)
        elif command is Command.MOVE_DOWN:
            result = pane.move_selection(1)
        elif command is Command.PAGE_UP:
            result = pane.page(-1)
        elif command is Command.PAGE_DOWN:
            result = pane.page(1)
        elif command is Command.MOVE_FIRST:
            result = pane.move_to_first()
        elif command is Command.MOVE_LAST:
            result = pane.move_to_last()
        elif command is Command.DESCEND:
            result = pane.descend()
        elif command is Command.ASCEND:
            result = pane.ascend()
        else:
            result = pane.refresh()
        if result is not None and result.type == ActionType.ERROR:
            self.status_message = result.payload
            self.status_is_error = True
        return result

    def dispatch_transfer(self, direction):
        """Copy the selection of the direction's source pane into the other pane's directory.

        The direction alone picks the panes; focus is irrelevant.
        """
        direction = Direction(direction)
        if self._runner.busy:
            return self._error('Another transfer is already running.')

        source_side, dest_side, busy_verb, verb = _ROUTES[direction]
        source_pane = self.panes[source_side]
        dest_pane = self.panes[dest_side]
        entry = source_pane.selected_entry()
        if entry is None:
            return self._error(f'Nothing selected in {source_pane.label}.')
        try:
            source = source_pane.selected_path()
        except PathError as exc:
            return self._error(str(exc))

        job = TransferJob(direction.value, source, dest_pane.current, dest_side.value, verb)
        LOGGER.info('%s %s -> %s', direction.value, source.display, dest_pane.current.display)
        outcome = self._runner.run(job, background=self._runner.is_long_transfer(entry))
        if outcome is None:
            self.status_message = f'{busy_verb} {source.name}...'
            return ActionResult(ActionType.TRANSFER_STARTED, job)
        return self._finish_transfer(job, outcome)

    def poll(self):
        """Deliver a finished background transfer, if any."""
        finished = self._runner.poll()
        if finished is None:
            return None
        return self._finish_transfer(*finished)

    def _finish_transfer(self, job, outcome):
        dest_pane = self.panes[Side(job.destination_side)]
        refreshed = dest_pane.refresh()
        self.last_outcome = outcome
        self.status_message = outcome.summary(verb=job.verb)
        self.status_is_error = not outcome.ok
        LOGGER.info('%s: %s', job.direction, self.status_message)
        if refreshed is not None and refreshed.type == ActionType.ERROR:
            LOGGER.warning('refresh of %s failed after transfer: %s', dest_pane.label, refreshed.payload)
        return ActionResult(ActionType.TRANSFER_DONE, outcome)

    def yank_selected_path(self):
        """Put the focused pane's highlighted path on the system clipboard."""
        pane = self.focused_pane
        try:
            path = pane.selected_path() or pane.current
        except PathError as exc:
            return self._error(str(exc))
        if not self._copy_text(path.display):
            return self._error('Clipboard is not available.')
        self.status_message = f'Copied path: {path.display}'
        return ActionResult(ActionType.REFRESH)

    def _error(self, message):
        self.status_message = message
        self.status_is_error = True
        return ActionResult(ActionType.ERROR, message)

    def snapshot(self):
        """Return a read-only view of both panes, focus and status."""
        progress = self._runner.progress_label()
        return ControllerSnapshot(
            left=self._pane_snapshot(Side.LEFT),
            right=self._pane_snapshot(Side.RIGHT),
            focus=self.focus,
            status_message=self.status_message,
            status_is_error=self.status_is_error,
            last_outcome=self.last_outcome,
            transfer=progress,
        )

    def _pane_snapshot(self, side):
        pane = self.panes[side]
        return PaneSnapshot(
            label=pane.label,
            path=pane.current.display,
            entries=tuple(pane.entries),
            selected_index=pane.selected_index,
            scroll_offset=pane.scroll_offset,
            error_message=pane.error_message,
            focused=side is self.focus,
        )

    def shutdown(self, timeout=None):
        return self._runner.shutdown(timeout)
