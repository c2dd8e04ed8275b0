"""
Typed command and result contract shared by the controller and the app loop.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ActionType(str, Enum):
    """Result kinds returned by pane/controller handlers."""

    REFRESH = "refresh"
    ERROR = "error"
    EXIT = "exit"
    TRANSFER_STARTED = "transfer_started"
    TRANSFER_DONE = "transfer_done"


class Command(str, Enum):
    """Abstract user commands produced by the key router."""

    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    MOVE_FIRST = "move_first"
    MOVE_LAST = "move_last"
    DESCEND = "descend"
    ASCEND = "ascend"
    REFRESH = "refresh"
    SWITCH_FOCUS = "switch_focus"
    EXPORT = "export"
    IMPORT = "import"
    YANK_PATH = "yank_path"
    QUIT = "quit"


NAVIGATION_COMMANDS = frozenset({
    Command.MOVE_UP,
    Command.MOVE_DOWN,
    Command.PAGE_UP,
    Command.PAGE_DOWN,
    Command.MOVE_FIRST,
    Command.MOVE_LAST,
    Command.DESCEND,
    Command.ASCEND,
    Command.REFRESH,
})

TRANSFER_COMMANDS = frozenset({Command.EXPORT, Command.IMPORT})


@dataclass(frozen=True)
class ActionResult:
    """Action message emitted by pane and controller handlers."""

    type: ActionType
    payload: Any = None
