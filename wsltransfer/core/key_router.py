"""Keyboard routing helpers: raw curses keys -> abstract commands."""

import curses

from ..utils import normalize_key_code
from .actions import Command

CHAR_BINDINGS = {
    'q': Command.QUIT,
    'Q': Command.QUIT,
    'j': Command.MOVE_DOWN,
    'k': Command.MOVE_UP,
    'l': Command.DESCEND,
    'h': Command.ASCEND,
    'g': Command.MOVE_FIRST,
    'G': Command.MOVE_LAST,
    'e': Command.EXPORT,
    'i': Command.IMPORT,
    'r': Command.REFRESH,
    'y': Command.YANK_PATH,
}

CONTROL_BINDINGS = {
    9: Command.SWITCH_FOCUS,   # Tab
    10: Command.DESCEND,       # Enter
    13: Command.DESCEND,
    17: Command.QUIT,          # Ctrl+Q
    8: Command.ASCEND,         # Backspace
    127: Command.ASCEND,
}

_SPECIAL_KEY_NAMES = {
    'KEY_UP': Command.MOVE_UP,
    'KEY_DOWN': Command.MOVE_DOWN,
    'KEY_RIGHT': Command.DESCEND,
    'KEY_ENTER': Command.DESCEND,
    'KEY_LEFT': Command.ASCEND,
    'KEY_BACKSPACE': Command.ASCEND,
    'KEY_PPAGE': Command.PAGE_UP,
    'KEY_NPAGE': Command.PAGE_DOWN,
    'KEY_HOME': Command.MOVE_FIRST,
    'KEY_END': Command.MOVE_LAST,
    'KEY_F5': Command.REFRESH,
    'KEY_BTAB': Command.SWITCH_FOCUS,
}


def special_key_bindings():
    """Bindings for curses special keys present in the running curses module."""
    return {
        getattr(curses, name): command
        for name, command in _SPECIAL_KEY_NAMES.items()
        if hasattr(curses, name)
    }


def translate_key(key):
    """Return the Command bound to ``key``, or None for unbound keys."""
    key_code = normalize_key_code(key)
    if key_code is None:
        return None
    special = special_key_bindings()
    if key_code in special:
        return special[key_code]
    if key_code in CONTROL_BINDINGS:
        return CONTROL_BINDINGS[key_code]
    if 32 <= key_code < 127:
        return CHAR_BINDINGS.get(chr(key_code))
    return None


def handle_key_event(app, key):
    """Translate one key and hand the command to the app."""
    command = translate_key(key)
    if command is None:
        return None
    return app.dispatch_command(command)
