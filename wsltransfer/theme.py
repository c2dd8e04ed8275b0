"""Theme definitions and lookup helpers for wsltransfer."""

from dataclasses import dataclass
import curses
from typing import Optional

from .constants import (
    C_DIRECTORY,
    C_HELP,
    C_PANE_BODY,
    C_PANE_BORDER,
    C_PANE_BORDER_ACTIVE,
    C_PANE_TITLE,
    C_SELECTED,
    C_SELECTED_INACTIVE,
    C_STATUS,
    C_STATUS_ERROR,
)

# Test doubles may expose only a subset of color constants.
for _name, _fallback in {
    "COLOR_BLACK": 0,
    "COLOR_RED": 1,
    "COLOR_BLUE": 4,
    "COLOR_CYAN": 6,
    "COLOR_GREEN": 2,
    "COLOR_WHITE": 7,
    "COLOR_YELLOW": 3,
}.items():
    if not hasattr(curses, _name):
        setattr(curses, _name, _fallback)

DEFAULT_THEME = "classic"

ROLE_TO_PAIR_ID = {
    "pane_border": C_PANE_BORDER,
    "pane_border_active": C_PANE_BORDER_ACTIVE,
    "pane_title": C_PANE_TITLE,
    "pane_body": C_PANE_BODY,
    "selected": C_SELECTED,
    "selected_inactive": C_SELECTED_INACTIVE,
    "directory": C_DIRECTORY,
    "status": C_STATUS,
    "status_error": C_STATUS_ERROR,
    "help": C_HELP,
}


def _mk_pairs(fg_bg):
    return dict(zip(ROLE_TO_PAIR_ID, fg_bg))


@dataclass(frozen=True)
class Theme:
    """Semantic color theme: role -> (fg, bg)."""

    key: str
    label: str
    pairs: dict


# -1 is the terminal default color (curses.use_default_colors).
THEMES = {
    "classic": Theme(
        key="classic",
        label="Classic",
        pairs=_mk_pairs(
            (
                (curses.COLOR_WHITE, -1),
                (curses.COLOR_GREEN, -1),
                (curses.COLOR_WHITE, -1),
                (curses.COLOR_WHITE, -1),
                (curses.COLOR_BLACK, curses.COLOR_GREEN),
                (curses.COLOR_BLACK, curses.COLOR_WHITE),
                (curses.COLOR_BLUE, -1),
                (curses.COLOR_GREEN, -1),
                (curses.COLOR_RED, -1),
                (curses.COLOR_CYAN, -1),
            )
        ),
    ),
    "dos_cga": Theme(
        key="dos_cga",
        label="DOS / CGA",
        pairs=_mk_pairs(
            (
                (curses.COLOR_CYAN, curses.COLOR_BLUE),
                (curses.COLOR_YELLOW, curses.COLOR_BLUE),
                (curses.COLOR_YELLOW, curses.COLOR_BLUE),
                (curses.COLOR_WHITE, curses.COLOR_BLUE),
                (curses.COLOR_BLACK, curses.COLOR_CYAN),
                (curses.COLOR_BLUE, curses.COLOR_WHITE),
                (curses.COLOR_YELLOW, curses.COLOR_BLUE),
                (curses.COLOR_BLACK, curses.COLOR_CYAN),
                (curses.COLOR_WHITE, curses.COLOR_RED),
                (curses.COLOR_BLACK, curses.COLOR_CYAN),
            )
        ),
    ),
    "hacker": Theme(
        key="hacker",
        label="Hacker",
        pairs=_mk_pairs(
            (
                (curses.COLOR_GREEN, curses.COLOR_BLACK),
                (curses.COLOR_GREEN, curses.COLOR_BLACK),
                (curses.COLOR_GREEN, curses.COLOR_BLACK),
                (curses.COLOR_GREEN, curses.COLOR_BLACK),
                (curses.COLOR_BLACK, curses.COLOR_GREEN),
                (curses.COLOR_BLACK, curses.COLOR_WHITE),
                (curses.COLOR_CYAN, curses.COLOR_BLACK),
                (curses.COLOR_GREEN, curses.COLOR_BLACK),
                (curses.COLOR_RED, curses.COLOR_BLACK),
                (curses.COLOR_GREEN, curses.COLOR_BLACK),
            )
        ),
    ),
}


def list_themes():
    """Return themes in deterministic order."""
    order = ("classic", "dos_cga", "hacker")
    return [THEMES[key] for key in order]


def get_theme(theme_key: Optional[str]) -> Theme:
    """Resolve theme by key with fallback to default."""
    if not theme_key:
        return THEMES[DEFAULT_THEME]
    return THEMES.get(theme_key, THEMES[DEFAULT_THEME])
