"""
System clipboard access for the path-yank command.
"""
from __future__ import annotations

import logging

import pyperclip

LOGGER = logging.getLogger(__name__)


def copy_text(text: str) -> bool:
    """Copy text to the system clipboard; return False when no backend works."""
    try:
        pyperclip.copy(text or "")
    except (pyperclip.PyperclipException, UnicodeError, OSError):
        LOGGER.debug("clipboard copy failed", exc_info=True)
        return False
    return True
