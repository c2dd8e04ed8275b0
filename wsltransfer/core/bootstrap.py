"""Terminal bootstrap helpers for wsltransfer startup."""

import curses
import os
import sys

if os.name == 'nt':
    termios = None
else:
    import termios


def configure_terminal(stdscr, timeout_ms=200):
    """Apply core curses terminal setup."""
    curses.curs_set(0)
    curses.noecho()
    curses.cbreak()
    stdscr.keypad(True)
    stdscr.nodelay(False)
    stdscr.timeout(timeout_ms)


def disable_flow_control(stdin_stream=None):
    """Disable XON/XOFF so Ctrl+Q/Ctrl+S reach the app."""
    if termios is None:
        return False
    stream = sys.stdin if stdin_stream is None else stdin_stream
    try:
        fd = stream.fileno()
        attrs = termios.tcgetattr(fd)
    except (AttributeError, ValueError, OSError, termios.error):
        return False
    attrs[0] &= ~(termios.IXON | termios.IXOFF)
    try:
        termios.tcsetattr(fd, termios.TCSANOW, attrs)
    except (OSError, termios.error):
        return False
    return True
