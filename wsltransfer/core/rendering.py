"""Rendering helpers for wsltransfer. Reads controller snapshots, never mutates state."""

import curses

from ..constants import (
    HELP_BAR_HEIGHT,
    HELP_TEXT,
    PANE_BORDER_ROWS,
    SIZE_COLUMN_WIDTH,
    STATUS_BAR_HEIGHT,
)
from ..utils import draw_box, fit_text_to_cells, format_size, safe_addstr, theme_attr


def pane_rects(height, width):
    """Return ``(left, right)`` pane rectangles as ``(x, y, w, h)``."""
    body_h = max(0, height - STATUS_BAR_HEIGHT - HELP_BAR_HEIGHT)
    left_w = width // 2
    right_w = max(0, width - left_w - 1)
    return (0, 0, left_w, body_h), (left_w, 0, right_w, body_h)


def list_height(rect):
    """Number of entry rows visible inside a pane rectangle."""
    return max(0, rect[3] - PANE_BORDER_ROWS)


def format_entry(entry, width):
    """Render one listing row: ``name/`` for directories, name plus size for files."""
    if width <= 0:
        return ''
    if entry.is_dir:
        return fit_text_to_cells(f' {entry.name}/', width)
    size = format_size(entry.size)
    name_w = width - SIZE_COLUMN_WIDTH - 1
    if name_w < 4:
        return fit_text_to_cells(f' {entry.name}', width)
    return fit_text_to_cells(f' {entry.name}', name_w) + f'{size:>{SIZE_COLUMN_WIDTH}} '


def _row_attr(pane, idx, entry):
    if idx == pane.selected_index:
        return theme_attr('selected' if pane.focused else 'selected_inactive')
    if entry.is_dir:
        return theme_attr('directory')
    return theme_attr('pane_body')


def draw_pane(stdscr, pane, rect, use_unicode=True):
    """Draw one bordered pane from a PaneSnapshot."""
    x, y, w, h = rect
    if w < 4 or h < PANE_BORDER_ROWS + 1:
        return
    border_attr = theme_attr('pane_border_active' if pane.focused else 'pane_border')
    draw_box(stdscr, y, x, h, w, border_attr, double=pane.focused, use_unicode=use_unicode)

    title = fit_text_to_cells(f' {pane.label}: {pane.path} ', w - 4).rstrip()
    safe_addstr(stdscr, y, x + 2, title, theme_attr('pane_title') | curses.A_BOLD)

    inner_w = w - 2
    rows = h - PANE_BORDER_ROWS
    if not pane.entries:
        safe_addstr(stdscr, y + 1, x + 1, fit_text_to_cells('  (empty directory)', inner_w), theme_attr('pane_body'))
    for row in range(rows):
        idx = pane.scroll_offset + row
        if idx >= len(pane.entries):
            break
        entry = pane.entries[idx]
        safe_addstr(stdscr, y + 1 + row, x + 1, format_entry(entry, inner_w), _row_attr(pane, idx, entry))

    if pane.error_message:
        message = fit_text_to_cells(f' {pane.error_message} ', w - 4).rstrip()
        safe_addstr(stdscr, y + h - 1, x + 2, message, theme_attr('status_error') | curses.A_BOLD)


def status_text(snapshot):
    """Text for the status line: in-flight copy, then the last message.

    An error raised while a copy runs is shown ahead of the progress label.
    """
    if snapshot.transfer and snapshot.status_is_error and snapshot.status_message:
        return f' {snapshot.status_message}  Copying {snapshot.transfer}'
    if snapshot.transfer:
        return f' Copying {snapshot.transfer}'
    if snapshot.status_message:
        return f' {snapshot.status_message}'
    return ''


def draw_statusbar(stdscr, snapshot):
    """Draw the outcome/message line above the help line."""
    h, w = stdscr.getmaxyx()
    row = h - HELP_BAR_HEIGHT - STATUS_BAR_HEIGHT
    attr = theme_attr('status_error' if snapshot.status_is_error else 'status')
    safe_addstr(stdscr, row, 0, fit_text_to_cells(status_text(snapshot), w - 1), attr)


def draw_helpbar(stdscr):
    """Draw the key binding reminder on the last row."""
    h, w = stdscr.getmaxyx()
    safe_addstr(stdscr, h - 1, 0, fit_text_to_cells(HELP_TEXT, w - 1), theme_attr('help'))


def draw_screen(stdscr, snapshot, use_unicode=True):
    """Draw both panes, the status line and the help line."""
    h, w = stdscr.getmaxyx()
    left_rect, right_rect = pane_rects(h, w)
    draw_pane(stdscr, snapshot.left, left_rect, use_unicode)
    draw_pane(stdscr, snapshot.right, right_rect, use_unicode)
    draw_statusbar(stdscr, snapshot)
    draw_helpbar(stdscr)
