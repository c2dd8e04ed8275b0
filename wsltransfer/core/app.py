"""
Main wsltransfer application class.
"""
import logging

from ..utils import check_unicode_support, init_colors
from .actions import ActionResult, ActionType
from .bootstrap import configure_terminal, disable_flow_control
from .event_loop import run_app_loop
from .key_router import handle_key_event
from .rendering import draw_screen, list_height, pane_rects

LOGGER = logging.getLogger(__name__)

APP_VERSION = '0.3.0'


class TransferApp:
    """Curses front end around a DualPaneController."""

    MIN_TERM_WIDTH = 40
    MIN_TERM_HEIGHT = 8
    SHUTDOWN_JOIN_TIMEOUT = 5.0

    def __init__(self, stdscr, controller, theme=None):
        self.stdscr = stdscr
        self.controller = controller
        self.running = True
        self.use_unicode = check_unicode_support()

        configure_terminal(stdscr, timeout_ms=200)
        self._validate_terminal_size()
        disable_flow_control()
        init_colors(theme)

    def _validate_terminal_size(self):
        """Fail fast when terminal is too small for two panes."""
        h, w = self.stdscr.getmaxyx()
        if h < self.MIN_TERM_HEIGHT or w < self.MIN_TERM_WIDTH:
            raise ValueError(
                f'Terminal too small ({w}x{h}). '
                f'Minimum supported size is {self.MIN_TERM_WIDTH}x{self.MIN_TERM_HEIGHT}.'
            )

    def draw(self):
        """Scroll both panes to their selection, then draw a snapshot."""
        h, w = self.stdscr.getmaxyx()
        panes = (self.controller.wsl_pane, self.controller.windows_pane)
        for pane, rect in zip(panes, pane_rects(h, w)):
            pane.ensure_visible(list_height(rect))
        draw_screen(self.stdscr, self.controller.snapshot(), self.use_unicode)

    def handle_key(self, key):
        return handle_key_event(self, key)

    def dispatch_command(self, command):
        """Apply one command to the controller and react to its result."""
        LOGGER.debug('dispatch_command: %s', command)
        result = self.controller.dispatch(command)
        self._dispatch_result(result)
        return result

    def _dispatch_result(self, result):
        if not isinstance(result, ActionResult):
            return
        if result.type == ActionType.EXIT:
            self.running = False
        elif result.type == ActionType.ERROR:
            LOGGER.debug('command failed: %s', result.payload)

    def has_background_operation(self):
        return self.controller.transfer_in_flight

    def poll_background_operation(self):
        """Deliver a finished background copy on the interaction thread."""
        self._dispatch_result(self.controller.poll())

    def cleanup(self):
        """Wait briefly for an in-flight copy before the terminal is restored."""
        if self.controller.transfer_in_flight:
            LOGGER.info('waiting for in-flight transfer before exit')
        self.controller.shutdown(self.SHUTDOWN_JOIN_TIMEOUT)

    def run(self):
        run_app_loop(self)
