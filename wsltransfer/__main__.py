"""
Entry point for wsltransfer.
"""
import argparse
import curses
import locale
import logging
import os
import sys
from pathlib import Path

from .core.app import APP_VERSION, TransferApp
from .core.config import ConfigError, apply_overrides, load_config
from .core.controller import DualPaneController
from .core.lister import ListError

DEBUG_ENV = 'WSLTRANSFER_DEBUG'
LOG_FILE_ENV = 'WSLTRANSFER_LOG'


def default_log_path():
    return Path.home() / '.cache' / 'wsltransfer' / 'wsltransfer.log'


def configure_logging(debug=False):
    """Send debug logs to a file; curses owns the terminal. Returns the log path or None."""
    if not (debug or os.environ.get(DEBUG_ENV)):
        return None
    path = Path(os.environ.get(LOG_FILE_ENV) or default_log_path())
    path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(path),
        level=logging.DEBUG,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )
    return path


def build_parser():
    parser = argparse.ArgumentParser(
        prog='wsltransfer',
        description='Copy files between a WSL directory tree and a Windows directory tree.',
    )
    parser.add_argument('--wsl-root', help='root of the WSL pane (default: /home)')
    parser.add_argument('--windows-root', help='root of the Windows pane, e.g. C:\\Users\\me')
    parser.add_argument('--config', help='path to config.toml')
    parser.add_argument('--theme', help='color theme (classic, dos_cga, hacker)')
    parser.add_argument('--debug', action='store_true', help=f'write debug log (also ${DEBUG_ENV})')
    parser.add_argument('--version', action='version', version=f'%(prog)s {APP_VERSION}')
    return parser


def build_controller(args):
    """Load config, apply CLI overrides and open both panes.

    Raises ConfigError or ListError; both are fatal at startup.
    """
    config = apply_overrides(
        load_config(args.config),
        wsl_root=args.wsl_root,
        windows_root=args.windows_root,
        theme=args.theme,
    )
    wsl_root, windows_root = config.build_roots()
    return config, DualPaneController.from_roots(wsl_root, windows_root)


def run(argv=None):
    """Run wsltransfer and return process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(args.debug)
    try:
        config, controller = build_controller(args)
    except (ConfigError, ListError) as exc:
        print(f'wsltransfer: {exc}', file=sys.stderr)
        return 1

    # Ensure UTF-8
    try:
        locale.setlocale(locale.LC_ALL, '')
    except locale.Error:
        pass

    try:
        curses.wrapper(lambda stdscr: TransferApp(stdscr, controller, theme=config.theme).run())
        return 0
    except KeyboardInterrupt:
        return 130
    except Exception as e:
        # Any crash: restore the terminal, then report.
        try:
            curses.endwin()
        except curses.error:
            pass
        print(f'\nError: {e}', file=sys.stderr)
        logging.getLogger(__name__).exception('wsltransfer crashed')
        return 1


def main_cli():
    """Console script entrypoint."""
    return run()


if __name__ == '__main__':
    raise SystemExit(main_cli())
