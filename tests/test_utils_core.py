import importlib
import sys
import unittest
from unittest import mock

from tests._support import FakeWindow, make_fake_curses

_CURSES_MODULES = ("wsltransfer.theme", "wsltransfer.utils")


class UtilsTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls._prev_curses = sys.modules.get("curses")
        cls.fake_curses = make_fake_curses()
        sys.modules["curses"] = cls.fake_curses
        for mod_name in _CURSES_MODULES:
            sys.modules.pop(mod_name, None)
        cls.utils = importlib.import_module("wsltransfer.utils")
        cls.theme = importlib.import_module("wsltransfer.theme")

    @classmethod
    def tearDownClass(cls):
        for mod_name in _CURSES_MODULES:
            sys.modules.pop(mod_name, None)
        if cls._prev_curses is not None:
            sys.modules["curses"] = cls._prev_curses
        else:
            sys.modules.pop("curses", None)

    def test_format_size_units(self):
        self.assertEqual(self.utils.format_size(None), "")
        self.assertEqual(self.utils.format_size(512), "512B")
        self.assertEqual(self.utils.format_size(4096), "4.0K")
        self.assertEqual(self.utils.format_size(3 * 1048576), "3.0M")

    def test_fit_text_to_cells_pads_and_clips(self):
        self.assertEqual(self.utils.fit_text_to_cells("abc", 5), "abc  ")
        self.assertEqual(self.utils.fit_text_to_cells("abcdef", 3), "abc")
        self.assertEqual(self.utils.fit_text_to_cells("文件", 3), "文 ")
        self.assertEqual(self.utils.fit_text_to_cells("abc", 0), "")

    def test_normalize_key_code(self):
        self.assertEqual(self.utils.normalize_key_code("\r"), 10)
        self.assertEqual(self.utils.normalize_key_code("\b"), 8)
        self.assertEqual(self.utils.normalize_key_code("a"), 97)
        self.assertEqual(self.utils.normalize_key_code(260), 260)
        self.assertIsNone(self.utils.normalize_key_code(""))

    def test_safe_addstr_clips_to_window(self):
        win = FakeWindow(5, 10)
        self.utils.safe_addstr(win, 0, 2, "hello world")
        self.utils.safe_addstr(win, 9, 0, "off screen")
        self.assertEqual(win.calls, [(0, 2, "hello w", 0)])

    def test_safe_addstr_swallows_curses_errors(self):
        win = FakeWindow(5, 10)
        win.addnstr = mock.Mock(side_effect=self.fake_curses.error("edge"))
        self.utils.safe_addstr(win, 4, 0, "x")

    def test_draw_box_ascii_fallback(self):
        win = FakeWindow(10, 20)
        self.utils.draw_box(win, 0, 0, 3, 5, use_unicode=False)
        self.assertEqual(win.row(0), "+---+")
        self.assertEqual(win.row(2), "+---+")

    def test_init_colors_registers_every_role(self):
        with mock.patch.object(self.fake_curses, "init_pair") as init_pair:
            self.utils.init_colors("hacker")
        self.assertEqual(init_pair.call_count, len(self.theme.ROLE_TO_PAIR_ID))

    def test_get_theme_falls_back_to_default(self):
        self.assertEqual(self.theme.get_theme("missing").key, self.theme.DEFAULT_THEME)
        self.assertEqual([t.key for t in self.theme.list_themes()], ["classic", "dos_cga", "hacker"])


if __name__ == "__main__":
    unittest.main()
