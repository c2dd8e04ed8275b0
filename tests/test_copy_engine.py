import errno
import os
import shutil
import unittest
from unittest import mock

from tests._support import build_tree, make_repo_tmpdir, read_bytes
from wsltransfer.core.copy_engine import (
    CopyEngine,
    CopyErrorKind,
    CopyFailure,
    CopyOutcome,
    CopyStatus,
    classify_os_error,
)
from wsltransfer.core.lister import ListError, ListErrorKind, list_directory
from wsltransfer.core.paths import PathSyntax, Root


class CopyEngineTests(unittest.TestCase):
    def setUp(self):
        self.tmp = make_repo_tmpdir()
        self.addCleanup(self.tmp.cleanup)
        self.src_base = os.path.join(self.tmp.name, "wsl")
        self.dst_base = os.path.join(self.tmp.name, "win")
        os.makedirs(self.src_base)
        os.makedirs(self.dst_base)
        self.src_root = Root.create("WSL", self.src_base, PathSyntax.UNIX)
        self.dst_root = Root("Windows", "C:\\Users", PathSyntax.WINDOWS, self.dst_base)
        self.engine = CopyEngine()

    def _src(self, *parts):
        path = self.src_root.path()
        for part in parts:
            path = path.child(part)
        return path

    def _dst(self, *parts):
        path = self.dst_root.path()
        for part in parts:
            path = path.child(part)
        return path

    def test_single_file_is_byte_identical(self):
        payload = bytes(range(256)) * 40
        build_tree(self.src_base, {"blob.bin": payload})

        outcome = self.engine.copy(self._src("blob.bin"), self._dst())

        self.assertIs(outcome.status, CopyStatus.SUCCESS)
        self.assertTrue(outcome.ok)
        self.assertEqual(read_bytes(self.dst_base, "blob.bin"), payload)
        self.assertEqual(outcome.files_copied, 1)
        self.assertEqual(outcome.bytes_copied, len(payload))
        self.assertEqual(outcome.destination, "C:\\Users")

    def test_existing_file_is_overwritten(self):
        build_tree(self.src_base, {"a.txt": "new"})
        build_tree(self.dst_base, {"a.txt": "old content"})

        outcome = self.engine.copy(self._src("a.txt"), self._dst())

        self.assertIs(outcome.status, CopyStatus.SUCCESS)
        self.assertEqual(read_bytes(self.dst_base, "a.txt"), b"new")

    def test_directory_tree_is_reproduced(self):
        build_tree(self.src_base, {
            "proj": {
                "README": "r",
                "src": {"main.py": "print()", "pkg": {"__init__.py": ""}},
                "empty": {},
            },
        })

        outcome = self.engine.copy(self._src("proj"), self._dst())

        self.assertIs(outcome.status, CopyStatus.SUCCESS)
        for dirpath, dirnames, filenames in os.walk(os.path.join(self.src_base, "proj")):
            rel = os.path.relpath(dirpath, self.src_base)
            for name in dirnames:
                self.assertTrue(os.path.isdir(os.path.join(self.dst_base, rel, name)))
            for name in filenames:
                self.assertTrue(os.path.isfile(os.path.join(self.dst_base, rel, name)))
        self.assertEqual(outcome.files_copied, 3)
        self.assertEqual(outcome.dirs_created, 4)

    def test_existing_directory_is_merged(self):
        build_tree(self.src_base, {"b": {"x.txt": "from source", "shared.txt": "source wins"}})
        build_tree(self.dst_base, {"b": {"y.txt": "kept", "shared.txt": "old"}})

        outcome = self.engine.copy(self._src("b"), self._dst())

        self.assertIs(outcome.status, CopyStatus.SUCCESS)
        self.assertEqual(sorted(os.listdir(os.path.join(self.dst_base, "b"))), ["shared.txt", "x.txt", "y.txt"])
        self.assertEqual(read_bytes(self.dst_base, "b", "y.txt"), b"kept")
        self.assertEqual(read_bytes(self.dst_base, "b", "shared.txt"), b"source wins")
        self.assertEqual(outcome.dirs_created, 0)

    def test_unreadable_child_yields_partial_failure_and_siblings_copy(self):
        build_tree(self.src_base, {"dir": {"a.txt": "a", "bad.txt": "b", "c.txt": "c"}})
        real_copyfile = shutil.copyfile
        bad_path = os.path.join(self.src_base, "dir", "bad.txt")

        def fake_copyfile(src, dst, *args, **kwargs):
            if src == bad_path:
                raise PermissionError(errno.EACCES, "Permission denied", src)
            return real_copyfile(src, dst, *args, **kwargs)

        with mock.patch("wsltransfer.core.copy_engine.shutil.copyfile", side_effect=fake_copyfile):
            outcome = self.engine.copy(self._src("dir"), self._dst())

        self.assertIs(outcome.status, CopyStatus.PARTIAL_FAILURE)
        self.assertEqual(
            outcome.failures,
            (CopyFailure("dir/bad.txt", CopyErrorKind.PERMISSION_DENIED, "Permission denied"),),
        )
        self.assertTrue(os.path.isfile(os.path.join(self.dst_base, "dir", "a.txt")))
        self.assertTrue(os.path.isfile(os.path.join(self.dst_base, "dir", "c.txt")))
        self.assertFalse(os.path.exists(os.path.join(self.dst_base, "dir", "bad.txt")))
        self.assertEqual(outcome.files_copied, 2)

    def _nested_tree(self):
        build_tree(self.src_base, {
            "dir": {
                "a.txt": "a",
                "sub": {"x.txt": "x"},
                "other": {"deeper": {"bad.txt": "b", "ok.txt": "ok"}},
                "z.txt": "z",
            },
        })

    def test_unlistable_nested_directory_is_reported_and_siblings_copy(self):
        self._nested_tree()

        def lister(path):
            if path.parts == ("dir", "sub"):
                raise ListError(ListErrorKind.PERMISSION_DENIED, path.display)
            return list_directory(path)

        outcome = CopyEngine(lister=lister).copy(self._src("dir"), self._dst())

        self.assertIs(outcome.status, CopyStatus.PARTIAL_FAILURE)
        self.assertEqual(
            outcome.failures,
            (CopyFailure("dir/sub", CopyErrorKind.PERMISSION_DENIED, "permission denied"),),
        )
        self.assertFalse(os.path.exists(os.path.join(self.dst_base, "dir", "sub")))
        for rel in ("a.txt", "z.txt", os.path.join("other", "deeper", "ok.txt"), os.path.join("other", "deeper", "bad.txt")):
            with self.subTest(rel=rel):
                self.assertTrue(os.path.isfile(os.path.join(self.dst_base, "dir", rel)))

    def test_failure_two_levels_down_reaches_top_level_outcome(self):
        self._nested_tree()
        real_copyfile = shutil.copyfile
        bad_path = os.path.join(self.src_base, "dir", "other", "deeper", "bad.txt")

        def fake_copyfile(src, dst, *args, **kwargs):
            if src == bad_path:
                raise OSError(errno.EIO, "Input/output error", src)
            return real_copyfile(src, dst, *args, **kwargs)

        with mock.patch("wsltransfer.core.copy_engine.shutil.copyfile", side_effect=fake_copyfile):
            outcome = self.engine.copy(self._src("dir"), self._dst())

        self.assertIs(outcome.status, CopyStatus.PARTIAL_FAILURE)
        self.assertEqual([f.path for f in outcome.failures], ["dir/other/deeper/bad.txt"])
        self.assertIs(outcome.failures[0].kind, CopyErrorKind.IO_ERROR)
        self.assertEqual(outcome.files_copied, 4)
        self.assertTrue(os.path.isfile(os.path.join(self.dst_base, "dir", "other", "deeper", "ok.txt")))
        self.assertTrue(os.path.isfile(os.path.join(self.dst_base, "dir", "sub", "x.txt")))
        self.assertIn("dir/other/deeper/bad.txt (I/O error)", outcome.summary())

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks unavailable")
    def test_symlink_into_destination_is_not_followed(self):
        build_tree(self.src_base, {"dir": {"a.txt": "a"}})
        try:
            os.symlink(self.dst_base, os.path.join(self.src_base, "dir", "to_dest"))
            os.symlink(self.tmp.name, os.path.join(self.src_base, "dir", "to_parent"))
        except OSError:
            self.skipTest("cannot create symlinks here")

        outcome = self.engine.copy(self._src("dir"), self._dst())

        self.assertIs(outcome.status, CopyStatus.PARTIAL_FAILURE)
        self.assertEqual([f.path for f in outcome.failures], ["dir/to_dest", "dir/to_parent"])
        self.assertEqual(outcome.failures[0].message, "symlink into destination")
        self.assertTrue(os.path.isfile(os.path.join(self.dst_base, "dir", "a.txt")))
        self.assertEqual(sorted(os.listdir(os.path.join(self.dst_base, "dir"))), ["a.txt"])

    def test_name_invalid_on_windows_is_recorded(self):
        build_tree(self.src_base, {"dir": {"ok.txt": "1", "a:b.txt": "2"}})

        outcome = self.engine.copy(self._src("dir"), self._dst())

        self.assertIs(outcome.status, CopyStatus.PARTIAL_FAILURE)
        self.assertEqual([f.path for f in outcome.failures], ["dir/a:b.txt"])
        self.assertIs(outcome.failures[0].kind, CopyErrorKind.INVALID_NAME)
        self.assertTrue(os.path.isfile(os.path.join(self.dst_base, "dir", "ok.txt")))

    def test_top_level_file_failure_is_fatal(self):
        build_tree(self.src_base, {"a.txt": "a"})
        with mock.patch(
            "wsltransfer.core.copy_engine.shutil.copyfile",
            side_effect=OSError(errno.ENOSPC, "No space left on device"),
        ):
            outcome = self.engine.copy(self._src("a.txt"), self._dst())

        self.assertIs(outcome.status, CopyStatus.FATAL)
        self.assertIn("out of space", outcome.reason)

    def test_missing_source_is_fatal(self):
        outcome = self.engine.copy(self._src("gone.txt"), self._dst())
        self.assertIs(outcome.status, CopyStatus.FATAL)
        self.assertIn("cannot read", outcome.reason)

    def test_destination_must_be_a_directory(self):
        build_tree(self.src_base, {"a.txt": "a"})
        build_tree(self.dst_base, {"file": "x"})
        outcome = self.engine.copy(self._src("a.txt"), self._dst("file"))
        self.assertIs(outcome.status, CopyStatus.FATAL)
        self.assertIn("not a directory", outcome.reason)

    def test_copy_onto_itself_is_fatal(self):
        build_tree(self.src_base, {"a.txt": "a"})
        outcome = self.engine.copy(self._src("a.txt"), self._src())
        self.assertIs(outcome.status, CopyStatus.FATAL)
        self.assertEqual(outcome.reason, "source and destination are the same")
        self.assertEqual(read_bytes(self.src_base, "a.txt"), b"a")

    def test_copy_directory_into_itself_is_fatal(self):
        build_tree(self.src_base, {"dir": {"sub": {}}})
        outcome = self.engine.copy(self._src("dir"), self._src("dir", "sub"))
        self.assertIs(outcome.status, CopyStatus.FATAL)
        self.assertEqual(outcome.reason, "cannot copy a directory into itself")
        self.assertFalse(os.path.exists(os.path.join(self.src_base, "dir", "sub", "dir")))

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks unavailable")
    def test_symlink_loop_is_reported_not_followed_forever(self):
        build_tree(self.src_base, {"dir": {"a.txt": "a"}})
        try:
            os.symlink(os.path.join(self.src_base, "dir"), os.path.join(self.src_base, "dir", "loop"))
        except OSError:
            self.skipTest("cannot create symlinks here")

        outcome = self.engine.copy(self._src("dir"), self._dst())

        self.assertIs(outcome.status, CopyStatus.PARTIAL_FAILURE)
        self.assertEqual([f.path for f in outcome.failures], ["dir/loop"])
        self.assertTrue(os.path.isfile(os.path.join(self.dst_base, "dir", "a.txt")))

    def test_progress_reports_each_entry(self):
        build_tree(self.src_base, {"dir": {"a.txt": "a", "sub": {"b.txt": "b"}}})
        seen = []
        self.engine.copy(self._src("dir"), self._dst(), progress=seen.append)
        self.assertEqual(seen, ["dir/sub", "dir/sub/b.txt", "dir/a.txt"])


class ClassifyOsErrorTests(unittest.TestCase):
    def test_known_errnos(self):
        self.assertIs(classify_os_error(PermissionError(errno.EACCES, "x")), CopyErrorKind.PERMISSION_DENIED)
        self.assertIs(classify_os_error(OSError(errno.EPERM, "x")), CopyErrorKind.PERMISSION_DENIED)
        self.assertIs(classify_os_error(OSError(errno.ENOSPC, "x")), CopyErrorKind.OUT_OF_SPACE)
        self.assertIs(classify_os_error(OSError(errno.ENAMETOOLONG, "x")), CopyErrorKind.NAME_TOO_LONG)
        self.assertIs(classify_os_error(OSError(errno.EIO, "x")), CopyErrorKind.IO_ERROR)

    def test_missing_source_file_is_source_vanished(self):
        exc = FileNotFoundError(errno.ENOENT, "No such file", "/src/a")
        self.assertIs(classify_os_error(exc, "/src/a"), CopyErrorKind.SOURCE_VANISHED)
        self.assertIs(classify_os_error(exc, "/other"), CopyErrorKind.IO_ERROR)


class CopyOutcomeSummaryTests(unittest.TestCase):
    def test_success_summary(self):
        outcome = CopyOutcome(CopyStatus.SUCCESS, "a.txt", "C:\\Users", files_copied=1)
        self.assertEqual(outcome.summary("Exported"), "Exported a.txt to C:\\Users (1 files, 0 dirs)")

    def test_fatal_summary(self):
        outcome = CopyOutcome(CopyStatus.FATAL, "a.txt", "/home", reason="boom")
        self.assertEqual(outcome.summary(), "Copied a.txt failed: boom")
        self.assertFalse(outcome.ok)

    def test_partial_summary_truncates_failure_list(self):
        failures = tuple(
            CopyFailure(f"d/f{i}", CopyErrorKind.IO_ERROR, "bad") for i in range(5)
        )
        outcome = CopyOutcome(CopyStatus.PARTIAL_FAILURE, "d", "/home", failures=failures, files_copied=2)
        text = outcome.summary("Imported")
        self.assertTrue(text.startswith("Imported d with 5 failed (2 files, 0 dirs): d/f0 (I/O error)"))
        self.assertTrue(text.endswith("+2 more"))
        self.assertNotIn("d/f3", text)


if __name__ == "__main__":
    unittest.main()
