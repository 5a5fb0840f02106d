# test_cli.py -- Tests for cli
# Copyright (C) 2008-2025 Jelmer Vernooij <jelmer@jelmer.uk>
#
# SPDX-License-Identifier: Apache-2.0 OR GPL-2.0-or-later
# tgit is dual-licensed under the Apache License, Version 2.0 and the GNU
# General Public License as published by the Free Software Foundation; version 2.0
# or (at your option) any later version. You can redistribute it and/or
# modify it under the terms of either of these two licenses.
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# You should have received a copy of the licenses; if not, see
# <http://www.gnu.org/licenses/> for a copy of the GNU General Public License
# and <http://www.apache.org/licenses/LICENSE-2.0> for a copy of the Apache
# License, Version 2.0.
#

"""Tests for tgit.cli."""

import io
import logging
import os
import sys

from tgit import cli
from tgit.hash import digest
from tgit.log_utils import _TGIT_LOGGER
from tgit.repo import Repo

from . import TestCase


class TgitCliTestCase(TestCase):
    """Base class for CLI tests."""

    def setUp(self) -> None:
        super().setUp()
        self.test_dir = self.mkdtemp()
        self.repo_path = os.path.join(self.test_dir, "repo")
        os.mkdir(self.repo_path)
        self.repo = Repo.init(self.repo_path)
        self.addCleanup(self.repo.close)

        root_logger = logging.getLogger()
        self.addCleanup(setattr, _TGIT_LOGGER, "handlers", list(_TGIT_LOGGER.handlers))
        self.addCleanup(setattr, root_logger, "handlers", list(root_logger.handlers))
        self.addCleanup(root_logger.setLevel, root_logger.level)

    def _run_cli(self, *args: str, cwd: str | None = None):
        """Run CLI command and capture output."""
        stdout = io.TextIOWrapper(io.BytesIO(), encoding="utf-8")
        stderr = io.StringIO()
        old_stdout = sys.stdout
        old_stderr = sys.stderr
        old_cwd = os.getcwd()
        try:
            sys.stdout = stdout
            sys.stderr = stderr
            os.chdir(cwd or self.repo_path)
            result = cli.main(list(args))
        finally:
            sys.stdout = old_stdout
            sys.stderr = old_stderr
            os.chdir(old_cwd)
        stdout.flush()
        return result, stdout.buffer.getvalue(), stderr.getvalue()

    def write_file(self, path: str, contents: bytes) -> None:
        with open(os.path.join(self.repo_path, path), "wb") as f:
            f.write(contents)


class MainTests(TgitCliTestCase):
    def test_no_args(self) -> None:
        result, stdout, _stderr = self._run_cli()
        self.assertEqual(1, result)
        self.assertIn(b"usage: tgit", stdout)

    def test_unknown_command(self) -> None:
        result, _stdout, _stderr = self._run_cli("frobnicate")
        self.assertEqual(1, result)

    def test_index_locked(self) -> None:
        lockpath = os.path.join(self.repo_path, ".tgit", "index.lock")
        with open(lockpath, "wb"):
            pass
        self.write_file("a.txt", b"hello")
        result, _stdout, stderr = self._run_cli("add", "a.txt")
        self.assertEqual(1, result)
        self.assertTrue(stderr.startswith("error: "))
        self.assertIn("index.lock", stderr)
        self.assertTrue(os.path.exists(lockpath))

    def test_outside_repository(self) -> None:
        result, _stdout, stderr = self._run_cli("commit", cwd=self.mkdtemp())
        self.assertEqual(1, result)
        self.assertTrue(stderr.startswith("error: No tgit repository was found"))


class InitCommandTest(TgitCliTestCase):
    def test_init_basic(self) -> None:
        new_repo_path = os.path.join(self.test_dir, "new_repo")
        result, _stdout, _stderr = self._run_cli("init", new_repo_path)
        self.assertIsNone(result)
        self.assertTrue(os.path.isdir(os.path.join(new_repo_path, ".tgit")))

    def test_init_already_initialized(self) -> None:
        result, _stdout, _stderr = self._run_cli("init", self.repo_path)
        self.assertEqual(1, result)

    def test_init_objectformat_sha256(self) -> None:
        new_repo_path = os.path.join(self.test_dir, "sha256_repo")
        self._run_cli("init", "--objectformat=sha256", new_repo_path)
        with Repo(new_repo_path) as repo:
            self.assertEqual("sha256", repo.algorithm.name)

    def test_init_branch(self) -> None:
        new_repo_path = os.path.join(self.test_dir, "branch_repo")
        self._run_cli("init", "-b", "main", new_repo_path)
        with Repo(new_repo_path) as repo:
            self.assertEqual("refs/heads/main", repo.refs.get_head_ref())


class AddCommitCommandTest(TgitCliTestCase):
    def test_add_and_commit(self) -> None:
        self.write_file("a.txt", b"hello")
        result, _stdout, _stderr = self._run_cli("add", "a.txt")
        self.assertIsNone(result)
        self.assertEqual(digest(b"hello"), self.repo.open_index()["a.txt"])

        result, stdout, _stderr = self._run_cli("commit")
        self.assertIsNone(result)
        sha = stdout.decode("ascii").strip()
        self.assertEqual(sha, self.repo.head())
        self.assertEqual(0, len(self.repo.open_index()))

    def test_add_from_subdirectory(self) -> None:
        os.mkdir(os.path.join(self.repo_path, "sub"))
        self.write_file(os.path.join("sub", "b.txt"), b"b")
        self._run_cli("add", "b.txt", cwd=os.path.join(self.repo_path, "sub"))
        self.assertIn("sub/b.txt", self.repo.open_index())

    def test_add_missing(self) -> None:
        result, _stdout, stderr = self._run_cli("add", "missing.txt")
        self.assertEqual(1, result)
        self.assertTrue(stderr.startswith("error: "))

    def test_add_malformed_index(self) -> None:
        self.write_file("a.txt", b"hello")
        with open(self.repo.index_path(), "wb") as f:
            f.write(b"broken\n")
        result, _stdout, stderr = self._run_cli("add", "a.txt")
        self.assertEqual(1, result)
        self.assertIn("The index is corrupt", stderr)


class InspectionCommandTest(TgitCliTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.write_file("a.txt", b"hello")
        self.write_file("b.txt", b"world")
        self._run_cli("add", "a.txt", "b.txt")

    def test_ls_files(self) -> None:
        _result, stdout, _stderr = self._run_cli("ls-files")
        self.assertEqual(b"a.txt\nb.txt\n", stdout)

    def test_ls_files_stage(self) -> None:
        _result, stdout, _stderr = self._run_cli("ls-files", "--stage")
        self.assertEqual(
            f"{digest(b'hello')} a.txt\n{digest(b'world')} b.txt\n".encode(), stdout
        )

    def test_cat_file(self) -> None:
        _result, stdout, _stderr = self._run_cli("cat-file", digest(b"hello"))
        self.assertEqual(b"hello", stdout)

    def test_cat_file_missing(self) -> None:
        result, _stdout, stderr = self._run_cli("cat-file", "a" * 40)
        self.assertEqual(1, result)
        self.assertIn("is not in the object store", stderr)

    def test_log(self) -> None:
        _result, stdout, _stderr = self._run_cli("commit")
        sha1 = stdout.decode("ascii").strip()
        _result, stdout, _stderr = self._run_cli("commit")
        sha2 = stdout.decode("ascii").strip()
        _result, stdout, _stderr = self._run_cli("log")
        self.assertIn(f"commit: {sha2}".encode(), stdout)
        self.assertIn(f"commit: {sha1}".encode(), stdout)
        _result, stdout, _stderr = self._run_cli("log", "-n", "1")
        self.assertIn(f"commit: {sha2}".encode(), stdout)
        self.assertNotIn(f"commit: {sha1}".encode(), stdout)
