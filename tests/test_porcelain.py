# test_porcelain.py -- Tests for porcelain
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

"""Tests for tgit.porcelain."""

import os
from io import BytesIO, StringIO

from tgit import porcelain
from tgit.errors import NotTgitRepository, ObjectMissing
from tgit.hash import digest
from tgit.repo import Repo

from . import TestCase


class PorcelainTestCase(TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.repo_path = os.path.realpath(self.mkdtemp())
        self.repo = Repo.init(self.repo_path)
        self.addCleanup(self.repo.close)

    def write_file(self, path: str, contents: bytes) -> str:
        full_path = os.path.join(self.repo_path, path)
        os.makedirs(os.path.dirname(full_path), exist_ok=True)
        with open(full_path, "wb") as f:
            f.write(contents)
        return full_path


class InitTests(TestCase):
    def test_non_existent(self) -> None:
        repo_dir = os.path.join(self.mkdtemp(), "foo")
        with porcelain.init(repo_dir) as repo:
            self.assertEqual(repo_dir, repo.path)
        self.assertTrue(os.path.isdir(os.path.join(repo_dir, ".tgit")))

    def test_existing(self) -> None:
        repo_dir = self.mkdtemp()
        porcelain.init(repo_dir).close()
        self.assertRaises(FileExistsError, porcelain.init, repo_dir)

    def test_object_format(self) -> None:
        with porcelain.init(self.mkdtemp(), object_format="sha256") as repo:
            self.assertEqual("sha256", repo.algorithm.name)


class OpenRepoClosingTests(PorcelainTestCase):
    def test_repo_passthrough(self) -> None:
        with porcelain.open_repo_closing(self.repo) as r:
            self.assertIs(self.repo, r)

    def test_path(self) -> None:
        with porcelain.open_repo_closing(self.repo_path) as r:
            self.assertEqual(self.repo_path, r.path)

    def test_not_a_repository(self) -> None:
        self.assertRaises(
            NotTgitRepository, porcelain.open_repo_closing, self.mkdtemp()
        )


class AddTests(PorcelainTestCase):
    def test_add_relative_to_cwd(self) -> None:
        self.write_file("sub/foo", b"foo")
        self.chdir(os.path.join(self.repo_path, "sub"))
        self.assertEqual(["sub/foo"], porcelain.add(self.repo_path, paths=["foo"]))
        self.assertEqual(digest(b"foo"), self.repo.open_index()["sub/foo"])

    def test_add_absolute(self) -> None:
        path = self.write_file("foo", b"foo")
        self.assertEqual(["foo"], porcelain.add(self.repo, paths=path))

    def test_add_directory(self) -> None:
        self.write_file("a/b.txt", b"b")
        self.write_file("a/c/d.txt", b"d")
        self.write_file("e.txt", b"e")
        self.chdir(self.repo_path)
        self.assertEqual(
            ["a/b.txt", "a/c/d.txt", "e.txt"],
            sorted(porcelain.add(self.repo, paths=["."])),
        )
        self.assertNotIn(".tgit/HEAD", self.repo.open_index())

    def test_add_outside_repository(self) -> None:
        outside = os.path.join(self.mkdtemp(), "x")
        with open(outside, "wb") as f:
            f.write(b"x")
        self.assertRaises(ValueError, porcelain.add, self.repo, paths=[outside])

    def test_add_control_directory(self) -> None:
        self.assertRaises(
            ValueError,
            porcelain.add,
            self.repo,
            paths=[os.path.join(self.repo_path, ".tgit", "HEAD")],
        )

    def test_add_missing(self) -> None:
        self.assertRaises(
            FileNotFoundError,
            porcelain.add,
            self.repo,
            paths=[os.path.join(self.repo_path, "missing")],
        )


class CommitTests(PorcelainTestCase):
    def test_commit(self) -> None:
        path = self.write_file("a.txt", b"hello")
        porcelain.add(self.repo, paths=[path])
        sha = porcelain.commit(self.repo_path)
        self.assertEqual(sha, self.repo.head())
        self.assertEqual([], porcelain.ls_files(self.repo))


class LsFilesTests(PorcelainTestCase):
    def test_empty(self) -> None:
        self.assertEqual([], porcelain.ls_files(self.repo))

    def test_simple(self) -> None:
        self.write_file("b", b"b")
        self.write_file("a", b"a")
        porcelain.add(
            self.repo,
            paths=[os.path.join(self.repo_path, "b"), os.path.join(self.repo_path, "a")],
        )
        self.assertEqual(
            [("a", digest(b"a")), ("b", digest(b"b"))], porcelain.ls_files(self.repo)
        )


class LogTests(PorcelainTestCase):
    def test_empty(self) -> None:
        outstream = StringIO()
        porcelain.log(self.repo, outstream=outstream)
        self.assertEqual("", outstream.getvalue())

    def test_simple(self) -> None:
        porcelain.add(self.repo, paths=[self.write_file("a", b"a")])
        c1 = porcelain.commit(self.repo)
        porcelain.add(self.repo, paths=[self.write_file("b", b"b")])
        c2 = porcelain.commit(self.repo)
        outstream = StringIO()
        porcelain.log(self.repo, outstream=outstream)
        output = outstream.getvalue()
        self.assertEqual(2, output.count("-" * 50))
        self.assertLess(output.index(f"commit: {c2}"), output.index(f"commit: {c1}"))
        self.assertIn(f"parent: {c1}\n", output)
        self.assertIn(f"blob {digest(b'b')} b\n", output)

    def test_max_entries(self) -> None:
        porcelain.commit(self.repo)
        c2 = porcelain.commit(self.repo)
        outstream = StringIO()
        porcelain.log(self.repo, outstream=outstream, max_entries=1)
        self.assertEqual(1, outstream.getvalue().count("-" * 50))
        self.assertIn(f"commit: {c2}", outstream.getvalue())


class CatFileTests(PorcelainTestCase):
    def test_blob(self) -> None:
        porcelain.add(self.repo, paths=[self.write_file("a", b"contents")])
        outstream = BytesIO()
        data = porcelain.cat_file(self.repo, digest(b"contents"), outstream)
        self.assertEqual(b"contents", data)
        self.assertEqual(b"contents", outstream.getvalue())

    def test_commit(self) -> None:
        porcelain.add(self.repo, paths=[self.write_file("a", b"a")])
        sha = porcelain.commit(self.repo)
        self.assertEqual(
            f"blob {digest(b'a')} a\n".encode(), porcelain.cat_file(self.repo, sha)
        )

    def test_missing(self) -> None:
        self.assertRaises(ObjectMissing, porcelain.cat_file, self.repo, "a" * 40)
