# test_walk.py -- Tests for walk
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

"""Tests for commit walking functionality."""

from tgit.errors import ObjectMissing
from tgit.object_store import MemoryObjectStore
from tgit.objects import Commit
from tgit.walk import Walker

from . import TestCase

a_sha = "a" * 40
b_sha = "b" * 40


class WalkerTest(TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.store = MemoryObjectStore()

    def make_linear_commits(self, num_commits: int) -> list[Commit]:
        commits = []
        parent = None
        for i in range(num_commits):
            c = Commit(parent)
            c.add(f"f{i}", a_sha if i % 2 else b_sha)
            c.update()
            self.store.add_commit(c)
            commits.append(c)
            parent = c
        return commits

    def test_linear(self) -> None:
        c1, c2, c3 = self.make_linear_commits(3)
        walker = Walker(self.store, c3.id)
        self.assertEqual([c3, c2, c1], [e.commit for e in walker])
        self.assertEqual([0, 1, 2], [e.depth for e in walker])

    def test_empty(self) -> None:
        self.assertEqual([], list(Walker(self.store, None)))

    def test_max_entries(self) -> None:
        c1, c2, c3 = self.make_linear_commits(3)
        self.assertEqual(
            [c3, c2], [e.commit for e in Walker(self.store, c3.id, max_entries=2)]
        )
        self.assertEqual([], list(Walker(self.store, c3.id, max_entries=0)))

    def test_missing_parent(self) -> None:
        c1, c2 = self.make_linear_commits(2)
        del self.store[c1.id]
        walker = iter(Walker(self.store, c2.id))
        self.assertEqual(c2, next(walker).commit)
        self.assertRaises(ObjectMissing, next, walker)

    def test_changes(self) -> None:
        c1, c2 = self.make_linear_commits(2)
        entries = list(Walker(self.store, c2.id))
        self.assertEqual({"f1": a_sha}, entries[0].changes(c1))
        self.assertEqual({"f0": b_sha}, entries[1].changes(None))
