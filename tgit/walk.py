# walk.py -- History walking
# Copyright (C) 2010 Google, Inc.
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

"""General implementation of walking commits and their history.

History is a singly linked list: each commit names at most one parent.
Walking starts at a commit and follows parent pointers until a commit
without parent is reached. There is no cycle detection; a chain built by
tgit can not contain a cycle.
"""

__all__ = [
    "WalkEntry",
    "Walker",
]

from collections.abc import Iterator

from .object_store import BaseObjectStore
from .objects import Commit


class WalkEntry:
    """Object encapsulating a single result from a walk."""

    def __init__(self, commit: Commit, depth: int) -> None:
        self.commit = commit
        self.depth = depth

    def changes(self, parent: Commit | None) -> dict[str, str]:
        """Return the entries this commit added or changed relative to ``parent``."""
        parent_files = parent.files if parent is not None else {}
        return {
            path: sha
            for (path, sha) in self.commit.files.items()
            if parent_files.get(path) != sha
        }

    def __repr__(self) -> str:
        return f"<WalkEntry commit={self.commit.id} depth={self.depth}>"


class Walker:
    """Object for performing a walk of commits in a store.

    Walker objects are initialized with a store and a starting commit. They
    are iterable and yield `WalkEntry` objects, newest first.
    """

    def __init__(
        self,
        store: BaseObjectStore,
        include: str | None,
        max_entries: int | None = None,
    ) -> None:
        """Constructor.

        Args:
          store: ObjectStore instance for looking up objects.
          include: Digest of the commit to start from, or None for an
            empty history.
          max_entries: The maximum number of entries to yield, or None for
            no limit.
        """
        self.store = store
        self.include = include
        self.max_entries = max_entries

    def __iter__(self) -> Iterator[WalkEntry]:
        sha = self.include
        depth = 0
        while sha is not None:
            if self.max_entries is not None and depth >= self.max_entries:
                return
            commit = self.store.read_commit(sha)
            yield WalkEntry(commit, depth)
            sha = commit.parent
            depth += 1
