# objects.py -- Access to blob and commit objects
# Copyright (C) 2007 James Westby <jw+debian@jameswestby.net>
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

"""Access to tgit objects.

There are two kinds of stored objects. A blob is the raw content of a file.
A commit is a snapshot of the complete path to blob mapping, optionally
linked to the commit it was built on. Its serialized form is plain text::

    parent <digest>
    blob <digest> <path>
    blob <digest> <path>

The ``parent`` line is only present when the commit has a parent. Blob lines
are ordered by digest. Objects are stored without a header and without
compression, and are identified by the digest of exactly the stored bytes.
"""

__all__ = [
    "Blob",
    "Commit",
]

import os
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from .errors import CommitError, InvalidCommit
from .hash import DEFAULT_HASH_ALGORITHM, HashAlgorithm

if TYPE_CHECKING:
    from .index import Index

_PARENT_HEADER = "parent"
_BLOB_HEADER = "blob"


class Blob:
    """The content of one file, together with its digest."""

    __slots__ = ("data", "id")

    def __init__(self, id: str, data: bytes) -> None:
        self.id = id
        self.data = data

    @classmethod
    def from_string(
        cls, data: bytes, algorithm: HashAlgorithm | None = None
    ) -> "Blob":
        """Create a blob from its contents, computing the digest."""
        algorithm = algorithm or DEFAULT_HASH_ALGORITHM
        return cls(algorithm.hash_object_hex(data), data)

    @classmethod
    def from_path(
        cls, path: str | os.PathLike[str], algorithm: HashAlgorithm | None = None
    ) -> "Blob":
        """Read a file from disk and create a blob from its contents.

        Args:
          path: Path of the file to read
          algorithm: Hash algorithm to use (defaults to SHA-1)
        Returns: A new `Blob`
        Raises:
          OSError: if the file can not be read
        """
        with open(path, "rb") as f:
            return cls.from_string(f.read(), algorithm)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.id}>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Blob):
            return NotImplemented
        return self.id == other.id and self.data == other.data

    __hash__ = None  # type: ignore[assignment]


class Commit:
    """A snapshot of every tracked path, linked to its parent.

    A new commit starts out as a copy of its parent's files. Entries from
    the index are laid over it with `add_from_index`, after which `update`
    renders the serialized form and fixes the digest. From then on the
    commit can not be changed.
    """

    def __init__(
        self,
        parent: "Commit | None" = None,
        algorithm: HashAlgorithm | None = None,
    ) -> None:
        """Create a commit on top of ``parent``.

        Args:
          parent: Commit to build on, or None for the first commit. A parent
            that has not been finalized has no digest and is not recorded
            as parent, but its files are still inherited.
          algorithm: Hash algorithm, defaults to the parent's algorithm
        """
        if algorithm is None:
            algorithm = (
                parent.algorithm if parent is not None else DEFAULT_HASH_ALGORITHM
            )
        self.algorithm = algorithm
        self._id: str | None = None
        self._raw: bytes | None = None
        self._parent: str | None = None
        self._files: dict[str, str] = {}
        if parent is not None:
            self._parent = parent.id
            self._files.update(parent._files)

    @property
    def id(self) -> str | None:
        """Digest of the serialized commit, or None if not yet finalized."""
        return self._id

    @property
    def finalized(self) -> bool:
        """Whether the digest and serialized form have been computed."""
        return self._id is not None and self._raw is not None

    @property
    def parent(self) -> str | None:
        """Digest of the parent commit, if any."""
        return self._parent

    @parent.setter
    def parent(self, value: str | None) -> None:
        self._check_mutable()
        self._parent = value

    @property
    def files(self) -> Mapping[str, str]:
        """Read-only mapping from path to blob digest."""
        return MappingProxyType(self._files)

    def _check_mutable(self) -> None:
        if self.finalized:
            raise CommitError(f"commit {self._id} is finalized and can not change")

    def add(self, path: str, sha: str) -> None:
        """Track ``path`` at blob ``sha``, replacing any previous entry."""
        self._check_mutable()
        if not path or "\n" in path:
            raise ValueError(f"invalid path {path!r}")
        self._files[path] = sha

    def add_from_index(self, index: "Index | Iterable[tuple[str, str]]") -> None:
        """Lay every staged (path, digest) pair over this commit's files.

        Args:
          index: An `Index`, or any iterable of (path, digest) pairs
        """
        entries = index.items() if hasattr(index, "items") else index
        for path, sha in entries:
            self.add(path, sha)

    def iter_entries(self) -> Iterator[tuple[str, str]]:
        """Iterate over (digest, path) pairs in serialization order."""
        return iter(sorted((sha, path) for (path, sha) in self._files.items()))

    def _serialize(self) -> list[str]:
        lines = []
        if self._parent is not None:
            lines.append(f"{_PARENT_HEADER} {self._parent}\n")
        for sha, path in self.iter_entries():
            lines.append(f"{_BLOB_HEADER} {sha} {path}\n")
        return lines

    def update(self) -> None:
        """Render the serialized form and compute the digest.

        Calling this on a commit that is already finalized has no effect.
        """
        if self.finalized:
            return
        raw = "".join(self._serialize()).encode("utf-8")
        self._id = self.algorithm.hash_object_hex(raw)
        self._raw = raw

    def as_raw_string(self) -> bytes | None:
        """Return the serialized form, or None if not yet finalized."""
        return self._raw

    @classmethod
    def from_string(
        cls, sha: str, text: str, algorithm: HashAlgorithm | None = None
    ) -> "Commit":
        """Parse a serialized commit.

        ``sha`` is the digest the text was stored under; it is trusted
        as is. ``parent`` lines set the parent (the last one wins),
        ``blob`` lines add an entry and anything else is skipped. A
        ``blob`` line without a path or a line whose digest is not valid
        for ``algorithm`` is skipped as well.

        Args:
          sha: Digest of the commit
          text: Serialized commit
          algorithm: Hash algorithm, used to recognize digests
        Returns: A finalized `Commit`
        """
        commit = cls(algorithm=algorithm)
        valid_hexsha = commit.algorithm.valid_hexsha
        for line in text.split("\n"):
            line = line.rstrip("\r")
            field, _, value = line.partition(" ")
            if field == _PARENT_HEADER:
                if valid_hexsha(value):
                    commit._parent = value
            elif field == _BLOB_HEADER:
                blob_sha, sep, path = value.partition(" ")
                if sep and path and valid_hexsha(blob_sha):
                    commit._files[path] = blob_sha
        commit._id = sha
        commit._raw = text.encode("utf-8")
        return commit

    @classmethod
    def from_raw_string(
        cls, sha: str, data: bytes, algorithm: HashAlgorithm | None = None
    ) -> "Commit":
        """Parse a serialized commit from the bytes found in the object store.

        Raises:
          InvalidCommit: if the bytes are not valid UTF-8 text
        """
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidCommit(sha, str(e)) from e
        commit = cls.from_string(sha, text, algorithm)
        commit._raw = data
        return commit

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self._id}>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Commit):
            return NotImplemented
        return self._parent == other._parent and self._files == other._files

    __hash__ = None  # type: ignore[assignment]
