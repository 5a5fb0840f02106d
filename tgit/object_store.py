# object_store.py -- Object store interface
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

"""Object store interface and implementations.

Objects live under their digest, split into a two character directory name
and a file name made of the remaining characters, e.g. ``ab/cdef...``.
"""

__all__ = [
    "BaseObjectStore",
    "DiskObjectStore",
    "MemoryObjectStore",
    "hex_to_filename",
]

import os
from collections.abc import Iterator

from ._typing import StrPath
from .errors import ObjectMissing
from .file import LockedFile
from .hash import DEFAULT_HASH_ALGORITHM, HashAlgorithm
from .log_utils import getLogger
from .objects import Blob, Commit

logger = getLogger(__name__)


def hex_to_filename(path: StrPath, hex: str) -> str:
    """Takes a hex digest and returns its filename relative to a path."""
    return os.path.join(path, hex[:2], hex[2:])


class BaseObjectStore:
    """Object store interface."""

    def __init__(self, *, algorithm: HashAlgorithm | None = None) -> None:
        """Initialize object store.

        Args:
            algorithm: Hash algorithm used to address objects
        """
        self.algorithm = algorithm or DEFAULT_HASH_ALGORITHM

    def write_object(self, sha: str, data: bytes) -> None:
        """Store ``data`` under ``sha``, replacing any existing object.

        The data is not checked against the digest.
        """
        raise NotImplementedError(self.write_object)

    def read_object(self, sha: str) -> bytes:
        """Obtain the raw contents of an object.

        Raises:
          ObjectMissing: if there is no object with this digest
        """
        raise NotImplementedError(self.read_object)

    def contains(self, sha: str) -> bool:
        """Check if a particular object is present."""
        raise NotImplementedError(self.contains)

    def __contains__(self, sha: str) -> bool:
        return self.contains(sha)

    def __iter__(self) -> Iterator[str]:
        """Iterate over the digests that are present in this store."""
        raise NotImplementedError(self.__iter__)

    def add_blob(self, blob: Blob) -> None:
        """Store the contents of a blob under its digest."""
        self.write_object(blob.id, blob.data)

    def read_blob(self, sha: str) -> Blob:
        """Read a blob back from the store."""
        return Blob(sha, self.read_object(sha))

    def add_commit(self, commit: Commit) -> None:
        """Store a finalized commit.

        A commit without digest or serialized form can not be stored; that
        is a programming error and is reported as an AssertionError.
        """
        raw = commit.as_raw_string()
        if commit.id is None or raw is None:
            raise AssertionError("Commit should have data and hash")
        self.write_object(commit.id, raw)

    def read_commit(self, sha: str) -> Commit:
        """Read and parse a commit.

        Raises:
          ObjectMissing: if there is no object with this digest
          InvalidCommit: if the object can not be parsed as a commit
        """
        data = self.read_object(sha)
        return Commit.from_raw_string(sha, data, self.algorithm)

    def close(self) -> None:
        """Close any files opened by this object store."""


class DiskObjectStore(BaseObjectStore):
    """Object store that keeps one file per object on disk."""

    def __init__(
        self,
        path: StrPath,
        *,
        fsync_object_files: bool = False,
        algorithm: HashAlgorithm | None = None,
    ) -> None:
        """Open an object store.

        Args:
          path: Path of the object store.
          fsync_object_files: whether to fsync object files for durability
          algorithm: Hash algorithm used to address objects
        """
        super().__init__(algorithm=algorithm)
        self.path = os.fspath(path)
        self.fsync_object_files = fsync_object_files

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}({self.path!r})>"

    @classmethod
    def init(
        cls,
        path: StrPath,
        *,
        algorithm: HashAlgorithm | None = None,
    ) -> "DiskObjectStore":
        """Create a new, empty object store directory.

        Args:
          path: Path where the object store should be created
          algorithm: Hash algorithm used to address objects
        Returns: New DiskObjectStore instance
        """
        try:
            os.mkdir(path)
        except FileExistsError:
            pass
        return cls(path, algorithm=algorithm)

    def _get_shafile_path(self, sha: str) -> str:
        if not self.algorithm.valid_hexsha(sha):
            raise ValueError(f"Invalid {self.algorithm} digest {sha!r}")
        return hex_to_filename(self.path, sha)

    def contains(self, sha: str) -> bool:
        try:
            return os.path.isfile(self._get_shafile_path(sha))
        except ValueError:
            return False

    def __iter__(self) -> Iterator[str]:
        for base in sorted(os.listdir(self.path)):
            if len(base) != 2:
                continue
            for rest in sorted(os.listdir(os.path.join(self.path, base))):
                sha = base + rest
                if self.algorithm.valid_hexsha(sha):
                    yield sha

    def write_object(self, sha: str, data: bytes) -> None:
        path = self._get_shafile_path(sha)
        dir = os.path.dirname(path)
        try:
            os.mkdir(dir)
        except FileExistsError:
            pass
        with LockedFile(path, "wb", fsync=self.fsync_object_files) as f:
            f.write(data)
        logger.debug("Wrote object %s (%d bytes)", sha, len(data))

    def read_object(self, sha: str) -> bytes:
        try:
            path = self._get_shafile_path(sha)
        except ValueError as e:
            raise ObjectMissing(sha) from e
        try:
            with open(path, "rb") as f:
                return f.read()
        except FileNotFoundError as e:
            raise ObjectMissing(sha) from e


class MemoryObjectStore(BaseObjectStore):
    """Object store that keeps all objects in memory."""

    def __init__(self, *, algorithm: HashAlgorithm | None = None) -> None:
        super().__init__(algorithm=algorithm)
        self._data: dict[str, bytes] = {}

    def contains(self, sha: str) -> bool:
        return sha in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._data))

    def write_object(self, sha: str, data: bytes) -> None:
        self._data[sha] = bytes(data)

    def read_object(self, sha: str) -> bytes:
        try:
            return self._data[sha]
        except KeyError as e:
            raise ObjectMissing(sha) from e

    def __delitem__(self, sha: str) -> None:
        """Delete an object from this store, for testing only."""
        del self._data[sha]

