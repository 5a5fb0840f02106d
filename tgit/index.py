# index.py -- Staging index
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

"""Parser for the staging index.

The index is a text file with one ``<path> <digest>`` line per staged file,
ordered by path. Paths are relative to the repository root and use forward
slashes.
"""

__all__ = [
    "Index",
    "read_index",
    "write_index",
]

import os
from collections.abc import Iterable, Iterator
from typing import IO

from .errors import InvalidIndex
from .file import LockedFile
from .log_utils import getLogger

logger = getLogger(__name__)


def read_index(f: IO[bytes], filename: str = "<index>") -> dict[str, str]:
    """Read an index file, returning a dictionary mapping path to digest.

    Args:
      f: File-like object to read from
      filename: Name used in error messages
    Raises:
      InvalidIndex: if any line is not UTF-8 or does not consist of exactly
        a path and a digest
    """
    ret: dict[str, str] = {}
    for lineno, raw_line in enumerate(f, 1):
        try:
            line = raw_line.decode("utf-8").rstrip("\r\n")
        except UnicodeDecodeError as e:
            raise InvalidIndex(filename, lineno, repr(raw_line)) from e
        fields = line.split()
        if len(fields) != 2:
            raise InvalidIndex(filename, lineno, line)
        (path, sha) = fields
        ret[path] = sha
    return ret


def write_index(f: IO[bytes], entries: Iterable[tuple[str, str]]) -> None:
    """Write an index file.

    Args:
      f: File-like object to write to
      entries: Iterable over (path, digest) pairs, written in the given order
    """
    for path, sha in entries:
        f.write(f"{path} {sha}\n".encode())


class Index:
    """The staging area: a mapping from path to staged blob digest."""

    def __init__(self, filename: str | os.PathLike[str], read: bool = True) -> None:
        """Create an index object associated with the given filename.

        Args:
          filename: Path to the index file
          read: Whether to initialize the index from the given file, should it exist.
        """
        self._filename = os.fspath(filename)
        self._byname: dict[str, str] = {}
        if read:
            self.read()

    @property
    def path(self) -> str:
        return self._filename

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._filename!r})"

    def read(self) -> None:
        """Read current contents of index from disk.

        Replaces all in-memory entries. A missing index file is the same as
        an empty one. If the file holds a malformed line the entries are
        left untouched.
        """
        try:
            f = LockedFile(self._filename, "rb")
        except FileNotFoundError:
            self._byname = {}
            return
        with f:
            self._byname = read_index(f, self._filename)

    def write(self) -> None:
        """Write current contents of index to disk."""
        with LockedFile(self._filename, "wb") as f:
            write_index(f, self.items())
        logger.debug("Wrote %d entries to %s", len(self._byname), self._filename)

    def clear(self) -> None:
        """Remove all entries and write the now empty index to disk."""
        self._byname = {}
        self.write()

    def update(self, path: str, sha: str) -> None:
        """Stage ``sha`` for ``path``. Does not write the index to disk."""
        self[path] = sha

    def __len__(self) -> int:
        """Number of entries in this index file."""
        return len(self._byname)

    def __getitem__(self, path: str) -> str:
        """Retrieve the staged digest for a path.

        Raises KeyError: if the path is not staged
        """
        return self._byname[path]

    def __setitem__(self, path: str, sha: str) -> None:
        # Entries are split on whitespace when read back
        for value in (path, sha):
            if not value or value.split() != [value]:
                raise ValueError(f"{value!r} can not be stored in the index")
        self._byname[path] = sha

    def __contains__(self, path: object) -> bool:
        return path in self._byname

    def __iter__(self) -> Iterator[str]:
        """Iterate over the staged paths, in sorted order."""
        return iter(sorted(self._byname))

    def items(self) -> Iterator[tuple[str, str]]:
        """Iterate over (path, digest) pairs, in sorted order."""
        return iter(sorted(self._byname.items()))
