# file.py -- Atomic writes to control directory files
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

"""Atomic writes to files in the control directory.

A write to ``foo`` goes to ``foo.lock``. Closing the handle renames the
lock file over ``foo``; aborting it, or leaving the ``with`` block through
an exception, removes the lock file and leaves ``foo`` as it was. The lock
file is created exclusively, so a second writer fails with `FileLocked`
instead of interleaving its bytes with the first. Readers never lock.
"""

__all__ = [
    "FileLocked",
    "LockedFile",
    "ensure_dir_exists",
]

import os
from types import TracebackType
from typing import IO

from ._typing import Buffer, StrPath
from .errors import FileLocked

LOCK_SUFFIX = ".lock"


def ensure_dir_exists(dirname: StrPath) -> None:
    """Create a directory and its parents unless it already exists."""
    os.makedirs(dirname, exist_ok=True)


def LockedFile(
    filename: StrPath, mode: str = "rb", fsync: bool = True
) -> "IO[bytes] | _LockedFile":
    """Open a control file for reading, or for replacing its contents.

    Args:
      filename: Path to the file
      mode: "rb" to read, "wb" to write a complete new version
      fsync: Whether written data is synced to disk before the rename

    Raises:
      ValueError: for any mode other than "rb" and "wb"
      FileLocked: when writing and the lock file already exists
    """
    if mode == "rb":
        return open(filename, "rb")
    if mode == "wb":
        return _LockedFile(filename, fsync)
    raise ValueError(f"unsupported mode {mode!r} for control files")


class _LockedFile:
    """Write handle that only replaces its target when closed."""

    def __init__(self, filename: StrPath, fsync: bool = True) -> None:
        self._target = os.fspath(filename)
        self._lockpath = self._target + LOCK_SUFFIX
        self._fsync = fsync
        flags = os.O_WRONLY | os.O_CREAT | os.O_EXCL | getattr(os, "O_BINARY", 0)
        try:
            fd = os.open(self._lockpath, flags, 0o644)
        except FileExistsError as e:
            raise FileLocked(self._target, self._lockpath) from e
        self._file = os.fdopen(fd, "wb")

    def write(self, data: Buffer, /) -> int:
        return self._file.write(data)

    def _discard(self) -> None:
        self._file.close()
        try:
            os.remove(self._lockpath)
        except FileNotFoundError:
            pass

    def abort(self) -> None:
        """Throw away what was written and release the lock."""
        if not self._file.closed:
            self._discard()

    def close(self) -> None:
        """Move what was written into place and release the lock.

        Raises:
          OSError: if the data could not be synced or renamed; the lock file
            is removed and the target keeps its old contents
        """
        if self._file.closed:
            return
        try:
            self._file.flush()
            if self._fsync:
                os.fsync(self._file.fileno())
            self._file.close()
            os.replace(self._lockpath, self._target)
        except BaseException:
            self._discard()
            raise

    def __enter__(self) -> "_LockedFile":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is None:
            self.close()
        else:
            self.abort()
