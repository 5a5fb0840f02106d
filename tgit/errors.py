# errors.py -- tgit-related exception classes
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

"""tgit-related exception classes.

I/O failures are not wrapped: they propagate as the built-in ``OSError``
hierarchy (``FileNotFoundError``, ``PermissionError`` and friends).
"""

__all__ = [
    "CommitError",
    "FileFormatException",
    "FileLocked",
    "InvalidCommit",
    "InvalidIndex",
    "NotTgitRepository",
    "ObjectMissing",
    "RefFormatError",
    "TgitError",
    "UnsupportedVersion",
]


class TgitError(Exception):
    """Base class for all tgit errors."""


class NotTgitRepository(TgitError):
    """Indicates that no tgit repository was found."""

    def __init__(self, *args: object, **kwargs: object) -> None:
        """Initialize a NotTgitRepository exception.

        Args:
            *args: Error message and additional positional arguments.
            **kwargs: Additional keyword arguments.
        """
        Exception.__init__(self, *args, **kwargs)


class ObjectMissing(TgitError):
    """Indicates that a requested object is not in the object store."""

    def __init__(self, sha: str, *args: object, **kwargs: object) -> None:
        """Initialize an ObjectMissing exception.

        Args:
            sha: The digest of the missing object.
            *args: Additional positional arguments.
            **kwargs: Additional keyword arguments.
        """
        self.sha = sha
        Exception.__init__(self, f"{sha} is not in the object store")


class FileFormatException(TgitError):
    """Base class for exceptions relating to reading tgit file formats."""


class InvalidIndex(FileFormatException):
    """Indicates that the index file contains a malformed line."""

    def __init__(self, filename: str, lineno: int, line: str) -> None:
        """Initialize an InvalidIndex exception.

        Args:
            filename: Path of the index file.
            lineno: One-based number of the offending line.
            line: The offending line.
        """
        self.filename = filename
        self.lineno = lineno
        self.line = line
        Exception.__init__(
            self, f"The index is corrupt: {filename}:{lineno}: {line!r}"
        )


class InvalidCommit(FileFormatException):
    """Indicates that stored commit bytes could not be decoded."""

    def __init__(self, sha: str, reason: str | None = None) -> None:
        """Initialize an InvalidCommit exception.

        Args:
            sha: Digest under which the commit was found.
            reason: Optional description of what went wrong.
        """
        self.sha = sha
        message = f"The commit {sha} is invalid"
        if reason is not None:
            message += f": {reason}"
        Exception.__init__(self, message)


class RefFormatError(FileFormatException):
    """Indicates that a reference file does not hold a valid digest."""


class FileLocked(TgitError):
    """A control file can not be written because its lock file exists.

    Either another tgit process is writing the file, or a previous one died
    and left the lock file behind.
    """

    def __init__(self, filename: str, lockfilename: str) -> None:
        self.filename = filename
        self.lockfilename = lockfilename
        Exception.__init__(
            self,
            f"Unable to write {filename}: {lockfilename} exists. If no other "
            "tgit process is running, remove it and try again.",
        )


class CommitError(TgitError):
    """An error occurred while building a commit."""


class UnsupportedVersion(TgitError):
    """Unsupported repository format version."""

    def __init__(self, version: int) -> None:
        """Initialize UnsupportedVersion exception.

        Args:
            version: The unsupported repository version
        """
        self.version = version
        Exception.__init__(self, f"Unsupported repository format version {version}")
