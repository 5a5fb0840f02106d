# refs.py -- HEAD and branch references
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

"""Ref handling.

``HEAD`` names the current branch as ``ref: refs/heads/<branch>``; the
branch file holds the digest of the branch's tip commit. The branch file
does not exist until the first commit.
"""

__all__ = [
    "HEADREF",
    "LOCAL_BRANCH_PREFIX",
    "SYMREF",
    "DiskRefsContainer",
    "local_branch_name",
]

import os

from .errors import RefFormatError
from .file import LockedFile, ensure_dir_exists
from .hash import DEFAULT_HASH_ALGORITHM, HashAlgorithm
from .log_utils import getLogger

logger = getLogger(__name__)

HEADREF = "HEAD"
SYMREF = "ref: "
LOCAL_BRANCH_PREFIX = "refs/heads/"


def local_branch_name(name: str) -> str:
    """Build a full branch ref from a short name.

    Args:
      name: Short branch name (e.g., "master") or full ref

    Returns:
      Full branch ref name (e.g., "refs/heads/master")

    Examples:
      >>> local_branch_name("master")
      'refs/heads/master'
      >>> local_branch_name("refs/heads/master")
      'refs/heads/master'
    """
    if name.startswith(LOCAL_BRANCH_PREFIX):
        return name
    return LOCAL_BRANCH_PREFIX + name


def _check_refname(name: str) -> None:
    parts = name.split("/")
    if name.startswith("/") or any(part in ("", ".", "..") for part in parts):
        raise RefFormatError(f"invalid ref name {name!r}")


class DiskRefsContainer:
    """Refs container that reads refs from the control directory."""

    def __init__(
        self,
        path: str | os.PathLike[str],
        algorithm: HashAlgorithm | None = None,
    ) -> None:
        self.path = os.fspath(path)
        self.algorithm = algorithm or DEFAULT_HASH_ALGORITHM

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.path!r})"

    def refpath(self, name: str) -> str:
        """Return the disk path of a ref."""
        _check_refname(name)
        return os.path.join(self.path, *name.split("/"))

    def get_head_ref(self) -> str:
        """Return the name of the ref HEAD points at.

        Raises:
          FileNotFoundError: if there is no HEAD file
        """
        with LockedFile(self.refpath(HEADREF), "rb") as f:
            contents = f.read().decode("utf-8")
        # The target follows a fixed length prefix
        return contents[len(SYMREF) :].rstrip("\r\n")

    def read_ref(self, name: str) -> str | None:
        """Read the digest a ref points at.

        Args:
          name: the refname to read, relative to the control directory
        Returns: The digest, or None if the ref file does not exist.

        Raises:
          RefFormatError: if the ref file does not hold a valid digest
        """
        try:
            with LockedFile(self.refpath(name), "rb") as f:
                contents = f.read()
        except FileNotFoundError:
            return None
        sha = contents.decode("ascii", "replace").strip()
        if not self.algorithm.valid_hexsha(sha):
            raise RefFormatError(f"{name} does not contain a valid digest: {sha!r}")
        return sha

    def set_symbolic_ref(self, name: str, other: str) -> None:
        """Make a ref point at another ref.

        Args:
          name: Name of the ref to set
          other: Name of the ref to point at
        """
        _check_refname(other)
        filename = self.refpath(name)
        ensure_dir_exists(os.path.dirname(filename))
        with LockedFile(filename, "wb") as f:
            f.write((SYMREF + other).encode("utf-8"))
        logger.debug("Pointed %s at %s", name, other)

    def set_ref(self, name: str, sha: str) -> None:
        """Overwrite a ref with a new digest.

        No check is made on the previous value of the ref.
        """
        if not self.algorithm.valid_hexsha(sha):
            raise ValueError(f"Invalid digest {sha!r}")
        filename = self.refpath(name)
        ensure_dir_exists(os.path.dirname(filename))
        with LockedFile(filename, "wb") as f:
            f.write(sha.encode("ascii"))
        logger.debug("Updated %s to %s", name, sha)

    def current_branch_head(self) -> str | None:
        """Return the tip of the current branch, or None before the first commit."""
        return self.read_ref(self.get_head_ref())

    def record_new_head(self, sha: str) -> None:
        """Point the current branch at ``sha``."""
        self.set_ref(self.get_head_ref(), sha)
