# repo.py -- For dealing with tgit repositories
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

"""Repository access.

A repository is a directory holding a ``.tgit`` control directory::

    .tgit/HEAD               ref: refs/heads/master
    .tgit/config             repository configuration
    .tgit/index              staged "<path> <digest>" lines
    .tgit/objects/ab/cdef..  stored blobs and commits
    .tgit/refs/heads/master  digest of the branch tip

Nothing guards against two processes using the same repository at the same
time. Concurrent stages race on the index and concurrent commits race on
the branch reference; in both cases the last writer wins.
"""

__all__ = [
    "BASE_DIRECTORIES",
    "CONTROLDIR",
    "DEFAULT_BRANCH",
    "INDEX_FILENAME",
    "OBJECTDIR",
    "REFSDIR",
    "REFSDIR_HEADS",
    "Repo",
]

import os
from collections.abc import Iterable
from types import TracebackType

from ._typing import StrPath
from .config import ConfigFile
from .errors import NotTgitRepository, UnsupportedVersion
from .hash import SHA256, HashAlgorithm, get_hash_algorithm
from .index import Index
from .log_utils import getLogger
from .object_store import DiskObjectStore
from .objects import Blob, Commit
from .refs import HEADREF, DiskRefsContainer, local_branch_name
from .walk import Walker

logger = getLogger(__name__)

CONTROLDIR = ".tgit"
OBJECTDIR = "objects"
REFSDIR = "refs"
REFSDIR_HEADS = "heads"
INDEX_FILENAME = "index"
CONFIG_FILENAME = "config"

BASE_DIRECTORIES = [
    [REFSDIR],
    [REFSDIR, REFSDIR_HEADS],
]

DEFAULT_BRANCH = "master"


def _read_config(path: str) -> ConfigFile:
    try:
        return ConfigFile.from_path(path)
    except FileNotFoundError:
        return ConfigFile(path)


class Repo:
    """A tgit repository backed by local disk.

    To open an existing repository, call the constructor with
    the path of the repository.

    To create a new repository, use the Repo.init class method.

    Attributes:
      path: Path to the working copy
      object_store: The repository's object store
      refs: Access to HEAD and the branch references
    """

    path: str
    object_store: DiskObjectStore
    refs: DiskRefsContainer

    def __init__(self, root: StrPath) -> None:
        """Open a repository on disk.

        Args:
          root: Path to the repository's root.

        Raises:
          NotTgitRepository: if ``root`` does not hold a control directory
          UnsupportedVersion: if the repository format is not understood
        """
        root = os.fspath(root)
        controldir = os.path.join(root, CONTROLDIR)
        if not os.path.isdir(controldir):
            raise NotTgitRepository(f"No tgit repository was found at {root}")
        self.path = root
        self._controldir = controldir

        config = self.get_config()
        try:
            format_version = int(config.get("core", "repositoryformatversion"))
        except KeyError:
            format_version = 0
        if format_version != 0:
            raise UnsupportedVersion(format_version)

        try:
            object_format = config.get("extensions", "objectformat")
        except KeyError:
            object_format = None
        self.algorithm: HashAlgorithm = get_hash_algorithm(object_format)

        self.object_store = DiskObjectStore(
            os.path.join(controldir, OBJECTDIR),
            fsync_object_files=config.get_boolean("core", "fsyncObjectFiles", False),
            algorithm=self.algorithm,
        )
        self.refs = DiskRefsContainer(controldir, algorithm=self.algorithm)

    def __repr__(self) -> str:
        return f"<Repo at {self.path!r}>"

    @classmethod
    def discover(cls, start: StrPath = ".") -> "Repo":
        """Iterate parent directories to discover a repository.

        Return a Repo object for the first parent directory that looks like a
        tgit repository.

        Args:
          start: The directory to start discovery from (defaults to '.')

        Raises:
          NotTgitRepository: if the filesystem root is reached without
            finding a repository
        """
        path = os.path.abspath(start)
        while True:
            try:
                return cls(path)
            except NotTgitRepository:
                new_path, _tail = os.path.split(path)
                if new_path == path:  # Root reached
                    break
                path = new_path
        raise NotTgitRepository(f"No tgit repository was found at {os.fspath(start)}")

    @classmethod
    def init(
        cls,
        path: StrPath,
        *,
        mkdir: bool = False,
        default_branch: str | None = None,
        object_format: str | None = None,
    ) -> "Repo":
        """Create a new repository.

        Args:
          path: Path in which to create the repository
          mkdir: Whether to create the directory
          default_branch: Branch HEAD points at (defaults to "master")
          object_format: Hash algorithm to use ("sha1" or "sha256",
            defaults to "sha1")
        Returns: `Repo` instance

        Raises:
          FileExistsError: if the repository has already been initialized
        """
        path = os.fspath(path)
        algorithm = get_hash_algorithm(object_format)
        if mkdir:
            os.mkdir(path)
        controldir = os.path.join(path, CONTROLDIR)
        os.mkdir(controldir)
        for d in BASE_DIRECTORIES:
            os.mkdir(os.path.join(controldir, *d))
        DiskObjectStore.init(os.path.join(controldir, OBJECTDIR), algorithm=algorithm)

        config = ConfigFile(os.path.join(controldir, CONFIG_FILENAME))
        config.set("core", "repositoryformatversion", 0)
        config.set("core", "fsyncObjectFiles", False)
        if algorithm is SHA256:
            config.set("extensions", "objectformat", algorithm.name)
        config.write_to_path()

        refs = DiskRefsContainer(controldir, algorithm=algorithm)
        refs.set_symbolic_ref(HEADREF, local_branch_name(default_branch or DEFAULT_BRANCH))
        logger.debug("Initialized empty repository in %s", controldir)
        return cls(path)

    def controldir(self) -> str:
        """Return the path of the control directory."""
        return self._controldir

    def get_config(self) -> ConfigFile:
        """Retrieve the config object.

        Returns: `ConfigFile` object for the ``.tgit/config`` file. A
          repository without config file has an empty configuration.
        """
        return _read_config(os.path.join(self.controldir(), CONFIG_FILENAME))

    def index_path(self) -> str:
        """Return path to the index file."""
        return os.path.join(self.controldir(), INDEX_FILENAME)

    def open_index(self) -> Index:
        """Open the index for this repository.

        Raises:
          InvalidIndex: if the index file is malformed
        Returns: The matching `Index`
        """
        return Index(self.index_path())

    def head(self) -> str | None:
        """Return the digest of the current branch tip, or None if unborn."""
        return self.refs.current_branch_head()

    def get_object(self, sha: str) -> bytes:
        """Retrieve the raw contents of an object.

        Raises:
          ObjectMissing: if the object is not in the store
        """
        return self.object_store.read_object(sha)

    def get_commit(self, sha: str) -> Commit:
        """Retrieve and parse a commit."""
        return self.object_store.read_commit(sha)

    def _fs_to_tree_path(self, fs_path: StrPath) -> str:
        root = os.path.abspath(self.path)
        path = os.path.join(root, os.fspath(fs_path))
        relpath = os.path.relpath(path, root)
        if relpath == os.path.pardir or relpath.startswith(os.path.pardir + os.path.sep):
            raise ValueError(f"Path {path} is not within repository {self.path}")
        if relpath.split(os.path.sep)[0] == CONTROLDIR:
            raise ValueError(f"Path {path} is inside the control directory")
        return relpath.replace(os.path.sep, "/")

    def stage(self, fs_paths: Iterable[StrPath]) -> list[str]:
        """Stage a set of paths.

        Each file is hashed and stored as a blob, and the index is updated
        and written out.

        Args:
          fs_paths: Paths of the files to stage, either absolute or
            relative to the repository root
        Returns: The repository-relative paths that were staged
        """
        index = self.open_index()
        staged = []
        for fs_path in fs_paths:
            tree_path = self._fs_to_tree_path(fs_path)
            full_path = os.path.join(self.path, *tree_path.split("/"))
            blob = Blob.from_path(full_path, self.algorithm)
            self.object_store.add_blob(blob)
            index.update(tree_path, blob.id)
            logger.debug("Staged %s as %s", tree_path, blob.id)
            staged.append(tree_path)
        index.write()
        return staged

    def do_commit(self) -> Commit:
        """Create a new commit from the index on top of the current branch.

        The new commit holds every file of its parent plus the staged
        entries. It is stored, the current branch is moved to it and the
        index is cleared.

        Returns: The new, finalized `Commit`
        """
        index = self.open_index()
        parent_sha = self.head()
        parent = self.get_commit(parent_sha) if parent_sha is not None else None

        commit = Commit(parent, self.algorithm)
        commit.add_from_index(index)
        commit.update()
        self.object_store.add_commit(commit)
        assert commit.id is not None
        self.refs.record_new_head(commit.id)
        index.clear()
        logger.debug("Committed %s (parent %s)", commit.id, parent_sha)
        return commit

    def get_walker(
        self, include: str | None = None, max_entries: int | None = None
    ) -> Walker:
        """Obtain a walker over the history of this repository.

        Args:
          include: Digest of the commit to start from (defaults to the
            current branch tip)
          max_entries: Maximum number of commits to return
        """
        if include is None:
            include = self.head()
        return Walker(self.object_store, include, max_entries=max_entries)

    def close(self) -> None:
        """Close any files opened by this repository."""
        self.object_store.close()

    def __enter__(self) -> "Repo":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
