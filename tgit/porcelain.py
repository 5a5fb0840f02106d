# porcelain.py -- Porcelain-like layer on top of tgit
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

"""Simple wrapper that provides porcelain-like functions on top of tgit.

Currently implemented:
 * add
 * cat_file
 * commit
 * init
 * log
 * ls_files

These functions are meant to behave similarly to the tgit subcommands.
Differences in behaviour are considered bugs.

Note: one of the consequences of this is that paths tend to be
interpreted relative to the current working directory rather than relative
to the repository root.

Functions should generally accept both unicode strings and os.PathLike
objects for paths, and a `Repo` object or path for repositories.
"""

__all__ = [
    "add",
    "cat_file",
    "commit",
    "init",
    "log",
    "ls_files",
    "open_repo_closing",
    "print_commit",
]

import os
import sys
from collections.abc import Iterator, Sequence
from contextlib import AbstractContextManager, closing, contextmanager
from typing import BinaryIO, TextIO, TypeVar, overload

from ._typing import StrPath
from .objects import Commit
from .repo import CONTROLDIR, Repo

T = TypeVar("T", bound=Repo)

RepoPath = StrPath | Repo


@contextmanager
def _noop_context_manager(obj: T) -> Iterator[T]:
    """Context manager that has the same api as closing but does nothing."""
    yield obj


@overload
def open_repo_closing(path_or_repo: T) -> AbstractContextManager[T]: ...


@overload
def open_repo_closing(
    path_or_repo: StrPath,
) -> AbstractContextManager[Repo]: ...


def open_repo_closing(
    path_or_repo: StrPath | T,
) -> AbstractContextManager[T | Repo]:
    """Open an argument that can be a repository or a path for a repository.

    returns a context manager that will close the repo on exit if the argument
    is a path, else does nothing if the argument is a repo.
    """
    if isinstance(path_or_repo, Repo):
        return _noop_context_manager(path_or_repo)
    return closing(Repo(path_or_repo))


def init(
    path: StrPath = ".",
    *,
    default_branch: str | None = None,
    object_format: str | None = None,
) -> Repo:
    """Create a new tgit repository.

    Args:
      path: Path to repository.
      default_branch: Branch the first commit goes to (defaults to "master")
      object_format: Hash algorithm, "sha1" (default) or "sha256"
    Returns: A Repo instance
    """
    if not os.path.exists(path):
        os.mkdir(path)
    return Repo.init(path, default_branch=default_branch, object_format=object_format)


def _walk_files(dirpath: str) -> Iterator[str]:
    for dirname, dirnames, filenames in os.walk(dirpath):
        dirnames[:] = sorted(d for d in dirnames if d != CONTROLDIR)
        for filename in sorted(filenames):
            yield os.path.join(dirname, filename)


def add(
    repo: RepoPath = ".",
    paths: Sequence[StrPath] | StrPath = (),
) -> list[str]:
    """Add files to the staging area.

    Args:
      repo: Repository for the files
      paths: Paths to add, absolute or relative to the current working
        directory. Directories are added recursively.
    Returns: The staged paths, relative to the repository root

    Raises:
      ValueError: if a path is not inside the repository
      FileNotFoundError: if a path does not exist
    """
    if isinstance(paths, (str, os.PathLike)):
        paths = [paths]
    with open_repo_closing(repo) as r:
        repo_path = os.path.realpath(r.path)
        fs_paths = []
        for p in paths:
            path = os.path.realpath(os.path.abspath(p))
            relpath = os.path.relpath(path, repo_path)
            if relpath == os.path.pardir or relpath.startswith(
                os.path.pardir + os.path.sep
            ):
                raise ValueError(f"Path {p} is not within repository {repo_path}")
            if relpath.split(os.path.sep)[0] == CONTROLDIR:
                raise ValueError(f"Path {p} is inside the control directory")
            if os.path.isdir(path):
                fs_paths.extend(_walk_files(path))
            else:
                fs_paths.append(path)
        return r.stage(
            os.path.relpath(fs_path, repo_path) for fs_path in fs_paths
        )


def commit(repo: RepoPath = ".") -> str:
    """Create a new commit from the staged files.

    Args:
      repo: Path to repository
    Returns: Digest of the newly created commit
    """
    with open_repo_closing(repo) as r:
        c = r.do_commit()
        assert c.id is not None
        return c.id


def print_commit(commit: Commit, outstream: TextIO = sys.stdout) -> None:
    """Write a human-readable commit log entry.

    Args:
      commit: A `Commit` object
      outstream: A stream file to write to
    """
    outstream.write("-" * 50 + "\n")
    outstream.write(f"commit: {commit.id}\n")
    if commit.parent is not None:
        outstream.write(f"parent: {commit.parent}\n")
    outstream.write("\n")
    for sha, path in commit.iter_entries():
        outstream.write(f"blob {sha} {path}\n")


def log(
    repo: RepoPath = ".",
    outstream: TextIO = sys.stdout,
    max_entries: int | None = None,
) -> None:
    """Write commit logs, newest first.

    Args:
      repo: Path to repository
      outstream: Stream to write log output to
      max_entries: Optional maximum number of entries to display
    """
    with open_repo_closing(repo) as r:
        for entry in r.get_walker(max_entries=max_entries):
            print_commit(entry.commit, outstream)


def ls_files(repo: RepoPath = ".") -> list[tuple[str, str]]:
    """List all staged files as (path, digest) pairs, ordered by path."""
    with open_repo_closing(repo) as r:
        return list(r.open_index().items())


def cat_file(
    repo: RepoPath, sha: str, outstream: BinaryIO | None = None
) -> bytes:
    """Retrieve the raw contents of an object.

    Args:
      repo: Path to repository
      sha: Digest of the object
      outstream: If given, the contents are also written to this stream
    Returns: The object's stored bytes
    """
    with open_repo_closing(repo) as r:
        data = r.get_object(sha)
    if outstream is not None:
        outstream.write(data)
        outstream.flush()
    return data
