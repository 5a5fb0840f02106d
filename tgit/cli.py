# cli.py -- Simple command-line interface to tgit
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

"""Simple command-line interface to tgit.

This is a very simple command-line wrapper for tgit. It mirrors the
porcelain functions: every subcommand is a `Command` subclass that parses
its own arguments and calls into `tgit.porcelain`.
"""

import argparse
import logging
import os
import signal
import sys
import types
from collections.abc import Sequence

from . import porcelain
from .errors import TgitError
from .log_utils import default_logging_config
from .repo import Repo

logger = logging.getLogger("tgit.cli")


def signal_int(signal: int, frame: types.FrameType | None) -> None:
    """Handle interrupt signal by exiting.

    Args:
        signal: Signal number
        frame: Current stack frame
    """
    sys.exit(1)


class Command:
    """A tgit subcommand."""

    def run(self, args: Sequence[str]) -> int | None:
        """Run the command."""
        raise NotImplementedError(self.run)


class cmd_init(Command):
    """Create an empty tgit repository."""

    def run(self, args: Sequence[str]) -> int | None:
        """Execute the init command.

        Args:
            args: Command line arguments
        """
        parser = argparse.ArgumentParser(prog="tgit init")
        parser.add_argument(
            "--objectformat",
            type=str,
            choices=["sha1", "sha256"],
            help="Object format to use (sha1 or sha256)",
        )
        parser.add_argument(
            "-b",
            "--initial-branch",
            type=str,
            help="Name of the branch HEAD points at",
        )
        parser.add_argument(
            "path", nargs="?", default=os.getcwd(), help="Repository path"
        )
        parsed_args = parser.parse_args(args)

        try:
            repo = porcelain.init(
                parsed_args.path,
                default_branch=parsed_args.initial_branch,
                object_format=parsed_args.objectformat,
            )
        except FileExistsError:
            logger.error("Already initialized: %s", parsed_args.path)
            return 1
        with repo:
            logger.info("Initialized empty tgit repository in %s", repo.controldir())
        return None


class cmd_add(Command):
    """Add file contents to the index."""

    def run(self, argv: Sequence[str]) -> None:
        """Execute the add command.

        Args:
            argv: Command line arguments
        """
        parser = argparse.ArgumentParser(prog="tgit add")
        parser.add_argument("path", nargs="+")
        args = parser.parse_args(argv)

        with Repo.discover() as repo:
            for path in porcelain.add(repo, paths=args.path):
                logger.debug("add '%s'", path)


class cmd_commit(Command):
    """Record the staged files as a new commit."""

    def run(self, args: Sequence[str]) -> None:
        """Execute the commit command.

        Args:
            args: Command line arguments
        """
        parser = argparse.ArgumentParser(prog="tgit commit")
        parser.parse_args(args)
        with Repo.discover() as repo:
            sha = porcelain.commit(repo)
        sys.stdout.write(sha + "\n")


class cmd_log(Command):
    """Show commit logs."""

    def run(self, args: Sequence[str]) -> None:
        """Execute the log command.

        Args:
            args: Command line arguments
        """
        parser = argparse.ArgumentParser(prog="tgit log")
        parser.add_argument(
            "-n",
            "--max-count",
            dest="max_entries",
            type=int,
            help="Limit the number of commits to output",
        )
        parsed_args = parser.parse_args(args)
        with Repo.discover() as repo:
            porcelain.log(
                repo, outstream=sys.stdout, max_entries=parsed_args.max_entries
            )


class cmd_ls_files(Command):
    """Show information about files in the index."""

    def run(self, args: Sequence[str]) -> None:
        """Execute the ls-files command.

        Args:
            args: Command line arguments
        """
        parser = argparse.ArgumentParser(prog="tgit ls-files")
        parser.add_argument(
            "-s", "--stage", action="store_true", help="Show staged digests"
        )
        parsed_args = parser.parse_args(args)
        with Repo.discover() as repo:
            for path, sha in porcelain.ls_files(repo):
                if parsed_args.stage:
                    sys.stdout.write(f"{sha} {path}\n")
                else:
                    sys.stdout.write(f"{path}\n")


class cmd_cat_file(Command):
    """Print the raw contents of a stored object."""

    def run(self, args: Sequence[str]) -> None:
        """Execute the cat-file command.

        Args:
            args: Command line arguments
        """
        parser = argparse.ArgumentParser(prog="tgit cat-file")
        parser.add_argument("object", help="Digest of the object")
        parsed_args = parser.parse_args(args)
        sys.stdout.flush()
        with Repo.discover() as repo:
            porcelain.cat_file(repo, parsed_args.object, sys.stdout.buffer)


commands = {
    "add": cmd_add,
    "cat-file": cmd_cat_file,
    "commit": cmd_commit,
    "init": cmd_init,
    "log": cmd_log,
    "ls-files": cmd_ls_files,
}


def main(argv: Sequence[str] | None = None) -> int | None:
    """Main entry point for the tgit CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code or None
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = argparse.ArgumentParser(
        prog="tgit", description="Simple command-line interface to tgit"
    )
    parser.add_argument(
        "command",
        help=f"Command to run. Available: {', '.join(sorted(commands.keys()))}",
    )
    parser.add_argument("args", nargs=argparse.REMAINDER)

    if not argv or argv[0] in ("-h", "--help"):
        parser.print_help()
        return 1

    default_logging_config()

    cmd = argv[0]
    cmd_args = argv[1:]

    try:
        cmd_kls = commands[cmd]
    except KeyError:
        logging.fatal("No such subcommand: %s", cmd)
        return 1
    try:
        return cmd_kls().run(cmd_args)
    except (TgitError, OSError, ValueError) as e:
        sys.stderr.write(f"error: {e}\n")
        return 1


def _main() -> None:
    signal.signal(signal.SIGINT, signal_int)

    sys.exit(main())


if __name__ == "__main__":
    _main()
