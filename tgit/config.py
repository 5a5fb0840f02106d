# config.py -- Reading and writing repository config files
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

"""Reading and writing repository configuration files.

The format is a subset of the git config format::

    [core]
        repositoryformatversion = 0
        fsyncObjectFiles = false

Section and variable names are case-insensitive. Comments start with ``#``
or ``;``. Subsections and includes are not supported.
"""

__all__ = [
    "ConfigFile",
]

import os
from collections.abc import Iterator
from typing import IO

from .file import LockedFile

_TRUE_VALUES = ("true", "yes", "on", "1")
_FALSE_VALUES = ("false", "no", "off", "0", "")


def _strip_comments(line: str) -> str:
    string_open = False
    for i, character in enumerate(line):
        # Comment characters outside balanced quotes denote comment start
        if character == '"':
            string_open = not string_open
        elif not string_open and character in "#;":
            return line[:i]
    return line


def _parse_value(value: str) -> str:
    value = _strip_comments(value).strip()
    if len(value) >= 2 and value[0] == value[-1] == '"':
        value = value[1:-1]
    return value


def _check_name(name: str) -> bool:
    return bool(name) and all(c.isalnum() or c in "-." for c in name)


class ConfigFile:
    """A repository configuration file, like .tgit/config."""

    def __init__(self, path: str | None = None) -> None:
        self.path = path
        # section -> (name -> (original name, value)), keyed lowercase
        self._values: dict[str, dict[str, tuple[str, str]]] = {}
        self._section_names: dict[str, str] = {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.path!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfigFile):
            return NotImplemented
        return self._values == other._values

    __hash__ = None  # type: ignore[assignment]

    def get(self, section: str, name: str) -> str:
        """Get a configuration value.

        Raises:
            KeyError: if the value is not set
        """
        return self._values[section.lower()][name.lower()][1]

    def get_boolean(self, section: str, name: str, default: bool = False) -> bool:
        """Retrieve a configuration setting as boolean.

        Args:
          section: Section name
          name: Name of the setting
          default: Value to return if the setting is not set

        Raises:
          ValueError: if the value is not a recognized boolean
        """
        try:
            value = self.get(section, name)
        except KeyError:
            return default
        if value.lower() in _TRUE_VALUES:
            return True
        if value.lower() in _FALSE_VALUES:
            return False
        raise ValueError(f"not a valid boolean string: {value!r}")

    def set(self, section: str, name: str, value: str | bool | int) -> None:
        """Set a configuration value."""
        if not _check_name(section):
            raise ValueError(f"invalid section name {section!r}")
        if not _check_name(name):
            raise ValueError(f"invalid variable name {name!r}")
        if isinstance(value, bool):
            value = "true" if value else "false"
        self._section_names.setdefault(section.lower(), section)
        self._values.setdefault(section.lower(), {})[name.lower()] = (
            name,
            str(value),
        )

    def items(self, section: str) -> Iterator[tuple[str, str]]:
        """Iterate over the (name, value) pairs of a section."""
        return iter(self._values.get(section.lower(), {}).values())

    def sections(self) -> Iterator[str]:
        """Iterate over the section names."""
        return iter(self._section_names[key] for key in self._values)

    @classmethod
    def from_file(cls, f: IO[bytes], path: str | None = None) -> "ConfigFile":
        """Read configuration from a file-like object.

        Raises:
          ValueError: on a line that can not be parsed
        """
        ret = cls(path)
        section: str | None = None
        for lineno, raw_line in enumerate(f, 1):
            line = raw_line.decode("utf-8").strip()
            if line.startswith("["):
                line = _strip_comments(line).rstrip()
                if not line.endswith("]"):
                    raise ValueError(f"line {lineno}: expected trailing ]")
                section = line[1:-1].strip()
                if not _check_name(section):
                    raise ValueError(f"line {lineno}: invalid section {section!r}")
                ret._section_names.setdefault(section.lower(), section)
                ret._values.setdefault(section.lower(), {})
                continue
            line = _strip_comments(line).strip()
            if not line:
                continue
            if section is None:
                raise ValueError(f"line {lineno}: setting outside section")
            name, sep, value = line.partition("=")
            name = name.strip()
            # A bare name is a boolean that is set
            value = _parse_value(value) if sep else "true"
            ret.set(section, name, value)
        return ret

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> "ConfigFile":
        """Read configuration from a file on disk."""
        path = os.fspath(path)
        with LockedFile(path, "rb") as f:
            return cls.from_file(f, path)

    def write_to_path(self, path: str | os.PathLike[str] | None = None) -> None:
        """Write configuration to a file on disk."""
        if path is None:
            if self.path is None:
                raise ValueError("No path specified and no default path available")
            path = self.path
        with LockedFile(path, "wb") as f:
            self.write_to_file(f)

    def write_to_file(self, f: IO[bytes]) -> None:
        """Write configuration to a file-like object."""
        for key, values in self._values.items():
            f.write(f"[{self._section_names[key]}]\n".encode())
            for name, value in values.values():
                if value != value.strip() or any(c in value for c in '#;"'):
                    value = '"' + value + '"'
                f.write(f"\t{name} = {value}\n".encode())
