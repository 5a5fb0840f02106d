# log_utils.py -- Logging setup for tgit
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

"""Logging setup for tgit.

Library modules log through ``getLogger(__name__)`` and stay silent until
an application configures logging: the ``tgit`` logger carries a
`logging.NullHandler`, so embedding tgit never prints stray warnings.

The ``TGIT_TRACE`` environment variable turns on debug output:

* ``1``, ``2`` or ``true``: stderr
* ``3`` to ``9``: that file descriptor
* an absolute path: append to that file, or to ``trace.<pid>`` inside it
  when the path is a directory

Any other value leaves tracing off.
"""

__all__ = [
    "TRACE_ENVIRONMENT_VARIABLE",
    "default_logging_config",
    "getLogger",
    "remove_null_handler",
]

import logging
import os
import sys

getLogger = logging.getLogger

TRACE_ENVIRONMENT_VARIABLE = "TGIT_TRACE"
TRACE_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"

_NULL_HANDLER = logging.NullHandler()
_TGIT_LOGGER = getLogger("tgit")
_TGIT_LOGGER.addHandler(_NULL_HANDLER)


def _get_trace_target() -> str | int | None:
    """Work out where TGIT_TRACE sends debug output.

    Returns: 2 for stderr, another small int for a file descriptor, a file
      path, or None when tracing is off
    """
    value = os.environ.get(TRACE_ENVIRONMENT_VARIABLE, "").strip()
    if value.lower() in ("1", "2", "true"):
        return 2
    if value.isdigit() and 3 <= int(value) <= 9:
        return int(value)
    if os.path.isabs(value):
        if os.path.isdir(value):
            return os.path.join(value, f"trace.{os.getpid()}")
        return value
    return None


def _open_trace_handler(target: str | int) -> logging.Handler:
    if target == 2:
        return logging.StreamHandler(sys.stderr)
    if isinstance(target, int):
        return logging.StreamHandler(os.fdopen(target, "w", buffering=1))
    return logging.FileHandler(target, mode="a")


def _configure_logging_from_trace() -> bool:
    """Send debug output where TGIT_TRACE points.

    Returns: whether tracing was switched on
    """
    target = _get_trace_target()
    if target is None:
        return False
    try:
        handler = _open_trace_handler(target)
    except OSError as e:
        sys.stderr.write(
            f"Warning: can not trace to {TRACE_ENVIRONMENT_VARIABLE}={target}: {e}\n"
        )
        return False
    handler.setFormatter(logging.Formatter(TRACE_FORMAT))
    root_logger = logging.getLogger()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.DEBUG)
    return True


def default_logging_config() -> None:
    """Set up logging for a tgit application.

    Debug output goes where TGIT_TRACE points; without it, INFO messages
    and above are written to stderr.
    """
    remove_null_handler()
    if not _configure_logging_from_trace():
        logging.basicConfig(level=logging.INFO, stream=sys.stderr, format="%(message)s")


def remove_null_handler() -> None:
    """Detach the silencing handler from the ``tgit`` logger."""
    _TGIT_LOGGER.removeHandler(_NULL_HANDLER)
