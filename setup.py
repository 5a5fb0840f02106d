#!/usr/bin/python3
# Setup file for tgit
# Copyright (C) 2008-2025 Jelmer Vernooij <jelmer@jelmer.uk>
# SPDX-License-Identifier: Apache-2.0 OR GPL-2.0-or-later

from setuptools import setup

setup(
    package_data={"": ["py.typed"]},
)
