#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# ****************************************************************************************************************************************************
# * BSD 3-Clause License
# *
# * Copyright (c) 2025, Mana Battery
# * All rights reserved.
# *
# * Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
# *
# * 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
# * 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
# *    documentation and/or other materials provided with the distribution.
# * 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
# *    software without specific prior written permission.
# *
# * THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
# * THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
# * CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
# * PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# * LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# * EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
# ****************************************************************************************************************************************************
"""Path canonicalization strategies and directory listing helpers.

The classifier and loader never call os.path directly to canonicalize a path;
they receive a normalization strategy instead. Production code passes
normalize_path, tests pass normalize_path_for_test so expected output does not
depend on the layout of the machine running them.
"""

import os
import logging
from typing import Callable, List

logger = logging.getLogger(__name__)

# Strategy signature: raw path -> absolute canonical path
PathNormalizer = Callable[[str], str]

# Prefix added by normalize_path_for_test so tests can see which paths were normalized
TEST_NORMALIZE_MARKER = "&"


def normalize_path(path: str) -> str:
    """Return the absolute canonical form of path (symlinks resolved).

    Args:
        path: Absolute or relative path; it does not need to exist

    Returns:
        Canonical absolute path
    """
    return os.path.realpath(path)


def normalize_path_for_test(path: str) -> str:
    """Deterministic stand-in for normalize_path that never touches the filesystem."""
    return TEST_NORMALIZE_MARKER + path


def ensure_ends_in_slash(path: str) -> str:
    """Append a trailing '/' to path unless it already has one."""
    if path.endswith("/"):
        return path
    return path + "/"


def list_files(root: str, recursive: bool = True, prefix_with_root: bool = True) -> List[str]:
    """List the files below root.

    Hidden directories (names starting with '.') are not descended into.
    Results are sorted so directory listing mode is deterministic.

    Args:
        root: Directory to list
        recursive: Descend into subdirectories
        prefix_with_root: Return paths joined onto root instead of relative to it

    Returns:
        Sorted list of file paths using '/' separators
    """
    if not os.path.isdir(root):
        logger.debug("list_files: %s is not a directory", root)
        return []

    result: List[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
        if not recursive:
            dirnames[:] = []

        rel_dir = os.path.relpath(dirpath, root)
        for filename in sorted(filenames):
            rel_path = filename if rel_dir == "." else os.path.join(rel_dir, filename)
            rel_path = rel_path.replace(os.sep, "/")
            if prefix_with_root:
                result.append(ensure_ends_in_slash(root.replace(os.sep, "/")) + rel_path)
            else:
                result.append(rel_path)

    result.sort()
    return result
