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
"""External tool detection for compdb.

Locates a clang executable so the compiler resource directory (builtin headers
such as <stddef.h>) can be passed to every entry via -resource-dir.

Detection results are cached within the Python process session to avoid repeated
subprocess calls.

CLI Interface:
    python3 -m compdb.tool_detection --find-clang      # Output command name, exit 0/1
    python3 -m compdb.tool_detection --resource-dir    # Output resource directory, exit 0/1
    python3 -m compdb.tool_detection --verbose         # Enable debug logging
"""

import os
import sys
import shutil
import logging
import argparse
import subprocess
from typing import Optional, Dict, List
from dataclasses import dataclass

from compdb.constants import TOOL_COMMAND_TIMEOUT

logger = logging.getLogger(__name__)

# Newest first; the unversioned name is the last resort
CLANG_COMMANDS = ["clang-20", "clang-19", "clang-18", "clang"]

# Probe results for the lifetime of the process, keyed by lookup function
_tool_cache: Dict[str, "ToolInfo"] = {}


@dataclass
class ToolInfo:
    """Result of probing for a clang executable.

    Attributes:
        command: Command name (e.g., "clang-19")
        version: Raw version string as reported by tool (first line of --version)
    """

    command: Optional[str]
    version: Optional[str]

    def is_found(self) -> bool:
        """True when a working executable was located."""
        return self.command is not None


def clear_cache() -> None:
    """Forget cached probe results so the next lookup runs the tools again."""
    _tool_cache.clear()
    logger.debug("Tool detection cache cleared")


def _run_tool(cmd_parts: List[str], timeout: int = TOOL_COMMAND_TIMEOUT) -> Optional[str]:
    """Run a tool and return its stripped stdout.

    Args:
        cmd_parts: Command and arguments
        timeout: Timeout in seconds for subprocess call

    Returns:
        Output string if the command succeeded, None otherwise
    """
    try:
        result = subprocess.run(cmd_parts, capture_output=True, text=True, check=True, timeout=timeout)
        return result.stdout.strip()
    except (subprocess.CalledProcessError, FileNotFoundError, subprocess.TimeoutExpired):
        return None


def _extract_version(output: str) -> str:
    """Return the first line of a --version output."""
    return output.splitlines()[0].strip() if output else ""


def find_clang() -> ToolInfo:
    """Find an available clang executable.

    Tries commands in order: clang-20, clang-19, clang-18, clang

    Returns:
        ToolInfo with command and version if found, or empty ToolInfo if not found
    """
    cache_key = "find_clang"
    if cache_key in _tool_cache:
        return _tool_cache[cache_key]

    for cmd in CLANG_COMMANDS:
        logger.debug("Trying %s...", cmd)
        if not shutil.which(cmd):
            logger.debug("%s not in PATH", cmd)
            continue

        version_output = _run_tool([cmd, "--version"])
        if version_output:
            version = _extract_version(version_output)
            logger.debug("Found %s version %s", cmd, version)
            tool_info = ToolInfo(command=cmd, version=version)
            _tool_cache[cache_key] = tool_info
            return tool_info
        logger.debug("%s did not respond to --version", cmd)

    logger.debug("clang not found")
    tool_info = ToolInfo(command=None, version=None)
    _tool_cache[cache_key] = tool_info
    return tool_info


def detect_resource_dir(clang: Optional[ToolInfo] = None) -> Optional[str]:
    """Ask clang for its resource directory.

    Args:
        clang: Tool to query (default: find_clang())

    Returns:
        Absolute resource directory, or None if clang is unavailable or the
        reported directory does not exist
    """
    if clang is None:
        clang = find_clang()
    if not clang.is_found():
        logger.debug("No clang available to detect the resource directory")
        return None

    assert clang.command is not None  # For type checker
    output = _run_tool([clang.command, "-print-resource-dir"])
    if not output:
        logger.debug("%s -print-resource-dir failed", clang.command)
        return None

    resource_dir = output.splitlines()[0].strip()
    if not os.path.isdir(resource_dir):
        logger.debug("Reported resource directory %s does not exist", resource_dir)
        return None

    logger.debug("Detected resource directory %s", resource_dir)
    return resource_dir


def main() -> int:
    """Command line entry point.

    Returns:
        Exit code: 0 if found, 1 if not found
    """
    parser = argparse.ArgumentParser(description="Detect external tools for compdb", formatter_class=argparse.RawDescriptionHelpFormatter)

    parser.add_argument("--find-clang", action="store_true", help="Find clang command")
    parser.add_argument("--resource-dir", action="store_true", help="Print the clang resource directory")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose debug logging")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(message)s", stream=sys.stderr)
    else:
        logging.basicConfig(level=logging.WARNING)

    if args.find_clang:
        tool_info = find_clang()
        if tool_info.is_found():
            print(tool_info.command)
            return 0
        return 1

    if args.resource_dir:
        resource_dir = detect_resource_dir()
        if resource_dir:
            print(resource_dir)
            return 0
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
