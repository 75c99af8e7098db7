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
"""Shared constants for the compdb tools.

This module provides centralized constants used by the compile command loader,
the project index and the command line tool, together with the exception
hierarchy every compdb module raises.
"""

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_SUCCESS = 0
EXIT_INVALID_ARGS = 1
EXIT_RUNTIME_ERROR = 2
EXIT_KEYBOARD_INTERRUPT = 130

# =============================================================================
# Project Layout Constants
# =============================================================================

COMPILE_COMMANDS_JSON = "compile_commands.json"  # Standard compilation database filename
PROJECT_MARKER_FILE = ".compdb"  # Presence forces directory listing mode; holds one flag per line
MARKER_COMMENT_PREFIX = "#"

# =============================================================================
# Compile Flag Defaults
# =============================================================================

# Executable used when the argument list carries flags only (e.g. from the marker file)
DEFAULT_COMPILER_EXECUTABLE = "clang++"
WORKING_DIRECTORY_FLAG = "-working-directory"
DIALECT_FLAG = "-x"
STANDARD_FLAG = "-std="
DEFAULT_C_STANDARD = "-std=gnu11"
DEFAULT_CXX_STANDARD = "-std=c++14"

# Bookkeeping flags appended to every entry (each only when not already present)
RESOURCE_DIR_FLAG = "-resource-dir"
NO_UNKNOWN_WARNING_FLAG = "-Wno-unknown-warning-option"
PARSE_ALL_COMMENTS_FLAG = "-fparse-all-comments"

# =============================================================================
# Inference Scoring Weights
# =============================================================================

MATCH_PREFIX_WEIGHT = 100  # Per matching leading character
MISMATCH_DIRECTORY_WEIGHT = 100  # Per '/' after the common prefix, on each side
MATCH_POSTFIX_WEIGHT = 1  # Per matching trailing character

# =============================================================================
# Tool Detection
# =============================================================================

TOOL_COMMAND_TIMEOUT = 5  # Timeout (seconds) for --version / -print-resource-dir probes

# =============================================================================
# Exception Classes
# =============================================================================


class CompdbError(Exception):
    """Base exception for all compdb errors.

    All compdb exceptions carry an exit_code attribute that indicates
    what exit code the program should use when this error is caught at the
    main entry point.
    """

    def __init__(self, message: str, exit_code: int = EXIT_RUNTIME_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


# Validation errors (EXIT_INVALID_ARGS)
class ValidationError(CompdbError):
    """Raised when input validation fails (arguments, paths, etc)."""

    def __init__(self, message: str):
        super().__init__(message, EXIT_INVALID_ARGS)


class ProjectDirectoryError(ValidationError):
    """Raised when the project directory is invalid or inaccessible."""


class ConfigError(ValidationError):
    """Raised when an index configuration file is invalid."""


# Loading errors (EXIT_RUNTIME_ERROR)
class CompilationDatabaseError(CompdbError):
    """Raised when compile_commands.json cannot be located or parsed.

    The loader recovers from this error by falling back to a directory listing.
    """


class MalformedCompileCommandError(CompdbError):
    """Raised when a path-bearing flag is followed by an empty path.

    This signals a malformed build description and is never recovered from.
    """
