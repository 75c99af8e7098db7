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
"""Normalization of raw compiler invocations into project entries.

A compilation database records compiler invocations the way the build system
ran them: behind distributed-build wrappers, with relative include paths and
with dependency-file flags that only matter to the build. This module turns one
such invocation into an Entry whose argument list a compiler frontend can use
from any working directory.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set, Tuple

from compdb.constants import (
    DEFAULT_COMPILER_EXECUTABLE,
    DEFAULT_C_STANDARD,
    DEFAULT_CXX_STANDARD,
    DIALECT_FLAG,
    NO_UNKNOWN_WARNING_FLAG,
    PARSE_ALL_COMMENTS_FLAG,
    RESOURCE_DIR_FLAG,
    STANDARD_FLAG,
    WORKING_DIRECTORY_FLAG,
    MalformedCompileCommandError,
)
from compdb.path_utils import PathNormalizer, normalize_path

logger = logging.getLogger(__name__)

__all__ = ["CompileCommand", "Entry", "ProjectConfig", "source_file_type", "get_entry_from_compile_command"]

# Source extension -> value passed to -x
SOURCE_FILE_TYPES = (
    (".c", "c"),
    (".cpp", "c++"),
    (".cc", "c++"),
    (".mm", "objective-c++"),
    (".m", "objective-c"),
)

# Flags removed together with the argument that follows them
BLACKLIST_MULTI = ("-MF", "-MT", "-MQ", "-o", "--serialize-diagnostics", "-Xclang")

# Flags which are always removed from the command line
BLACKLIST = ("-c", "-MP", "-MD", "-MMD", "--fcolor-diagnostics")

# Flags followed by a potentially relative path, either as the next argument
# ("-I", "foo") or fused into the same argument ("-Ifoo"). Order matters: the
# first matching prefix wins.
PATH_ARGS = (
    "-I",
    "-iquote",
    "-isystem",
    "--sysroot=",
    "-isysroot",
    "-gcc-toolchain",
    "-include-pch",
    "-iframework",
    "-F",
    "-imacros",
    "-include",
)

# Path flags whose fused spelling is rewritten to carry an absolute path, because
# -working-directory is not honoured for them. Must be a subset of PATH_ARGS.
NORMALIZE_PATH_ARGS = ("--sysroot=",)

# Path flags that contribute to the #include "..." and #include <...> search sets
QUOTE_INCLUDE_ARGS = ("-iquote",)
ANGLE_INCLUDE_ARGS = ("-I", "-isystem")


@dataclass
class CompileCommand:
    """One raw record of a compilation database.

    Attributes:
        directory: Working directory the compiler was run from
        file: Source file path, absolute or relative to directory
        args: Full argument vector, starting with the compiler (or a wrapper)
    """

    directory: str
    file: str
    args: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Entry:
    """One normalized compiler invocation.

    Attributes:
        filename: Canonical absolute path of the source file
        args: Argument vector; args[0] is the compiler executable. Stored as a
            tuple so entries shared by a loaded Project cannot be modified.
        is_inferred: True when synthesized for a file missing from the index
    """

    filename: str
    args: Tuple[str, ...] = ()
    is_inferred: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))


@dataclass
class ProjectConfig:
    """Accumulator shared by every classification of a single project load.

    get_entry_from_compile_command only ever adds to quote_dirs and angle_dirs;
    the remaining fields are read-only inputs.

    Attributes:
        quote_dirs: Absolute directories named by quote-style include flags
        angle_dirs: Absolute directories named by angle-style include flags
        extra_flags: User flags appended verbatim to every entry
        project_dir: Project root directory
        resource_dir: Compiler resource directory passed via -resource-dir
    """

    quote_dirs: Set[str] = field(default_factory=set)
    angle_dirs: Set[str] = field(default_factory=set)
    extra_flags: List[str] = field(default_factory=list)
    project_dir: str = ""
    resource_dir: str = ""


def source_file_type(path: str) -> Optional[str]:
    """Return the -x language for path, or None if it is not a known source file.

    Args:
        path: Source file path

    Returns:
        "c", "c++", "objective-c++", "objective-c" or None
    """
    for extension, language in SOURCE_FILE_TYPES:
        if path.endswith(extension):
            return language
    return None


def _starts_with_any(arg: str, prefixes: Sequence[str]) -> bool:
    return any(arg.startswith(prefix) for prefix in prefixes)


def _any_starts_with(args: Sequence[str], prefix: str) -> bool:
    return any(arg.startswith(prefix) for arg in args)


def _looks_like_filename(arg: str) -> bool:
    """Check if a leading argument looks like a source filename rather than a command.

    A '.' within the last four characters that is not followed by a digit is
    taken as a file extension (foo.c, bar.cpp). Commands such as ./a/b/goma or
    clang-4.0 do not qualify.

    Args:
        arg: Command argument to check

    Returns:
        True if argument looks like a filename
    """
    dot = arg.rfind(".")
    if dot == -1 or dot + 4 < len(arg):
        return False
    next_char = arg[dot + 1 : dot + 2]
    return not (next_char.isascii() and next_char.isdigit())


def _find_compiler_index(args: Sequence[str], filename: str, normalize: PathNormalizer) -> int:
    """Skip the leading commands of an invocation (wrappers and the compiler itself).

    Handles command lines such as "goma clang -c foo.cc" where a distributed
    build dispatcher precedes the real compiler.

    Args:
        args: Raw argument vector
        filename: Normalized path of the main source file
        normalize: Path normalization strategy

    Returns:
        Index of the first argument after the compiler
    """
    i = 0
    while i < len(args):
        arg = args[i]
        if arg.startswith("-"):
            break
        # Never skip over the main source file
        if normalize(arg) == filename:
            break
        if _looks_like_filename(arg):
            break
        i += 1
    return i


def _resolve_path(path: str, directory: str, normalize: PathNormalizer) -> str:
    """Make a path argument absolute relative to the command's working directory.

    Raises:
        MalformedCompileCommandError: If path is empty
    """
    if not path:
        raise MalformedCompileCommandError(f"Empty path argument in compile command (directory: {directory!r})")
    if path.startswith("/") or not directory:
        return normalize(path)
    return normalize(directory + "/" + path)


def get_entry_from_compile_command(config: ProjectConfig, command: CompileCommand, normalize: PathNormalizer = normalize_path) -> Entry:
    """Normalize one raw compiler invocation into an Entry.

    Steps:
    - Strip leading wrapper commands, keeping the compiler as args[0]
    - Add -working-directory unless present
    - Add -x<language> and a default -std= based on the file extension
    - Drop blacklisted flags; absolutize path flags and collect include dirs
    - Append config.extra_flags, then -resource-dir, -Wno-unknown-warning-option
      and -fparse-all-comments unless present

    Include directories named by -iquote (quote) and -I/-isystem (angle) are
    added to config.quote_dirs / config.angle_dirs. Nothing else in config is
    modified.

    Args:
        config: Shared accumulator for the current project load
        command: Raw compilation database record
        normalize: Path normalization strategy

    Returns:
        Normalized Entry

    Raises:
        MalformedCompileCommandError: If a path flag is followed by an empty path
    """
    raw_args = command.args
    filename = normalize(command.file)
    result: List[str] = []

    i = _find_compiler_index(raw_args, filename, normalize)
    if i > 0:
        result.append(raw_args[i - 1])
    else:
        # Flags only (e.g. from the marker file); the frontend expects the
        # executable first and would otherwise ignore the first flag.
        result.append(DEFAULT_COMPILER_EXECUTABLE)

    if not _any_starts_with(raw_args, WORKING_DIRECTORY_FLAG):
        result.append(WORKING_DIRECTORY_FLAG)
        result.append(command.directory)

    language = source_file_type(command.file)
    if language is not None:
        if not _any_starts_with(raw_args, DIALECT_FLAG):
            result.append(DIALECT_FLAG + language)
        if not _any_starts_with(raw_args, STANDARD_FLAG):
            if language == "c":
                result.append(DEFAULT_C_STANDARD)
            elif language == "c++":
                result.append(DEFAULT_CXX_STANDARD)

    next_flag_is_path = False
    add_next_flag_to_quote_dirs = False
    add_next_flag_to_angle_dirs = False

    while i < len(raw_args):
        arg = raw_args[i]

        if not next_flag_is_path:
            if _starts_with_any(arg, BLACKLIST_MULTI):
                logger.debug("Removing flag and its argument: %s", arg)
                i += 2
                continue
            if _starts_with_any(arg, BLACKLIST):
                logger.debug("Removing flag: %s", arg)
                i += 1
                continue

        if next_flag_is_path:
            # {"-I", "foo"} style
            path = _resolve_path(arg, command.directory, normalize)
            if add_next_flag_to_quote_dirs:
                config.quote_dirs.add(path)
            if add_next_flag_to_angle_dirs:
                config.angle_dirs.add(path)

            next_flag_is_path = False
            add_next_flag_to_quote_dirs = False
            add_next_flag_to_angle_dirs = False
        else:
            for flag_type in PATH_ARGS:
                if arg == flag_type:
                    next_flag_is_path = True
                    add_next_flag_to_quote_dirs = _starts_with_any(flag_type, QUOTE_INCLUDE_ARGS)
                    add_next_flag_to_angle_dirs = _starts_with_any(flag_type, ANGLE_INCLUDE_ARGS)
                    break

                # {"-Ifoo"} style
                if arg.startswith(flag_type):
                    path = _resolve_path(arg[len(flag_type) :], command.directory, normalize)
                    if _starts_with_any(arg, NORMALIZE_PATH_ARGS):
                        arg = flag_type + path
                    if _starts_with_any(flag_type, QUOTE_INCLUDE_ARGS):
                        config.quote_dirs.add(path)
                    if _starts_with_any(flag_type, ANGLE_INCLUDE_ARGS):
                        config.angle_dirs.add(path)
                    break

        result.append(arg)
        i += 1

    # User-given extra flags are passed through untouched
    result.extend(config.extra_flags)

    # Lets the frontend resolve builtin headers such as <stddef.h>
    if not _any_starts_with(result, RESOURCE_DIR_FLAG):
        result.append(f"{RESOURCE_DIR_FLAG}={config.resource_dir}")

    # The project may target a different compiler version than the frontend
    if not _any_starts_with(result, NO_UNKNOWN_WARNING_FLAG):
        result.append(NO_UNKNOWN_WARNING_FLAG)

    # Keeps documentation comments available to the indexer
    if not _any_starts_with(result, PARSE_ALL_COMMENTS_FLAG):
        result.append(PARSE_ALL_COMMENTS_FLAG)

    return Entry(filename=filename, args=result)
