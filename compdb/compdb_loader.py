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
"""Loading of compile commands for a project.

Two sources are supported:
- A marker file (.compdb) at the project root. When present, every source file
  below the root is compiled with the flags listed in the marker file.
- A compile_commands.json compilation database. When it is missing or cannot
  be parsed, the loader falls back to the directory listing.
"""

import os
import json
import time
import shlex
import logging
from typing import Any, Callable, Dict, List

from compdb.constants import COMPILE_COMMANDS_JSON, MARKER_COMMENT_PREFIX, PROJECT_MARKER_FILE, CompilationDatabaseError
from compdb.compile_flags import CompileCommand, Entry, ProjectConfig, get_entry_from_compile_command, source_file_type
from compdb.path_utils import PathNormalizer, list_files, normalize_path

logger = logging.getLogger(__name__)

__all__ = ["read_marker_flags", "load_from_directory_listing", "read_compilation_database", "load_compilation_entries"]

# Signature of the filesystem collaborator: (root, recursive, prefix_with_root) -> paths
FileLister = Callable[[str, bool, bool], List[str]]


def _marker_path(config: ProjectConfig) -> str:
    return os.path.join(config.project_dir, PROJECT_MARKER_FILE)


def read_marker_flags(marker_path: str) -> List[str]:
    """Read the flags listed in a marker file.

    One flag per line; surrounding whitespace is stripped, blank lines and
    lines starting with '#' are ignored.

    Args:
        marker_path: Path to the marker file

    Returns:
        Flags in file order (empty if the file does not exist or cannot be read)
    """
    if not os.path.isfile(marker_path):
        return []

    flags: List[str] = []
    try:
        with open(marker_path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith(MARKER_COMMENT_PREFIX):
                    continue
                flags.append(line)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Ignoring unreadable %s: %s", marker_path, e)
        return []
    return flags


def load_from_directory_listing(config: ProjectConfig, normalize: PathNormalizer = normalize_path, lister: FileLister = list_files) -> List[Entry]:
    """Create an entry for every source file below the project directory.

    Args:
        config: Shared accumulator for the current project load
        normalize: Path normalization strategy
        lister: Filesystem collaborator used to enumerate files

    Returns:
        Entries in listing order
    """
    marker_path = _marker_path(config)
    args = read_marker_flags(marker_path)
    if args:
        logger.info("Using %s arguments %s", PROJECT_MARKER_FILE, " ".join(args))
    if not os.path.isfile(marker_path) and not config.extra_flags:
        logger.warning(
            "No compiler arguments configured for %s. Consider adding either a %s or a %s file.",
            config.project_dir,
            COMPILE_COMMANDS_JSON,
            PROJECT_MARKER_FILE,
        )

    result: List[Entry] = []
    for file_path in lister(config.project_dir, True, True):
        if source_file_type(file_path) is None:
            continue
        command = CompileCommand(directory=config.project_dir, file=file_path, args=args + [file_path])
        result.append(get_entry_from_compile_command(config, command, normalize))

    logger.debug("Directory listing produced %d entries", len(result))
    return result


def _record_arguments(record: Dict[str, Any], index: int) -> List[str]:
    """Extract the argument vector of one database record.

    Raises:
        CompilationDatabaseError: If neither a valid "arguments" list nor "command" string is present
    """
    arguments = record.get("arguments")
    if arguments is not None:
        if not isinstance(arguments, list) or not all(isinstance(arg, str) for arg in arguments):
            raise CompilationDatabaseError(f"Record {index}: 'arguments' must be a list of strings")
        return list(arguments)

    command = record.get("command")
    if not isinstance(command, str):
        raise CompilationDatabaseError(f"Record {index}: missing 'arguments' or 'command'")
    try:
        return shlex.split(command)
    except ValueError as e:
        raise CompilationDatabaseError(f"Record {index}: failed to parse command: {e}") from e


def read_compilation_database(database_path: str) -> List[CompileCommand]:
    """Parse compile_commands.json into raw compile commands.

    Relative "file" values are joined onto the record's "directory"; the
    classifier canonicalizes them.

    Args:
        database_path: Path to compile_commands.json

    Returns:
        One CompileCommand per record, in file order

    Raises:
        CompilationDatabaseError: If the file is missing or malformed
    """
    try:
        with open(database_path, "r", encoding="utf-8") as f:
            records = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CompilationDatabaseError(f"Unable to load {database_path}: {e}") from e

    if not isinstance(records, list):
        raise CompilationDatabaseError(f"{database_path} must contain a JSON array")

    commands: List[CompileCommand] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise CompilationDatabaseError(f"Record {index}: expected an object")
        directory = record.get("directory")
        relative_filename = record.get("file")
        if not isinstance(directory, str) or not isinstance(relative_filename, str):
            raise CompilationDatabaseError(f"Record {index}: 'directory' and 'file' must be strings")

        args = _record_arguments(record, index)

        if relative_filename.startswith("/"):
            absolute_filename = relative_filename
        else:
            absolute_filename = directory + "/" + relative_filename
        commands.append(CompileCommand(directory=directory, file=absolute_filename, args=args))

    return commands


def load_compilation_entries(
    config: ProjectConfig,
    compilation_db_dir: str = "",
    normalize: PathNormalizer = normalize_path,
    lister: FileLister = list_files,
) -> List[Entry]:
    """Load all entries for a project.

    A marker file at the project root always selects directory listing mode.
    Otherwise compile_commands.json is read from compilation_db_dir (default:
    the project directory), falling back to directory listing when it cannot
    be loaded.

    Args:
        config: Shared accumulator for the current project load
        compilation_db_dir: Directory holding compile_commands.json
        normalize: Path normalization strategy
        lister: Filesystem collaborator used in directory listing mode

    Returns:
        Entries in source order
    """
    if os.path.isfile(_marker_path(config)):
        return load_from_directory_listing(config, normalize, lister)

    database_dir = compilation_db_dir or config.project_dir
    database_path = os.path.join(database_dir, COMPILE_COMMANDS_JSON)
    logger.info("Trying to load %s", database_path)

    start_time = time.perf_counter()
    try:
        commands = read_compilation_database(database_path)
    except CompilationDatabaseError as e:
        logger.info("%s; using directory listing instead.", e)
        return load_from_directory_listing(config, normalize, lister)
    parse_time = time.perf_counter() - start_time

    start_time = time.perf_counter()
    result = [get_entry_from_compile_command(config, command, normalize) for command in commands]
    classify_time = time.perf_counter() - start_time

    logger.debug("%s parse time: %.3fs", COMPILE_COMMANDS_JSON, parse_time)
    logger.debug("%s classification time: %.3fs", COMPILE_COMMANDS_JSON, classify_time)
    return result
