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
"""Project index of compile commands with best-effort lookup for unknown files."""

import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from compdb.constants import MATCH_POSTFIX_WEIGHT, MATCH_PREFIX_WEIGHT, MISMATCH_DIRECTORY_WEIGHT
from compdb.compdb_loader import FileLister, load_compilation_entries
from compdb.compile_flags import Entry, ProjectConfig
from compdb.config import IndexConfig
from compdb.match import GroupMatch
from compdb.path_utils import PathNormalizer, ensure_ends_in_slash, list_files, normalize_path

logger = logging.getLogger(__name__)

__all__ = ["Project", "compute_guess_score"]


def compute_guess_score(a: str, b: str) -> int:
    """Compute how well two paths match, for guessing flags of unknown files.

    - +100 per character of the common prefix
    - -100 per '/' after the common prefix, counted in both paths
    - +1 per character of the common suffix

    The directory penalty keeps guesses inside the closest directory subtree;
    the suffix bonus only breaks ties between files in the same place (e.g.
    foo_unittest.cc prefers the flags of other *_unittest.cc files).

    Args:
        a: First path
        b: Second path

    Returns:
        Score, possibly negative
    """
    score = 0

    i = 0
    while i < len(a) and i < len(b) and a[i] == b[i]:
        score += MATCH_PREFIX_WEIGHT
        i += 1

    score -= a.count("/", i) * MISMATCH_DIRECTORY_WEIGHT
    score -= b.count("/", i) * MISMATCH_DIRECTORY_WEIGHT

    offset = 1
    while offset <= len(a) and offset <= len(b) and a[-offset] == b[-offset]:
        score += MATCH_POSTFIX_WEIGHT
        offset += 1

    return score


class Project:
    """Compile commands of one project, indexed by source file.

    The index is built once by load() (or from_entries()) and not written
    afterwards, so it can be shared between readers without locking.

    Attributes:
        entries: Entries in load order (may contain duplicate filenames)
        quote_include_directories: Directories for #include "..." completion, each ending in '/'
        angle_include_directories: Directories for #include <...> completion, each ending in '/'
    """

    def __init__(self) -> None:
        self.entries: Tuple[Entry, ...] = ()
        self.quote_include_directories: List[str] = []
        self.angle_include_directories: List[str] = []
        self._absolute_path_to_entry_index: Dict[str, int] = {}

    @classmethod
    def from_entries(cls, entries: Sequence[Entry]) -> "Project":
        """Build a project directly from already normalized entries."""
        project = cls()
        project._set_entries(entries)
        return project

    def _set_entries(self, entries: Sequence[Entry]) -> None:
        self.entries = tuple(entries)
        # Later entries for the same file replace earlier ones in the lookup
        self._absolute_path_to_entry_index = {entry.filename: i for i, entry in enumerate(self.entries)}

    def load(
        self,
        extra_flags: Sequence[str],
        compilation_db_dir: str,
        root_directory: str,
        resource_directory: str,
        normalize: PathNormalizer = normalize_path,
        lister: FileLister = list_files,
    ) -> None:
        """Load the project's compile commands and build the index.

        Args:
            extra_flags: Flags appended to every entry
            compilation_db_dir: Directory holding compile_commands.json (empty: root_directory)
            root_directory: Project root
            resource_directory: Compiler resource directory
            normalize: Path normalization strategy
            lister: Filesystem collaborator for directory listing mode
        """
        config = ProjectConfig(extra_flags=list(extra_flags), project_dir=root_directory, resource_dir=resource_directory)
        entries = load_compilation_entries(config, compilation_db_dir, normalize, lister)

        # Sorted so listings do not depend on set iteration order
        self.quote_include_directories = sorted(ensure_ends_in_slash(path) for path in config.quote_dirs)
        self.angle_include_directories = sorted(ensure_ends_in_slash(path) for path in config.angle_dirs)
        for path in self.quote_include_directories:
            logger.info("quote_include_dir: %s", path)
        for path in self.angle_include_directories:
            logger.info("angle_include_dir: %s", path)

        self._set_entries(entries)
        logger.info("Loaded %d compile entries for %s", len(self.entries), root_directory)

    def find_entry(self, filename: str) -> Optional[Entry]:
        """Return the indexed entry for filename, or None."""
        index = self._absolute_path_to_entry_index.get(filename)
        if index is None:
            return None
        return self.entries[index]

    def find_compilation_entry_for_file(self, filename: str) -> Entry:
        """Return the entry for filename, inferring one if the file is not indexed.

        The inferred entry copies the args of the best scoring indexed entry
        (the first one on ties) and is marked is_inferred. With an empty index
        its args are empty.

        Args:
            filename: Absolute path of the source file

        Returns:
            Indexed or inferred entry
        """
        entry = self.find_entry(filename)
        if entry is not None:
            return entry

        # TODO: cache inferred entries once the index supports concurrent writers
        best_entry: Optional[Entry] = None
        best_score: Optional[int] = None
        for candidate in self.entries:
            score = compute_guess_score(filename, candidate.filename)
            if best_score is None or score > best_score:
                best_score = score
                best_entry = candidate

        if best_entry is None:
            logger.debug("No entries to infer flags for %s", filename)
            return Entry(filename=filename, is_inferred=True)

        logger.debug("Inferred flags for %s from %s (score %d)", filename, best_entry.filename, best_score)
        return Entry(filename=filename, args=best_entry.args, is_inferred=True)

    def for_all_filtered_files(self, config: IndexConfig, action: Callable[[int, Entry], None]) -> None:
        """Call action(index, entry) for every entry accepted by the index filters.

        Args:
            config: Supplies index_whitelist, index_blacklist and log_skipped_paths
            action: Callback invoked in index order
        """
        matcher = GroupMatch(config.index_whitelist, config.index_blacklist)
        total = len(self.entries)
        for i, entry in enumerate(self.entries):
            matched, failure_reason = matcher.is_match(entry.filename)
            if matched:
                action(i, entry)
            elif config.log_skipped_paths:
                logger.info("[%d/%d]: Failed %s; skipping %s", i + 1, total, failure_reason, entry.filename)
