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
"""Glob based include/exclude matching for project files."""

import fnmatch
import logging
from typing import List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class GroupMatch:
    """Match paths against a whitelist and a blacklist of glob patterns.

    A path matching any whitelist pattern is accepted. Otherwise a path matching
    any blacklist pattern is rejected. Everything else is accepted.

    Attributes:
        whitelist: Patterns that always accept a path
        blacklist: Patterns that reject a path not on the whitelist
    """

    def __init__(self, whitelist: Optional[Sequence[str]] = None, blacklist: Optional[Sequence[str]] = None):
        self.whitelist = self._valid_patterns(whitelist or [], "whitelist")
        self.blacklist = self._valid_patterns(blacklist or [], "blacklist")

    @staticmethod
    def _valid_patterns(patterns: Sequence[str], kind: str) -> List[str]:
        valid: List[str] = []
        for pattern in patterns:
            if not pattern:
                logger.warning("Ignoring empty %s pattern", kind)
                continue
            valid.append(pattern)
        return valid

    def is_match(self, path: str) -> Tuple[bool, str]:
        """Check whether path passes the filter.

        Args:
            path: Path to check

        Returns:
            Tuple of (matched, failure_reason); failure_reason is empty on match
        """
        for pattern in self.whitelist:
            if fnmatch.fnmatchcase(path, pattern):
                return True, ""

        for pattern in self.blacklist:
            if fnmatch.fnmatchcase(path, pattern):
                return False, f'blacklist "{pattern}"'

        return True, ""
