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
"""Index configuration.

Settings come from an optional JSON file and from the command line. JSON keys
may use either camelCase (as editor clients send them) or snake_case.
"""

import json
import logging
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional

from compdb.constants import ConfigError

logger = logging.getLogger(__name__)

# camelCase spellings accepted in configuration files
_KEY_ALIASES = {
    "extraClangArguments": "extra_flags",
    "extraFlags": "extra_flags",
    "compilationDatabaseDirectory": "compilation_database_dir",
    "resourceDirectory": "resource_dir",
    "indexWhitelist": "index_whitelist",
    "indexBlacklist": "index_blacklist",
    "logSkippedPathsForIndex": "log_skipped_paths",
}

_LIST_FIELDS = ("extra_flags", "index_whitelist", "index_blacklist")
_STRING_FIELDS = ("compilation_database_dir", "resource_dir")


@dataclass(frozen=True)
class IndexConfig:
    """Settings controlling how a project is loaded and which files are indexed.

    Attributes:
        extra_flags: Flags appended verbatim to every entry
        compilation_database_dir: Directory holding compile_commands.json (default: project dir)
        resource_dir: Compiler resource directory (empty: detect from clang)
        index_whitelist: Glob patterns of files always indexed
        index_blacklist: Glob patterns of files skipped unless whitelisted
        log_skipped_paths: Log every file skipped by the filters
    """

    extra_flags: List[str] = field(default_factory=list)
    compilation_database_dir: str = ""
    resource_dir: str = ""
    index_whitelist: List[str] = field(default_factory=list)
    index_blacklist: List[str] = field(default_factory=list)
    log_skipped_paths: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IndexConfig":
        """Build a config from a parsed JSON object.

        Raises:
            ConfigError: On unknown keys or values of the wrong type
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            name = _KEY_ALIASES.get(key, key)
            if name not in known:
                raise ConfigError(f"Unknown configuration key: {key}")
            if name in _LIST_FIELDS:
                if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
                    raise ConfigError(f"Configuration key '{key}' must be a list of strings")
                value = list(value)
            elif name in _STRING_FIELDS:
                if not isinstance(value, str):
                    raise ConfigError(f"Configuration key '{key}' must be a string")
            elif not isinstance(value, bool):
                raise ConfigError(f"Configuration key '{key}' must be a boolean")
            values[name] = value
        return cls(**values)

    def merged_with(self, **overrides: Any) -> "IndexConfig":
        """Return a copy with the given fields replaced.

        None values and empty lists are treated as "not given" so command line
        defaults do not clobber values from a configuration file.
        """
        changes = {name: value for name, value in overrides.items() if value is not None and value != []}
        return replace(self, **changes)


def load_config(path: Optional[str]) -> IndexConfig:
    """Load an IndexConfig from a JSON file.

    Args:
        path: Path to the JSON file, or None for the default configuration

    Returns:
        Parsed configuration

    Raises:
        ConfigError: If the file cannot be read or is invalid
    """
    if path is None:
        return IndexConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read configuration file '{path}': {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file '{path}' must contain a JSON object")

    config = IndexConfig.from_dict(data)
    logger.debug("Loaded configuration from %s: %s", path, config)
    return config
