#!/usr/bin/env python3
"""Tests for compdb/config.py"""

import os
import json
import pytest
from typing import Any, Callable, Dict

from compdb.config import IndexConfig, load_config
from compdb.constants import EXIT_INVALID_ARGS, ConfigError, ValidationError


class TestIndexConfigFromDict:
    """Tests for IndexConfig.from_dict."""

    def test_defaults(self) -> None:
        """Test an empty object gives the default configuration."""
        config = IndexConfig.from_dict({})

        assert config == IndexConfig()
        assert config.extra_flags == []
        assert config.log_skipped_paths is False

    def test_camel_case_keys(self) -> None:
        """Test editor style camelCase keys are accepted."""
        config = IndexConfig.from_dict(
            {
                "extraClangArguments": ["-DFOO"],
                "compilationDatabaseDirectory": "/build",
                "resourceDirectory": "/res",
                "indexWhitelist": ["*/keep/*"],
                "indexBlacklist": ["*/out/*"],
                "logSkippedPathsForIndex": True,
            }
        )

        assert config == IndexConfig(
            extra_flags=["-DFOO"],
            compilation_database_dir="/build",
            resource_dir="/res",
            index_whitelist=["*/keep/*"],
            index_blacklist=["*/out/*"],
            log_skipped_paths=True,
        )

    def test_snake_case_keys(self) -> None:
        """Test field names are accepted directly."""
        config = IndexConfig.from_dict({"extra_flags": ["-DBAR"], "resource_dir": "/r"})

        assert config.extra_flags == ["-DBAR"]
        assert config.resource_dir == "/r"

    def test_unknown_key(self) -> None:
        """Test unknown keys are rejected."""
        with pytest.raises(ConfigError, match="Unknown configuration key: bogus"):
            IndexConfig.from_dict({"bogus": 1})

    @pytest.mark.parametrize(
        "data",
        [
            {"extraFlags": "-DFOO"},
            {"indexBlacklist": [1, 2]},
            {"resourceDirectory": 3},
            {"logSkippedPathsForIndex": "yes"},
        ],
    )
    def test_wrong_types(self, data: Dict[str, Any]) -> None:
        """Test values of the wrong type are rejected."""
        with pytest.raises(ConfigError):
            IndexConfig.from_dict(data)

    def test_config_error_is_validation_error(self) -> None:
        """Test configuration errors map to the invalid arguments exit code."""
        with pytest.raises(ValidationError) as exc_info:
            IndexConfig.from_dict({"bogus": 1})

        assert exc_info.value.exit_code == EXIT_INVALID_ARGS


class TestMergedWith:
    """Tests for IndexConfig.merged_with."""

    def test_overrides_given_values(self) -> None:
        """Test given values replace file values."""
        base = IndexConfig(resource_dir="/file", extra_flags=["-DFILE"])

        merged = base.merged_with(resource_dir="/cli", extra_flags=["-DCLI"])

        assert merged.resource_dir == "/cli"
        assert merged.extra_flags == ["-DCLI"]
        assert base.resource_dir == "/file"

    def test_none_and_empty_list_ignored(self) -> None:
        """Test unset command line options keep file values."""
        base = IndexConfig(resource_dir="/file", index_blacklist=["*.h"], log_skipped_paths=True)

        merged = base.merged_with(resource_dir=None, index_blacklist=[], log_skipped_paths=None)

        assert merged == base


class TestLoadConfig:
    """Tests for load_config."""

    def test_none_path(self) -> None:
        """Test no path gives the default configuration."""
        assert load_config(None) == IndexConfig()

    def test_load_file(self, write_file: Callable[..., str]) -> None:
        """Test a JSON file is parsed."""
        path = write_file("config.json", json.dumps({"extraFlags": ["-DX"], "logSkippedPathsForIndex": True}))

        config = load_config(path)

        assert config.extra_flags == ["-DX"]
        assert config.log_skipped_paths is True

    def test_missing_file(self, temp_dir: str) -> None:
        """Test a missing file raises ConfigError."""
        with pytest.raises(ConfigError, match="Cannot read configuration file"):
            load_config(os.path.join(temp_dir, "missing.json"))

    def test_invalid_json(self, write_file: Callable[..., str]) -> None:
        """Test malformed JSON raises ConfigError."""
        path = write_file("config.json", "{ nope")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_not_an_object(self, write_file: Callable[..., str]) -> None:
        """Test a JSON array raises ConfigError."""
        path = write_file("config.json", "[]")

        with pytest.raises(ConfigError, match="must contain a JSON object"):
            load_config(path)
