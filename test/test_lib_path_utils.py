#!/usr/bin/env python3
"""Tests for compdb/path_utils.py"""

import os
import pytest
from typing import Callable

from compdb.path_utils import ensure_ends_in_slash, list_files, normalize_path, normalize_path_for_test


class TestNormalizePath:
    """Tests for the path normalization strategies."""

    def test_test_normalizer_prefixes_marker(self) -> None:
        """Test the test normalizer only prefixes '&'."""
        assert normalize_path_for_test("/a/../b") == "&/a/../b"
        assert normalize_path_for_test("rel") == "&rel"

    def test_normalize_path_collapses_dots(self) -> None:
        """Test '..' components are resolved."""
        assert normalize_path("/a/b/../c") == os.path.realpath("/a/c")

    def test_normalize_path_resolves_symlinks(self, temp_dir: str, write_file: Callable[..., str]) -> None:
        """Test symlinks are resolved to their target."""
        target = write_file("real/file.cc")
        link = os.path.join(temp_dir, "link.cc")
        os.symlink(target, link)

        assert normalize_path(link) == os.path.realpath(target)


class TestEnsureEndsInSlash:
    """Tests for ensure_ends_in_slash."""

    @pytest.mark.parametrize("path,expected", [("/a", "/a/"), ("/a/", "/a/"), ("", "/")])
    def test_trailing_slash(self, path: str, expected: str) -> None:
        """Test exactly one trailing slash is present."""
        assert ensure_ends_in_slash(path) == expected


class TestListFiles:
    """Tests for list_files."""

    def test_recursive_sorted(self, temp_dir: str, write_file: Callable[..., str]) -> None:
        """Test files are listed recursively, sorted and prefixed with root."""
        write_file("b.cc")
        write_file("a/z.c")
        write_file("a/y.h")

        assert list_files(temp_dir) == [temp_dir + "/a/y.h", temp_dir + "/a/z.c", temp_dir + "/b.cc"]

    def test_relative_paths(self, temp_dir: str, write_file: Callable[..., str]) -> None:
        """Test prefix_with_root=False returns paths relative to root."""
        write_file("a/z.c")

        assert list_files(temp_dir, prefix_with_root=False) == ["a/z.c"]

    def test_non_recursive(self, temp_dir: str, write_file: Callable[..., str]) -> None:
        """Test recursive=False only lists the top level."""
        write_file("top.cc")
        write_file("sub/nested.cc")

        assert list_files(temp_dir, recursive=False, prefix_with_root=False) == ["top.cc"]

    def test_hidden_directories_skipped(self, temp_dir: str, write_file: Callable[..., str]) -> None:
        """Test hidden directories are not descended into but hidden files are listed."""
        write_file(".git/config")
        write_file(".compdb")

        assert list_files(temp_dir, prefix_with_root=False) == [".compdb"]

    def test_missing_root(self, temp_dir: str) -> None:
        """Test a missing root gives an empty list."""
        assert list_files(os.path.join(temp_dir, "missing")) == []
