#!/usr/bin/env python3
"""Tests for compdb/package_verification.py."""

import pytest
from typing import Any
from unittest.mock import patch
from importlib.metadata import PackageNotFoundError

from compdb.package_verification import PACKAGE_REQUIREMENTS, check_all_packages, check_package_version, main, require_package


@pytest.mark.unit
class TestCheckPackageVersion:
    """Test check_package_version function."""

    @pytest.mark.unit
    def test_check_installed_meets_version(self) -> None:
        """Test checking an installed package that meets version requirement."""
        # colorama is a runtime dependency
        is_installed, meets_version, installed_ver = check_package_version("colorama", "0.1.0", raise_on_error=False)

        assert is_installed is True
        assert meets_version is True
        assert installed_ver

    @pytest.mark.unit
    def test_check_installed_below_version(self) -> None:
        """Test checking an installed package below required version."""
        is_installed, meets_version, installed_ver = check_package_version("colorama", "999.0.0", raise_on_error=False)

        assert is_installed is True
        assert meets_version is False
        assert installed_ver is not None

    @pytest.mark.unit
    def test_check_not_installed(self) -> None:
        """Test checking a package that is not installed."""
        is_installed, meets_version, installed_ver = check_package_version("nonexistent_package_xyz123", "1.0.0", raise_on_error=False)

        assert (is_installed, meets_version, installed_ver) == (False, False, None)

    @pytest.mark.unit
    def test_check_raise_on_missing_package(self) -> None:
        """Test that ImportError is raised when package is missing and raise_on_error=True."""
        with pytest.raises(ImportError, match="is not installed"):
            check_package_version("nonexistent_package_xyz123", "1.0.0")

    @pytest.mark.unit
    def test_check_raise_on_old_version(self) -> None:
        """Test that ImportError is raised when version is too old and raise_on_error=True."""
        with pytest.raises(ImportError, match="is too old"):
            check_package_version("packaging", "999.0.0")

    @pytest.mark.unit
    def test_check_use_registry_version(self) -> None:
        """Test using PACKAGE_REQUIREMENTS registry when min_version is None."""
        with patch("compdb.package_verification.version", return_value="0.4.6"):
            assert check_package_version("colorama") == (True, True, "0.4.6")

    @pytest.mark.unit
    def test_check_unknown_package_without_version(self) -> None:
        """Test ValueError when no minimum version is known."""
        with pytest.raises(ValueError, match="No version requirement"):
            check_package_version("some_unknown_package")


@pytest.mark.unit
class TestRequirePackage:
    """Test require_package function."""

    def test_satisfied(self) -> None:
        """Test nothing happens for a satisfied requirement."""
        require_package("packaging")

    def test_missing_exits(self, capsys: Any) -> None:
        """Test a missing package exits with the runtime error code."""
        with patch("compdb.package_verification.version", side_effect=PackageNotFoundError("colorama")):
            with pytest.raises(SystemExit) as exc_info:
                require_package("colorama", "compdbProject")

        assert exc_info.value.code == 2
        assert "compdbProject cannot run" in capsys.readouterr().err


@pytest.mark.unit
class TestCheckAllPackages:
    """Test check_all_packages and the CLI."""

    def test_registry_contents(self) -> None:
        """Test the registry lists every runtime dependency."""
        assert set(PACKAGE_REQUIREMENTS) == {"packaging", "colorama"}

    def test_all_ok(self) -> None:
        """Test the installed environment satisfies every requirement."""
        assert check_all_packages() is True

    def test_reports_old_package(self, capsys: Any) -> None:
        """Test an outdated package fails the check and prints an install hint."""
        with patch("compdb.package_verification.version", return_value="0.0.1"):
            assert check_all_packages() is False

        assert "Install missing packages with" in capsys.readouterr().err

    def test_main_check_all(self, monkeypatch: Any) -> None:
        """Test --check-all returns 0 when everything is installed."""
        monkeypatch.setattr("sys.argv", ["package_verification.py", "--check-all"])

        assert main() == 0
