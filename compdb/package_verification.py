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
"""Runtime dependency checks for compdb.

The CLI refuses to start with a colorama or packaging release older than the
versions listed in PACKAGE_REQUIREMENTS (the Ubuntu 24.04 LTS packages).

CLI Interface:
    python3 -m compdb.package_verification --check-all
"""

import sys
import logging
import argparse
from importlib.metadata import version, PackageNotFoundError
from typing import Dict, Optional, Tuple

from packaging.version import parse

from compdb.color_utils import print_error, print_success
from compdb.constants import EXIT_RUNTIME_ERROR

logger = logging.getLogger(__name__)

# Distribution name -> minimum supported version
PACKAGE_REQUIREMENTS: Dict[str, str] = {
    "packaging": "24.0",
    "colorama": "0.4.6",
}


def _install_hint(package_name: str, min_version: str) -> str:
    return f"pip install --upgrade '{package_name}>={min_version}'"


def check_package_version(package_name: str, min_version: Optional[str] = None, raise_on_error: bool = True) -> Tuple[bool, bool, Optional[str]]:
    """Look up the installed version of a distribution and compare it to a minimum.

    Args:
        package_name: Distribution name as published on PyPI
        min_version: Lowest accepted version; PACKAGE_REQUIREMENTS is consulted when None
        raise_on_error: Raise instead of reporting a missing or outdated package

    Returns:
        (is_installed, meets_version, installed_version)

    Raises:
        ValueError: If min_version is None and package_name has no registered requirement
        ImportError: If raise_on_error is set and the package is missing or too old
    """
    if min_version is None:
        if package_name not in PACKAGE_REQUIREMENTS:
            raise ValueError(f"No version requirement specified for {package_name}")
        min_version = PACKAGE_REQUIREMENTS[package_name]

    try:
        installed_version = version(package_name)
    except PackageNotFoundError as exc:
        logger.debug("%s is not installed", package_name)
        if raise_on_error:
            raise ImportError(f"{package_name} is not installed ({_install_hint(package_name, min_version)})") from exc
        return False, False, None

    meets_version = parse(installed_version) >= parse(min_version)
    logger.debug("%s %s installed, %s required", package_name, installed_version, min_version)
    if raise_on_error and not meets_version:
        raise ImportError(f"{package_name} {installed_version} is too old, need >={min_version} ({_install_hint(package_name, min_version)})")
    return True, meets_version, installed_version


def require_package(package_name: str, context: str = "this tool") -> None:
    """Exit with EXIT_RUNTIME_ERROR unless package_name satisfies its registered requirement."""
    try:
        check_package_version(package_name)
    except (ImportError, ValueError) as e:
        print_error(f"{context} cannot run: {e}")
        sys.exit(EXIT_RUNTIME_ERROR)


def check_all_packages() -> bool:
    """Print one status line per registered package.

    Returns:
        True when every package is installed in a supported version
    """
    failures = 0
    for package_name, min_version in PACKAGE_REQUIREMENTS.items():
        is_installed, meets_version, installed_version = check_package_version(package_name, min_version, raise_on_error=False)
        if not is_installed:
            print_error(f"{package_name} not installed", prefix=False)
            failures += 1
        elif not meets_version:
            print_error(f"{package_name} {installed_version} (need >={min_version})", prefix=False)
            failures += 1
        else:
            print_success(f"{package_name} {installed_version}")

    if failures:
        requirements = " ".join(f"'{name}>={ver}'" for name, ver in PACKAGE_REQUIREMENTS.items())
        print(f"Install missing packages with: pip install {requirements}", file=sys.stderr)
    return failures == 0


def main() -> int:
    """Command line entry point; returns 1 if any requirement is unmet."""
    parser = argparse.ArgumentParser(description="Verify compdb package dependencies")
    parser.add_argument("--check-all", action="store_true", help="Check every runtime dependency")
    args = parser.parse_args()

    if not args.check_all:
        parser.print_help()
        return 0
    return 0 if check_all_packages() else 1


if __name__ == "__main__":
    sys.exit(main())
