#!/usr/bin/env python3
#****************************************************************************************************************************************************
#* BSD 3-Clause License
#*
#* Copyright (c) 2025, Mana Battery
#* All rights reserved.
#*
#* Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
#*
#* 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
#* 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
#*    documentation and/or other materials provided with the distribution.
#* 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
#*    software without specific prior written permission.
#*
#* THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
#* THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
#* CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
#* PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
#* LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
#* EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
#****************************************************************************************************************************************************
"""Pytest configuration and shared base fixtures for compdb tests.

Fixture Scopes:
- function: Default, recreated for each test
"""

import os
import sys
import json
import tempfile
import shutil
from pathlib import Path
from typing import Any, Callable, Dict, Generator, List
import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from compdb.compile_flags import ProjectConfig

TEST_PROJECT_DIR = "/w/c/s/"
TEST_RESOURCE_DIR = "/w/resource_dir/"


@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """Create a temporary directory for tests.

    Scope: function (default)
    Use for: File I/O operations that need isolation
    """
    tmpdir = tempfile.mkdtemp(prefix="compdb_test_")
    yield tmpdir
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def project_config() -> ProjectConfig:
    """Accumulator with fixed project and resource directories.

    Scope: function
    Use for: Classifier tests using the deterministic path normalizer
    """
    return ProjectConfig(project_dir=TEST_PROJECT_DIR, resource_dir=TEST_RESOURCE_DIR)


@pytest.fixture
def write_file(temp_dir: str) -> Callable[[str, str], str]:
    """Return a helper writing text files below temp_dir.

    Scope: function
    Dependencies: temp_dir
    Returns: write(relative_path, content) -> absolute path
    """

    def write(relative_path: str, content: str = "") -> str:
        path = os.path.join(temp_dir, relative_path)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        return path

    return write


@pytest.fixture
def write_compile_commands(temp_dir: str) -> Callable[[List[Dict[str, Any]]], str]:
    """Return a helper writing compile_commands.json into temp_dir.

    Scope: function
    Dependencies: temp_dir
    Returns: write(records) -> path of the written database
    """

    def write(records: List[Dict[str, Any]]) -> str:
        path = os.path.join(temp_dir, "compile_commands.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2)
        return path

    return write
