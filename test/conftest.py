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
"""Pytest configuration and shared fixtures for depattach tests.

Fixture Scopes:
- function: Default, recreated for each test
"""

import sys
import json
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from depattach.constants import PREFIX_PATH_ENV  # noqa: E402
from depattach.package_registry import InMemoryPackageRegistry  # noqa: E402
from depattach.target_graph import BuildGraph  # noqa: E402


@pytest.fixture(autouse=True)
def clean_prefix_path(monkeypatch: Any) -> None:
    """Keep the developer's prefix chain out of include ordering."""
    monkeypatch.delenv(PREFIX_PATH_ENV, raising=False)


@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """Create a temporary directory for tests.

    Use for: File I/O operations that need isolation
    """
    tmpdir = tempfile.mkdtemp(prefix="depattach_test_")
    yield tmpdir
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def build_graph() -> BuildGraph:
    """Build graph with a library target 'T' and an executable 'app'."""
    graph = BuildGraph()
    graph.add_target("T")
    graph.add_target("app", kind="executable")
    return graph


@pytest.fixture
def package_registry() -> InMemoryPackageRegistry:
    """Registry with one modern, one legacy, one mixed and one empty package."""
    registry = InMemoryPackageRegistry()
    registry.mark_found("modern", targets=["modern::modern"])
    registry.mark_found(
        "legacy",
        include_dirs=["/opt/legacy/include"],
        libraries=["/opt/legacy/lib/liblegacy.so", "m", "/opt/legacy/lib/liblegacy.so"],
        library_dirs=["/opt/legacy/lib", "/opt/legacy/lib"],
        definitions=["LEGACY_API=1", "LEGACY_API=1"],
    )
    registry.mark_found("mixed", targets=["mixed::mixed"], include_dirs=["/opt/mixed/include"], libraries=["libmixed.a"])
    registry.mark_found("empty")
    return registry


@pytest.fixture
def description_data() -> Dict[str, Any]:
    """A small overlay/underlay build description."""
    return {
        "prefix_path": ["/ws/install", "/opt/ros/jazzy"],
        "targets": [{"name": "talker", "kind": "executable"}, {"name": "talker_lib"}],
        "imported_targets": [
            {
                "name": "rclcpp::rclcpp",
                "include_dirs": ["/opt/ros/jazzy/include/rclcpp"],
                "libraries": ["/opt/ros/jazzy/lib/librclcpp.so"],
            }
        ],
        "packages": {
            "rclcpp": {"targets": ["rclcpp::rclcpp"]},
            "msgs": {
                "include_dirs": ["/opt/ros/jazzy/include", "/usr/include/eigen3", "/ws/install/include"],
                "libraries": ["/ws/install/lib/libmsgs.so", "/opt/ros/jazzy/lib/libbase.so", "/ws/install/lib/libmsgs.so"],
                "definitions": ["MSGS_VERSION=2"],
            },
            "missing": {"found": False},
        },
        "attach": [
            {"target": "talker_lib", "packages": ["rclcpp", "msgs"], "scope": "PUBLIC"},
            {"target": "talker", "packages": ["msgs"], "system": True},
        ],
    }


@pytest.fixture
def description_file(temp_dir: str, description_data: Dict[str, Any]) -> str:
    """description_data written to a JSON file."""
    path = Path(temp_dir) / "build_description.json"
    path.write_text(json.dumps(description_data, indent=2), encoding="utf-8")
    return str(path)
