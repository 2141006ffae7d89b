#!/usr/bin/env python3
"""Tests for depattach/include_order.py"""

import os
import sys
from pathlib import Path
from typing import Any, List

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))
from depattach.constants import PREFIX_PATH_ENV
from depattach.include_order import order_include_directories, prefix_index, prefixes_from_environment

PREFIXES = ["/ws/overlay/install", "/ws/underlay/install", "/opt/ros/jazzy"]


class TestPrefixesFromEnvironment:
    """Test reading the prefix chain."""

    @pytest.mark.unit
    def test_split_on_pathsep(self) -> None:
        """Test that the variable is split in order and empty entries dropped."""
        environ = {PREFIX_PATH_ENV: os.pathsep.join(["/a", "", "/b"])}
        assert prefixes_from_environment(environ) == ["/a", "/b"]

    @pytest.mark.unit
    def test_unset(self) -> None:
        """Test that a missing variable gives an empty chain."""
        assert prefixes_from_environment({}) == []

    @pytest.mark.unit
    def test_defaults_to_os_environ(self, monkeypatch: Any) -> None:
        """Test that os.environ is used when no mapping is given."""
        monkeypatch.setenv(PREFIX_PATH_ENV, "/x")
        assert prefixes_from_environment() == ["/x"]


class TestPrefixIndex:
    """Test prefix matching."""

    @pytest.mark.unit
    def test_first_matching_prefix(self) -> None:
        """Test that the first prefix containing the path is chosen."""
        assert prefix_index("/opt/ros/jazzy/include", PREFIXES) == 2
        assert prefix_index("/ws/overlay/install/include/foo", PREFIXES) == 0

    @pytest.mark.unit
    def test_requires_separator(self) -> None:
        """Test that a sibling directory sharing a name prefix does not match."""
        assert prefix_index("/opt/ros/jazzy2/include", PREFIXES) == len(PREFIXES)

    @pytest.mark.unit
    def test_prefix_itself_does_not_match(self) -> None:
        """Test that the prefix directory itself is not under the prefix."""
        assert prefix_index("/opt/ros/jazzy", PREFIXES) == len(PREFIXES)

    @pytest.mark.unit
    def test_windows_separator(self) -> None:
        """Test that backslash separated paths match."""
        assert prefix_index("C:\\dev\\install\\include", ["C:\\dev\\install"]) == 0


class TestOrderIncludeDirectories:
    """Test the order_include_directories function."""

    @pytest.mark.unit
    def test_empty(self) -> None:
        """Test that empty input gives empty output."""
        assert order_include_directories([], PREFIXES) == []

    @pytest.mark.unit
    def test_overlay_before_underlay(self) -> None:
        """Test that overlay include dirs move in front of underlay include dirs."""
        paths = ["/opt/ros/jazzy/include", "/ws/underlay/install/include", "/ws/overlay/install/include"]
        assert order_include_directories(paths, PREFIXES) == [
            "/ws/overlay/install/include",
            "/ws/underlay/install/include",
            "/opt/ros/jazzy/include",
        ]

    @pytest.mark.unit
    def test_unknown_prefix_goes_last(self) -> None:
        """Test that directories under no known prefix come after all known ones."""
        paths = ["/usr/include/eigen3", "/opt/ros/jazzy/include", "/home/me/src/include"]
        assert order_include_directories(paths, PREFIXES) == ["/opt/ros/jazzy/include", "/usr/include/eigen3", "/home/me/src/include"]

    @pytest.mark.unit
    def test_stable_within_prefix(self) -> None:
        """Test that input order is kept for directories of the same prefix."""
        paths = ["/opt/ros/jazzy/include/b", "/ws/overlay/install/include/z", "/opt/ros/jazzy/include/a", "/ws/overlay/install/include/y"]
        assert order_include_directories(paths, PREFIXES) == [
            "/ws/overlay/install/include/z",
            "/ws/overlay/install/include/y",
            "/opt/ros/jazzy/include/b",
            "/opt/ros/jazzy/include/a",
        ]

    @pytest.mark.unit
    def test_no_prefixes_keeps_order(self) -> None:
        """Test that without a prefix chain the input order is returned."""
        paths = ["/c", "/a", "/b"]
        assert order_include_directories(paths, []) == paths

    @pytest.mark.unit
    def test_nothing_under_prefixes_keeps_order(self) -> None:
        """Test that the input order is returned when no path is under a prefix."""
        paths = ["/usr/include", "/usr/local/include"]
        assert order_include_directories(paths, PREFIXES) == paths

    @pytest.mark.unit
    def test_duplicates_are_kept(self) -> None:
        """Test that ordering never removes duplicate directories."""
        paths = ["/usr/include", "/opt/ros/jazzy/include", "/usr/include", "/opt/ros/jazzy/include"]
        result = order_include_directories(paths, PREFIXES)
        assert result == ["/opt/ros/jazzy/include", "/opt/ros/jazzy/include", "/usr/include", "/usr/include"]

    @pytest.mark.unit
    def test_trailing_separator_on_prefix(self) -> None:
        """Test that a prefix given with a trailing slash still matches."""
        assert order_include_directories(["/x/include", "/p/include"], ["/p/"]) == ["/p/include", "/x/include"]

    @pytest.mark.unit
    def test_reads_environment_when_prefixes_omitted(self, monkeypatch: Any) -> None:
        """Test that the prefix chain comes from the environment by default."""
        monkeypatch.setenv(PREFIX_PATH_ENV, os.pathsep.join(["/ws/install", "/opt/ros/jazzy"]))
        paths = ["/opt/ros/jazzy/include", "/ws/install/include"]
        assert order_include_directories(paths) == ["/ws/install/include", "/opt/ros/jazzy/include"]

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "paths",
        [
            ["/opt/ros/jazzy/include", "/usr/include", "/ws/overlay/install/include", "/ws/underlay/install/include/x"],
            ["/usr/include", "/usr/include", "/opt/ros/jazzy/include"],
            ["/a"],
        ],
    )
    def test_permutation_and_idempotent(self, paths: List[str]) -> None:
        """Test that the result is a permutation of the input and ordering it again changes nothing."""
        once = order_include_directories(paths, PREFIXES)
        assert sorted(once) == sorted(paths)
        assert order_include_directories(once, PREFIXES) == once
