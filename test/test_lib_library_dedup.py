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
"""Tests for depattach/library_dedup.py"""

import sys
from pathlib import Path
from typing import List

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))
from depattach.library_dedup import deduplicate_libraries, deduplicate_link_units, group_library_entries, remove_duplicates


class TestRemoveDuplicates:
    """Test the remove_duplicates function."""

    @pytest.mark.unit
    def test_keeps_first_occurrence(self) -> None:
        """Test that later copies are dropped and order is kept."""
        assert remove_duplicates(["-DA", "-DB", "-DA", "-DC"]) == ["-DA", "-DB", "-DC"]

    @pytest.mark.unit
    def test_empty(self) -> None:
        """Test that an empty list stays empty."""
        assert remove_duplicates([]) == []

    @pytest.mark.unit
    def test_no_normalization(self) -> None:
        """Test that paths differing only in spelling are kept apart."""
        dirs = ["/opt/lib", "/opt/lib/", "/opt/./lib", "/OPT/lib"]
        assert remove_duplicates(dirs) == dirs

    @pytest.mark.unit
    def test_does_not_modify_input(self) -> None:
        """Test that the input list is left alone."""
        items = ["a", "a"]
        remove_duplicates(items)
        assert items == ["a", "a"]


class TestDeduplicateLibraries:
    """Test the deduplicate_libraries function."""

    @pytest.mark.unit
    def test_example_from_docs(self) -> None:
        """Test the documented example."""
        assert deduplicate_libraries(["a", "b", "a", "c", "b"]) == ["a", "b", "c"]

    @pytest.mark.unit
    def test_empty(self) -> None:
        """Test that an empty list stays empty."""
        assert deduplicate_libraries([]) == []

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "libs",
        [
            ["libx.a", "liby.a", "libx.a"],
            ["m", "pthread", "dl", "m", "dl", "m"],
            ["/usr/lib/libz.so", "z", "/usr/lib/libz.so"],
            ["debug", "a", "debug", "b"],
            ["optimized", "general", "optimized", "x", "general"],
        ],
    )
    def test_length_equals_distinct_count(self, libs: List[str]) -> None:
        """Test that exactly one copy of every distinct library survives."""
        result = deduplicate_libraries(libs)
        assert len(result) == len(set(libs))
        assert set(result) == set(libs)
        # First occurrence order
        assert result == sorted(set(libs), key=libs.index)

    @pytest.mark.unit
    def test_exact_comparison(self) -> None:
        """Test that no case folding or path normalization happens."""
        libs = ["/usr/lib/libfoo.so", "/usr/lib//libfoo.so", "/usr/lib/LIBFOO.so"]
        assert deduplicate_libraries(libs) == libs

    @pytest.mark.unit
    def test_no_duplicates_is_unchanged(self) -> None:
        """Test that a duplicate free list comes back as is."""
        libs = ["rt", "m", "pthread"]
        assert deduplicate_libraries(libs) == libs


class TestBuildConfigurationKeywords:
    """Test keyword aware removal of debug/optimized/general link units."""

    @pytest.mark.unit
    def test_group_pairs_keyword_with_library(self) -> None:
        """Test that a keyword is grouped with the library after it."""
        assert group_library_entries(["debug", "a_d.lib", "b.lib"]) == [("debug", "a_d.lib"), ("b.lib",)]

    @pytest.mark.unit
    def test_group_trailing_keyword(self) -> None:
        """Test that a trailing keyword stands alone."""
        assert group_library_entries(["a.lib", "optimized"]) == [("a.lib",), ("optimized",)]

    @pytest.mark.unit
    def test_distinct_keyword_pairs_are_kept(self) -> None:
        """Test that repeated keywords in front of different libraries survive."""
        libs = ["debug", "a_d.lib", "optimized", "a.lib", "debug", "b_d.lib", "optimized", "b.lib"]
        assert deduplicate_link_units(libs) == libs

    @pytest.mark.unit
    def test_duplicate_keyword_pairs_are_removed(self) -> None:
        """Test that an identical keyword/library pair is removed once."""
        libs = ["debug", "a_d.lib", "optimized", "a.lib", "debug", "a_d.lib", "optimized", "a.lib"]
        assert deduplicate_link_units(libs) == ["debug", "a_d.lib", "optimized", "a.lib"]

    @pytest.mark.unit
    def test_keyword_pair_differs_from_plain_library(self) -> None:
        """Test that 'debug x' and plain 'x' are different link units."""
        assert deduplicate_link_units(["x", "debug", "x", "x"]) == ["x", "debug", "x"]

    @pytest.mark.unit
    def test_plain_removal_treats_keywords_as_entries(self) -> None:
        """Test that deduplicate_libraries does not group keywords."""
        assert deduplicate_libraries(["debug", "a", "debug", "b"]) == ["debug", "a", "b"]
