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
"""Duplicate removal for library and flag lists.

A package may list the same library more than once, typically because two of
its internal components both link it. Passing every copy to the linker slows
down linking in leaf packages and can trigger order sensitive link errors.
"""

import logging
from typing import Hashable, List, Sequence, Set, Tuple, TypeVar

from depattach.constants import LIBRARY_CONFIG_KEYWORDS

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)


def remove_duplicates(items: Sequence[T]) -> List[T]:
    """Remove exact duplicates, keeping the first occurrence of each item.

    Args:
        items: Items in their original order

    Returns:
        Items without duplicates, in first-occurrence order
    """
    seen: Set[T] = set()
    unique: List[T] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            unique.append(item)
    return unique


def group_library_entries(libs: Sequence[str]) -> List[Tuple[str, ...]]:
    """Split a library list into link units.

    A build configuration keyword (debug, optimized, general) belongs to the
    library that follows it, so ["debug", "a.lib", "b.lib"] becomes
    [("debug", "a.lib"), ("b.lib",)]. A trailing keyword forms a unit on its own.
    """
    units: List[Tuple[str, ...]] = []
    index = 0
    while index < len(libs):
        entry = libs[index]
        if entry in LIBRARY_CONFIG_KEYWORDS and index + 1 < len(libs):
            units.append((entry, libs[index + 1]))
            index += 2
        else:
            units.append((entry,))
            index += 1
    return units


def deduplicate_libraries(libs: Sequence[str]) -> List[str]:
    """Remove duplicate libraries, keeping the first occurrence.

    Entries are compared by exact string equality: no path normalization,
    no symlink resolution, no case folding. Build configuration keywords are
    plain entries here; see deduplicate_link_units() for keyword aware removal.

    Args:
        libs: Library paths or link-library names

    Returns:
        Libraries without duplicates, relative order preserved

    Example:
        >>> deduplicate_libraries(["a", "b", "a", "c", "b"])
        ['a', 'b', 'c']
    """
    unique = remove_duplicates(libs)
    if len(unique) != len(libs):
        logger.debug("Removed %s duplicate library entries", len(libs) - len(unique))
    return unique


def deduplicate_link_units(libs: Sequence[str]) -> List[str]:
    """Remove duplicate link units, keeping the first occurrence.

    A keyword and the library it applies to are compared as one unit, so
    ["debug", "a_d.lib", "debug", "b_d.lib"] is kept as is.

    Example:
        >>> deduplicate_link_units(["x", "debug", "x", "x"])
        ['x', 'debug', 'x']
    """
    units = remove_duplicates(group_library_entries(libs))
    unique = [entry for unit in units for entry in unit]
    if len(unique) != len(libs):
        logger.debug("Removed %s duplicate link units", len(libs) - len(unique))
    return unique
