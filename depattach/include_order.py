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
"""Include directory ordering.

When a package in an overlay workspace overrides a package installed in an
underlay, and both install their headers without a package specific
subfolder (e.g. <prefix>/include/foo.h), the include directory order decides
which header wins. This module orders include directories by the prefix chain
so that directories from overlays come before directories from underlays.
"""

import os
import logging
from typing import Dict, List, Mapping, Optional, Sequence

from depattach.constants import PREFIX_PATH_ENV

logger = logging.getLogger(__name__)

PATH_SEPARATORS = ("/", "\\")


def prefixes_from_environment(environ: Optional[Mapping[str, str]] = None) -> List[str]:
    """Read the prefix chain from the environment.

    Args:
        environ: Environment mapping (default: os.environ)

    Returns:
        Prefixes in precedence order, empty entries dropped
    """
    if environ is None:
        environ = os.environ
    value = environ.get(PREFIX_PATH_ENV, "")
    return [prefix for prefix in value.split(os.pathsep) if prefix]


def _strip_separator(prefix: str) -> str:
    stripped = prefix.rstrip("/\\")
    # Keep filesystem roots like "/" matchable
    return stripped if stripped else prefix[:1]


def _is_under_prefix(path: str, prefix: str) -> bool:
    if prefix in PATH_SEPARATORS:
        return path.startswith(prefix) and path != prefix
    return any(path.startswith(prefix + sep) for sep in PATH_SEPARATORS)


def prefix_index(path: str, prefixes: Sequence[str]) -> int:
    """Return the index of the first prefix containing path, or len(prefixes) if none does."""
    for index, prefix in enumerate(prefixes):
        if _is_under_prefix(path, prefix):
            return index
    return len(prefixes)


def order_include_directories(paths: Sequence[str], prefixes: Optional[Sequence[str]] = None) -> List[str]:
    """Order include directories according to the prefix chain.

    Each directory is assigned to the slot of the first prefix it lives under,
    directories under no known prefix go into a trailing slot. The result is
    the concatenation of all slots, each keeping the input order. Nothing is
    added or removed.

    Args:
        paths: Include directories in the order the package provided them
        prefixes: Prefix chain in precedence order (default: read from the environment)

    Returns:
        Reordered include directories
    """
    if not paths:
        return []
    if prefixes is None:
        prefixes = prefixes_from_environment()
    chain = [_strip_separator(prefix) for prefix in prefixes if prefix]
    if not chain:
        return list(paths)

    slots: Dict[int, List[str]] = {index: [] for index in range(len(chain) + 1)}
    for path in paths:
        slots[prefix_index(path, chain)].append(path)

    ordered = [path for index in range(len(chain) + 1) for path in slots[index]]
    if ordered != list(paths):
        logger.debug("Reordered %s include directories using %s prefixes", len(ordered), len(chain))
    return ordered
