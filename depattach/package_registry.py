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
"""In-memory package registry.

Holds the outcome of package discovery: which packages were found and what
each of them provides. Packages that were never marked as found are
unresolved.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from depattach.attach_types import LegacyMetadata, PackageDescriptor

logger = logging.getLogger(__name__)


class InMemoryPackageRegistry:
    """Package registry backed by a dictionary of descriptors."""

    def __init__(self) -> None:
        self._descriptors: Dict[str, PackageDescriptor] = {}

    def mark_found(
        self,
        name: str,
        targets: Optional[Iterable[str]] = None,
        include_dirs: Iterable[str] = (),
        libraries: Iterable[str] = (),
        library_dirs: Iterable[str] = (),
        definitions: Iterable[str] = (),
    ) -> PackageDescriptor:
        """Record a resolved package, replacing any earlier descriptor of the same name."""
        descriptor = PackageDescriptor(
            name=name,
            targets=tuple(targets) if targets else (),
            legacy=LegacyMetadata(
                include_dirs=tuple(include_dirs),
                libraries=tuple(libraries),
                library_dirs=tuple(library_dirs),
                definitions=tuple(definitions),
            ),
        )
        if name in self._descriptors:
            logger.debug("Replacing descriptor of package '%s'", name)
        self._descriptors[name] = descriptor
        return descriptor

    def add(self, descriptor: PackageDescriptor) -> None:
        self._descriptors[descriptor.name] = descriptor

    def descriptor(self, name: str) -> Optional[PackageDescriptor]:
        return self._descriptors.get(name)

    @property
    def package_names(self) -> List[str]:
        return list(self._descriptors)

    def was_resolved(self, name: str) -> bool:
        return name in self._descriptors

    def modern_handle(self, name: str) -> Optional[Tuple[str, ...]]:
        descriptor = self._descriptors.get(name)
        return descriptor.modern_handle if descriptor is not None else None

    def legacy_metadata(self, name: str) -> LegacyMetadata:
        descriptor = self._descriptors.get(name)
        return descriptor.legacy if descriptor is not None else LegacyMetadata()
