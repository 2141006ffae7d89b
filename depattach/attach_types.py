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
"""Shared types for dependency attachment.

Scopes, package descriptors and the two collaborator interfaces the attachment
orchestrator talks to: a target registry (the build-graph engine that owns
targets) and a package registry (the result of package discovery).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Protocol, Sequence, Tuple


class Scope(Enum):
    """Visibility of attached configuration to downstream consumers of a target.

    - PUBLIC: used to build the target and propagated to consumers
    - PRIVATE: used to build the target only
    - INTERFACE: propagated to consumers only

    An unset scope is represented by None, not by a member of this enum.
    """

    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"
    INTERFACE = "INTERFACE"


def scope_label(scope: Optional[Scope]) -> str:
    """Return a printable name for a possibly unset scope."""
    return scope.value if scope is not None else "<unset>"


@dataclass(frozen=True)
class LegacyMetadata:
    """Legacy package description: four independent ordered lists.

    Attributes:
        include_dirs: Include directories
        libraries: Library paths or link-library names, possibly with debug/optimized/general keywords
        library_dirs: Library search directories
        definitions: Preprocessor definitions
    """

    include_dirs: Tuple[str, ...] = ()
    libraries: Tuple[str, ...] = ()
    library_dirs: Tuple[str, ...] = ()
    definitions: Tuple[str, ...] = ()

    def is_empty(self) -> bool:
        return not (self.include_dirs or self.libraries or self.library_dirs or self.definitions)


@dataclass(frozen=True)
class PackageDescriptor:
    """A resolved package.

    Attributes:
        name: Package name
        targets: Imported targets bundling the package's transitive requirements (modern handle)
        legacy: Legacy metadata lists
    """

    name: str
    targets: Tuple[str, ...] = ()
    legacy: LegacyMetadata = field(default_factory=LegacyMetadata)

    @property
    def modern_handle(self) -> Optional[Tuple[str, ...]]:
        """The modern handle, or None when the package only provides legacy metadata."""
        return self.targets if self.targets else None


@dataclass(frozen=True)
class MutationCall:
    """One configuration mutation applied to a target, as recorded by a target registry."""

    operation: str
    target: str
    scope: Optional[Scope]
    values: Tuple[str, ...]
    system: bool = False

    def to_dict(self) -> dict:
        return {
            "operation": self.operation,
            "target": self.target,
            "scope": self.scope.value if self.scope is not None else None,
            "values": list(self.values),
            "system": self.system,
        }


class TargetRegistry(Protocol):
    """Mutation interface of the build-graph engine that owns targets."""

    def exists(self, name: str) -> bool: ...

    def link_opaque_dependency(self, target: str, scope: Optional[Scope], handle: Any) -> None: ...

    def add_include_directories(self, target: str, scope: Scope, paths: Sequence[str], system: bool) -> None: ...

    def add_link_libraries(self, target: str, scope: Optional[Scope], libs: Sequence[str]) -> None: ...

    def add_link_directories(self, target: str, scope: Scope, dirs: Sequence[str]) -> None: ...

    def add_compile_definitions(self, target: str, scope: Scope, defs: Sequence[str]) -> None: ...


class PackageRegistry(Protocol):
    """Read-only view of packages located by package discovery."""

    def was_resolved(self, name: str) -> bool: ...

    def modern_handle(self, name: str) -> Optional[Any]: ...

    def legacy_metadata(self, name: str) -> LegacyMetadata: ...
