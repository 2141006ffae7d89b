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
"""In-memory build graph that implements the target registry interface.

Targets are nodes of a NetworkX directed graph. Linking a known target adds an
edge consumer -> dependency labelled with the link scope, which lets the graph
answer what configuration a target is actually built with once usage
requirements of its dependencies are propagated.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set

import networkx as nx

from depattach.attach_types import LegacyMetadata, MutationCall, Scope
from depattach.constants import DEFAULT_TARGET_KIND, TARGET_KINDS, InvalidArgumentError, PreconditionError
from depattach.library_dedup import remove_duplicates

logger = logging.getLogger(__name__)

# Link scopes that make a dependency's usage requirements part of the consumer's own
PROPAGATING_SCOPES = (Scope.PUBLIC, Scope.INTERFACE, None)


@dataclass(frozen=True)
class ConfigEntry:
    """One configuration value attached to a target with its scope."""

    scope: Optional[Scope]
    value: str
    system: bool = False


@dataclass
class TargetConfig:
    """Configuration attached to a single target.

    Attributes:
        include_dirs: Include directories (system flag kept per entry)
        link_libraries: Libraries, link flags and linked targets
        link_directories: Library search directories
        compile_definitions: Preprocessor definitions
    """

    include_dirs: List[ConfigEntry] = field(default_factory=list)
    link_libraries: List[ConfigEntry] = field(default_factory=list)
    link_directories: List[ConfigEntry] = field(default_factory=list)
    compile_definitions: List[ConfigEntry] = field(default_factory=list)


@dataclass
class EffectiveConfiguration:
    """Configuration a target is built with, after usage requirement propagation."""

    include_dirs: List[str] = field(default_factory=list)
    system_include_dirs: List[str] = field(default_factory=list)
    link_libraries: List[str] = field(default_factory=list)
    link_directories: List[str] = field(default_factory=list)
    compile_definitions: List[str] = field(default_factory=list)

    def extend(self, config: TargetConfig, scopes: Iterable[Optional[Scope]], link_scopes: Iterable[Optional[Scope]]) -> None:
        scopes = tuple(scopes)
        link_scopes = tuple(link_scopes)
        for entry in config.include_dirs:
            if entry.scope in scopes:
                (self.system_include_dirs if entry.system else self.include_dirs).append(entry.value)
        self.link_libraries.extend(entry.value for entry in config.link_libraries if entry.scope in link_scopes)
        self.link_directories.extend(entry.value for entry in config.link_directories if entry.scope in scopes)
        self.compile_definitions.extend(entry.value for entry in config.compile_definitions if entry.scope in scopes)

    def deduplicated(self) -> "EffectiveConfiguration":
        return EffectiveConfiguration(
            include_dirs=remove_duplicates(self.include_dirs),
            system_include_dirs=remove_duplicates(self.system_include_dirs),
            link_libraries=remove_duplicates(self.link_libraries),
            link_directories=remove_duplicates(self.link_directories),
            compile_definitions=remove_duplicates(self.compile_definitions),
        )

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "include_dirs": list(self.include_dirs),
            "system_include_dirs": list(self.system_include_dirs),
            "link_libraries": list(self.link_libraries),
            "link_directories": list(self.link_directories),
            "compile_definitions": list(self.compile_definitions),
        }


class BuildGraph:
    """Target registry backed by a NetworkX DiGraph.

    Every mutation is recorded in call order, see calls.
    """

    def __init__(self) -> None:
        self.graph: nx.DiGraph = nx.DiGraph()
        self._calls: List[MutationCall] = []

    # -------------------------------------------------------------------------
    # Targets
    # -------------------------------------------------------------------------

    def add_target(self, name: str, kind: str = DEFAULT_TARGET_KIND, imported: bool = False, interface: Optional[LegacyMetadata] = None) -> None:
        """Register a target.

        Args:
            name: Unique target name
            kind: library, executable or interface
            imported: True for targets provided by an installed package
            interface: Usage requirements of the target (INTERFACE scope)

        Raises:
            InvalidArgumentError: If the name is taken or the kind is unknown
        """
        if name in self.graph:
            raise InvalidArgumentError(f"Target '{name}' already exists")
        if kind not in TARGET_KINDS:
            raise InvalidArgumentError(f"Target kind must be one of: {', '.join(TARGET_KINDS)}. Got: '{kind}'")

        self.graph.add_node(name, kind=kind, imported=imported, config=TargetConfig())
        if interface is not None:
            config = self.config(name)
            config.include_dirs.extend(ConfigEntry(Scope.INTERFACE, path) for path in interface.include_dirs)
            config.link_directories.extend(ConfigEntry(Scope.INTERFACE, path) for path in interface.library_dirs)
            config.compile_definitions.extend(ConfigEntry(Scope.INTERFACE, definition) for definition in interface.definitions)
            self._link(name, Scope.INTERFACE, interface.libraries)
        logger.debug("Added %s target '%s'%s", kind, name, " (imported)" if imported else "")

    def exists(self, name: str) -> bool:
        return name in self.graph

    @property
    def target_names(self) -> List[str]:
        return list(self.graph.nodes)

    def kind(self, name: str) -> str:
        self._require(name)
        return str(self.graph.nodes[name]["kind"])

    def is_imported(self, name: str) -> bool:
        self._require(name)
        return bool(self.graph.nodes[name]["imported"])

    def config(self, name: str) -> TargetConfig:
        self._require(name)
        config: TargetConfig = self.graph.nodes[name]["config"]
        return config

    def _require(self, name: str) -> None:
        if name not in self.graph:
            raise PreconditionError(f"Target '{name}' does not exist")

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    @property
    def calls(self) -> List[MutationCall]:
        return list(self._calls)

    def calls_for(self, target: str) -> List[MutationCall]:
        return [call for call in self._calls if call.target == target]

    def _record(self, operation: str, target: str, scope: Optional[Scope], values: Sequence[str], system: bool = False) -> None:
        self._require(target)
        self._calls.append(MutationCall(operation, target, scope, tuple(values), system))

    def _link(self, target: str, scope: Optional[Scope], items: Iterable[str]) -> None:
        config = self.config(target)
        for item in items:
            config.link_libraries.append(ConfigEntry(scope, item))
            if item in self.graph and item != target:
                scopes: List[Optional[Scope]] = self.graph.edges[target, item]["scopes"] if self.graph.has_edge(target, item) else []
                if scope not in scopes:
                    scopes.append(scope)
                self.graph.add_edge(target, item, scopes=scopes)

    def link_opaque_dependency(self, target: str, scope: Optional[Scope], handle: Any) -> None:
        """Link the imported targets of a modern handle."""
        items = [handle] if isinstance(handle, str) else list(handle)
        self._record("link_opaque_dependency", target, scope, items)
        self._link(target, scope, items)

    def add_include_directories(self, target: str, scope: Scope, paths: Sequence[str], system: bool) -> None:
        self._record("add_include_directories", target, scope, paths, system)
        self.config(target).include_dirs.extend(ConfigEntry(scope, path, system) for path in paths)

    def add_link_libraries(self, target: str, scope: Optional[Scope], libs: Sequence[str]) -> None:
        self._record("add_link_libraries", target, scope, libs)
        self._link(target, scope, libs)

    def add_link_directories(self, target: str, scope: Scope, dirs: Sequence[str]) -> None:
        self._record("add_link_directories", target, scope, dirs)
        self.config(target).link_directories.extend(ConfigEntry(scope, path) for path in dirs)

    def add_compile_definitions(self, target: str, scope: Scope, defs: Sequence[str]) -> None:
        self._record("add_compile_definitions", target, scope, defs)
        self.config(target).compile_definitions.extend(ConfigEntry(scope, definition) for definition in defs)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def _dependencies(self, name: str, propagating_only: bool) -> List[str]:
        deps = []
        for dep in self.graph.successors(name):
            scopes = self.graph.edges[name, dep]["scopes"]
            if propagating_only and not any(scope in PROPAGATING_SCOPES for scope in scopes):
                continue
            if not propagating_only and all(scope == Scope.INTERFACE for scope in scopes):
                continue
            deps.append(dep)
        return deps

    def _collect_usage_requirements(self, name: str, result: EffectiveConfiguration, visited: Set[str]) -> None:
        if name in visited:
            return
        visited.add(name)
        result.extend(self.config(name), (Scope.PUBLIC, Scope.INTERFACE), PROPAGATING_SCOPES)
        for dep in self._dependencies(name, propagating_only=True):
            self._collect_usage_requirements(dep, result, visited)

    def usage_requirements(self, name: str) -> EffectiveConfiguration:
        """Configuration a target passes on to the targets that link it."""
        self._require(name)
        result = EffectiveConfiguration()
        self._collect_usage_requirements(name, result, set())
        return result.deduplicated()

    def effective_configuration(self, name: str) -> EffectiveConfiguration:
        """Configuration used to build a target.

        The target's own PUBLIC, PRIVATE and unset entries, followed by the usage
        requirements of every target it links with a non INTERFACE scope. Usage
        requirements are followed transitively through PUBLIC, INTERFACE and
        unset links; a PRIVATE link only reaches the direct consumer.
        """
        self._require(name)
        result = EffectiveConfiguration()
        result.extend(self.config(name), (Scope.PUBLIC, Scope.PRIVATE, None), (Scope.PUBLIC, Scope.PRIVATE, None))
        visited = {name}
        for dep in self._dependencies(name, propagating_only=False):
            self._collect_usage_requirements(dep, result, visited)
        return result.deduplicated()

    def link_cycles(self) -> List[Set[str]]:
        """Find groups of targets that link each other in a cycle."""
        cycles = [set(component) for component in nx.strongly_connected_components(self.graph) if len(component) > 1]
        if cycles:
            logger.debug("Found %s link cycles", len(cycles))
        return sorted(cycles, key=lambda component: sorted(component))
