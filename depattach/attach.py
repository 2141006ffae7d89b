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
"""Attach resolved packages to a build target.

For every package the caller names, either link the package's modern handle
(imported targets that already carry ordered, de-duplicated requirements) or
apply its legacy metadata lists one by one:

| Collection   | Processing                  | Scope           |
|--------------|-----------------------------|-----------------|
| include dirs | order_include_directories   | implied scope   |
| libraries    | deduplicate_libraries       | caller's scope  |
| library dirs | remove_duplicates           | implied scope   |
| definitions  | remove_duplicates           | implied scope   |

The caller's scope may be unset. Library linkage gives an unset scope its own
meaning, so it is passed through as is; every other mutation needs a keyword
and gets PUBLIC instead (the implied scope).

Example usage:
    from depattach.attach import attach_dependencies

    attach_dependencies("talker", ["rclcpp", "Boost"], graph, packages, scope="PRIVATE")
"""

import logging
from typing import Any, Iterable, Optional, Sequence, Union

from depattach.attach_types import LegacyMetadata, PackageRegistry, Scope, TargetRegistry
from depattach.constants import ALLOWED_SCOPES, IMPLIED_SCOPE, InvalidArgumentError, PreconditionError
from depattach.include_order import order_include_directories
from depattach.library_dedup import deduplicate_libraries, remove_duplicates

logger = logging.getLogger(__name__)


def resolve_scope(scope: Union[Scope, str, None]) -> Optional[Scope]:
    """Validate a caller supplied scope.

    Args:
        scope: Scope member, scope name, or None/"" for unset

    Returns:
        The matching Scope, or None when unset

    Raises:
        InvalidArgumentError: If scope is set but not one of PUBLIC, PRIVATE, INTERFACE
    """
    if scope is None or scope == "":
        return None
    if isinstance(scope, Scope):
        return scope
    if isinstance(scope, str) and scope in ALLOWED_SCOPES:
        return Scope(scope)
    raise InvalidArgumentError(f"If scope is specified, it must be one of: {', '.join(ALLOWED_SCOPES)}. Got: '{scope}'")


def implied_scope(scope: Optional[Scope]) -> Scope:
    """Return the scope for mutations that cannot take an unset scope."""
    return scope if scope is not None else Scope(IMPLIED_SCOPE)


def apply_legacy_metadata(
    targets: TargetRegistry,
    target: str,
    metadata: LegacyMetadata,
    scope: Optional[Scope],
    system_includes: bool = False,
    prefixes: Optional[Sequence[str]] = None,
) -> int:
    """Apply each non-empty legacy list to the target.

    Args:
        targets: Target registry to mutate
        target: Target name
        metadata: Legacy metadata of one package
        scope: Caller's scope, None when unset
        system_includes: Mark include directories as system includes
        prefixes: Prefix chain for include ordering (default: read from the environment)

    Returns:
        Number of mutation calls issued
    """
    calls = 0
    attached = 0
    keyword_scope = implied_scope(scope)

    include_dirs = order_include_directories(metadata.include_dirs, prefixes)
    if include_dirs:
        targets.add_include_directories(target, keyword_scope, include_dirs, system_includes)
        calls += 1

    libraries = deduplicate_libraries(metadata.libraries)
    if libraries:
        targets.add_link_libraries(target, scope, libraries)
        calls += 1

    library_dirs = remove_duplicates(metadata.library_dirs)
    if library_dirs:
        targets.add_link_directories(target, keyword_scope, library_dirs)
        calls += 1

    definitions = remove_duplicates(metadata.definitions)
    if definitions:
        targets.add_compile_definitions(target, keyword_scope, definitions)
        calls += 1

    return calls


def apply_package(
    targets: TargetRegistry,
    packages: PackageRegistry,
    target: str,
    package_name: str,
    scope: Optional[Scope],
    system_includes: bool = False,
    prefixes: Optional[Sequence[str]] = None,
) -> int:
    """Attach one resolved package to the target.

    A modern handle always wins over legacy metadata, even when both are present.

    Returns:
        Number of mutation calls issued
    """
    handle = packages.modern_handle(package_name)
    if handle:
        logger.debug("%s: linking modern handle of '%s'", target, package_name)
        targets.link_opaque_dependency(target, scope, handle)
        return 1

    logger.debug("%s: applying legacy metadata of '%s'", target, package_name)
    return apply_legacy_metadata(targets, target, packages.legacy_metadata(package_name), scope, system_includes, prefixes)


def attach_dependencies(
    target: str,
    package_names: Iterable[str],
    targets: TargetRegistry,
    packages: PackageRegistry,
    *,
    scope: Union[Scope, str, None] = None,
    system_includes: bool = False,
    prefixes: Optional[Sequence[str]] = None,
    **unparsed: Any,
) -> None:
    """Make a target depend on everything provided by the named packages.

    All arguments are validated before the first package is processed. Packages
    are processed in the given order; if one of them was never resolved the
    operation stops there and mutations already applied for earlier packages
    are kept.

    Args:
        target: Name of an existing target
        package_names: Names of packages resolved by package discovery
        targets: Target registry owning the target
        packages: Package registry holding the resolved packages
        scope: PUBLIC, PRIVATE, INTERFACE, or None for unset
        system_includes: Treat legacy include directories as system includes.
            Has no effect on packages that provide a modern handle.
        prefixes: Prefix chain for include ordering (default: read from the environment)

    Raises:
        PreconditionError: If the target does not exist or a package was never resolved
        InvalidArgumentError: For unrecognized arguments or an invalid scope
    """
    if not targets.exists(target):
        raise PreconditionError(f"attach_dependencies() the first argument must be a valid target name, '{target}' does not exist")
    if unparsed:
        raise InvalidArgumentError(f"attach_dependencies() called with unused arguments: {', '.join(sorted(unparsed))}")
    if isinstance(package_names, str):
        raise InvalidArgumentError(f"attach_dependencies() package names must be a sequence of names, got the string '{package_names}'")
    caller_scope = resolve_scope(scope)

    calls = 0
    attached = 0
    for package_name in package_names:
        if not packages.was_resolved(package_name):
            raise PreconditionError(f"'{package_name}' must be resolved by package discovery prior to passing it to attach_dependencies()")
        calls += apply_package(targets, packages, target, package_name, caller_scope, system_includes, prefixes)
        attached += 1

    logger.info("Attached %s packages to %s (%s mutations)", attached, target, calls)
