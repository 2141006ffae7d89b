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
"""Loading of JSON build descriptions.

A build description lists the targets of a project, the packages package
discovery found for it and the attachments to perform:

    {
      "prefix_path": ["/ws/install", "/opt/ros/jazzy"],
      "targets": [{"name": "talker", "kind": "executable"}],
      "imported_targets": [{"name": "rclcpp::rclcpp", "include_dirs": ["/opt/ros/jazzy/include/rclcpp"]}],
      "packages": {
        "rclcpp": {"targets": ["rclcpp::rclcpp"]},
        "Boost": {"include_dirs": ["/usr/include"], "libraries": ["boost_system"]}
      },
      "attach": [{"target": "talker", "packages": ["rclcpp", "Boost"], "scope": "PRIVATE"}]
    }
"""

import os
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from depattach.attach_types import LegacyMetadata
from depattach.constants import DEFAULT_TARGET_KIND, LEGACY_FIELDS, BuildDescriptionError, DepAttachError
from depattach.package_registry import InMemoryPackageRegistry
from depattach.target_graph import BuildGraph

logger = logging.getLogger(__name__)


@dataclass
class AttachRequest:
    """One attach_dependencies() invocation from a build description."""

    target: str
    packages: List[str]
    scope: Optional[str] = None
    system: bool = False


@dataclass
class BuildDescription:
    """Everything needed to run the attachments of a build description.

    Attributes:
        graph: Build graph holding all targets and imported targets
        packages: Registry of resolved packages
        requests: Attachments in file order
        prefixes: Prefix chain from the file, None to use the environment
    """

    graph: BuildGraph
    packages: InMemoryPackageRegistry
    requests: List[AttachRequest] = field(default_factory=list)
    prefixes: Optional[List[str]] = None


def _string_list(value: Any, where: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise BuildDescriptionError(f"{where} must be a list of strings")
    return list(value)


def _object(value: Any, where: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise BuildDescriptionError(f"{where} must be an object")
    return value


def _list(value: Any, where: str) -> List[Any]:
    if not isinstance(value, list):
        raise BuildDescriptionError(f"{where} must be a list")
    return value


def _boolean(value: Any, where: str) -> bool:
    if not isinstance(value, bool):
        raise BuildDescriptionError(f"{where} must be a boolean")
    return value


def _legacy_metadata(data: Dict[str, Any], where: str) -> LegacyMetadata:
    return LegacyMetadata(**{name: tuple(_string_list(data.get(name), f"{where}.{name}")) for name in LEGACY_FIELDS})


def _parse_prefixes(value: Any) -> Optional[List[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        return [prefix for prefix in value.split(os.pathsep) if prefix]
    return _string_list(value, "prefix_path")


def parse_build_description(data: Any) -> BuildDescription:
    """Build a BuildDescription from decoded JSON.

    Raises:
        BuildDescriptionError: If the document does not have the expected shape
    """
    data = _object(data, "build description")
    graph = BuildGraph()
    packages = InMemoryPackageRegistry()

    try:
        for index, entry in enumerate(_list(data.get("targets", []), "targets")):
            entry = _object(entry, f"targets[{index}]")
            if not isinstance(entry.get("name"), str):
                raise BuildDescriptionError(f"targets[{index}].name must be a string")
            graph.add_target(entry["name"], entry.get("kind", DEFAULT_TARGET_KIND))

        for index, entry in enumerate(_list(data.get("imported_targets", []), "imported_targets")):
            entry = _object(entry, f"imported_targets[{index}]")
            if not isinstance(entry.get("name"), str):
                raise BuildDescriptionError(f"imported_targets[{index}].name must be a string")
            interface = _legacy_metadata(entry, f"imported_targets[{index}]")
            graph.add_target(entry["name"], entry.get("kind", "interface"), imported=True, interface=interface)
    except BuildDescriptionError:
        raise
    except DepAttachError as e:
        raise BuildDescriptionError(str(e)) from e

    for name, entry in _object(data.get("packages", {}), "packages").items():
        entry = _object(entry, f"packages.{name}")
        if not _boolean(entry.get("found", True), f"packages.{name}.found"):
            logger.debug("Package '%s' is listed as not found", name)
            continue
        legacy = _legacy_metadata(entry, f"packages.{name}")
        packages.mark_found(
            name,
            targets=_string_list(entry.get("targets"), f"packages.{name}.targets"),
            include_dirs=legacy.include_dirs,
            libraries=legacy.libraries,
            library_dirs=legacy.library_dirs,
            definitions=legacy.definitions,
        )

    requests = []
    for index, entry in enumerate(_list(data.get("attach", []), "attach")):
        entry = _object(entry, f"attach[{index}]")
        if not isinstance(entry.get("target"), str):
            raise BuildDescriptionError(f"attach[{index}].target must be a string")
        scope = entry.get("scope")
        if scope is not None and not isinstance(scope, str):
            raise BuildDescriptionError(f"attach[{index}].scope must be a string")
        requests.append(
            AttachRequest(
                target=entry["target"],
                packages=_string_list(entry.get("packages"), f"attach[{index}].packages"),
                scope=scope,
                system=_boolean(entry.get("system", False), f"attach[{index}].system"),
            )
        )

    return BuildDescription(graph=graph, packages=packages, requests=requests, prefixes=_parse_prefixes(data.get("prefix_path")))


def load_build_description(filename: str) -> BuildDescription:
    """Load a build description from a JSON file.

    Args:
        filename: Path to the JSON file

    Returns:
        Parsed BuildDescription

    Raises:
        BuildDescriptionError: If the file cannot be read or is malformed
    """
    try:
        with open(filename, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (IOError, OSError) as e:
        raise BuildDescriptionError(f"Failed to read build description {filename}: {e}") from e
    except json.JSONDecodeError as e:
        raise BuildDescriptionError(f"Invalid JSON in {filename}: {e}") from e

    description = parse_build_description(data)
    logger.info(
        "Loaded %s targets, %s packages and %s attachments from %s",
        len(description.graph.target_names),
        len(description.packages.package_names),
        len(description.requests),
        filename,
    )
    return description
